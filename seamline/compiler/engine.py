"""
Geometry engine contract and HTTP client.

Generated pattern code is data: it is submitted with millimetre measurements
to an external geometry-evaluation service which drafts the pattern and
renders it to SVG.  Nothing is evaluated in-process, so sandboxing is the
service's responsibility.

Wire format (``POST <base_url>/compile``):

  request   {"code": str, "measurements": {name: mm, ...}}
  200       {"svg": str, "pieces": [str, ...]}
  4xx/5xx   {"error": str, "code": "missing_export" | ...}

GeometryEngine is a @runtime_checkable Protocol so tests can inject a
deterministic engine without network access.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

import requests

from seamline.config import DEFAULT_ENGINE_URL, REQUEST_TIMEOUT_S
from seamline.errors import GeometryEngineError, MissingExportError

logger = logging.getLogger(__name__)

MISSING_EXPORT_CODE = "missing_export"


@dataclass(frozen=True)
class EngineResult:
    """Rendered output of a successful draft."""

    svg: str
    pieces: tuple[str, ...]


@runtime_checkable
class GeometryEngine(Protocol):
    """Protocol for geometry engines.

    Implementations raise GeometryEngineError (or MissingExportError) with
    the engine's message when the code fails to parse, run, or draft.
    """

    def compile_geometry(self, code: str, measurements_mm: dict[str, float]) -> EngineResult: ...


class HttpGeometryEngine:
    """Geometry engine reached over HTTP.

    The underlying ``requests.Session`` is shared by all calls; it holds no
    per-run state, so one instance can serve concurrent runs.  Each call is
    bounded by *timeout*; expiry is reported as a GeometryEngineError.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_ENGINE_URL,
        timeout: float = REQUEST_TIMEOUT_S,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()

    def compile_geometry(self, code: str, measurements_mm: dict[str, float]) -> EngineResult:
        """Submit *code* for drafting and return the rendered SVG and piece names."""
        try:
            resp = self._session.post(
                f"{self.base_url}/compile",
                json={"code": code, "measurements": measurements_mm},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.debug("Geometry engine call failed: %s", exc)
            raise GeometryEngineError(f"Geometry engine unreachable: {exc}") from exc

        try:
            body = resp.json()
        except ValueError as exc:
            raise GeometryEngineError(
                f"Geometry engine returned non-JSON response (HTTP {resp.status_code})"
            ) from exc

        if resp.status_code != 200:
            message = body.get("error") or f"Geometry engine failed with HTTP {resp.status_code}"
            if body.get("code") == MISSING_EXPORT_CODE:
                raise MissingExportError(message)
            raise GeometryEngineError(message)

        svg = body.get("svg")
        if not isinstance(svg, str) or not svg:
            raise GeometryEngineError("Geometry engine returned no SVG")
        return EngineResult(svg=svg, pieces=tuple(body.get("pieces") or ()))

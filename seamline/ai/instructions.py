"""
SewingInstructionWriter — step-by-step sewing instructions from Claude.

Instructions are an optional extra on a successful run.  On any failure
(network error, empty response) write() returns None with a UserWarning —
the caller still gets the pattern.
"""

from __future__ import annotations

import logging
import warnings

from seamline.ai.client import make_anthropic_client
from seamline.ai.prompts import instructions_prompt
from seamline.config import DEFAULT_CLAUDE_MODEL, INSTRUCTIONS_MAX_TOKENS, REQUEST_TIMEOUT_S
from seamline.schemas.analysis import GarmentAnalysis

logger = logging.getLogger(__name__)


class SewingInstructionWriter:
    """Writes construction instructions for a garment and its pattern pieces."""

    def __init__(
        self,
        model: str = DEFAULT_CLAUDE_MODEL,
        timeout: float = REQUEST_TIMEOUT_S,
        client=None,
    ) -> None:
        self._client = client if client is not None else make_anthropic_client(timeout)
        self._model = model

    def write(self, analysis: GarmentAnalysis, piece_names: tuple[str, ...]) -> str | None:
        """Return instruction text, or None if Claude could not provide it."""
        try:
            response = self._client.messages.create(
                model=self._model,
                max_tokens=INSTRUCTIONS_MAX_TOKENS,
                messages=[
                    {
                        "role": "user",
                        "content": instructions_prompt(analysis.to_dict(), list(piece_names)),
                    }
                ],
            )
            text = "".join(b.text for b in response.content if b.type == "text").strip()
        except Exception as exc:  # noqa: BLE001
            logger.warning("Sewing instruction generation failed: %s", exc)
            warnings.warn(f"SewingInstructionWriter failed, returning no instructions: {exc}",
                          stacklevel=2)
            return None
        return text or None

"""
PatternCompiler — submits pattern code to a geometry engine and normalises
the result into a CompilationOutcome.

This is the single place where measurements are converted from centimetres
to millimetres.  compile() never raises: every engine or transport failure
becomes a failed outcome carrying the message verbatim.
"""

from __future__ import annotations

import logging
import re

from seamline.compiler.engine import GeometryEngine
from seamline.errors import MissingExportError
from seamline.schemas.drawing import VectorDrawing
from seamline.schemas.measurements import Measurements
from seamline.schemas.result import CompilationOutcome
from seamline.utilities.conversion import measurements_to_mm

logger = logging.getLogger(__name__)

MISSING_EXPORT_MESSAGE = 'MissingExport: Pattern code must define a "design" variable'

# A top-level binding named ``design`` or a default export.
_ENTRY_POINT_RE = re.compile(
    r"\b(?:const|let|var|function|class)\s+design\b|\bexport\s+default\b"
)


def has_entry_point(code: str) -> bool:
    """Return True when *code* exposes a design the engine can instantiate."""
    return _ENTRY_POINT_RE.search(code) is not None


class PatternCompiler:
    """
    Compile pattern code against body measurements.

    Holds only a reference to the engine, so repeated calls with different
    code on the same measurements are independent.
    """

    def __init__(self, engine: GeometryEngine) -> None:
        self._engine = engine

    def compile(self, code: str, measurements: Measurements) -> CompilationOutcome:
        """
        Draft *code* with *measurements* and return a CompilationOutcome.

        Parameters
        ----------
        code:
            Pattern code understood by the geometry engine.
        measurements:
            Body measurements in centimetres.

        Returns
        -------
        CompilationOutcome
            ``success=True`` with the drawing and ordered piece names, or
            ``success=False`` with the error message.
        """
        if not has_entry_point(code):
            return CompilationOutcome.failed(MISSING_EXPORT_MESSAGE)

        measurements_mm = measurements_to_mm(measurements.to_dict())
        try:
            result = self._engine.compile_geometry(code, measurements_mm)
            drawing = VectorDrawing.from_markup(result.svg, piece_names=result.pieces)
        except MissingExportError as exc:
            return CompilationOutcome.failed(f"MissingExport: {exc}")
        except Exception as exc:  # noqa: BLE001
            logger.debug("Compilation failed: %s", exc)
            return CompilationOutcome.failed(str(exc) or "Unknown compilation error")

        return CompilationOutcome.ok(drawing, result.pieces)

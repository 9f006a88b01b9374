"""
Exception hierarchy shared by every seamline module.

Boundary validation raises InputValidationError before any pipeline work
starts.  Stage failures inside a run are folded into the PipelineResult by
the orchestrator; only the boundary functions let exceptions reach callers.
"""

from __future__ import annotations


class SeamlineError(Exception):
    """Base class for all seamline errors."""


class InputValidationError(SeamlineError, ValueError):
    """Raised when caller-supplied input is outside the accepted domain."""


class MeasurementError(InputValidationError):
    """Raised when a measurement is missing, non-numeric, or out of range."""


class AnalysisError(SeamlineError):
    """Raised when the garment analysis service returns unusable output."""


class CodeGenerationError(SeamlineError):
    """Raised when the code generation or fix service returns no code."""


class ImageFetchError(SeamlineError):
    """Raised when a garment image URL cannot be downloaded."""


class ImageGenerationError(SeamlineError):
    """Raised when the reference image service returns no image."""


class GeometryEngineError(SeamlineError):
    """Raised by a geometry engine when pattern code fails to draft."""


class MissingExportError(GeometryEngineError):
    """Raised when pattern code exposes no usable design entry point."""


class ExportError(SeamlineError):
    """Raised when drawing markup cannot be assembled into a document."""


class PipelineError(SeamlineError):
    """Raised when a pipeline stage fails.

    Attributes:
        stage: Name of the stage that failed
            (``"analyzing"``, ``"coding"``, ``"compiling"``, ...).
        detail: Human-readable description of the failure.
    """

    def __init__(self, stage: str, detail: str) -> None:
        super().__init__(f"[{stage}] {detail}")
        self.stage = stage
        self.detail = detail

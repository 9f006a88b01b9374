"""schemas — data records shared across the pipeline."""

from seamline.schemas.analysis import GarmentAnalysis
from seamline.schemas.drawing import VectorDrawing, parse_svg_dimensions
from seamline.schemas.measurements import Measurements
from seamline.schemas.result import (
    CompilationOutcome,
    CompileAttempt,
    PipelineResult,
    PipelineStatus,
)

__all__ = [
    "CompilationOutcome",
    "CompileAttempt",
    "GarmentAnalysis",
    "Measurements",
    "PipelineResult",
    "PipelineStatus",
    "VectorDrawing",
    "parse_svg_dimensions",
]

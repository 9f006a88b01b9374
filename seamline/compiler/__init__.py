"""compiler — PatternCompiler and the geometry engine contract."""

from seamline.compiler.compiler import PatternCompiler, has_entry_point
from seamline.compiler.engine import EngineResult, GeometryEngine, HttpGeometryEngine
from seamline.schemas.result import CompilationOutcome

__all__ = [
    "CompilationOutcome",
    "EngineResult",
    "GeometryEngine",
    "HttpGeometryEngine",
    "PatternCompiler",
    "has_entry_point",
]

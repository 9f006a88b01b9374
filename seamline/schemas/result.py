"""
Pipeline result schema: status enum, compile outcomes, and the externally
visible PipelineResult.

PipelineResult is frozen.  The orchestrator advances a run by producing a
new snapshot with :meth:`PipelineResult.advance`; once a terminal status is
reached no further snapshot can be derived.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

from seamline.schemas.analysis import GarmentAnalysis
from seamline.schemas.drawing import VectorDrawing


class PipelineStatus(str, Enum):
    """
    Stage labels of a generation run, in order.

    ANALYZING / CODING / COMPILING double as user-visible progress labels.
    COMPLETED and FAILED are the only terminal states.
    """

    PENDING = "pending"
    ANALYZING = "analyzing"
    CODING = "coding"
    COMPILING = "compiling"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (PipelineStatus.COMPLETED, PipelineStatus.FAILED)


@dataclass(frozen=True)
class CompilationOutcome:
    """Uniform result of one compile: a drawing on success, an error otherwise."""

    success: bool
    drawing: VectorDrawing | None = None
    piece_names: tuple[str, ...] = ()
    error: str | None = None

    def __post_init__(self) -> None:
        if self.success and (self.drawing is None or self.error is not None):
            raise ValueError("a successful outcome carries a drawing and no error")
        if not self.success and (self.error is None or self.drawing is not None):
            raise ValueError("a failed outcome carries an error and no drawing")

    @classmethod
    def ok(cls, drawing: VectorDrawing, piece_names: tuple[str, ...]) -> CompilationOutcome:
        return cls(success=True, drawing=drawing, piece_names=tuple(piece_names))

    @classmethod
    def failed(cls, error: str) -> CompilationOutcome:
        return cls(success=False, error=error)


@dataclass(frozen=True)
class CompileAttempt:
    """One compile of one code revision.  ``attempt`` counts from 1."""

    attempt: int
    code: str
    outcome: CompilationOutcome


def new_run_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class PipelineResult:
    """
    Externally visible artifact of one generation run.

    A ``failed`` result always carries ``error`` and never a drawing.  A
    degraded ``completed`` result carries the fallback drawing together with
    the last compiler error.
    """

    id: str
    status: PipelineStatus = PipelineStatus.PENDING
    analysis: GarmentAnalysis | None = None
    code: str | None = None
    drawing: VectorDrawing | None = None
    message: str | None = None
    error: str | None = None
    attempts: tuple[CompileAttempt, ...] = ()
    instructions: str | None = None

    @classmethod
    def start(cls) -> PipelineResult:
        """Create the ``pending`` snapshot for a new run."""
        return cls(id=new_run_id())

    def advance(self, **changes: Any) -> PipelineResult:
        """Return a new snapshot with *changes* applied.

        Raises RuntimeError once the result has reached a terminal status.
        """
        if self.status.is_terminal:
            raise RuntimeError(f"result {self.id} is already {self.status.value}")
        return replace(self, **changes)

    @property
    def is_degraded(self) -> bool:
        """True for a ``completed`` result that fell back to the placeholder."""
        return self.status == PipelineStatus.COMPLETED and self.error is not None

    def to_dict(self) -> dict[str, Any]:
        """JSON view returned by the surrounding application."""
        out: dict[str, Any] = {"id": self.id, "status": self.status.value}
        if self.analysis is not None:
            out["analysis"] = self.analysis.to_dict()
        if self.code is not None:
            out["code"] = self.code
        if self.drawing is not None:
            out["svg"] = self.drawing.markup
        if self.instructions is not None:
            out["instructions"] = self.instructions
        if self.message is not None:
            out["message"] = self.message
        if self.error is not None:
            out["error"] = self.error
        return out

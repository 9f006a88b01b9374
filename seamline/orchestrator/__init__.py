"""orchestrator — the generation pipeline state machine."""

from seamline.orchestrator.pipeline import (
    CompileLoopOutput,
    GenerationOrchestrator,
    OrchestratorInput,
)

__all__ = ["CompileLoopOutput", "GenerationOrchestrator", "OrchestratorInput"]

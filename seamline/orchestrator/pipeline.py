"""
GenerationOrchestrator — drives a garment image to a drawable pattern.

Pipeline stages (strictly sequential; each consumes the previous output):

  1. no image                → placeholder drawing, ``completed`` at once
  2. analyzing               → PatternAI.analyze_image()  (fatal on failure)
  3. coding                  → PatternAI.generate_code()
  4. pre-validation          → validate_pattern_code(); one best-effort
                               PatternAI.fix_code() when invalid (a failing
                               fix keeps the original code)
  5. compiling               → PatternCompiler.compile(), up to max_attempts;
                               every failure but the last is followed by
                               PatternAI.fix_code() with the latest error; a
                               failing fix ends the retries early
  6. resolution              → compiled drawing, or the placeholder with the
                               last compiler error when no attempt succeeded

Exhausting the compile budget is a degraded success, not a failure: the
result is ``completed`` with the placeholder drawing and the last compiler
error.  A fix service fault is reported only in the log.
Only an analysis failure or an unexpected fault yields ``failed``, and
nothing propagates to the caller.

Each compile is recorded as a CompileAttempt, so the full attempt history is
inspectable on the result even though only the latest error is forwarded to
the fix service.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from seamline.ai.client import PatternAI
from seamline.ai.images import GarmentImage
from seamline.ai.instructions import SewingInstructionWriter
from seamline.compiler.compiler import PatternCompiler
from seamline.config import DEFAULT_FABRIC_TYPE, DEFAULT_SEAM_ALLOWANCE_CM, MAX_COMPILE_ATTEMPTS
from seamline.errors import PipelineError
from seamline.fallback.placeholder import generate_test_pattern
from seamline.schemas.analysis import GarmentAnalysis
from seamline.schemas.measurements import Measurements
from seamline.schemas.result import CompileAttempt, PipelineResult, PipelineStatus
from seamline.validator.code import validate_pattern_code

logger = logging.getLogger(__name__)

PLACEHOLDER_MESSAGE = "Test pattern generated (placeholder, not an AI-generated pattern)"
SUCCESS_MESSAGE = "Pattern generated successfully"
DEGRADED_MESSAGE = (
    "Using simplified pattern due to compilation issues. "
    "AI-generated code available for review."
)
GENERIC_FAILURE = "Failed to generate pattern"


@dataclass(frozen=True)
class OrchestratorInput:
    """Complete input bundle for one generation run.

    Attributes:
        description: Free-text garment description from the user.
        measurements: Validated body measurements in centimetres.
        fabric_type: ``"woven"``, ``"knit"``, or ``"stretch-woven"``.
        seam_allowance: Seam allowance in centimetres.
        image: Garment image; None requests the placeholder pattern.
        include_instructions: Generate sewing instructions after a successful
            compile (needs an instruction writer on the orchestrator).
    """

    description: str
    measurements: Measurements
    fabric_type: str = DEFAULT_FABRIC_TYPE
    seam_allowance: float = DEFAULT_SEAM_ALLOWANCE_CM
    image: GarmentImage | None = None
    include_instructions: bool = False


@dataclass(frozen=True)
class CompileLoopOutput:
    """Outcome of the compile stage: every attempt, in order."""

    attempts: tuple[CompileAttempt, ...]

    @property
    def last(self) -> CompileAttempt:
        return self.attempts[-1]

    @property
    def succeeded(self) -> bool:
        return self.last.outcome.success


class GenerationOrchestrator:
    """
    Pipeline state machine for one run at a time.

    Holds references to shared collaborators only; all per-run state lives in
    local variables and the returned PipelineResult, so one orchestrator may
    serve concurrent runs.
    """

    def __init__(
        self,
        ai: PatternAI | None = None,
        compiler: PatternCompiler | None = None,
        max_attempts: int = MAX_COMPILE_ATTEMPTS,
        instruction_writer: SewingInstructionWriter | None = None,
        on_status: Callable[[PipelineResult], None] | None = None,
    ) -> None:
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")
        self._ai = ai
        self._compiler = compiler
        self._max_attempts = max_attempts
        self._instruction_writer = instruction_writer
        self._on_status = on_status

    def run(self, oi: OrchestratorInput) -> PipelineResult:
        """Execute the pipeline and return a terminal :class:`PipelineResult`.

        Parameters
        ----------
        oi:
            Input bundle: description, measurements, fabric options, image.

        Returns
        -------
        PipelineResult
            Status ``completed`` (real or placeholder drawing) or ``failed``
            (error set, no drawing).  Never raises.
        """
        result = PipelineResult.start()
        logger.info("Run %s started", result.id)

        try:
            if oi.image is None:
                return self._finish(
                    result,
                    status=PipelineStatus.COMPLETED,
                    drawing=generate_test_pattern(oi.measurements),
                    message=PLACEHOLDER_MESSAGE,
                )

            if self._ai is None or self._compiler is None:
                raise PipelineError("pending", "no AI service or geometry engine configured")

            # Stage 2: analysis is a hard prerequisite.
            result = self._advance(result, PipelineStatus.ANALYZING)
            try:
                analysis = self._ai.analyze_image(oi.image, oi.description)
            except Exception as exc:
                raise PipelineError("analyzing", str(exc) or type(exc).__name__) from exc
            result = result.advance(analysis=analysis)

            # Stage 3: code generation.
            result = self._advance(result, PipelineStatus.CODING)
            code = self._ai.generate_code(
                analysis, oi.measurements, oi.fabric_type, oi.seam_allowance
            )

            # Stage 4: single best-effort fix for obvious structural omissions.
            validation = validate_pattern_code(code)
            if not validation.valid:
                logger.warning(
                    "Run %s: generated code failed validation (%s), requesting fix",
                    result.id,
                    validation.error_type,
                )
                try:
                    code = self._ai.fix_code(code, validation.error or "Invalid code")
                except Exception as exc:  # noqa: BLE001
                    logger.warning(
                        "Run %s: pre-validation fix failed (%s), compiling original code",
                        result.id,
                        exc,
                    )
            result = result.advance(code=code)

            # Stage 5: compile with bounded fix-and-retry.
            result = self._advance(result, PipelineStatus.COMPILING)
            loop = self._compile_loop(code, oi.measurements, result.id)
            result = result.advance(code=loop.last.code, attempts=loop.attempts)

            # Stage 6: resolution.
            if loop.succeeded:
                outcome = loop.last.outcome
                instructions = None
                if oi.include_instructions:
                    instructions = self._write_instructions(analysis, outcome.piece_names)
                return self._finish(
                    result,
                    status=PipelineStatus.COMPLETED,
                    drawing=outcome.drawing,
                    message=SUCCESS_MESSAGE,
                    instructions=instructions,
                )

            logger.warning(
                "Run %s: %d compile attempts failed, substituting placeholder pattern",
                result.id,
                len(loop.attempts),
            )
            return self._finish(
                result,
                status=PipelineStatus.COMPLETED,
                drawing=generate_test_pattern(oi.measurements),
                message=DEGRADED_MESSAGE,
                error=loop.last.outcome.error,
            )

        except PipelineError as exc:
            logger.warning("Run %s failed at %s: %s", result.id, exc.stage, exc.detail)
            return self._finish(result, status=PipelineStatus.FAILED, error=exc.detail)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Run %s failed unexpectedly", result.id)
            detail = str(exc) or type(exc).__name__
            return self._finish(
                result, status=PipelineStatus.FAILED, error=f"{GENERIC_FAILURE}: {detail}"
            )

    # ── Stage helpers ─────────────────────────────────────────────────────────

    def _compile_loop(self, code: str, measurements: Measurements, run_id: str) -> CompileLoopOutput:
        """
        Compile *code*, fixing and retrying until success or the budget is spent.

        The fix service always receives the most recent error only, and each
        fix fully replaces the code.  fix_code is called at most
        ``max_attempts - 1`` times.
        """
        attempts: list[CompileAttempt] = []
        for attempt in range(1, self._max_attempts + 1):
            outcome = self._compiler.compile(code, measurements)
            attempts.append(CompileAttempt(attempt=attempt, code=code, outcome=outcome))
            if outcome.success:
                logger.info("Run %s: compiled on attempt %d", run_id, attempt)
                break
            logger.warning(
                "Run %s: compile attempt %d/%d failed: %s",
                run_id,
                attempt,
                self._max_attempts,
                outcome.error,
            )
            if attempt < self._max_attempts:
                try:
                    code = self._ai.fix_code(code, outcome.error or "Compilation failed")
                except Exception as exc:  # noqa: BLE001
                    logger.warning(
                        "Run %s: fix after attempt %d failed (%s), stopping retries",
                        run_id,
                        attempt,
                        exc,
                    )
                    break
        return CompileLoopOutput(attempts=tuple(attempts))

    def _write_instructions(
        self, analysis: GarmentAnalysis, piece_names: tuple[str, ...]
    ) -> str | None:
        if self._instruction_writer is None:
            return None
        return self._instruction_writer.write(analysis, piece_names)

    def _advance(self, result: PipelineResult, status: PipelineStatus) -> PipelineResult:
        result = result.advance(status=status)
        logger.info("Run %s: %s", result.id, status.value)
        self._notify(result)
        return result

    def _finish(self, result: PipelineResult, **changes) -> PipelineResult:
        """Apply the terminal snapshot; a failed result never carries a drawing."""
        if changes.get("status") == PipelineStatus.FAILED:
            changes["drawing"] = None
        result = result.advance(**changes)
        logger.info("Run %s: %s", result.id, result.status.value)
        self._notify(result)
        return result

    def _notify(self, result: PipelineResult) -> None:
        if self._on_status is None:
            return
        try:
            self._on_status(result)
        except Exception:  # noqa: BLE001
            logger.exception("Run %s: status listener raised", result.id)

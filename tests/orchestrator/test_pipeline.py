"""
Tests for orchestrator/pipeline.py — GenerationOrchestrator.

All collaborators are in-process fakes: a scripted PatternAI that records
every call, and a scripted geometry engine wrapped in the real
PatternCompiler.
"""

from __future__ import annotations

import pytest

from seamline.ai.images import GarmentImage
from seamline.compiler.compiler import PatternCompiler
from seamline.compiler.engine import EngineResult
from seamline.errors import AnalysisError, GeometryEngineError
from seamline.fallback.placeholder import generate_test_pattern
from seamline.orchestrator.pipeline import (
    DEGRADED_MESSAGE,
    PLACEHOLDER_MESSAGE,
    SUCCESS_MESSAGE,
    GenerationOrchestrator,
    OrchestratorInput,
)
from seamline.schemas.analysis import GarmentAnalysis
from seamline.schemas.measurements import Measurements
from seamline.schemas.result import PipelineStatus

# ── Fixtures ──────────────────────────────────────────────────────────────────

_MEASUREMENTS = Measurements.from_dict(
    {
        "bust": 90,
        "waist": 70,
        "hips": 95,
        "shoulderWidth": 40,
        "armLength": 55,
        "inseam": 75,
        "torsoLength": 40,
    }
)

_ANALYSIS = GarmentAnalysis.from_dict(
    {
        "garmentType": "dress",
        "silhouette": "semi-fitted",
        "length": "knee",
        "sleeves": {"type": "short", "fit": "fitted"},
        "neckline": "scoop",
        "closure": "back zipper",
        "seaming": ["side"],
        "details": ["pockets"],
        "suggestedFabric": "woven",
        "estimatedEase": {"bust": 0.06, "waist": 0.06, "hip": 0.1},
    }
)

_IMAGE = GarmentImage(data=b"\xff\xd8\xff fake jpeg")

_GOOD_CODE = (
    "const design = new Design({ draft: ({ Point, Path, paths }) => {\n"
    "  paths.seam = new Path().move(new Point(0, 0));\n"
    "  return paths;\n"
    "} });\n"
    "export default design;"
)

_NO_ENTRY_CODE = "const pattern = new Design({ draft: ({ Point, Path }) => new Path() });"

_SVG = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="300mm" height="500mm">'
    '<path d="M 0 0 L 100 0"/></svg>'
)


def _fixed(n: int) -> str:
    return _GOOD_CODE.replace("paths.seam", f"paths.seam{n}")


class _ScriptedAI:
    """PatternAI fake; fix_code returns _fixed(1), _fixed(2), ... in turn."""

    def __init__(self, code: str = _GOOD_CODE, analysis_error: Exception | None = None,
                 generate_error: Exception | None = None,
                 fix_error: Exception | None = None) -> None:
        self._code = code
        self._analysis_error = analysis_error
        self._generate_error = generate_error
        self._fix_error = fix_error
        self.analyze_calls = 0
        self.generate_calls = 0
        self.fix_calls: list[tuple[str, str]] = []

    def analyze_image(self, image, description):
        self.analyze_calls += 1
        if self._analysis_error is not None:
            raise self._analysis_error
        return _ANALYSIS

    def generate_code(self, analysis, measurements, fabric_type, seam_allowance):
        self.generate_calls += 1
        if self._generate_error is not None:
            raise self._generate_error
        return self._code

    def fix_code(self, code, error):
        self.fix_calls.append((code, error))
        if self._fix_error is not None:
            raise self._fix_error
        return _fixed(len(self.fix_calls))


class _ScriptedEngine:
    """Engine fake: each call pops the next script entry (exception or result)."""

    def __init__(self, *script) -> None:
        self._script = list(script)
        self.codes: list[str] = []

    def compile_geometry(self, code, measurements_mm):
        self.codes.append(code)
        step = self._script.pop(0)
        if isinstance(step, Exception):
            raise step
        return step


class _FakeWriter:
    def __init__(self, text: str | None = "1. Sew the side seams.") -> None:
        self._text = text
        self.calls: list[tuple] = []

    def write(self, analysis, piece_names):
        self.calls.append((analysis, piece_names))
        return self._text


_OK = EngineResult(svg=_SVG, pieces=("front", "back", "sleeve"))


def _input(**overrides) -> OrchestratorInput:
    fields = dict(
        description="A knee-length A-line dress with short sleeves",
        measurements=_MEASUREMENTS,
        image=_IMAGE,
    )
    fields.update(overrides)
    return OrchestratorInput(**fields)


def _orchestrator(ai, engine, **kwargs) -> GenerationOrchestrator:
    return GenerationOrchestrator(ai=ai, compiler=PatternCompiler(engine), **kwargs)


# ── No image ──────────────────────────────────────────────────────────────────


class TestPlaceholderPath:
    def test_completed_with_placeholder(self):
        result = GenerationOrchestrator().run(_input(image=None))
        assert result.status == PipelineStatus.COMPLETED
        assert result.message == PLACEHOLDER_MESSAGE
        assert result.drawing == generate_test_pattern(_MEASUREMENTS)
        assert result.error is None

    def test_no_ai_calls(self):
        ai = _ScriptedAI()
        engine = _ScriptedEngine()
        _orchestrator(ai, engine).run(_input(image=None))
        assert ai.analyze_calls == 0 and ai.generate_calls == 0
        assert engine.codes == []


# ── Success ───────────────────────────────────────────────────────────────────


class TestFirstAttemptSuccess:
    def test_completed_with_compiled_drawing(self):
        ai = _ScriptedAI()
        result = _orchestrator(ai, _ScriptedEngine(_OK)).run(_input())
        assert result.status == PipelineStatus.COMPLETED
        assert result.message == SUCCESS_MESSAGE
        assert result.drawing.markup == _SVG
        assert result.drawing.piece_names == ("front", "back", "sleeve")
        assert result.analysis == _ANALYSIS
        assert result.code == _GOOD_CODE
        assert result.error is None

    def test_fix_never_called(self):
        ai = _ScriptedAI()
        _orchestrator(ai, _ScriptedEngine(_OK)).run(_input())
        assert ai.fix_calls == []

    def test_one_attempt_recorded(self):
        result = _orchestrator(_ScriptedAI(), _ScriptedEngine(_OK)).run(_input())
        assert len(result.attempts) == 1
        assert result.attempts[0].attempt == 1
        assert result.attempts[0].outcome.success


class TestRecoveryAfterFix:
    def test_second_attempt_compiles_fixed_code(self):
        ai = _ScriptedAI()
        engine = _ScriptedEngine(GeometryEngineError("error 1"), _OK)
        result = _orchestrator(ai, engine).run(_input())
        assert result.status == PipelineStatus.COMPLETED
        assert result.message == SUCCESS_MESSAGE
        assert result.code == _fixed(1)
        assert engine.codes == [_GOOD_CODE, _fixed(1)]
        assert ai.fix_calls == [(_GOOD_CODE, "error 1")]


# ── Exhausted budget ──────────────────────────────────────────────────────────


class TestAllCompilesFail:
    def _run(self):
        ai = _ScriptedAI()
        engine = _ScriptedEngine(
            GeometryEngineError("error 1"),
            GeometryEngineError("error 2"),
            GeometryEngineError("error 3"),
        )
        return ai, engine, _orchestrator(ai, engine).run(_input())

    def test_degraded_completed(self):
        _, _, result = self._run()
        assert result.status == PipelineStatus.COMPLETED
        assert result.is_degraded
        assert result.message == DEGRADED_MESSAGE

    def test_last_error_and_last_code(self):
        _, _, result = self._run()
        assert result.error == "error 3"
        assert result.code == _fixed(2)

    def test_placeholder_drawing(self):
        _, _, result = self._run()
        assert result.drawing == generate_test_pattern(_MEASUREMENTS)

    def test_bounded_fix_calls(self):
        ai, engine, result = self._run()
        assert len(engine.codes) == 3
        assert len(ai.fix_calls) == 2
        assert len(result.attempts) == 3

    def test_only_latest_error_forwarded(self):
        ai, _, _ = self._run()
        assert ai.fix_calls == [(_GOOD_CODE, "error 1"), (_fixed(1), "error 2")]

    def test_attempt_history(self):
        _, _, result = self._run()
        assert [a.outcome.error for a in result.attempts] == ["error 1", "error 2", "error 3"]
        assert [a.code for a in result.attempts] == [_GOOD_CODE, _fixed(1), _fixed(2)]

    def test_missing_entry_point_counts_as_attempt(self):
        ai = _ScriptedAI(code=_NO_ENTRY_CODE)
        ai.fix_code = lambda code, error: (ai.fix_calls.append((code, error)) or _NO_ENTRY_CODE)
        engine = _ScriptedEngine()
        result = _orchestrator(ai, engine).run(_input())
        assert result.status == PipelineStatus.COMPLETED
        assert result.error.startswith("MissingExport")
        assert engine.codes == []
        assert len(ai.fix_calls) == 2

    @pytest.mark.parametrize("max_attempts", [1, 2, 5])
    def test_custom_budget(self, max_attempts):
        ai = _ScriptedAI()
        engine = _ScriptedEngine(*[GeometryEngineError(f"error {i}") for i in range(1, 6)])
        result = _orchestrator(ai, engine, max_attempts=max_attempts).run(_input())
        assert len(engine.codes) == max_attempts
        assert len(ai.fix_calls) == max_attempts - 1
        assert result.error == f"error {max_attempts}"

    def test_invalid_budget(self):
        with pytest.raises(ValueError):
            GenerationOrchestrator(max_attempts=0)


# ── Pre-validation ────────────────────────────────────────────────────────────


class TestPreValidationFix:
    def test_invalid_code_fixed_before_compile(self):
        ai = _ScriptedAI(code="const x = 1;")
        engine = _ScriptedEngine(_OK)
        result = _orchestrator(ai, engine).run(_input())
        assert ai.fix_calls[0][0] == "const x = 1;"
        assert ai.fix_calls[0][1] == "Pattern must include a Design definition"
        assert engine.codes == [_fixed(1)]
        assert result.status == PipelineStatus.COMPLETED
        assert result.message == SUCCESS_MESSAGE

    def test_pre_validation_fix_not_counted_against_budget(self):
        ai = _ScriptedAI(code="const design = (;")
        engine = _ScriptedEngine(
            GeometryEngineError("error 1"),
            GeometryEngineError("error 2"),
            GeometryEngineError("error 3"),
        )
        result = _orchestrator(ai, engine).run(_input())
        assert len(engine.codes) == 3
        # one pre-validation fix plus two compile-stage fixes
        assert len(ai.fix_calls) == 3
        assert result.error == "error 3"

    def test_failing_fix_keeps_original_code(self):
        code = "const design = new Design({});\nexport default design;"
        ai = _ScriptedAI(code=code, fix_error=ConnectionError("fix service unreachable"))
        engine = _ScriptedEngine(_OK)
        result = _orchestrator(ai, engine).run(_input())
        assert len(ai.fix_calls) == 1
        assert engine.codes == [code]
        assert result.status == PipelineStatus.COMPLETED
        assert result.message == SUCCESS_MESSAGE
        assert result.code == code


# ── Fix service faults ────────────────────────────────────────────────────────


class TestFixServiceFailure:
    def _run(self):
        ai = _ScriptedAI(fix_error=ConnectionError("fix service unreachable"))
        engine = _ScriptedEngine(
            GeometryEngineError("error 1"),
            GeometryEngineError("error 2"),
            GeometryEngineError("error 3"),
        )
        return ai, engine, _orchestrator(ai, engine).run(_input())

    def test_degrades_to_placeholder(self):
        _, _, result = self._run()
        assert result.status == PipelineStatus.COMPLETED
        assert result.message == DEGRADED_MESSAGE
        assert result.drawing == generate_test_pattern(_MEASUREMENTS)

    def test_keeps_compiler_error(self):
        _, _, result = self._run()
        assert result.error == "error 1"
        assert result.code == _GOOD_CODE

    def test_retries_stop_after_failed_fix(self):
        ai, engine, result = self._run()
        assert len(ai.fix_calls) == 1
        assert engine.codes == [_GOOD_CODE]
        assert len(result.attempts) == 1

    def test_failing_prevalidation_and_compile_fixes(self):
        code = "const design = new Design({});\nexport default design;"
        ai = _ScriptedAI(code=code, fix_error=ConnectionError("fix service unreachable"))
        engine = _ScriptedEngine(GeometryEngineError("error 1"))
        result = _orchestrator(ai, engine).run(_input())
        assert result.status == PipelineStatus.COMPLETED
        assert result.is_degraded
        assert result.error == "error 1"
        assert len(ai.fix_calls) == 2


# ── Failures ──────────────────────────────────────────────────────────────────


class TestAnalysisFailure:
    def test_failed_without_drawing(self):
        ai = _ScriptedAI(analysis_error=AnalysisError("model unavailable"))
        engine = _ScriptedEngine()
        result = _orchestrator(ai, engine).run(_input())
        assert result.status == PipelineStatus.FAILED
        assert result.error == "model unavailable"
        assert result.drawing is None

    def test_no_later_stage_runs(self):
        ai = _ScriptedAI(analysis_error=AnalysisError("model unavailable"))
        engine = _ScriptedEngine()
        _orchestrator(ai, engine).run(_input())
        assert ai.generate_calls == 0
        assert ai.fix_calls == []
        assert engine.codes == []


class TestUnexpectedFailure:
    def test_generation_error_becomes_failed(self):
        ai = _ScriptedAI(generate_error=RuntimeError("boom"))
        result = _orchestrator(ai, _ScriptedEngine()).run(_input())
        assert result.status == PipelineStatus.FAILED
        assert result.error == "Failed to generate pattern: boom"
        assert result.drawing is None

    def test_missing_collaborators(self):
        result = GenerationOrchestrator().run(_input())
        assert result.status == PipelineStatus.FAILED
        assert result.error == "no AI service or geometry engine configured"


# ── Status notifications ──────────────────────────────────────────────────────


class TestStatusListener:
    def test_stage_sequence(self):
        seen = []
        orch = _orchestrator(_ScriptedAI(), _ScriptedEngine(_OK), on_status=lambda r: seen.append(r.status))
        orch.run(_input())
        assert seen == [
            PipelineStatus.ANALYZING,
            PipelineStatus.CODING,
            PipelineStatus.COMPILING,
            PipelineStatus.COMPLETED,
        ]

    def test_failed_run_ends_with_failed(self):
        seen = []
        ai = _ScriptedAI(analysis_error=AnalysisError("nope"))
        _orchestrator(ai, _ScriptedEngine(), on_status=lambda r: seen.append(r.status)).run(_input())
        assert seen == [PipelineStatus.ANALYZING, PipelineStatus.FAILED]

    def test_listener_error_does_not_abort(self):
        def boom(_):
            raise RuntimeError("listener broke")

        result = _orchestrator(_ScriptedAI(), _ScriptedEngine(_OK), on_status=boom).run(_input())
        assert result.status == PipelineStatus.COMPLETED

    def test_same_run_id_throughout(self):
        ids = []
        result = _orchestrator(
            _ScriptedAI(), _ScriptedEngine(_OK), on_status=lambda r: ids.append(r.id)
        ).run(_input())
        assert set(ids) == {result.id}


# ── Instructions ──────────────────────────────────────────────────────────────


class TestInstructions:
    def test_written_on_success(self):
        writer = _FakeWriter()
        result = _orchestrator(_ScriptedAI(), _ScriptedEngine(_OK), instruction_writer=writer).run(
            _input(include_instructions=True)
        )
        assert result.instructions == "1. Sew the side seams."
        assert writer.calls == [(_ANALYSIS, ("front", "back", "sleeve"))]

    def test_not_requested(self):
        writer = _FakeWriter()
        result = _orchestrator(_ScriptedAI(), _ScriptedEngine(_OK), instruction_writer=writer).run(_input())
        assert result.instructions is None
        assert writer.calls == []

    def test_not_written_for_degraded_result(self):
        writer = _FakeWriter()
        engine = _ScriptedEngine(*[GeometryEngineError("bad")] * 3)
        result = _orchestrator(_ScriptedAI(), engine, instruction_writer=writer).run(
            _input(include_instructions=True)
        )
        assert result.instructions is None
        assert writer.calls == []

    def test_writer_returning_none(self):
        result = _orchestrator(
            _ScriptedAI(), _ScriptedEngine(_OK), instruction_writer=_FakeWriter(text=None)
        ).run(_input(include_instructions=True))
        assert result.status == PipelineStatus.COMPLETED
        assert result.instructions is None

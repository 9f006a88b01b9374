"""
AI pattern services — analysis, code generation, and code fixing.

PatternAI is a @runtime_checkable Protocol so tests can inject a
deterministic fake without importing the anthropic package.

ClaudePatternAI implements it with the Claude Messages API:

  analyze_image   image + description → forced tool use → GarmentAnalysis
  generate_code   analysis + measurements → JavaScript pattern code
  fix_code        code + latest error → replacement code

Requires the ``anthropic`` package.  The import is deferred to ``__init__``
so the rest of the module is importable without the package installed.
"""

from __future__ import annotations

import logging
import re
from typing import Protocol, runtime_checkable

from seamline.ai.images import GarmentImage
from seamline.ai.prompts import (
    ANALYSIS_SYSTEM_PROMPT,
    ANALYSIS_TOOL_SCHEMA,
    analysis_prompt,
    code_generation_prompt,
    fix_code_prompt,
)
from seamline.config import (
    ANALYSIS_MAX_TOKENS,
    CODE_MAX_TOKENS,
    DEFAULT_CLAUDE_MODEL,
    REQUEST_TIMEOUT_S,
)
from seamline.errors import AnalysisError, CodeGenerationError
from seamline.schemas.analysis import GarmentAnalysis
from seamline.schemas.measurements import Measurements

logger = logging.getLogger(__name__)

_CODE_BLOCK_RE = re.compile(r"```(?:javascript|js)?\n?([\s\S]*?)```")


@runtime_checkable
class PatternAI(Protocol):
    """Protocol for the external AI services driven by the orchestrator."""

    def analyze_image(self, image: GarmentImage, description: str) -> GarmentAnalysis: ...

    def generate_code(
        self,
        analysis: GarmentAnalysis,
        measurements: Measurements,
        fabric_type: str,
        seam_allowance: float,
    ) -> str: ...

    def fix_code(self, code: str, error: str) -> str: ...


def extract_code(text: str) -> str:
    """Return the contents of the first fenced code block in *text*, else *text*, stripped."""
    match = _CODE_BLOCK_RE.search(text)
    if match:
        text = match.group(1)
    return text.strip()


def make_anthropic_client(timeout: float = REQUEST_TIMEOUT_S):
    """Create an Anthropic client; it reads ``ANTHROPIC_API_KEY`` from the environment."""
    try:
        import anthropic

        return anthropic.Anthropic(timeout=timeout)
    except ImportError as exc:
        raise ImportError("Install anthropic for AI pattern services: pip install anthropic") from exc


class ClaudePatternAI:
    """
    PatternAI backed by Claude.

    The client is safe to share across concurrent runs; this class holds no
    per-run state.  Each call is bounded by the client's timeout, and a
    timeout surfaces as the calling stage's failure.
    """

    def __init__(
        self,
        model: str = DEFAULT_CLAUDE_MODEL,
        timeout: float = REQUEST_TIMEOUT_S,
        client=None,
    ) -> None:
        self._client = client if client is not None else make_anthropic_client(timeout)
        self._model = model

    def analyze_image(self, image: GarmentImage, description: str) -> GarmentAnalysis:
        """Describe the garment in *image* via Claude tool use."""
        response = self._client.messages.create(
            model=self._model,
            max_tokens=ANALYSIS_MAX_TOKENS,
            system=ANALYSIS_SYSTEM_PROMPT,
            tools=[ANALYSIS_TOOL_SCHEMA],
            tool_choice={"type": "any"},
            messages=[
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "image",
                            "source": {
                                "type": "base64",
                                "media_type": image.media_type,
                                "data": image.to_base64(),
                            },
                        },
                        {"type": "text", "text": analysis_prompt(description)},
                    ],
                }
            ],
        )
        tool_block = next((b for b in response.content if b.type == "tool_use"), None)
        if tool_block is None:
            raise AnalysisError("Claude did not return a garment analysis")
        if not isinstance(tool_block.input, dict):
            raise AnalysisError(f"Failed to parse garment analysis: {tool_block.input!r}")
        return GarmentAnalysis.from_dict(tool_block.input)

    def generate_code(
        self,
        analysis: GarmentAnalysis,
        measurements: Measurements,
        fabric_type: str,
        seam_allowance: float,
    ) -> str:
        """Ask Claude for pattern code drafting *analysis* to *measurements*."""
        prompt = code_generation_prompt(
            analysis.to_dict(), measurements.to_dict(), fabric_type, seam_allowance
        )
        return self._complete_code(prompt)

    def fix_code(self, code: str, error: str) -> str:
        """Ask Claude to repair *code* given the most recent *error*."""
        return self._complete_code(fix_code_prompt(code, error))

    def _complete_code(self, prompt: str) -> str:
        response = self._client.messages.create(
            model=self._model,
            max_tokens=CODE_MAX_TOKENS,
            messages=[{"role": "user", "content": prompt}],
        )
        text = "".join(b.text for b in response.content if b.type == "text")
        code = extract_code(text)
        if not code:
            raise CodeGenerationError("Claude returned no pattern code")
        return code

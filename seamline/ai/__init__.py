"""ai — external AI service contracts and Claude / OpenAI clients."""

from seamline.ai.client import ClaudePatternAI, PatternAI, extract_code
from seamline.ai.images import GarmentImage, OpenAIImageGenerator, fetch_image, style_prompt
from seamline.ai.instructions import SewingInstructionWriter

__all__ = [
    "ClaudePatternAI",
    "GarmentImage",
    "OpenAIImageGenerator",
    "PatternAI",
    "SewingInstructionWriter",
    "extract_code",
    "fetch_image",
    "style_prompt",
]

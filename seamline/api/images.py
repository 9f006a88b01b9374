"""
Reference image API — "generate a garment picture from a prompt".

Not part of the generation pipeline: users call it to get an image they can
then submit to generate_pattern().
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from seamline.ai.images import OpenAIImageGenerator, style_prompt
from seamline.config import IMAGE_PROMPT_MAX_CHARS, IMAGE_PROMPT_MIN_CHARS
from seamline.errors import InputValidationError


@runtime_checkable
class ImageGenerator(Protocol):
    """Protocol for reference image generators."""

    def generate(self, prompt: str) -> str: ...


@dataclass(frozen=True)
class ReferenceImage:
    """A generated image URL and an identifier for it."""

    image_url: str
    image_id: str


def generate_reference_image(
    prompt: str,
    style: str = "realistic",
    *,
    generator: ImageGenerator | None = None,
) -> ReferenceImage:
    """Generate an illustration of the garment described by *prompt*.

    Raises InputValidationError for an out-of-range prompt or unknown style,
    and ImageGenerationError when the service returns no image.
    """
    if not IMAGE_PROMPT_MIN_CHARS <= len(prompt) <= IMAGE_PROMPT_MAX_CHARS:
        raise InputValidationError(
            f"prompt must be {IMAGE_PROMPT_MIN_CHARS}–{IMAGE_PROMPT_MAX_CHARS} characters"
        )
    styled = style_prompt(prompt, style)
    if generator is None:
        generator = OpenAIImageGenerator()
    return ReferenceImage(image_url=generator.generate(styled), image_id=str(uuid.uuid4()))

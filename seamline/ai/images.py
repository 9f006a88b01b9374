"""
Garment images: the input to analysis, and the optional reference-image
generator that sits outside the pipeline proper.
"""

from __future__ import annotations

import base64
import binascii
import logging
import re
from dataclasses import dataclass

import requests

from seamline.ai.prompts import IMAGE_PROMPT_WRAPPER, IMAGE_STYLE_TEMPLATES
from seamline.config import DEFAULT_IMAGE_MODEL, REQUEST_TIMEOUT_S
from seamline.errors import ImageFetchError, ImageGenerationError, InputValidationError

logger = logging.getLogger(__name__)

DEFAULT_MEDIA_TYPE = "image/jpeg"
_DATA_URL_RE = re.compile(r"^data:(image/[\w.+-]+);base64,", re.IGNORECASE)


@dataclass(frozen=True)
class GarmentImage:
    """Raw image bytes with their media type."""

    data: bytes
    media_type: str = DEFAULT_MEDIA_TYPE

    def __post_init__(self) -> None:
        if not self.data:
            raise InputValidationError("image data is empty")

    @classmethod
    def from_base64(cls, encoded: str) -> GarmentImage:
        """Decode a base64 string, with or without a ``data:image/...;base64,`` prefix."""
        media_type = DEFAULT_MEDIA_TYPE
        match = _DATA_URL_RE.match(encoded)
        if match:
            media_type = match.group(1).lower()
            encoded = encoded[match.end():]
        try:
            data = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise InputValidationError(f"image is not valid base64: {exc}") from exc
        return cls(data=data, media_type=media_type)

    def to_base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")


def fetch_image(url: str, timeout: float = REQUEST_TIMEOUT_S) -> GarmentImage:
    """Download *url* into a GarmentImage.

    Raises ImageFetchError on transport errors and non-2xx responses.
    """
    try:
        resp = requests.get(url, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as exc:
        logger.debug("Image download failed for %s: %s", url, exc)
        raise ImageFetchError(f"Failed to fetch image from {url}: {exc}") from exc
    if not resp.content:
        raise ImageFetchError(f"Image at {url} is empty")
    media_type = resp.headers.get("Content-Type", DEFAULT_MEDIA_TYPE).split(";")[0].strip()
    if not media_type.startswith("image/"):
        media_type = DEFAULT_MEDIA_TYPE
    return GarmentImage(data=resp.content, media_type=media_type)


def style_prompt(prompt: str, style: str) -> str:
    """Apply the realistic / sketch / technical template to *prompt*."""
    try:
        template = IMAGE_STYLE_TEMPLATES[style]
    except KeyError as exc:
        raise InputValidationError(
            f"style must be one of {', '.join(IMAGE_STYLE_TEMPLATES)}; got {style!r}"
        ) from exc
    return template.format(prompt=prompt)


class OpenAIImageGenerator:
    """Reference image generator backed by the OpenAI Images API.

    The OpenAI client reads ``OPENAI_API_KEY`` from the environment.  Pass
    *client* to reuse an existing client (or inject a test double).
    """

    def __init__(
        self,
        model: str = DEFAULT_IMAGE_MODEL,
        size: str = "1024x1024",
        timeout: float = REQUEST_TIMEOUT_S,
        client=None,
    ) -> None:
        if client is None:
            try:
                import openai

                client = openai.OpenAI(timeout=timeout)
            except ImportError as exc:
                raise ImportError("Install openai for image generation: pip install openai") from exc
        self._client = client
        self._model = model
        self._size = size

    def generate(self, prompt: str) -> str:
        """Generate one illustration for *prompt* and return its URL."""
        response = self._client.images.generate(
            model=self._model,
            prompt=IMAGE_PROMPT_WRAPPER.format(prompt=prompt),
            n=1,
            size=self._size,
            quality="standard",
        )
        data = getattr(response, "data", None) or []
        url = data[0].url if data else None
        if not url:
            raise ImageGenerationError("Failed to generate image")
        return url

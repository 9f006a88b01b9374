"""
Public pattern generation API.

generate_pattern() is the single entry point that takes a garment image,
description, and body measurements and returns a PipelineResult.  It
validates the request at the boundary (raising InputValidationError before
any work starts), resolves the image, and runs the GenerationOrchestrator.

analyze_garment() exposes the analysis stage on its own.

The default collaborators are ClaudePatternAI (requires the anthropic
package and ANTHROPIC_API_KEY) and HttpGeometryEngine (SEAMLINE_ENGINE_URL).
For testing, inject any object satisfying PatternAI / GeometryEngine.
"""

from __future__ import annotations

import logging
from typing import Any, Union

from seamline.ai.client import PatternAI
from seamline.ai.images import GarmentImage, fetch_image
from seamline.ai.instructions import SewingInstructionWriter
from seamline.compiler.compiler import PatternCompiler
from seamline.compiler.engine import GeometryEngine
from seamline.config import (
    DEFAULT_FABRIC_TYPE,
    DEFAULT_SEAM_ALLOWANCE_CM,
    DESCRIPTION_MAX_CHARS,
    DESCRIPTION_MIN_CHARS,
    FABRIC_TYPES,
    SEAM_ALLOWANCE_RANGE_CM,
)
from seamline.errors import ImageFetchError, InputValidationError
from seamline.orchestrator.pipeline import GenerationOrchestrator, OrchestratorInput
from seamline.schemas.analysis import GarmentAnalysis
from seamline.schemas.measurements import Measurements
from seamline.schemas.result import PipelineResult, PipelineStatus

logger = logging.getLogger(__name__)

ImageInput = Union[GarmentImage, bytes, str]


def coerce_measurements(measurements: Measurements | dict[str, Any]) -> Measurements:
    """Accept a Measurements record or a camelCase / snake_case dict."""
    if isinstance(measurements, Measurements):
        return measurements
    if isinstance(measurements, dict):
        return Measurements.from_dict(measurements)
    raise InputValidationError(
        f"measurements must be a mapping, got {type(measurements).__name__}"
    )


def _validate_request(description: str, fabric_type: str, seam_allowance: float, has_image: bool) -> None:
    if not isinstance(description, str):
        raise InputValidationError("description must be a string")
    if len(description) > DESCRIPTION_MAX_CHARS:
        raise InputValidationError(
            f"description must be at most {DESCRIPTION_MAX_CHARS} characters"
        )
    if has_image and len(description) < DESCRIPTION_MIN_CHARS:
        raise InputValidationError(
            f"description must be at least {DESCRIPTION_MIN_CHARS} characters"
        )
    if fabric_type not in FABRIC_TYPES:
        raise InputValidationError(
            f"fabric_type must be one of {', '.join(FABRIC_TYPES)}; got {fabric_type!r}"
        )
    low, high = SEAM_ALLOWANCE_RANGE_CM
    if (
        isinstance(seam_allowance, bool)
        or not isinstance(seam_allowance, (int, float))
        or not low <= seam_allowance <= high
    ):
        raise InputValidationError(
            f"seam_allowance must be between {low:g} and {high:g} cm, got {seam_allowance!r}"
        )


def resolve_image(image: ImageInput) -> GarmentImage:
    """Turn raw bytes, a base64 / data-URL string, or an http(s) URL into a GarmentImage.

    Raises InputValidationError for undecodable input and ImageFetchError
    when a URL cannot be downloaded.
    """
    if isinstance(image, GarmentImage):
        return image
    if isinstance(image, (bytes, bytearray)):
        return GarmentImage(data=bytes(image))
    if isinstance(image, str):
        if image.startswith(("http://", "https://")):
            return fetch_image(image)
        return GarmentImage.from_base64(image)
    raise InputValidationError(f"unsupported image type {type(image).__name__}")


def _default_ai() -> PatternAI:
    from seamline.ai.client import ClaudePatternAI

    return ClaudePatternAI()


def _default_engine() -> GeometryEngine:
    from seamline.compiler.engine import HttpGeometryEngine

    return HttpGeometryEngine()


def generate_pattern(
    description: str,
    measurements: Measurements | dict[str, Any],
    fabric_type: str = DEFAULT_FABRIC_TYPE,
    seam_allowance: float = DEFAULT_SEAM_ALLOWANCE_CM,
    image: ImageInput | None = None,
    *,
    ai: PatternAI | None = None,
    engine: GeometryEngine | None = None,
    include_instructions: bool = False,
    instruction_writer: SewingInstructionWriter | None = None,
) -> PipelineResult:
    """
    Generate a sewing pattern from a garment image and body measurements.

    Parameters
    ----------
    description:
        Free-text garment description (10–1000 characters when an image is
        supplied).
    measurements:
        Body measurements in centimetres, as a Measurements record or dict.
    fabric_type:
        ``"woven"``, ``"knit"``, or ``"stretch-woven"``.
    seam_allowance:
        Seam allowance in centimetres (0.5–3).
    image:
        Garment image as a GarmentImage, raw bytes, base64 / data URL, or an
        http(s) URL.  None returns the placeholder pattern without calling
        any AI service.
    ai:
        PatternAI implementation; defaults to ClaudePatternAI.
    engine:
        GeometryEngine implementation; defaults to HttpGeometryEngine.
    include_instructions:
        Also generate sewing instructions after a successful compile.
    instruction_writer:
        Writer used when *include_instructions* is set; defaults to a
        SewingInstructionWriter sharing Claude credentials.

    Returns
    -------
    PipelineResult
        A terminal result: ``completed`` with a drawing, or ``failed`` with
        an error.

    Raises
    ------
    InputValidationError
        If the measurements, description, fabric type, seam allowance, or
        image encoding are invalid.  No pipeline stage has run.
    """
    resolved_measurements = coerce_measurements(measurements)
    _validate_request(description, fabric_type, seam_allowance, has_image=image is not None)

    garment_image: GarmentImage | None = None
    if image is not None:
        try:
            garment_image = resolve_image(image)
        except ImageFetchError as exc:
            logger.warning("Image could not be fetched: %s", exc)
            return PipelineResult.start().advance(status=PipelineStatus.FAILED, error=str(exc))

    if garment_image is None:
        # Placeholder path: no external collaborator is needed or constructed.
        orchestrator = GenerationOrchestrator()
    else:
        if include_instructions and instruction_writer is None:
            instruction_writer = SewingInstructionWriter()
        orchestrator = GenerationOrchestrator(
            ai=ai or _default_ai(),
            compiler=PatternCompiler(engine or _default_engine()),
            instruction_writer=instruction_writer,
        )

    return orchestrator.run(
        OrchestratorInput(
            description=description,
            measurements=resolved_measurements,
            fabric_type=fabric_type,
            seam_allowance=float(seam_allowance),
            image=garment_image,
            include_instructions=include_instructions,
        )
    )


def analyze_garment(
    image: ImageInput,
    description: str = "",
    *,
    ai: PatternAI | None = None,
) -> GarmentAnalysis:
    """Run only the analysis stage.

    Raises InputValidationError / ImageFetchError for unusable images and
    AnalysisError when the service output cannot be parsed.
    """
    garment_image = resolve_image(image)
    return (ai or _default_ai()).analyze_image(garment_image, description)

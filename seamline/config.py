"""Global configuration: ranges, page geometry, service defaults."""

from __future__ import annotations

import os

# Boundary ranges for the required body measurements, in centimetres (inclusive).
MEASUREMENT_RANGES_CM: dict[str, tuple[float, float]] = {
    "bust": (50.0, 200.0),
    "waist": (40.0, 180.0),
    "hips": (50.0, 200.0),
    "shoulder_width": (30.0, 60.0),
    "arm_length": (40.0, 80.0),
    "inseam": (50.0, 100.0),
    "torso_length": (30.0, 60.0),
}

FABRIC_TYPES = ("woven", "knit", "stretch-woven")
DEFAULT_FABRIC_TYPE = "woven"

# Seam allowance in centimetres.
SEAM_ALLOWANCE_RANGE_CM = (0.5, 3.0)
DEFAULT_SEAM_ALLOWANCE_CM = 1.5

DESCRIPTION_MIN_CHARS = 10
DESCRIPTION_MAX_CHARS = 1000

IMAGE_PROMPT_MIN_CHARS = 5
IMAGE_PROMPT_MAX_CHARS = 500
IMAGE_STYLES = ("realistic", "sketch", "technical")

# Compile attempts per run (each failed attempt but the last is followed by a fix).
MAX_COMPILE_ATTEMPTS = 3

# Page sizes in PDF points (1/72 inch).
PAGE_SIZES_PT: dict[str, tuple[float, float]] = {
    "A4": (595.28, 841.89),
    "Letter": (612.0, 792.0),
    "A0": (2383.94, 3370.39),
}
PAGE_MARGIN_PT = 36.0  # half an inch
TILE_OVERLAP_MM = 10.0
DOCUMENT_TITLE = "Sewing Pattern"
EXPORT_FILENAME = "pattern.pdf"
EXPORT_CONTENT_TYPE = "application/pdf"

# External services.
DEFAULT_ENGINE_URL = os.environ.get("SEAMLINE_ENGINE_URL", "http://localhost:3100")
DEFAULT_CLAUDE_MODEL = os.environ.get("SEAMLINE_CLAUDE_MODEL", "claude-opus-4-5")
DEFAULT_IMAGE_MODEL = "dall-e-3"
REQUEST_TIMEOUT_S = float(os.environ.get("SEAMLINE_REQUEST_TIMEOUT", "120"))

ANALYSIS_MAX_TOKENS = 2000
CODE_MAX_TOKENS = 8000
INSTRUCTIONS_MAX_TOKENS = 4000

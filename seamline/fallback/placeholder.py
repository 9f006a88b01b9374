"""
Placeholder pattern generator.

generate_test_pattern() draws two rectangles (front and back) sized from the
bust and torso length.  It is not a real garment pattern; it guarantees the
pipeline always ends with something drawable, and it answers requests that
arrive without an image.

The function is pure, deterministic, and total over validated Measurements.
"""

from __future__ import annotations

from seamline.schemas.drawing import VectorDrawing
from seamline.schemas.measurements import Measurements
from seamline.utilities.conversion import cm_to_mm

# All constants in millimetres.
PIECE_EASE_MM = 10.0
CANVAS_MARGIN_MM = 20.0
PIECE_GAP_MM = 40.0
GRAIN_INSET_MM = 20.0
ARROW_HALF_WIDTH_MM = 3.0
ARROW_LENGTH_MM = 10.0
LABEL_LINE_MM = 10.0

PIECE_NAMES = ("front", "back")

_STYLE = """  <style>
    .fabric { stroke: #212121; stroke-width: 0.5; fill: none; }
    .lining { stroke: #666; stroke-width: 0.3; fill: none; stroke-dasharray: 4 2; }
    .help { stroke: #aaa; stroke-width: 0.2; fill: none; }
    .note { font-family: sans-serif; font-size: 4; }
    text { font-family: sans-serif; }
  </style>"""


def _fmt(value: float) -> str:
    """Format a coordinate without float noise (``12.5``, ``40``)."""
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return text if text not in ("", "-") else "0"


def simple_svg(width: float, height: float, content: str) -> str:
    """Wrap *content* in an SVG document sized in millimetres."""
    w, h = _fmt(width), _fmt(height)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<svg xmlns="http://www.w3.org/2000/svg"\n'
        f'     width="{w}mm"\n'
        f'     height="{h}mm"\n'
        f'     viewBox="0 0 {w} {h}">\n'
        f"{_STYLE}\n"
        f"{content}\n"
        "</svg>"
    )


def _piece(label: str, x: float, y: float, width: float, height: float) -> str:
    """Render one rectangular piece with its labels and grain line."""
    cx = width / 2
    cy = height / 2
    grain_top = GRAIN_INSET_MM
    grain_bottom = height - GRAIN_INSET_MM
    arrow_base = grain_top + ARROW_LENGTH_MM / 2
    arrow_tip = grain_top - ARROW_LENGTH_MM / 2
    return "\n".join(
        [
            f"  <!-- {label.title()} Bodice -->",
            f'  <g transform="translate({_fmt(x)}, {_fmt(y)})">',
            f'    <path class="fabric" d="M 0 0 L {_fmt(width)} 0 L {_fmt(width)} {_fmt(height)}'
            f' L 0 {_fmt(height)} Z"/>',
            f'    <text x="{_fmt(cx)}" y="{_fmt(cy)}" class="note" text-anchor="middle">'
            f"{label.upper()}</text>",
            f'    <text x="{_fmt(cx)}" y="{_fmt(cy + LABEL_LINE_MM)}" class="note"'
            ' text-anchor="middle">Cut 1</text>',
            f'    <line x1="{_fmt(cx)}" y1="{_fmt(grain_top)}" x2="{_fmt(cx)}"'
            f' y2="{_fmt(grain_bottom)}" class="help"/>',
            f'    <polygon points="{_fmt(cx - ARROW_HALF_WIDTH_MM)},{_fmt(arrow_base)}'
            f" {_fmt(cx)},{_fmt(arrow_tip)}"
            f' {_fmt(cx + ARROW_HALF_WIDTH_MM)},{_fmt(arrow_base)}" class="help"/>',
            "  </g>",
        ]
    )


def generate_test_pattern(measurements: Measurements) -> VectorDrawing:
    """
    Synthesize a front/back placeholder drawing from *measurements*.

    Each piece is a quarter of the bust plus ease wide and one torso length
    high.  The canvas fits both pieces, the gap between them, and a margin on
    every side.
    """
    bust = cm_to_mm(measurements.bust)
    torso = cm_to_mm(measurements.torso_length)

    front_width = bust / 4 + PIECE_EASE_MM
    back_width = bust / 4 + PIECE_EASE_MM

    content = "\n".join(
        [
            _piece("front", CANVAS_MARGIN_MM, CANVAS_MARGIN_MM, front_width, torso),
            _piece(
                "back",
                CANVAS_MARGIN_MM + front_width + PIECE_GAP_MM,
                CANVAS_MARGIN_MM,
                back_width,
                torso,
            ),
        ]
    )

    width = front_width + back_width + PIECE_GAP_MM + 2 * CANVAS_MARGIN_MM
    height = torso + 2 * CANVAS_MARGIN_MM
    return VectorDrawing(
        markup=simple_svg(width, height, content),
        width_mm=width,
        height_mm=height,
        piece_names=PIECE_NAMES,
    )

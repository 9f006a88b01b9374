"""
Vector drawing schema: an SVG document with physical (millimetre) units.

Drawings come from either the geometry engine or the fallback generator and
are consumed read-only by the document exporter.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_WIDTH_RE = re.compile(r'<svg\b[^>]*?\swidth="([^"]+)"', re.DOTALL)
_HEIGHT_RE = re.compile(r'<svg\b[^>]*?\sheight="([^"]+)"', re.DOTALL)
_LENGTH_RE = re.compile(r"^\s*([0-9]*\.?[0-9]+(?:[eE][-+]?[0-9]+)?)\s*([a-z%]*)\s*$")

# Millimetres per unit; unitless lengths are taken as millimetres.
_UNIT_MM = {"": 1.0, "mm": 1.0, "cm": 10.0, "in": 25.4}


def _parse_length(value: str) -> float | None:
    match = _LENGTH_RE.match(value)
    if match is None or match.group(2) not in _UNIT_MM:
        return None
    return float(match.group(1)) * _UNIT_MM[match.group(2)]


def parse_svg_dimensions(markup: str) -> tuple[float, float] | None:
    """Return ``(width_mm, height_mm)`` from the root ``<svg>`` element.

    Returns None when either attribute is absent or uses an unknown unit.
    """
    width_match = _WIDTH_RE.search(markup)
    height_match = _HEIGHT_RE.search(markup)
    if width_match is None or height_match is None:
        return None
    width = _parse_length(width_match.group(1))
    height = _parse_length(height_match.group(1))
    if width is None or height is None:
        return None
    return width, height


@dataclass(frozen=True)
class VectorDrawing:
    """
    Self-contained 2-D drawing.

    Attributes:
        markup: Complete SVG document text.
        width_mm: Intrinsic drawing width in millimetres.
        height_mm: Intrinsic drawing height in millimetres.
        piece_names: Ordered names of the pattern pieces drawn.
    """

    markup: str
    width_mm: float
    height_mm: float
    piece_names: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.width_mm <= 0:
            raise ValueError(f"width_mm must be positive, got {self.width_mm}")
        if self.height_mm <= 0:
            raise ValueError(f"height_mm must be positive, got {self.height_mm}")

    @property
    def piece_count(self) -> int:
        return len(self.piece_names)

    @classmethod
    def from_markup(cls, markup: str, piece_names: tuple[str, ...] = ()) -> VectorDrawing:
        """Build a drawing from SVG text, reading its size from the root element.

        Raises ValueError if the markup carries no usable width/height.
        """
        dims = parse_svg_dimensions(markup)
        if dims is None:
            raise ValueError("SVG markup has no usable width/height attributes")
        return cls(markup=markup, width_mm=dims[0], height_mm=dims[1], piece_names=piece_names)

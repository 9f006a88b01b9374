"""
Tiled printing layout: how many standard pages cover an oversized drawing.

Neighbouring tiles overlap by TILE_OVERLAP_MM so the printed sheets can be
taped back together.  All lengths are in millimetres.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from seamline.config import PAGE_MARGIN_PT, PAGE_SIZES_PT, TILE_OVERLAP_MM
from seamline.utilities.conversion import points_to_mm


class PageSize(str, Enum):
    """Supported output page sizes."""

    A4 = "A4"
    LETTER = "Letter"
    A0 = "A0"

    @property
    def points(self) -> tuple[float, float]:
        """(width, height) in PDF points."""
        return PAGE_SIZES_PT[self.value]

    @property
    def printable_mm(self) -> tuple[float, float]:
        """(width, height) inside the page margins, in millimetres."""
        width, height = self.points
        return (
            points_to_mm(width - 2 * PAGE_MARGIN_PT),
            points_to_mm(height - 2 * PAGE_MARGIN_PT),
        )


@dataclass(frozen=True)
class Tile:
    """One page of a tiled layout; offsets locate its top-left corner on the drawing."""

    row: int
    col: int
    x_mm: float
    y_mm: float


@dataclass(frozen=True)
class TileLayout:
    """Grid of pages covering a drawing.

    Attributes:
        rows: Number of page rows.
        cols: Number of page columns.
        step_x_mm: Horizontal distance between neighbouring tile origins.
        step_y_mm: Vertical distance between neighbouring tile origins.
    """

    rows: int
    cols: int
    step_x_mm: float
    step_y_mm: float

    @property
    def total_pages(self) -> int:
        return self.rows * self.cols

    def tiles(self) -> Iterator[Tile]:
        """Yield tiles in row-major order."""
        for row in range(self.rows):
            for col in range(self.cols):
                yield Tile(row=row, col=col, x_mm=col * self.step_x_mm, y_mm=row * self.step_y_mm)


def _count(extent: float, step: float) -> int:
    return max(1, math.ceil((extent - TILE_OVERLAP_MM) / step))


def calculate_tiled_pages(width_mm: float, height_mm: float, page_size: PageSize) -> TileLayout:
    """Lay out a *width_mm* × *height_mm* drawing over pages of *page_size*."""
    printable_w, printable_h = PageSize(page_size).printable_mm
    step_x = printable_w - TILE_OVERLAP_MM
    step_y = printable_h - TILE_OVERLAP_MM
    return TileLayout(
        rows=_count(height_mm, step_y),
        cols=_count(width_mm, step_x),
        step_x_mm=step_x,
        step_y_mm=step_y,
    )

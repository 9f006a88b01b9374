"""Tests for export/tiling.py — PageSize and calculate_tiled_pages()."""

from __future__ import annotations

import pytest

from seamline.config import TILE_OVERLAP_MM
from seamline.export.tiling import PageSize, Tile, calculate_tiled_pages


class TestPageSize:
    def test_points(self):
        assert PageSize.A4.points == (595.28, 841.89)
        assert PageSize.LETTER.points == (612, 792)
        assert PageSize.A0.points == (2383.94, 3370.39)

    def test_from_string(self):
        assert PageSize("Letter") is PageSize.LETTER

    def test_printable_area_inside_margins(self):
        # 0.5 inch margins on each side remove 25.4 mm per dimension
        width, height = PageSize.LETTER.printable_mm
        assert width == pytest.approx(8.5 * 25.4 - 25.4)
        assert height == pytest.approx(11 * 25.4 - 25.4)


class TestCalculateTiledPages:
    def test_small_drawing_single_page(self):
        layout = calculate_tiled_pages(100, 100, PageSize.A4)
        assert (layout.rows, layout.cols) == (1, 1)
        assert layout.total_pages == 1

    def test_placeholder_sized_drawing_on_a4(self):
        # A4 printable ≈ 184.6 × 271.6 mm, step ≈ 174.6 × 261.6 mm
        layout = calculate_tiled_pages(550, 440, PageSize.A4)
        assert layout.cols == 4
        assert layout.rows == 2
        assert layout.total_pages == 8

    def test_a0_fits_on_one_page(self):
        assert calculate_tiled_pages(550, 440, PageSize.A0).total_pages == 1

    def test_step_leaves_overlap(self):
        layout = calculate_tiled_pages(1000, 1000, PageSize.A4)
        width, height = PageSize.A4.printable_mm
        assert layout.step_x_mm == pytest.approx(width - TILE_OVERLAP_MM)
        assert layout.step_y_mm == pytest.approx(height - TILE_OVERLAP_MM)

    def test_tiles_cover_drawing(self):
        layout = calculate_tiled_pages(900, 700, PageSize.LETTER)
        width, height = PageSize.LETTER.printable_mm
        tiles = list(layout.tiles())
        assert max(t.x_mm for t in tiles) + width >= 900
        assert max(t.y_mm for t in tiles) + height >= 700

    def test_row_major_order(self):
        layout = calculate_tiled_pages(400, 400, PageSize.A4)
        tiles = list(layout.tiles())
        assert tiles[0] == Tile(row=0, col=0, x_mm=0, y_mm=0)
        assert [(t.row, t.col) for t in tiles] == [
            (r, c) for r in range(layout.rows) for c in range(layout.cols)
        ]

    def test_accepts_string_page_size(self):
        assert calculate_tiled_pages(100, 100, "Letter").total_pages == 1

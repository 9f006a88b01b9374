"""export — PDF document assembly and tiled printing layout."""

from seamline.export.assembler import (
    DocumentAssembler,
    ExportOptions,
    ObjectTable,
    escape_pdf_text,
)
from seamline.export.tiling import PageSize, Tile, TileLayout, calculate_tiled_pages

__all__ = [
    "DocumentAssembler",
    "ExportOptions",
    "ObjectTable",
    "PageSize",
    "Tile",
    "TileLayout",
    "calculate_tiled_pages",
    "escape_pdf_text",
]

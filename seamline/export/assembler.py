"""
DocumentAssembler — deterministic PDF 1.4 writer for pattern drawings.

Object layout (indices assigned up front by ObjectTable):

  1            catalog
  2            page tree
  3            Helvetica font, shared by every page
  4, 5         first page, its content stream
  6, 7 ...     further pages in tiled mode

Each content stream carries the title, optional instructions, and the SVG
markup as literal strings.  Byte offsets for the cross-reference table are
computed in a single pass over the finalised object buffers, so the xref can
never drift from the body.

Identical inputs always produce identical bytes: nothing time- or
randomness-dependent is written.
"""

from __future__ import annotations

from dataclasses import dataclass

from seamline.config import DOCUMENT_TITLE, PAGE_MARGIN_PT
from seamline.errors import ExportError
from seamline.export.tiling import PageSize, Tile, calculate_tiled_pages
from seamline.schemas.drawing import parse_svg_dimensions
from seamline.utilities.conversion import mm_to_points

PDF_HEADER = b"%PDF-1.4\n"
XREF_FREE_HEAD = b"0000000000 65535 f \n"

CATALOG_INDEX = 1
PAGE_TREE_INDEX = 2
FONT_INDEX = 3

TITLE_FONT_SIZE = 24
INSTRUCTION_FONT_SIZE = 10
INSTRUCTION_LEADING = 12
MARKUP_FONT_SIZE = 4
MARKUP_LEADING = 5
BLOCK_GAP = 14


@dataclass(frozen=True)
class ExportOptions:
    """Export switches.

    Attributes:
        tiled: Split the drawing over several pages with overlap.
        include_instructions: Print ``instructions`` under the title.
        instructions: Sewing instructions text.
        title: Title printed at the top of every page.
    """

    tiled: bool = False
    include_instructions: bool = False
    instructions: str | None = None
    title: str = DOCUMENT_TITLE


def escape_pdf_text(text: str) -> str:
    """Escape a string for a PDF literal: backslash first, then parentheses."""
    return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def _num(value: float) -> str:
    """Format a number for PDF operators (``595.28``, ``612``)."""
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return text if text not in ("", "-") else "0"


def _encode(text: str) -> bytes:
    return text.encode("latin-1", errors="replace")


class ObjectTable:
    """
    Indexed object store for one document.

    Indices are handed out by :meth:`reserve` before any object body exists,
    so objects can reference each other freely; :meth:`serialize` then writes
    header, bodies, xref, and trailer in one pass.
    """

    def __init__(self) -> None:
        self._bodies: list[bytes | None] = []

    def reserve(self) -> int:
        """Return the next object index (1-based)."""
        self._bodies.append(None)
        return len(self._bodies)

    def set(self, index: int, body: bytes) -> None:
        self._bodies[index - 1] = body

    def __len__(self) -> int:
        return len(self._bodies)

    def serialize(self, root: int) -> bytes:
        """Return the complete file with *root* as the catalog.

        Raises ExportError if a reserved object was never filled.
        """
        chunks = [PDF_HEADER]
        offsets: list[int] = []
        position = len(PDF_HEADER)
        for index, body in enumerate(self._bodies, start=1):
            if body is None:
                raise ExportError(f"object {index} was reserved but never written")
            chunk = b"%d 0 obj\n" % index + body + b"\nendobj\n"
            offsets.append(position)
            chunks.append(chunk)
            position += len(chunk)

        size = len(self._bodies) + 1
        xref = [b"xref\n", b"0 %d\n" % size, XREF_FREE_HEAD]
        xref.extend(b"%010d 00000 n \n" % offset for offset in offsets)
        trailer = b"trailer\n<< /Size %d /Root %d 0 R >>\nstartxref\n%d\n%%%%EOF" % (
            size,
            root,
            position,
        )
        return b"".join(chunks) + b"".join(xref) + trailer


class DocumentAssembler:
    """Builds a paginated PDF from SVG drawing markup."""

    def assemble(
        self,
        markup: str,
        page_size: PageSize | str = PageSize.A4,
        options: ExportOptions | None = None,
    ) -> bytes:
        """
        Assemble *markup* into PDF bytes.

        Parameters
        ----------
        markup:
            SVG document text.  Tiled mode reads its width/height.
        page_size:
            ``A4``, ``Letter``, or ``A0``.
        options:
            Tiling and instruction switches; defaults to a single page.

        Returns
        -------
        bytes
            The complete PDF file.

        Raises
        ------
        ExportError
            If the page size is unknown, the markup is not an SVG document,
            or (tiled mode) its size cannot be determined.
        """
        options = options or ExportOptions()
        try:
            size = PageSize(page_size)
        except ValueError as exc:
            raise ExportError(f"unsupported page size {page_size!r}") from exc
        if "<svg" not in markup:
            raise ExportError("drawing markup is not an SVG document")

        if options.tiled:
            dims = parse_svg_dimensions(markup)
            if dims is None:
                raise ExportError("cannot tile a drawing without width/height")
            layout = calculate_tiled_pages(dims[0], dims[1], size)
            tiles: list[Tile | None] = list(layout.tiles())
        else:
            tiles = [None]

        table = ObjectTable()
        catalog = table.reserve()
        page_tree = table.reserve()
        font = table.reserve()
        page_ids: list[tuple[int, int]] = [(table.reserve(), table.reserve()) for _ in tiles]

        width, height = size.points
        lines = [escape_pdf_text(line) for line in markup.splitlines()]
        instructions = (
            [escape_pdf_text(line) for line in options.instructions.splitlines()]
            if options.include_instructions and options.instructions
            else []
        )

        table.set(catalog, b"<< /Type /Catalog /Pages %d 0 R >>" % page_tree)
        kids = " ".join(f"{page} 0 R" for page, _ in page_ids)
        table.set(
            page_tree,
            _encode(f"<< /Type /Pages /Kids [{kids}] /Count {len(page_ids)} >>"),
        )
        table.set(font, b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>")

        for number, (tile, (page, contents)) in enumerate(zip(tiles, page_ids), start=1):
            title = options.title
            if tile is not None:
                title = (
                    f"{title} (page {number} of {len(tiles)}, "
                    f"row {tile.row + 1}, column {tile.col + 1})"
                )
            stream = _encode(
                self._content_stream(
                    escape_pdf_text(title),
                    instructions if number == 1 else [],
                    lines,
                    width,
                    height,
                    tile,
                )
            )
            table.set(
                contents,
                b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream",
            )
            table.set(
                page,
                _encode(
                    f"<< /Type /Page /Parent {page_tree} 0 R "
                    f"/MediaBox [0 0 {_num(width)} {_num(height)}] "
                    f"/Contents {contents} 0 R "
                    f"/Resources << /Font << /F1 {font} 0 R >> >> >>"
                ),
            )

        return table.serialize(root=catalog)

    @staticmethod
    def _content_stream(
        title: str,
        instructions: list[str],
        lines: list[str],
        width: float,
        height: float,
        tile: Tile | None,
    ) -> str:
        """Render one page's operators.  All text arguments are pre-escaped."""
        margin = PAGE_MARGIN_PT
        top = height - margin - TITLE_FONT_SIZE
        ops = [
            "BT",
            f"/F1 {TITLE_FONT_SIZE} Tf",
            f"{_num(margin)} {_num(top)} Td",
            f"({title}) Tj",
            "ET",
        ]

        cursor = top - BLOCK_GAP
        if instructions:
            ops += [
                "BT",
                f"/F1 {INSTRUCTION_FONT_SIZE} Tf",
                f"{INSTRUCTION_LEADING} TL",
                f"{_num(margin)} {_num(cursor)} Td",
            ]
            for line in instructions:
                ops += [f"({line}) Tj", "T*"]
            ops.append("ET")
            cursor -= INSTRUCTION_LEADING * len(instructions) + BLOCK_GAP

        # Drawing block, clipped to the printable area.  Tiles shift the
        # drawing so that their own region lands inside the clip.
        origin_x, origin_y = margin, cursor
        if tile is not None:
            origin_x -= mm_to_points(tile.x_mm)
            origin_y += mm_to_points(tile.y_mm)
        ops += [
            "q",
            f"{_num(margin)} {_num(margin)} {_num(width - 2 * margin)} "
            f"{_num(height - 2 * margin)} re W n",
            f"1 0 0 1 {_num(origin_x)} {_num(origin_y)} cm",
            "BT",
            f"/F1 {MARKUP_FONT_SIZE} Tf",
            f"{MARKUP_LEADING} TL",
        ]
        for line in lines:
            ops += [f"({line}) Tj", "T*"]
        ops += ["ET", "Q"]
        return "\n".join(ops)

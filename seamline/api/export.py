"""
Public document export API.

export_document() turns drawing markup into a downloadable PDF.  It is
independent of any pipeline run: a malformed drawing fails the export call
only.
"""

from __future__ import annotations

from dataclasses import dataclass

from seamline.config import EXPORT_CONTENT_TYPE, EXPORT_FILENAME
from seamline.export.assembler import DocumentAssembler, ExportOptions
from seamline.export.tiling import PageSize


@dataclass(frozen=True)
class ExportedDocument:
    """PDF bytes with the response metadata a web layer needs."""

    content: bytes
    content_type: str = EXPORT_CONTENT_TYPE
    filename: str = EXPORT_FILENAME

    @property
    def content_disposition(self) -> str:
        return f'attachment; filename="{self.filename}"'


def export_document(
    drawing_markup: str,
    page_size: PageSize | str = PageSize.A4,
    tiled: bool = False,
    include_instructions: bool = False,
    instructions: str | None = None,
) -> ExportedDocument:
    """
    Export *drawing_markup* as a PDF document.

    Raises
    ------
    ExportError
        If the page size is unsupported or the markup cannot be assembled.
    """
    content = DocumentAssembler().assemble(
        drawing_markup,
        page_size,
        ExportOptions(
            tiled=tiled,
            include_instructions=include_instructions,
            instructions=instructions,
        ),
    )
    return ExportedDocument(content=content)

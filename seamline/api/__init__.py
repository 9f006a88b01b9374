"""
Public API.

Exposed names
-------------
generate_pattern          -- image + measurements → PipelineResult
analyze_garment           -- image + description → GarmentAnalysis
export_document           -- drawing markup → ExportedDocument (PDF)
generate_reference_image  -- prompt → ReferenceImage (URL)
"""

from seamline.api.export import ExportedDocument, export_document
from seamline.api.generate import analyze_garment, generate_pattern
from seamline.api.images import ReferenceImage, generate_reference_image

__all__ = [
    "ExportedDocument",
    "ReferenceImage",
    "analyze_garment",
    "export_document",
    "generate_pattern",
    "generate_reference_image",
]

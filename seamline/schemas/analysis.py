"""
Garment analysis schema: the structured description produced by the image
analysis service.

The analysis is opaque to the rest of the pipeline.  It is forwarded to the
code generation prompt and carried on the final result for display.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from seamline.errors import AnalysisError

GARMENT_TYPES = ("dress", "top", "bottom", "outerwear", "jumpsuit", "other")
SILHOUETTES = ("fitted", "semi-fitted", "loose", "oversized")
SLEEVE_TYPES = ("none", "cap", "short", "elbow", "three-quarter", "long")
SLEEVE_FITS = ("fitted", "loose", "puff", "bell")
SUGGESTED_FABRICS = ("woven", "knit", "stretch-woven")
EASE_REGIONS = ("bust", "waist", "hip")


def _choice(raw: dict[str, Any], key: str, allowed: tuple[str, ...]) -> str:
    value = raw[key]
    if value not in allowed:
        raise AnalysisError(f"{key} must be one of {', '.join(allowed)}; got {value!r}")
    return value


@dataclass(frozen=True)
class GarmentAnalysis:
    """
    Structured garment description.

    Attributes:
        garment_type: Broad garment category.
        silhouette: Overall fit of the garment.
        length: Free-text length, e.g. ``"knee"`` or ``"cropped"``.
        sleeve_type: Sleeve length category.
        sleeve_fit: Sleeve fit category.
        neckline: Free-text neckline description.
        closure: Free-text closure description.
        seaming: Seam types, e.g. ``("princess", "side")``.
        details: Style details, e.g. ``("pockets", "pleats")``.
        suggested_fabric: Fabric family suited to the garment.
        estimated_ease: Per-region ease as fractions (bust, waist, hip).
    """

    garment_type: str
    silhouette: str
    length: str
    sleeve_type: str
    sleeve_fit: str
    neckline: str
    closure: str
    seaming: tuple[str, ...]
    details: tuple[str, ...]
    suggested_fabric: str
    estimated_ease: MappingProxyType[str, float]

    def __post_init__(self) -> None:
        if isinstance(self.estimated_ease, dict):
            object.__setattr__(self, "estimated_ease", MappingProxyType(dict(self.estimated_ease)))

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> GarmentAnalysis:
        """Convert the camelCase JSON emitted by the analysis service.

        Raises AnalysisError on missing keys, unknown enum values, or
        non-numeric ease values.
        """
        try:
            sleeves = raw["sleeves"]
            ease_raw = raw["estimatedEase"]
            ease = {region: float(ease_raw[region]) for region in EASE_REGIONS}
            return cls(
                garment_type=_choice(raw, "garmentType", GARMENT_TYPES),
                silhouette=_choice(raw, "silhouette", SILHOUETTES),
                length=str(raw["length"]),
                sleeve_type=_choice(sleeves, "type", SLEEVE_TYPES),
                sleeve_fit=_choice(sleeves, "fit", SLEEVE_FITS),
                neckline=str(raw["neckline"]),
                closure=str(raw["closure"]),
                seaming=tuple(str(s) for s in raw.get("seaming") or ()),
                details=tuple(str(d) for d in raw.get("details") or ()),
                suggested_fabric=_choice(raw, "suggestedFabric", SUGGESTED_FABRICS),
                estimated_ease=MappingProxyType(ease),
            )
        except KeyError as exc:
            raise AnalysisError(f"garment analysis is missing field {exc}") from exc
        except (TypeError, ValueError) as exc:
            raise AnalysisError(f"garment analysis is malformed: {exc}") from exc

    def to_dict(self) -> dict[str, Any]:
        """Render back to the camelCase JSON shape."""
        return {
            "garmentType": self.garment_type,
            "silhouette": self.silhouette,
            "length": self.length,
            "sleeves": {"type": self.sleeve_type, "fit": self.sleeve_fit},
            "neckline": self.neckline,
            "closure": self.closure,
            "seaming": list(self.seaming),
            "details": list(self.details),
            "suggestedFabric": self.suggested_fabric,
            "estimatedEase": dict(self.estimated_ease),
        }

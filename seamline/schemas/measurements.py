"""
Body measurement record.

Measurements are in centimetres at the boundary.  The generated pattern code
addresses measurements by camelCase names (``measurements.shoulderWidth``),
so the wire form produced by :meth:`Measurements.to_dict` uses those keys.
Conversion to millimetres happens only inside the PatternCompiler.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, fields
from typing import Any

from seamline.config import MEASUREMENT_RANGES_CM
from seamline.errors import MeasurementError

REQUIRED_FIELDS: tuple[str, ...] = (
    "bust",
    "waist",
    "hips",
    "shoulder_width",
    "arm_length",
    "inseam",
    "torso_length",
)

OPTIONAL_FIELDS: tuple[str, ...] = (
    "high_bust",
    "underbust",
    "neck",
    "upper_arm",
    "wrist",
    "thigh",
    "knee",
    "calf",
    "ankle",
)


def _to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


_CAMEL_TO_FIELD: dict[str, str] = {_to_camel(n): n for n in REQUIRED_FIELDS + OPTIONAL_FIELDS}


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


@dataclass(frozen=True)
class Measurements:
    """
    Seven required and nine optional body dimensions, in centimetres.

    Required fields must fall within the garment-plausible ranges in
    ``config.MEASUREMENT_RANGES_CM``; optional fields, when given, must be
    strictly positive.  Violations raise :class:`MeasurementError`.
    """

    bust: float
    waist: float
    hips: float
    shoulder_width: float
    arm_length: float
    inseam: float
    torso_length: float

    high_bust: float | None = None
    underbust: float | None = None
    neck: float | None = None
    upper_arm: float | None = None
    wrist: float | None = None
    thigh: float | None = None
    knee: float | None = None
    calf: float | None = None
    ankle: float | None = None

    def __post_init__(self) -> None:
        for name in REQUIRED_FIELDS:
            value = getattr(self, name)
            if not _is_number(value):
                raise MeasurementError(f"{name} must be a number, got {value!r}")
            low, high = MEASUREMENT_RANGES_CM[name]
            if not low <= value <= high:
                raise MeasurementError(
                    f"{name} must be between {low:g} and {high:g} cm, got {value:g}"
                )
        for name in OPTIONAL_FIELDS:
            value = getattr(self, name)
            if value is None:
                continue
            if not _is_number(value) or value <= 0:
                raise MeasurementError(f"{name} must be a positive number, got {value!r}")

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Measurements:
        """Build a record from camelCase or snake_case keys.

        Unknown keys are ignored; missing required keys raise
        :class:`MeasurementError`.
        """
        values: dict[str, Any] = {}
        for key, value in raw.items():
            name = _CAMEL_TO_FIELD.get(key, key)
            if name in REQUIRED_FIELDS or name in OPTIONAL_FIELDS:
                values[name] = value
        missing = [_to_camel(n) for n in REQUIRED_FIELDS if n not in values]
        if missing:
            raise MeasurementError(f"missing required measurements: {', '.join(missing)}")
        return cls(**values)

    def to_dict(self) -> dict[str, float]:
        """Return the camelCase wire form, omitting unset optional fields."""
        return {
            _to_camel(f.name): getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }

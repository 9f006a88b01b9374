from .conversion import (
    cm_to_mm,
    inches_to_mm,
    measurements_to_cm,
    measurements_to_mm,
    mm_to_cm,
    mm_to_points,
    points_to_mm,
)

__all__ = [
    "cm_to_mm",
    "mm_to_cm",
    "inches_to_mm",
    "mm_to_points",
    "points_to_mm",
    "measurements_to_mm",
    "measurements_to_cm",
]

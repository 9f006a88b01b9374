"""
Unit conversion between centimetres, millimetres, inches and PDF points.

Body measurements cross the boundary in centimetres; the geometry engine and
every drawing work in millimetres; the PDF writer works in points.
All functions are pure — no side effects, no state.
"""

from __future__ import annotations

from typing import Any

MM_PER_CM: float = 10.0
MM_PER_INCH: float = 25.4
POINTS_PER_INCH: float = 72.0


def cm_to_mm(cm: float) -> float:
    """Convert centimetres to millimetres."""
    return cm * MM_PER_CM


def mm_to_cm(mm: float) -> float:
    """Convert millimetres to centimetres."""
    return mm / MM_PER_CM


def inches_to_mm(inches: float) -> float:
    """Convert inches to millimetres."""
    return inches * MM_PER_INCH


def mm_to_points(mm: float) -> float:
    """Convert millimetres to PDF points (1/72 inch)."""
    return mm / MM_PER_INCH * POINTS_PER_INCH


def points_to_mm(points: float) -> float:
    """Convert PDF points (1/72 inch) to millimetres."""
    return points / POINTS_PER_INCH * MM_PER_INCH


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def measurements_to_mm(measurements: dict[str, Any]) -> dict[str, float]:
    """Scale every numeric entry of *measurements* from cm to mm.

    Non-numeric entries are dropped from the result.
    """
    return {key: cm_to_mm(value) for key, value in measurements.items() if _is_number(value)}


def measurements_to_cm(measurements: dict[str, Any]) -> dict[str, float]:
    """Inverse of :func:`measurements_to_mm`."""
    return {key: mm_to_cm(value) for key, value in measurements.items() if _is_number(value)}

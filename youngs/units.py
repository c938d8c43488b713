"""Centralized unit conversion utilities."""

from __future__ import annotations

MM_PER_M: float = 1000.0
MM_TO_M: float = 1.0 / MM_PER_M


def mm_to_m(length_mm: float) -> float:
    """Convert a length reading from millimeters to meters.

    Args:
        length_mm (float): Length in millimeters as read from the micrometer
            or the ruler.

    Returns:
        float: Length in meters.

    Note:
        Every quantity entering the stress, strain and uncertainty formulas is
        converted with this helper so the modulus comes out in pascals.
        ``NaN`` passes through unchanged.

    References:
        SI prefix relation: 1 m = 1000 mm.
    """
    return float(length_mm) * MM_TO_M


def m_to_mm(length_m: float) -> float:
    """Convert a length from meters back to millimeters for reporting."""
    return float(length_m) * MM_PER_M

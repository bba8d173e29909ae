"""Millimetre/pixel conversion at the fixed print resolution.

Keep pure functions here for easy testing and reuse. Rounding is half-up
(toward +inf), the same rule the snap grid uses.
"""

import math

from .constants import LayoutConstants

PX_PER_MM = LayoutConstants.RESOLUTION_DPI / LayoutConstants.MM_PER_INCH


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties toward +inf (-2.5 -> -2, 2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def mm_to_px(mm: float) -> int:
    """Convert millimetres to pixels (rounded int)."""
    return round_half_up(mm / LayoutConstants.MM_PER_INCH * LayoutConstants.RESOLUTION_DPI)


def px_to_mm(px: float) -> float:
    """Convert pixels to millimetres."""
    return px / PX_PER_MM


def snap_unit_px() -> int:
    """Snap grid pitch in pixels (1 mm at 300 DPI = 12 px)."""
    return mm_to_px(LayoutConstants.SNAP_MM)

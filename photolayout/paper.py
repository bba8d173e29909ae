"""Paper table and output surface geometry."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .constants import LayoutConstants
from .errors import InvalidSettingError
from .units import mm_to_px

LANDSCAPE = "landscape"
PORTRAIT = "portrait"
ORIENTATIONS = (LANDSCAPE, PORTRAIT)

PAPER_SIZES = LayoutConstants.PAPER_SIZES


def validate_paper(paper: str) -> str:
    if paper not in PAPER_SIZES:
        raise InvalidSettingError(
            f"Unknown paper size: {paper!r} (expected one of {', '.join(PAPER_SIZES)})"
        )
    return paper


def validate_orientation(orientation: str) -> str:
    if orientation not in ORIENTATIONS:
        raise InvalidSettingError(
            f"Unknown orientation: {orientation!r} (expected landscape or portrait)"
        )
    return orientation


def paper_dimensions_mm(paper: str, orientation: str) -> Tuple[float, float]:
    """Return (width_mm, height_mm) for paper + orientation.

    The larger side becomes the width in landscape and the height in portrait.
    """
    validate_paper(paper)
    validate_orientation(orientation)
    large, small = sorted(PAPER_SIZES[paper], reverse=True)
    if orientation == LANDSCAPE:
        return large, small
    return small, large


def surface_dimensions(paper: str, orientation: str) -> Tuple[int, int]:
    """Output surface size in pixels.

    Example:
        >>> surface_dimensions("L", "landscape")
        (1500, 1051)
    """
    width_mm, height_mm = paper_dimensions_mm(paper, orientation)
    return mm_to_px(width_mm), mm_to_px(height_mm)


@dataclass(frozen=True)
class CanvasConfig:
    """Paper + orientation; the pixel size is always derived, never stored."""

    paper: str = LayoutConstants.DEFAULT_PAPER
    orientation: str = LayoutConstants.DEFAULT_ORIENTATION

    def __post_init__(self):
        validate_paper(self.paper)
        validate_orientation(self.orientation)

    @property
    def size(self) -> Tuple[int, int]:
        return surface_dimensions(self.paper, self.orientation)

    @property
    def size_mm(self) -> Tuple[float, float]:
        return paper_dimensions_mm(self.paper, self.orientation)

    def to_dict(self) -> dict:
        width, height = self.size
        width_mm, height_mm = self.size_mm
        return {
            "paper": self.paper,
            "orientation": self.orientation,
            "width_px": width,
            "height_px": height,
            "width_mm": width_mm,
            "height_mm": height_mm,
            "resolution_dpi": LayoutConstants.RESOLUTION_DPI,
        }


def paper_table() -> list[dict]:
    """Paper table as JSON-friendly rows."""
    return [
        {"paper": name, "dimensions_mm": sorted(dims)}
        for name, dims in PAPER_SIZES.items()
    ]

"""Crop reconciliation.

The browser crop widget reports a selection box in raster pixels; the raster
is cut here and the image's display size is recomputed so that either the
physical scale (free mode) or an explicit millimetre size (mm mode) holds.
Position never changes.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from PIL import Image

from .constants import LayoutConstants
from .errors import InvalidCropError, InvalidSettingError
from .models import PlacedImage
from .units import mm_to_px, round_half_up

MODE_FREE = "free"
MODE_MM = "mm"
CROP_MODES = (MODE_FREE, MODE_MM)


def validate_mode(mode: str) -> str:
    if mode not in CROP_MODES:
        raise InvalidSettingError(f"Unknown crop mode: {mode!r} (expected free or mm)")
    return mode


def _positive_mm(value: Any, field: str) -> float:
    try:
        parsed = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidCropError(f"{field} must be a number") from exc
    if not math.isfinite(parsed) or parsed <= 0:
        raise InvalidCropError(f"{field} must be greater than 0")
    return parsed


def _target_px(value: Any, field: str) -> int:
    """Explicit mm target as whole surface pixels, at least 1px and within the crop limit."""
    mm = _positive_mm(value, field)
    limit = LayoutConstants.MAX_CROP_TARGET_MM
    if mm > limit:
        raise InvalidCropError(f"{field} must be at most {limit}mm, got {mm:g}mm")
    px = mm_to_px(mm)
    if px < 1:
        raise InvalidCropError(f"{field} is below one pixel at {LayoutConstants.RESOLUTION_DPI}dpi: {mm:g}mm")
    return px


@dataclass(frozen=True)
class CropRequest:
    """Open edit on one image. Exists between opening and closing the editor."""

    target_id: str
    mode: str = MODE_FREE
    target_width_mm: Optional[float] = None
    target_height_mm: Optional[float] = None

    def __post_init__(self):
        validate_mode(self.mode)

    def target_size_px(self) -> Tuple[int, int]:
        """Explicit display size for mm mode.

        Raises:
            InvalidCropError: Missing, non-numeric, non-positive, sub-pixel or
                oversized input
        """
        return (
            _target_px(self.target_width_mm, "target_width_mm"),
            _target_px(self.target_height_mm, "target_height_mm"),
        )


@dataclass(frozen=True)
class CropBox:
    """Selection in raster pixels (top-left + size)."""

    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class CropResult:
    target_id: str
    raster: Image.Image

    @property
    def width(self) -> int:
        return self.raster.width

    @property
    def height(self) -> int:
        return self.raster.height


def crop_aspect_ratio(mode: str, width_mm: Any = None, height_mm: Any = None) -> Optional[float]:
    """Aspect lock for the crop widget: None for free, w/h for mm mode.

    Incomplete mm input leaves the widget free (None) rather than failing.
    """
    validate_mode(mode)
    if mode == MODE_FREE:
        return None
    try:
        width = _positive_mm(width_mm, "target_width_mm")
        height = _positive_mm(height_mm, "target_height_mm")
    except InvalidCropError:
        return None
    return width / height


def crop_raster(raster: Image.Image, box: CropBox) -> Image.Image:
    """Cut the selection out of the raster at native resolution.

    The box is rounded to whole pixels and clipped to the raster bounds.

    Raises:
        InvalidCropError: Selection is empty after clipping
    """
    left = max(0, round_half_up(box.x))
    top = max(0, round_half_up(box.y))
    right = min(raster.width, round_half_up(box.x + box.width))
    bottom = min(raster.height, round_half_up(box.y + box.height))
    if right <= left or bottom <= top:
        raise InvalidCropError(
            f"Crop selection is empty: ({box.x}, {box.y}, {box.width}x{box.height}) "
            f"on {raster.width}x{raster.height} raster"
        )
    cropped = raster.crop((left, top, right, bottom))
    cropped.load()
    return cropped


def reconciled_size(
    image: PlacedImage, result: CropResult, request: CropRequest
) -> Tuple[float, float]:
    """Display size after the crop, without mutating anything."""
    if request.mode == MODE_MM:
        return request.target_size_px()

    # Free: keep display-px per raster-px from before this crop.
    scale = image.width / image.raster.width
    return result.width * scale, result.height * scale


def reconcile(image: PlacedImage, result: CropResult, request: CropRequest) -> PlacedImage:
    """Replace raster and display size in place; position is untouched.

    Size is computed first, so invalid mm input leaves the image unchanged.
    """
    width, height = reconciled_size(image, result, request)
    image.width = width
    image.height = height
    image.raster = result.raster
    return image

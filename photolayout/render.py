"""Output surface rendering and export."""

from __future__ import annotations

import io
from typing import List

from PIL import Image, ImageDraw

from .constants import LayoutConstants
from .errors import InvalidSettingError
from .models import Layout, PlacedImage
from .units import mm_to_px, px_to_mm, round_half_up

EXPORT_MIME_TYPES = {"png": "image/png", "jpeg": "image/jpeg"}


def _draw_image(surface: Image.Image, image: PlacedImage) -> None:
    """Scale the raster to its display size and paste it, alpha respected.

    Only the part of the display rectangle that lands on the surface is
    resampled.
    """
    width = max(1, round_half_up(image.width))
    height = max(1, round_half_up(image.height))
    left, top = round_half_up(image.x), round_half_up(image.y)

    surface_w, surface_h = surface.size
    visible = (max(left, 0), max(top, 0), min(left + width, surface_w), min(top + height, surface_h))
    if visible[2] <= visible[0] or visible[3] <= visible[1]:
        return

    raster = image.raster
    if raster.mode != "RGBA":
        raster = raster.convert("RGBA")
    scale_x = raster.width / width
    scale_y = raster.height / height
    source_box = (
        (visible[0] - left) * scale_x,
        (visible[1] - top) * scale_y,
        (visible[2] - left) * scale_x,
        (visible[3] - top) * scale_y,
    )
    size = (visible[2] - visible[0], visible[3] - visible[1])
    if size != raster.size or source_box != (0, 0, raster.width, raster.height):
        raster = raster.resize(size, Image.LANCZOS, box=source_box)
    surface.paste(raster, visible[:2], raster)


def render(layout: Layout) -> Image.Image:
    """Draw every image in order onto a fresh opaque white surface.

    Later images occlude earlier ones. Does not modify the layout.
    """
    surface = Image.new("RGB", layout.size, LayoutConstants.BACKGROUND_COLOR)
    for image in layout.images:
        _draw_image(surface, image)
    return surface


def validate_format(fmt: str) -> str:
    fmt = (fmt or "").lower()
    if fmt == "jpg":
        fmt = "jpeg"
    if fmt not in EXPORT_MIME_TYPES:
        raise InvalidSettingError(f"Unsupported export format: {fmt!r} (expected png or jpeg)")
    return fmt


def export_filename(fmt: str) -> str:
    return f"{LayoutConstants.EXPORT_BASENAME}.{validate_format(fmt)}"


def encode(surface: Image.Image, fmt: str) -> bytes:
    fmt = validate_format(fmt)
    dpi = (LayoutConstants.RESOLUTION_DPI, LayoutConstants.RESOLUTION_DPI)
    buffer = io.BytesIO()
    if fmt == "jpeg":
        surface.save(buffer, format="JPEG", quality=LayoutConstants.JPEG_QUALITY, dpi=dpi)
    else:
        surface.save(buffer, format="PNG", dpi=dpi)
    return buffer.getvalue()


def export(layout: Layout, fmt: str) -> bytes:
    """Render at the current surface size and encode as PNG or JPEG."""
    return encode(render(layout), fmt)


def draw_grid(surface: Image.Image, spacing_mm: float = LayoutConstants.GRID_SPACING_MM) -> Image.Image:
    """Return a copy of the surface with a millimetre grid (preview only)."""
    preview = surface.copy()
    draw = ImageDraw.Draw(preview)
    spacing_px = mm_to_px(spacing_mm)
    width, height = preview.size

    x = spacing_px
    while x < width:
        draw.line([(x, 0), (x, height)], fill=LayoutConstants.GRID_COLOR, width=1)
        x += spacing_px

    y = spacing_px
    while y < height:
        draw.line([(0, y), (width, y)], fill=LayoutConstants.GRID_COLOR, width=1)
        y += spacing_px
    return preview


def detect_warnings(layout: Layout) -> List[str]:
    """Images extending beyond the printable surface, in mm per side."""
    warnings = []
    surface_w, surface_h = layout.size
    for index, image in enumerate(layout.images, start=1):
        left, top, right, bottom = image.bounds
        overflow = {
            "left": -left,
            "top": -top,
            "right": right - surface_w,
            "bottom": bottom - surface_h,
        }
        for side, amount_px in overflow.items():
            if amount_px > 0:
                label = image.filename or image.id
                warnings.append(
                    f"Image {index} ({label}) exceeds paper by {px_to_mm(amount_px):.1f}mm ({side})"
                )
    return warnings

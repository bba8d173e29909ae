"""Image ingestion: the only place new PlacedImage entries are created."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import List, Sequence

from PIL import Image, ImageOps, UnidentifiedImageError

from .constants import LayoutConstants
from .errors import CapacityExceededError, ImageDecodeError
from .models import Layout, PlacedImage, new_image_id
from .units import mm_to_px

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadedFile:
    """File-like upload: declared media type plus binary content."""

    filename: str
    media_type: str
    data: bytes

    @property
    def is_image(self) -> bool:
        return (self.media_type or "").lower().startswith("image/")


def decode_raster(data: bytes, name: str = "") -> Image.Image:
    """Decode bytes into a fully loaded raster with EXIF orientation applied.

    Raises:
        ImageDecodeError: If Pillow cannot identify or read the data
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            raster = ImageOps.exif_transpose(img)
            if raster is img:
                raster = img.copy()
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise ImageDecodeError(f"Cannot decode image {name or '<upload>'}: {exc}") from exc
    return raster


def default_display_size(raster: Image.Image) -> tuple[int, float]:
    """Default width of 40 mm, height keeps the source aspect ratio."""
    width = mm_to_px(LayoutConstants.DEFAULT_IMAGE_WIDTH_MM)
    return width, width * (raster.height / raster.width)


def cascade_offset(index: int) -> int:
    return LayoutConstants.CASCADE_ORIGIN_PX + LayoutConstants.CASCADE_STEP_PX * index


def check_capacity(layout: Layout, batch_size: int) -> None:
    limit = LayoutConstants.MAX_IMAGES
    if len(layout.images) + batch_size > limit:
        raise CapacityExceededError(limit, len(layout.images), batch_size)


def ingest_batch(layout: Layout, files: Sequence[UploadedFile]) -> List[PlacedImage]:
    """Add a batch of uploads to the layout.

    The whole batch is rejected when it would exceed the image limit, and all
    rasters are decoded before anything is committed, so a failure leaves the
    layout untouched. Non-image files are skipped.

    Returns:
        Newly placed images, in insertion order

    Raises:
        CapacityExceededError: current + batch size > MAX_IMAGES
        ImageDecodeError: Any image in the batch fails to decode
    """
    files = list(files)
    if not files:
        return []
    check_capacity(layout, len(files))

    decoded = []
    for upload in files:
        if not upload.is_image:
            logger.debug(f"Skipping non-image upload {upload.filename!r} ({upload.media_type})")
            continue
        decoded.append((upload, decode_raster(upload.data, upload.filename)))

    added = []
    for upload, raster in decoded:
        offset = cascade_offset(len(layout.images))
        width, height = default_display_size(raster)
        image = PlacedImage(
            id=new_image_id(),
            raster=raster,
            x=offset,
            y=offset,
            width=width,
            height=height,
            filename=upload.filename,
            media_type=upload.media_type,
        )
        layout.images.append(image)
        added.append(image)
        logger.info(
            f"Placed {upload.filename!r} as {image.id} "
            f"({raster.width}x{raster.height}px raster at {offset},{offset})"
        )
    return added

"""Layout data model: placed images in z-order on one canvas.

Coordinates are output-surface pixels with a top-left origin. Display sizes
are floats (free-mode crops keep fractional scale); rendering rounds them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple
from uuid import uuid4

from PIL import Image

from .errors import ImageNotFoundError
from .paper import CanvasConfig
from .units import px_to_mm


def new_image_id() -> str:
    return uuid4().hex


@dataclass
class PlacedImage:
    """One image on the canvas.

    Attributes:
        id: Stable identifier, immutable after creation
        raster: Owned raster data, replaced wholesale on crop
        x, y: Top-left position in surface pixels
        width, height: Display size in surface pixels (> 0)
        filename: Upload name (metadata only)
        media_type: Declared upload media type (metadata only)
    """

    id: str
    raster: Image.Image
    x: float
    y: float
    width: float
    height: float
    filename: str = ""
    media_type: str = ""

    def __setattr__(self, name, value):
        if name == "id" and "id" in self.__dict__:
            raise AttributeError("PlacedImage.id is immutable")
        # Checked on every assignment, including crop reconciliation
        if name in ("width", "height") and not value > 0:
            raise ValueError(f"Display {name} must be positive: {value}")
        super().__setattr__(name, value)

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        """(left, top, right, bottom) in surface pixels."""
        return self.x, self.y, self.x + self.width, self.y + self.height

    def contains(self, px: float, py: float) -> bool:
        """Inclusive axis-aligned hit test."""
        left, top, right, bottom = self.bounds
        return left <= px <= right and top <= py <= bottom

    def to_dict(self) -> dict:
        raster_w, raster_h = self.raster.size
        return {
            "id": self.id,
            "filename": self.filename,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "width_mm": round(px_to_mm(self.width), 2),
            "height_mm": round(px_to_mm(self.height), 2),
            "raster_width": raster_w,
            "raster_height": raster_h,
        }


@dataclass
class Layout:
    """Canvas config plus images in draw order (last drawn on top)."""

    canvas: CanvasConfig = field(default_factory=CanvasConfig)
    images: List[PlacedImage] = field(default_factory=list)

    @property
    def size(self) -> Tuple[int, int]:
        return self.canvas.size

    def find(self, image_id: str) -> Optional[PlacedImage]:
        for image in self.images:
            if image.id == image_id:
                return image
        return None

    def get(self, image_id: str) -> PlacedImage:
        image = self.find(image_id)
        if image is None:
            raise ImageNotFoundError(f"Image not found: {image_id}")
        return image

    def remove(self, image_id: str) -> PlacedImage:
        image = self.get(image_id)
        self.images = [i for i in self.images if i.id != image_id]
        return image

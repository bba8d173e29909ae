"""Layout error taxonomy.

User-facing errors carry a message suitable for a blocking notification.
"""


class LayoutError(Exception):
    """Base class for layout errors."""


class CapacityExceededError(LayoutError):
    """Ingestion batch would push the layout past the image limit."""

    def __init__(self, limit: int, current: int, requested: int):
        self.limit = limit
        self.current = current
        self.requested = requested
        super().__init__(f"Maximum {limit} images (have {current}, tried to add {requested})")


class ImageDecodeError(LayoutError):
    """Raster data could not be decoded."""


class ImageNotFoundError(LayoutError, KeyError):
    """No placed image with the given id."""

    def __str__(self):
        return str(self.args[0]) if self.args else "Image not found"


class InvalidCropError(LayoutError, ValueError):
    """Crop box or explicit target size is unusable."""


class InvalidSettingError(LayoutError, ValueError):
    """Unknown paper size, orientation, mode, or export format."""

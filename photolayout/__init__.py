"""Photo print layout library.

Pure-Python geometry, crop and render model for composing up to four photos
on an L/2L print at 300 DPI. No web framework dependencies.
"""

from .constants import LayoutConstants
from .errors import (
    CapacityExceededError,
    ImageDecodeError,
    ImageNotFoundError,
    InvalidCropError,
    InvalidSettingError,
    LayoutError,
)
from .session import LayoutSession
from .units import mm_to_px, px_to_mm

__all__ = [
    "LayoutConstants",
    "LayoutSession",
    "LayoutError",
    "CapacityExceededError",
    "ImageDecodeError",
    "ImageNotFoundError",
    "InvalidCropError",
    "InvalidSettingError",
    "mm_to_px",
    "px_to_mm",
]
__version__ = "0.1.0"

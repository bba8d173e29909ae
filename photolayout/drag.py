"""Drag/snap interaction.

Pointer and touch events are mapped into surface pixels and fed through a
two-state machine (Idle / Dragging). The transitions here are pure; the
LayoutSession owns the current DragSession and applies the results.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple

from .errors import InvalidSettingError
from .models import PlacedImage
from .units import round_half_up, snap_unit_px

POINTER_DOWN = "down"
POINTER_MOVE = "move"
POINTER_UP = "up"
POINTER_LEAVE = "leave"
POINTER_KINDS = (POINTER_DOWN, POINTER_MOVE, POINTER_UP, POINTER_LEAVE)


@dataclass(frozen=True)
class ClientRect:
    """Rendered (CSS) box of the surface element in client coordinates."""

    left: float
    top: float
    width: float
    height: float


@dataclass(frozen=True)
class PointerEvent:
    """Mouse or touch event in client coordinates.

    For touch input, the first entry of ``touches`` is the primary point and
    overrides client_x/client_y.
    """

    kind: str
    client_x: float
    client_y: float
    rect: ClientRect
    touches: Tuple[Tuple[float, float], ...] = field(default_factory=tuple)

    def __post_init__(self):
        if self.kind not in POINTER_KINDS:
            raise InvalidSettingError(f"Unknown pointer event: {self.kind!r}")

    @property
    def client_point(self) -> Tuple[float, float]:
        if self.touches:
            return self.touches[0]
        return self.client_x, self.client_y


@dataclass(frozen=True)
class DragSession:
    """Active drag: target image and pointer offset from its top-left corner."""

    target_id: str
    offset_x: float
    offset_y: float


def map_pointer(event: PointerEvent, surface_size: Tuple[int, int]) -> Tuple[float, float]:
    """Map client coordinates to surface pixels.

    The surface may be CSS-scaled; scale = intrinsic px / rendered px per axis.
    """
    rect = event.rect
    if rect.width <= 0 or rect.height <= 0:
        raise InvalidSettingError(f"Rendered surface has no area: {rect.width}x{rect.height}")
    surface_w, surface_h = surface_size
    client_x, client_y = event.client_point
    return (
        (client_x - rect.left) * (surface_w / rect.width),
        (client_y - rect.top) * (surface_h / rect.height),
    )


def hit_test(images: Sequence[PlacedImage], x: float, y: float) -> Optional[PlacedImage]:
    """Topmost image whose bounding box contains the point (last drawn first)."""
    for image in reversed(images):
        if image.contains(x, y):
            return image
    return None


def snap(value: float, unit: int) -> int:
    """Snap to the nearest multiple of unit."""
    return round_half_up(value / unit) * unit


def begin_drag(images: Sequence[PlacedImage], x: float, y: float) -> Optional[DragSession]:
    """Idle -> Dragging if the point hits an image, else stay Idle (None)."""
    target = hit_test(images, x, y)
    if target is None:
        return None
    return DragSession(target_id=target.id, offset_x=x - target.x, offset_y=y - target.y)


def drag_position(
    session: DragSession, x: float, y: float, unit: Optional[int] = None
) -> Tuple[int, int]:
    """New snapped top-left for the drag target. No bounds clamping."""
    unit = unit or snap_unit_px()
    return snap(x - session.offset_x, unit), snap(y - session.offset_y, unit)

"""LayoutSession: the single owner of one user's layout state.

All mutation goes through methods here. Handlers in a threaded server must
hold ``session.lock`` around calls; within the lock the model behaves like
the single event thread it replaces.
"""

from __future__ import annotations

import logging
import threading
from typing import List, Optional, Sequence

from PIL import Image

from . import crop as crop_ops
from . import drag as drag_ops
from .crop import CropBox, CropRequest, CropResult
from .drag import DragSession, PointerEvent
from .ingest import UploadedFile, ingest_batch
from .models import Layout, PlacedImage
from .paper import CanvasConfig
from .render import detect_warnings, export, render

logger = logging.getLogger(__name__)


class LayoutSession:
    """Layout + drag session + open crop edit for one user."""

    def __init__(self, canvas: Optional[CanvasConfig] = None):
        self.layout = Layout(canvas=canvas or CanvasConfig())
        self.drag: Optional[DragSession] = None
        self.edit: Optional[CropRequest] = None
        self.lock = threading.RLock()

    # --- Canvas ---

    @property
    def images(self) -> List[PlacedImage]:
        return self.layout.images

    def set_canvas(self, paper: Optional[str] = None, orientation: Optional[str] = None) -> CanvasConfig:
        """Change paper and/or orientation. Placed images keep their pixel coordinates."""
        canvas = CanvasConfig(
            paper=paper if paper is not None else self.layout.canvas.paper,
            orientation=orientation if orientation is not None else self.layout.canvas.orientation,
        )
        self.layout.canvas = canvas
        logger.info(f"Canvas set to {canvas.paper} {canvas.orientation} {canvas.size[0]}x{canvas.size[1]}px")
        return canvas

    # --- Ingestion ---

    def add_files(self, files: Sequence[UploadedFile]) -> List[PlacedImage]:
        return ingest_batch(self.layout, files)

    def remove_image(self, image_id: str) -> PlacedImage:
        removed = self.layout.remove(image_id)
        if self.drag is not None and self.drag.target_id == image_id:
            self.drag = None
        if self.edit is not None and self.edit.target_id == image_id:
            self.edit = None
        logger.info(f"Removed image {image_id}")
        return removed

    def move_image(self, image_id: str, x: float, y: float) -> PlacedImage:
        """Place an image at an absolute surface position (no snapping)."""
        image = self.layout.get(image_id)
        image.x, image.y = x, y
        return image

    # --- Drag/snap ---

    @property
    def dragging(self) -> bool:
        return self.drag is not None

    def dispatch(self, event: PointerEvent) -> bool:
        """Feed one pointer/touch event through the drag state machine.

        Returns:
            True if an image moved (caller should redraw)
        """
        if event.kind in (drag_ops.POINTER_UP, drag_ops.POINTER_LEAVE):
            self.drag = None
            return False

        x, y = drag_ops.map_pointer(event, self.layout.size)

        if event.kind == drag_ops.POINTER_DOWN:
            self.drag = drag_ops.begin_drag(self.images, x, y)
            if self.drag is not None:
                logger.debug(f"Drag start {self.drag.target_id} at ({x:.1f}, {y:.1f})")
            return False

        if self.drag is None:
            return False
        target = self.layout.find(self.drag.target_id)
        if target is None:
            self.drag = None
            return False
        new_x, new_y = drag_ops.drag_position(self.drag, x, y)
        if (new_x, new_y) == (target.x, target.y):
            return False
        target.x, target.y = new_x, new_y
        return True

    # --- Crop edit ---

    def begin_edit(self, image_id: str, mode: str = crop_ops.MODE_FREE) -> CropRequest:
        """Open the editor on one image, replacing any open edit."""
        self.layout.get(image_id)
        self.edit = CropRequest(target_id=image_id, mode=mode)
        return self.edit

    def close_edit(self) -> None:
        self.edit = None

    def edit_source(self, image_id: str) -> Image.Image:
        """Raster handed to the crop widget (current raster, not the upload)."""
        return self.layout.get(image_id).raster

    def apply_crop(
        self,
        box: CropBox,
        mode: str = crop_ops.MODE_FREE,
        target_width_mm=None,
        target_height_mm=None,
    ) -> Optional[PlacedImage]:
        """Confirm the crop for the open edit.

        No open edit, or a target that disappeared meanwhile, is a no-op
        (returns None). Invalid input raises before any state changes; the
        edit stays open so the user can correct it.
        """
        if self.edit is None:
            logger.info("Crop confirmed with no image selected; ignoring")
            return None
        request = CropRequest(
            target_id=self.edit.target_id,
            mode=mode,
            target_width_mm=target_width_mm,
            target_height_mm=target_height_mm,
        )
        image = self.layout.find(request.target_id)
        if image is None:
            logger.warning(f"Crop target {request.target_id} no longer exists; ignoring")
            self.edit = None
            return None

        result = CropResult(request.target_id, crop_ops.crop_raster(image.raster, box))
        return self.commit_crop(request, result)

    def commit_crop(self, request: CropRequest, result: CropResult) -> Optional[PlacedImage]:
        """Single commit point for crop results; re-validates the target."""
        image = self.layout.find(result.target_id)
        if image is None:
            logger.warning(f"Crop target {result.target_id} no longer exists; ignoring")
            return None
        crop_ops.reconcile(image, result, request)
        if self.edit is not None and self.edit.target_id == request.target_id:
            self.edit = None
        logger.info(
            f"Cropped {image.id} ({request.mode}): raster {result.width}x{result.height}px, "
            f"display {image.width:.1f}x{image.height:.1f}px"
        )
        return image

    # --- Output ---

    def render(self) -> Image.Image:
        return render(self.layout)

    def export(self, fmt: str) -> bytes:
        return export(self.layout, fmt)

    def warnings(self) -> List[str]:
        return detect_warnings(self.layout)

"""
Preview Service - state projection and on-screen preview

Builds the JSON view of a layout session (canvas, image list with
thumbnails, warnings) and the on-screen preview image. The preview may carry
a millimetre grid; exports never do.
"""

import logging
from typing import Dict, List

from PIL import Image

from photolayout import LayoutSession
from photolayout.models import PlacedImage
from photolayout.render import draw_grid

from .image_service import ImageService

logger = logging.getLogger(__name__)


class PreviewService:
    """Read-only projections of a LayoutSession"""

    @staticmethod
    def render_preview(session: LayoutSession, show_grid: bool = False) -> Image.Image:
        """Rendered surface, optionally with the grid overlay."""
        surface = session.render()
        if show_grid:
            surface = draw_grid(surface)
        return surface

    @staticmethod
    def thumbnails(images: List[PlacedImage]) -> List[Dict]:
        """Thumbnail list regenerated from the image sequence (draw order)."""
        items = []
        for index, image in enumerate(images):
            item = image.to_dict()
            item["index"] = index
            item["thumbnail"] = ImageService.thumbnail_data_url(image.raster)
            items.append(item)
        return items

    @staticmethod
    def layout_state(session: LayoutSession) -> Dict:
        """Full state payload for the UI."""
        return {
            "canvas": session.layout.canvas.to_dict(),
            "images": PreviewService.thumbnails(session.images),
            "dragging": session.dragging,
            "editing": session.edit.target_id if session.edit else None,
            "warnings": session.warnings(),
        }

"""Image encoding helpers for API payloads"""

import base64
import io
from typing import Iterable, List

from PIL import Image
from werkzeug.datastructures import FileStorage

from photolayout import LayoutConstants
from photolayout.ingest import UploadedFile


class ImageService:
    """Raster <-> transport conversions for the web layer"""

    @staticmethod
    def image_to_png_bytes(img: Image.Image) -> bytes:
        """Encode any raster as PNG bytes (lossless, alpha preserved)."""
        buffer = io.BytesIO()
        img.save(buffer, format="PNG")
        return buffer.getvalue()

    @staticmethod
    def image_to_base64(img: Image.Image) -> str:
        """Convert PIL Image to base64 PNG data URL for preview.

        Args:
            img: PIL Image to convert

        Returns:
            Base64 data URL string
        """
        img_base64 = base64.b64encode(ImageService.image_to_png_bytes(img)).decode()
        return f"data:image/png;base64,{img_base64}"

    @staticmethod
    def thumbnail_data_url(img: Image.Image, max_px: int = LayoutConstants.THUMBNAIL_MAX_PX) -> str:
        """Small preview of a raster, aspect ratio preserved."""
        thumb = img.copy()
        thumb.thumbnail((max_px, max_px), Image.LANCZOS)
        return ImageService.image_to_base64(thumb)

    @staticmethod
    def uploads_from_request(files: Iterable[FileStorage]) -> List[UploadedFile]:
        """Read Flask/Werkzeug uploads into library UploadedFile records.

        The declared media type is kept as sent; filtering happens at ingestion.
        """
        uploads = []
        for file in files:
            if file is None or file.filename == "":
                continue
            uploads.append(UploadedFile(
                filename=file.filename,
                media_type=file.mimetype or "application/octet-stream",
                data=file.read(),
            ))
        return uploads

"""Service layer for the layout web app"""

from .image_service import ImageService
from .preview_service import PreviewService
from .session_service import SessionRegistry

__all__ = ['ImageService', 'PreviewService', 'SessionRegistry']

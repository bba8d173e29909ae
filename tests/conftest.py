import io

import pytest
from PIL import Image

from photolayout.ingest import UploadedFile
from photolayout.session import LayoutSession


def image_bytes(size=(1000, 500), color="red", fmt="PNG", mode="RGB"):
    """Encode a solid-colour test image."""
    buffer = io.BytesIO()
    Image.new(mode, size, color).save(buffer, format=fmt)
    return buffer.getvalue()


def make_upload(name="photo.png", size=(1000, 500), color="red", media_type="image/png"):
    return UploadedFile(name, media_type, image_bytes(size, color))


@pytest.fixture
def session():
    return LayoutSession()


@pytest.fixture
def upload():
    return make_upload

import io

import pytest
from PIL import Image

from photolayout.errors import CapacityExceededError, ImageDecodeError
from photolayout.ingest import UploadedFile, ingest_batch
from photolayout.models import Layout

from conftest import make_upload


def test_default_size_keeps_aspect_ratio():
    layout = Layout()
    [image] = ingest_batch(layout, [make_upload(size=(1000, 500))])
    assert image.width == 472
    assert image.height == pytest.approx(236.0)
    assert image.raster.size == (1000, 500)


def test_cascading_offsets():
    layout = Layout()
    ingest_batch(layout, [make_upload("a.png"), make_upload("b.png")])
    ingest_batch(layout, [make_upload("c.png")])
    positions = [(image.x, image.y) for image in layout.images]
    assert positions == [(50, 50), (100, 100), (150, 150)]


def test_ids_unique():
    layout = Layout()
    ingest_batch(layout, [make_upload() for _ in range(4)])
    assert len({image.id for image in layout.images}) == 4


def test_id_is_immutable():
    layout = Layout()
    [image] = ingest_batch(layout, [make_upload()])
    with pytest.raises(AttributeError):
        image.id = "other"


def test_fifth_image_rejected():
    layout = Layout()
    ingest_batch(layout, [make_upload(f"{i}.png") for i in range(4)])
    with pytest.raises(CapacityExceededError):
        ingest_batch(layout, [make_upload("extra.png", color="blue")])
    assert len(layout.images) == 4
    assert all(image.filename != "extra.png" for image in layout.images)


def test_batch_rejected_without_partial_ingest():
    layout = Layout()
    ingest_batch(layout, [make_upload("a.png")])
    with pytest.raises(CapacityExceededError):
        ingest_batch(layout, [make_upload(f"{i}.png") for i in range(4)])
    assert [image.filename for image in layout.images] == ["a.png"]


def test_non_image_skipped_but_counted():
    layout = Layout()
    text = UploadedFile("notes.txt", "text/plain", b"hello")
    added = ingest_batch(layout, [make_upload("a.png"), text, make_upload("b.png")])
    assert [image.filename for image in added] == ["a.png", "b.png"]
    with pytest.raises(CapacityExceededError):
        ingest_batch(layout, [make_upload("c.png"), text, make_upload("d.png")])
    assert len(layout.images) == 2


def test_decode_failure_leaves_layout_untouched():
    layout = Layout()
    broken = UploadedFile("broken.png", "image/png", b"not really a png")
    with pytest.raises(ImageDecodeError):
        ingest_batch(layout, [make_upload("good.png"), broken])
    assert layout.images == []


def test_empty_batch():
    layout = Layout()
    assert ingest_batch(layout, []) == []


def test_display_size_must_stay_positive():
    layout = Layout()
    [image] = ingest_batch(layout, [make_upload()])
    with pytest.raises(ValueError):
        image.width = 0
    with pytest.raises(ValueError):
        image.height = -1
    assert image.width == 472
    assert image.height == pytest.approx(236.0)


def test_exif_orientation_applied():
    exif = Image.Exif()
    exif[0x0112] = 6  # rotated 90 degrees clockwise
    buffer = io.BytesIO()
    Image.new("RGB", (40, 20), "red").save(buffer, format="JPEG", exif=exif.tobytes())
    layout = Layout()
    [image] = ingest_batch(layout, [UploadedFile("rotated.jpg", "image/jpeg", buffer.getvalue())])
    assert image.raster.size == (20, 40)
    assert image.height == pytest.approx(944.0)

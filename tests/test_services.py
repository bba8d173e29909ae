import base64
import io

from PIL import Image
from werkzeug.datastructures import FileStorage

from photolayout_web.services import ImageService, PreviewService, SessionRegistry

from conftest import image_bytes


def test_registry_create_and_get():
    registry = SessionRegistry()
    session_id, session = registry.create()
    assert registry.get(session_id) is session
    assert registry.get(None) is None
    assert registry.get("unknown") is None


def test_registry_get_or_create_reuses():
    registry = SessionRegistry()
    session_id, session = registry.get_or_create(None)
    assert registry.get_or_create(session_id) == (session_id, session)
    other_id, _ = registry.get_or_create("stale-cookie")
    assert other_id != "stale-cookie"
    assert len(registry) == 2


def test_registry_evicts_oldest():
    registry = SessionRegistry(max_sessions=2)
    first, _ = registry.create()
    registry.create()
    registry.create()
    assert len(registry) == 2
    assert registry.get(first) is None


def test_thumbnail_fits_box():
    url = ImageService.thumbnail_data_url(Image.new("RGB", (1000, 500)), max_px=100)
    raw = base64.b64decode(url.split(",", 1)[1])
    with Image.open(io.BytesIO(raw)) as thumb:
        assert thumb.size == (100, 50)


def test_uploads_from_request_keeps_media_type():
    files = [
        FileStorage(io.BytesIO(image_bytes()), filename="a.png", content_type="image/png"),
        FileStorage(io.BytesIO(b"x"), filename="", content_type="image/png"),
        FileStorage(io.BytesIO(b"text"), filename="b.txt", content_type="text/plain"),
    ]
    uploads = ImageService.uploads_from_request(files)
    assert [(u.filename, u.media_type) for u in uploads] == [("a.png", "image/png"), ("b.txt", "text/plain")]
    assert uploads[0].is_image and not uploads[1].is_image


def test_layout_state_projection(session, upload):
    first, second = session.add_files([upload("a.png"), upload("b.png")])
    session.begin_edit(second.id)
    state = PreviewService.layout_state(session)
    assert [item["id"] for item in state["images"]] == [first.id, second.id]
    assert [item["index"] for item in state["images"]] == [0, 1]
    assert state["editing"] == second.id
    assert state["canvas"]["paper"] == "L"
    assert state["warnings"] == []


def test_render_preview_grid(session):
    plain = PreviewService.render_preview(session)
    grid = PreviewService.render_preview(session, show_grid=True)
    assert plain.size == grid.size
    assert plain.tobytes() != grid.tobytes()

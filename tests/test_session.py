import pytest

from photolayout.drag import ClientRect, PointerEvent
from photolayout.errors import ImageNotFoundError, InvalidSettingError
from photolayout.session import LayoutSession
from photolayout.paper import CanvasConfig

RECT = ClientRect(0, 0, 1500, 1051)


def test_defaults():
    s = LayoutSession()
    assert s.layout.canvas == CanvasConfig("L", "landscape")
    assert s.images == []
    assert not s.dragging
    assert s.edit is None


def test_set_canvas_keeps_positions(session, upload):
    [image] = session.add_files([upload()])
    session.set_canvas(paper="2L")
    assert session.layout.size == (2102, 1500)
    session.set_canvas(orientation="portrait")
    assert session.layout.size == (1500, 2102)
    assert (image.x, image.y, image.width) == (50, 50, 472)


def test_set_canvas_invalid_keeps_previous(session):
    with pytest.raises(InvalidSettingError):
        session.set_canvas(paper="A4")
    assert session.layout.canvas.paper == "L"


def test_remove_image(session, upload):
    a, b = session.add_files([upload("a.png"), upload("b.png")])
    session.remove_image(a.id)
    assert [image.id for image in session.images] == [b.id]
    with pytest.raises(ImageNotFoundError):
        session.remove_image(a.id)


def test_remove_dragged_image_ends_drag(session, upload):
    [image] = session.add_files([upload()])
    session.dispatch(PointerEvent("down", 60, 60, RECT))
    assert session.dragging
    session.remove_image(image.id)
    assert not session.dragging


def test_capacity_frees_after_remove(session, upload):
    placed = session.add_files([upload(f"{i}.png") for i in range(4)])
    session.remove_image(placed[0].id)
    [added] = session.add_files([upload("late.png")])
    # cascade follows the current count
    assert (added.x, added.y) == (200, 200)


def test_edit_source_is_current_raster(session, upload):
    [image] = session.add_files([upload(size=(300, 200))])
    assert session.edit_source(image.id) is image.raster


def test_export_formats(session, upload):
    session.add_files([upload()])
    assert session.export("png").startswith(b"\x89PNG")
    assert session.export("jpeg").startswith(b"\xff\xd8")

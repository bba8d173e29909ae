from PIL import Image

from photolayout import cli


def write_image(path, size=(400, 300), color="red"):
    Image.new("RGB", size, color).save(path)
    return path


def test_compose_png(tmp_path):
    a = write_image(tmp_path / "a.png")
    b = write_image(tmp_path / "b.jpg", color="blue")
    out = tmp_path / "out.png"

    assert cli.main([str(a), str(b), "--at", "10,10", "--at", "50,10", "-o", str(out)]) == 0

    with Image.open(out) as img:
        assert img.size == (1500, 1051)
        # first image moved to 10mm = 118px, 40mm wide
        assert img.getpixel((130, 130)) == (255, 0, 0)


def test_portrait_jpeg(tmp_path):
    a = write_image(tmp_path / "a.png")
    out = tmp_path / "out.jpeg"
    assert cli.main([str(a), "--orientation", "portrait", "--format", "jpeg", "-o", str(out)]) == 0
    with Image.open(out) as img:
        assert img.format == "JPEG"
        assert img.size == (1051, 1500)


def test_too_many_images(tmp_path, capsys):
    paths = [str(write_image(tmp_path / f"{i}.png")) for i in range(5)]
    assert cli.main(paths + ["-o", str(tmp_path / "out.png")]) == 2
    assert "Maximum 4 images" in capsys.readouterr().out
    assert not (tmp_path / "out.png").exists()


def test_bad_format(tmp_path):
    a = write_image(tmp_path / "a.png")
    assert cli.main([str(a), "--format", "gif"]) == 2

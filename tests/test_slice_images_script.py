"""slice_images 스크립트 테스트."""

from PIL import Image

from scripts.slice_images import main


def test_slices_directory(tmp_path, make_png):
    src = tmp_path / "in"
    out = tmp_path / "out"
    src.mkdir()
    (src / "red.png").write_bytes(make_png(40, 30))
    (src / "tiny.png").write_bytes(make_png(1, 1))
    (src / "notes.txt").write_text("skip me")

    assert main([str(src), "-o", str(out), "--scale", "10"]) == 0

    saved = sorted(p.name for p in out.iterdir())
    assert saved == ["red_0.png", "red_1.png", "red_2.png", "red_3.png"]
    assert Image.open(out / "red_0.png").size == (10, 10)


def test_no_images(tmp_path):
    assert main([str(tmp_path), "-o", str(tmp_path / "out")]) == 1

"""슬라이스/워터마크 API 테스트."""

import base64
import io

from PIL import Image

from core.config import settings
from service import source_service
from utility.png_stream import split_png_stream

RED = (255, 0, 0, 255)


def _open_all(content: bytes) -> list[Image.Image]:
    return [Image.open(io.BytesIO(png)) for png in split_png_stream(content)]


class TestSliceBinary:
    def test_plain_slice(self, client, make_png):
        """400x300 빨강, scale=0 → 200x150 불투명 빨강 PNG 4장."""
        resp = client.post(
            "/slice?scale=0",
            content=make_png(400, 300),
            headers={"content-type": "image/png"},
        )
        assert resp.status_code == 200
        assert resp.headers["content-type"] == "application/octet-stream"
        assert resp.headers["x-quadrant-size"] == "200x150"

        images = _open_all(resp.content)
        assert len(images) == 4
        for img in images:
            assert img.format == "PNG"
            assert img.size == (200, 150)
            assert img.convert("RGBA").getcolors() == [(200 * 150, RED)]

    def test_default_scale_too_large_keeps_size(self, client, make_png):
        """기본 scale=300은 smallest(150) 이상이라 리사이즈하지 않는다."""
        resp = client.post("/slice", content=make_png(400, 300), headers={"content-type": "image/png"})
        assert resp.status_code == 200
        assert all(img.size == (200, 150) for img in _open_all(resp.content))

    def test_scale(self, client, make_png):
        resp = client.post(
            "/slice?scale=100",
            content=make_png(400, 300),
            headers={"content-type": "application/octet-stream"},
        )
        assert resp.status_code == 200
        assert resp.headers["x-quadrant-size"] == "100x100"
        assert all(img.size == (100, 100) for img in _open_all(resp.content))

    def test_watermark_low_transparency(self, client, make_png):
        """transparency=10이어도 0.5로 합성된다."""
        resp = client.post(
            "/slice?scale=0&watermark=TEST&transparency=10",
            content=make_png(400, 300),
            headers={"content-type": "image/png"},
        )
        assert resp.status_code == 200

        for img in _open_all(resp.content):
            colors = {c for _, c in img.convert("RGBA").getcolors(maxcolors=1 << 16)}
            assert (127, 0, 0, 191) in colors
            assert any(r > 127 for r, _, _, _ in colors)
            assert RED not in colors

    def test_process_time_header(self, client, make_png):
        resp = client.post("/slice?scale=0", content=make_png(4, 4), headers={"content-type": "image/png"})
        assert "x-process-time" in resp.headers


class TestSliceJson:
    def test_base64(self, client, make_png):
        payload = {"image_base64": base64.b64encode(make_png(40, 30)).decode()}
        resp = client.post("/slice?scale=0", json=payload)

        assert resp.status_code == 200
        assert [img.size for img in _open_all(resp.content)] == [(20, 15)] * 4

    def test_url(self, client, make_png, monkeypatch):
        png = make_png(40, 30)
        requested = []

        async def fake_fetch(url, client=None):
            requested.append(url)
            return png

        monkeypatch.setattr(source_service, "fetch_image_bytes", fake_fetch)

        resp = client.post("/slice?scale=0", json={"image_url": "http://img.test/a.png"})
        assert resp.status_code == 200
        assert requested == ["http://img.test/a.png"]
        assert len(_open_all(resp.content)) == 4

    def test_no_source_in_json(self, client):
        resp = client.post("/slice", json={"foo": "bar"})
        assert resp.status_code == 400
        assert resp.json()["error_code"] == "INVALID_IMAGE_SOURCE"


class TestSliceErrors:
    def test_undecodable_body(self, client):
        resp = client.post("/slice", content=b"not an image", headers={"content-type": "image/png"})
        assert resp.status_code == 400
        assert resp.json()["error_code"] == "IMAGE_DECODE_FAILED"

    def test_single_pixel(self, client, make_png):
        """1x1 → 400 DEGENERATE_IMAGE (부분 결과 없음)."""
        resp = client.post("/slice", content=make_png(1, 1), headers={"content-type": "image/png"})
        assert resp.status_code == 400
        assert resp.json()["error_code"] == "DEGENERATE_IMAGE"

    def test_empty_body(self, client):
        resp = client.post("/slice")
        assert resp.status_code == 400
        assert resp.json()["error_code"] == "INVALID_IMAGE_SOURCE"

    def test_transparency_out_of_range(self, client, make_png):
        """transparency는 0~100 → 범위 밖이면 422 (pydantic 검증)."""
        resp = client.post(
            "/slice?transparency=150",
            content=make_png(4, 4),
            headers={"content-type": "image/png"},
        )
        assert resp.status_code == 422

    def test_negative_scale(self, client, make_png):
        resp = client.post("/slice?scale=-1", content=make_png(4, 4), headers={"content-type": "image/png"})
        assert resp.status_code == 422

    def test_fetch_failure(self, client, monkeypatch):
        from core.exceptions import SourceAcquisitionError

        async def failing_fetch(url, client=None):
            raise SourceAcquisitionError(f"이미지 다운로드 실패: {url}. Status: 404")

        monkeypatch.setattr(source_service, "fetch_image_bytes", failing_fetch)

        resp = client.post("/slice", json={"image_url": "http://img.test/missing.png"})
        assert resp.status_code == 400
        assert resp.json()["error_code"] == "SOURCE_ACQUISITION_FAILED"


class TestWatermarkEndpoint:
    def test_watermark_whole_image(self, client, make_png):
        resp = client.post(
            "/watermark?text=TEST&transparency=80",
            content=make_png(120, 40),
            headers={"content-type": "image/png"},
        )
        assert resp.status_code == 200
        assert resp.headers["content-type"] == "image/png"

        img = Image.open(io.BytesIO(resp.content))
        assert img.size == (120, 40)
        colors = {c for _, c in img.convert("RGBA").getcolors(maxcolors=1 << 16)}
        assert RED not in colors

    def test_default_text(self, client, make_png):
        resp = client.post("/watermark", content=make_png(60, 20), headers={"content-type": "image/png"})
        assert resp.status_code == 200

    def test_decode_error(self, client):
        resp = client.post("/watermark", content=b"xx", headers={"content-type": "image/png"})
        assert resp.status_code == 400
        assert resp.json()["error_code"] == "IMAGE_DECODE_FAILED"


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "ok"
    assert data["version"] == settings.APP_VERSION
    assert data["font"]

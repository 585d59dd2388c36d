"""pytest 공용 fixture.

- client: lifespan까지 실행한 TestClient (폰트 로딩 포함)
- make_png / make_image: 단색 또는 패턴 테스트 이미지 생성
"""

import io
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from PIL import Image

# src/ 디렉토리를 import path에 추가
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from main import app


@pytest.fixture()
def client():
    with TestClient(app) as c:
        yield c


def _solid(width: int, height: int, color=(255, 0, 0, 255)) -> Image.Image:
    return Image.new("RGBA", (width, height), color)


def _pattern(width: int, height: int) -> Image.Image:
    """픽셀마다 값이 다른 이미지. 위치가 섞이면 바로 드러난다."""
    img = Image.new("RGBA", (width, height))
    img.putdata(
        [((x * 7) % 256, (y * 13) % 256, (x + y) % 256, 255) for y in range(height) for x in range(width)]
    )
    return img


def _to_png(img: Image.Image) -> bytes:
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture()
def make_image():
    return _solid


@pytest.fixture()
def make_pattern():
    return _pattern


@pytest.fixture()
def make_png():
    """(width, height, color) → PNG 바이트."""

    def _make(width: int = 400, height: int = 300, color=(255, 0, 0, 255)) -> bytes:
        return _to_png(_solid(width, height, color))

    return _make

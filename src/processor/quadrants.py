"""
사분면 분할 / 리사이즈 함수.
모든 함수는 PIL.Image(RGBA)를 받고 새 이미지를 반환한다. 원본은 건드리지 않는다.

사분면 인덱스는 row * 2 + col:
    0 = 좌상, 1 = 우상, 2 = 좌하, 3 = 우하
"""

from functools import partial

from PIL import Image

from model.slice import QUADRANT_COUNT, QuadrantDimension
from processor.runner import map_quadrants


def quadrant_dimensions(image: Image.Image) -> QuadrantDimension:
    return QuadrantDimension(width=image.width // 2, height=image.height // 2)


def should_resize(scale_px: int, dims: QuadrantDimension) -> bool:
    """scale_px가 0보다 크고 사분면의 짧은 변보다 작을 때만 축소한다."""
    return 0 < scale_px < dims.smallest


def quadrant_box(index: int, dims: QuadrantDimension) -> tuple[int, int, int, int]:
    """index번 사분면의 (left, upper, right, lower) 영역."""
    x = (index % 2) * dims.width
    y = (index // 2) * dims.height
    return (x, y, x + dims.width, y + dims.height)


def extract_quadrants(image: Image.Image, dims: QuadrantDimension) -> list[Image.Image]:
    """원본을 4개의 겹치지 않는 영역으로 복사한다.

    영역은 항상 원본 안쪽이다 (2 * width <= W, 2 * height <= H).
    width나 height가 0이면 0 크기 이미지가 나온다 (예외 아님).
    """
    return [image.crop(quadrant_box(pic, dims)) for pic in range(QUADRANT_COUNT)]


def resize_quadrant(image: Image.Image, size: int) -> Image.Image:
    return image.resize((size, size), Image.Resampling.NEAREST)


def resize_quadrants(
    quadrants: list[Image.Image], size: int, workers: int = 1
) -> list[Image.Image]:
    """4개 모두 size x size로 nearest-neighbor 리샘플링한다."""
    return map_quadrants(partial(resize_quadrant, size=size), quadrants, workers)

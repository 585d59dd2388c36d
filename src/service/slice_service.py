"""사분면 슬라이스 파이프라인.

단계는 한 방향으로만 진행한다:

    pending → fetching → decoding → dimensioning → extracting
            → [watermarking] → [resizing] → encoding → done

어느 단계에서든 예외가 나면 failed로 끝나고 예외를 그대로 올린다.
재시도나 부분 결과는 없다 (4장 전부 아니면 에러).

run()만 async다. 다운로드는 이벤트 루프에서 기다리고,
디코딩 이후의 CPU 작업은 스레드풀로 넘긴다.
"""

import io
from enum import StrEnum

import httpx
from loguru import logger
from PIL import Image
from starlette.concurrency import run_in_threadpool

from core.config import settings
from core.exceptions import AppException, DegenerateImage
from model.slice import QuadrantDimension
from model.source import ImageSource
from processor.quadrants import extract_quadrants, quadrant_dimensions, resize_quadrants, should_resize
from processor.runner import map_quadrants
from processor.watermark import composite_watermark, rasterize_watermark
from service import source_service
from utility.timer import timer


class Stage(StrEnum):
    PENDING = "pending"
    FETCHING = "fetching"
    DECODING = "decoding"
    DIMENSIONING = "dimensioning"
    EXTRACTING = "extracting"
    WATERMARKING = "watermarking"
    RESIZING = "resizing"
    ENCODING = "encoding"
    DONE = "done"
    FAILED = "failed"


def encode_png(image: Image.Image) -> bytes:
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


class SlicePipeline:
    """요청 하나에 대한 슬라이스 실행기. 요청마다 새로 만든다.

    Args:
        scale_px: 출력 정사각형 한 변. 0이면 리사이즈하지 않음.
        watermark_text: None 또는 공백뿐이면 워터마크 생략.
        transparency: 0~100 (%). 합성 직전에 /100 하고 0.5 하한이 걸린다.
        workers: 사분면 병렬 처리 스레드 수.
    """

    def __init__(
        self,
        scale_px: int = 0,
        watermark_text: str | None = None,
        transparency: int = 30,
        workers: int | None = None,
    ):
        self.scale_px = scale_px
        self.watermark_text = watermark_text if watermark_text and watermark_text.strip() else None
        self.alpha = transparency / 100
        self.workers = workers if workers is not None else settings.QUADRANT_WORKERS
        self.stage = Stage.PENDING
        self.failure: str | None = None
        self.dimension: QuadrantDimension | None = None
        self.output_size: tuple[int, int] | None = None

    def _enter(self, stage: Stage) -> Stage:
        logger.debug(f"slice: {self.stage} → {stage}")
        self.stage = stage
        return stage

    def _fail(self, exc: Exception):
        reason = exc.message if isinstance(exc, AppException) else f"{exc.__class__.__name__}: {exc}"
        logger.warning(f"slice failed at {self.stage}: {reason}")
        self.failure = reason
        self.stage = Stage.FAILED

    async def run(self, source: ImageSource, client: httpx.AsyncClient | None = None) -> list[bytes]:
        """소스를 받아 PNG 4장을 인덱스 순서로 반환한다."""
        try:
            with timer(self._enter(Stage.FETCHING)):
                data = await source_service.acquire(source, client)
        except Exception as e:
            self._fail(e)
            raise
        return await run_in_threadpool(self.process, data)

    def process(self, data: bytes) -> list[bytes]:
        """디코딩부터 인코딩까지 (동기)."""
        try:
            with timer(self._enter(Stage.DECODING)):
                image = source_service.decode_image(data)
            quadrants = self._slice(image)
            with timer(self._enter(Stage.ENCODING)):
                encoded = map_quadrants(encode_png, quadrants, self.workers)
        except Exception as e:
            self._fail(e)
            raise

        self._enter(Stage.DONE)
        logger.info(
            f"Sliced {image.width}x{image.height} → 4 x {self.output_size[0]}x{self.output_size[1]}"
            f" (watermark: {self.watermark_text is not None}, {sum(map(len, encoded))} bytes)"
        )
        return encoded

    def slice(self, image: Image.Image) -> list[Image.Image]:
        """이미 디코딩된 이미지를 사분면 4장으로 나눈다."""
        try:
            quadrants = self._slice(image.convert("RGBA"))
        except Exception as e:
            self._fail(e)
            raise
        self._enter(Stage.DONE)
        return quadrants

    def _slice(self, image: Image.Image) -> list[Image.Image]:
        with timer(self._enter(Stage.DIMENSIONING)):
            dims = quadrant_dimensions(image)
            self.dimension = dims
        if dims.is_empty:
            raise DegenerateImage(
                f"{image.width}x{image.height} 이미지는 사분면으로 나눌 수 없습니다 (가로/세로 최소 2px)"
            )

        with timer(self._enter(Stage.EXTRACTING)):
            quadrants = extract_quadrants(image, dims)

        if self.watermark_text is not None:
            with timer(self._enter(Stage.WATERMARKING)):
                # 래스터라이즈는 요청당 한 번, 합성은 사분면마다
                mark = rasterize_watermark(self.watermark_text, (dims.width, dims.height))
                quadrants = map_quadrants(
                    lambda q: composite_watermark(q, mark, self.alpha), quadrants, self.workers
                )

        if should_resize(self.scale_px, dims):
            with timer(self._enter(Stage.RESIZING)):
                quadrants = resize_quadrants(quadrants, self.scale_px, self.workers)

        self.output_size = quadrants[0].size
        return quadrants


def watermark_image(image: Image.Image, text: str, transparency: int = 30) -> Image.Image:
    """이미지 전체 크기로 워터마크를 그려 합성한 사본을 반환한다."""
    target = image.convert("RGBA")
    if target.width == 0 or target.height == 0 or not text.strip():
        return target
    mark = rasterize_watermark(text, target.size)
    return composite_watermark(target, mark, transparency / 100)


async def run_watermark(
    source: ImageSource,
    text: str,
    transparency: int,
    client: httpx.AsyncClient | None = None,
) -> bytes:
    """단일 이미지 워터마크: 소스 → PNG 1장."""
    data = await source_service.acquire(source, client)

    def _process() -> bytes:
        with timer("watermark"):
            image = source_service.decode_image(data)
            return encode_png(watermark_image(image, text, transparency))

    return await run_in_threadpool(_process)

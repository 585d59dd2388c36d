from fastapi import APIRouter, Query, Request
from fastapi.responses import Response, StreamingResponse

from core.config import settings
from service import source_service
from service.slice_service import SlicePipeline, run_watermark

router = APIRouter(tags=["slice"])


async def _read_source(request: Request):
    body = await request.body()
    return source_service.parse_source(request.headers.get("content-type", ""), body)


@router.post("/slice")
async def slice_image(
    request: Request,
    scale: int = Query(default=settings.DEFAULT_SCALE, ge=0),
    watermark: str | None = Query(default=None),
    transparency: int = Query(default=settings.DEFAULT_TRANSPARENCY, ge=0, le=100),
):
    """이미지를 사분면 4장(PNG)으로 나눠 이어 붙인 스트림으로 반환한다.

    순서: 좌상, 우상, 좌하, 우하. 길이 구분자는 없다.
    """
    source = await _read_source(request)
    pipeline = SlicePipeline(scale_px=scale, watermark_text=watermark, transparency=transparency)
    images = await pipeline.run(source)

    width, height = pipeline.output_size
    return StreamingResponse(
        iter(images),
        media_type="application/octet-stream",
        headers={"X-Quadrant-Size": f"{width}x{height}"},
    )


@router.post("/watermark")
async def watermark_image(
    request: Request,
    text: str = Query(default=settings.DEFAULT_WATERMARK_TEXT),
    transparency: int = Query(default=settings.DEFAULT_TRANSPARENCY, ge=0, le=100),
):
    """이미지 전체에 워터마크를 합성해 PNG 1장으로 반환한다."""
    source = await _read_source(request)
    png = await run_watermark(source, text, transparency)
    return Response(content=png, media_type="image/png")

"""텍스트 워터마크 래스터라이즈 + 알파 합성.

래스터라이즈 결과는 글자 커버리지 v(0~255)를 R=G=B=A=v로 채운 RGBA 이미지다.
검은 글자 + 별도 알파가 아니라, 밝기와 알파가 같은 "헤일로" 형태가 된다.

합성 규칙 (채널 c = R, G, B):
    wa   = max(alpha, 0.5)
    base = 1 - wa
    out[c] = base * dst[c] + wa * wm[c] * (1 - base)
    out.A  = (base + wa * (1 - base)) * 255

요청한 투명도가 0.5 미만이어도 항상 0.5로 올라간다.
기존 서비스와 출력이 같아야 하므로 이 동작은 그대로 둔다.
"""

import math

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from processor.font import get_font

ALPHA_FLOOR = 0.5


def effective_alpha(alpha: float) -> float:
    return max(alpha, ALPHA_FLOOR)


def rasterize_watermark(
    text: str,
    size: tuple[int, int],
    font: ImageFont.FreeTypeFont | None = None,
) -> Image.Image:
    """text를 그린 뒤 size로 nearest-neighbor 리사이즈한 RGBA 비트맵을 반환한다.

    원본 캔버스 크기:
        width  = ceil(글자 advance 합계)
        height = ascent + descent  (Pillow의 descent는 양수)

    그릴 글자가 없으면 완전히 투명한 size 크기 이미지를 반환한다.
    """
    font = font or get_font()
    # 한 줄 레이아웃만 지원
    text = " ".join(text.splitlines())

    ascent, descent = font.getmetrics()
    raw_width = math.ceil(font.getlength(text))
    raw_height = ascent + descent

    if raw_width <= 0 or raw_height <= 0 or size[0] <= 0 or size[1] <= 0:
        return Image.new("RGBA", size, (0, 0, 0, 0))

    # (0, 0) + 기본 anchor "la" → 기준선이 y = ascent
    coverage = Image.new("L", (raw_width, raw_height), 0)
    ImageDraw.Draw(coverage).text((0, 0), text, fill=255, font=font)

    canvas = Image.merge("RGBA", (coverage, coverage, coverage, coverage))
    return canvas.resize(size, Image.Resampling.NEAREST)


def centered_offset(target_size: tuple[int, int], mark_size: tuple[int, int]) -> tuple[int, int]:
    """가운데 정렬 좌상단 좌표. 워터마크가 더 크면 음수가 될 수 있다."""
    return (
        (target_size[0] - mark_size[0]) // 2,
        (target_size[1] - mark_size[1]) // 2,
    )


def composite_watermark(target: Image.Image, watermark: Image.Image, alpha: float) -> Image.Image:
    """target(RGBA) 가운데에 watermark를 합성한다. target을 직접 수정하고 그대로 반환.

    워터마크가 target보다 크면 target 경계 밖 부분은 잘라낸다.
    워터마크 영역 밖의 픽셀은 바뀌지 않는다.
    """
    offset_x, offset_y = centered_offset(target.size, watermark.size)

    left = max(offset_x, 0)
    top = max(offset_y, 0)
    right = min(offset_x + watermark.width, target.width)
    bottom = min(offset_y + watermark.height, target.height)
    if right <= left or bottom <= top:
        return target

    mark = watermark.convert("RGBA").crop(
        (left - offset_x, top - offset_y, right - offset_x, bottom - offset_y)
    )
    dst = np.asarray(target.crop((left, top, right, bottom)), dtype=np.float32)
    wm = np.asarray(mark, dtype=np.float32)

    wa = np.float32(effective_alpha(alpha))
    base = np.float32(1.0) - wa
    combined = base + wa * (np.float32(1.0) - base)

    out = np.empty_like(dst)
    out[..., :3] = base * dst[..., :3] + wa * wm[..., :3] * (np.float32(1.0) - base)
    out[..., 3] = combined * np.float32(255.0)

    # float → u8 변환은 0 방향 절삭 (음수/255 초과는 포화)
    blended = np.clip(out, 0, 255).astype(np.uint8)
    target.paste(Image.fromarray(blended), (left, top))
    return target

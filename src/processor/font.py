"""워터마크용 폰트 리소스.

프로세스 전체에서 하나의 FreeTypeFont를 공유한다.
- 최초 get_font() 호출 시 한 번만 로딩 (lru_cache)
- 이후 읽기 전용이므로 스레드 간 락 없이 사용해도 안전
- 해제하지 않는다 (프로세스 수명과 동일)

로딩 실패는 요청 오류가 아니라 설정 오류다. lifespan에서 미리 호출해
잘못된 폰트로는 서버가 뜨지 않도록 한다.
"""

from functools import lru_cache

from loguru import logger
from PIL import ImageFont

from core.config import settings
from core.exceptions import FontLoadError


def load_font(path: str | None, size: int) -> ImageFont.FreeTypeFont:
    try:
        if path:
            font = ImageFont.truetype(path, size)
        else:
            # Pillow 10.1+ 내장 폰트 (FreeType 필요)
            font = ImageFont.load_default(size=size)
    except OSError as e:
        raise FontLoadError(f"폰트를 읽을 수 없습니다: {path or '<pillow default>'} ({e})") from e

    if not isinstance(font, ImageFont.FreeTypeFont):
        raise FontLoadError("FreeType 지원이 없는 Pillow 빌드입니다")

    family, style = font.getname()
    logger.info(f"Watermark font loaded: {family} {style} ({size}px)")
    return font


@lru_cache(maxsize=1)
def get_font() -> ImageFont.FreeTypeFont:
    return load_font(settings.WATERMARK_FONT_PATH, settings.WATERMARK_FONT_SIZE)

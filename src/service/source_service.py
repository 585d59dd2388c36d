"""이미지 소스 해석 / 다운로드 / 디코딩.

요청 본문 형태:
- application/json            → {"image_url": ...} 또는 {"image_base64": ...}
- image/*, octet-stream, 기타 → 본문 전체를 이미지 바이트로 취급 (비어 있지 않으면)

재시도는 하지 않는다. 실패는 모두 400 계열 AppException으로 올라간다.
"""

import base64
import binascii
import io

import httpx
from loguru import logger
from PIL import Image, UnidentifiedImageError
from pydantic import ValidationError

from core.config import settings
from core.exceptions import ImageDecodeError, InvalidImageSource, SourceAcquisitionError
from model.source import ImagePayload, ImageSource, SourceKind


def _size_mb(data: bytes) -> float:
    return len(data) / 1024 / 1024


def parse_source(content_type: str, body: bytes) -> ImageSource:
    """Content-Type과 본문으로 이미지 소스를 판별한다."""
    content_type = content_type.lower()

    if content_type.startswith("application/json"):
        try:
            payload = ImagePayload.model_validate_json(body)
        except ValidationError as e:
            raise InvalidImageSource(f"JSON을 해석할 수 없습니다: {e.errors()[0]['msg']}") from e

        if payload.image_url:
            return ImageSource(SourceKind.URL, payload.image_url)
        if payload.image_base64:
            return ImageSource(SourceKind.BASE64, payload.image_base64)
        raise InvalidImageSource("JSON에 image_url 또는 image_base64가 없습니다")

    if content_type.startswith("image/") or content_type == "application/octet-stream" or body:
        if not body:
            raise InvalidImageSource("이미지 본문이 비어 있습니다")
        return ImageSource(SourceKind.BINARY, body)

    raise InvalidImageSource()


async def fetch_image_bytes(url: str, client: httpx.AsyncClient | None = None) -> bytes:
    """원격 이미지를 내려받는다. 2xx가 아니면 SourceAcquisitionError."""
    try:
        if client is None:
            async with httpx.AsyncClient(
                timeout=settings.FETCH_TIMEOUT, follow_redirects=True
            ) as own_client:
                response = await own_client.get(url)
        else:
            response = await client.get(url)
    except httpx.HTTPError as e:
        raise SourceAcquisitionError(f"이미지 다운로드 실패: {url} ({e.__class__.__name__})") from e

    if not response.is_success:
        raise SourceAcquisitionError(
            f"이미지 다운로드 실패: {url}. Status: {response.status_code}"
        )

    data = response.content
    logger.info(f"Got image from URL: {url} ({_size_mb(data):.2f} MB)")
    return data


def decode_base64(value: str) -> bytes:
    try:
        data = base64.b64decode(value.strip(), validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidImageSource(f"base64를 해석할 수 없습니다: {e}") from e
    logger.info(f"Decoded base64 image ({_size_mb(data):.2f} MB)")
    return data


async def acquire(source: ImageSource, client: httpx.AsyncClient | None = None) -> bytes:
    """소스 종류에 맞게 원본 이미지 바이트를 얻는다."""
    match source.kind:
        case SourceKind.URL:
            return await fetch_image_bytes(source.value, client)
        case SourceKind.BASE64:
            return decode_base64(source.value)
        case SourceKind.BINARY:
            logger.info(f"Loading image from binary body ({_size_mb(source.value):.2f} MB)")
            return source.value
    raise InvalidImageSource(f"알 수 없는 소스 종류: {source.kind}")


def decode_image(data: bytes) -> Image.Image:
    """바이트를 디코딩해 RGBA 이미지로 정규화한다."""
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except (
        UnidentifiedImageError,
        Image.DecompressionBombError,
        OSError,
        SyntaxError,
        EOFError,
        ValueError,
    ) as e:
        raise ImageDecodeError(f"이미지를 디코딩할 수 없습니다: {e}") from e
    return img.convert("RGBA")

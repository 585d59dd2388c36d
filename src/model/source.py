from dataclasses import dataclass
from enum import StrEnum

from pydantic import BaseModel


class SourceKind(StrEnum):
    URL = "url"
    BINARY = "binary"
    BASE64 = "base64"


@dataclass(frozen=True)
class ImageSource:
    kind: SourceKind
    value: str | bytes


class ImagePayload(BaseModel):
    """JSON 요청 본문. image_url이 있으면 image_base64보다 우선한다."""

    image_url: str | None = None
    image_base64: str | None = None

import sys

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # 앱 설정
    APP_NAME: str = "quadrant-slicer"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "DEBUG"

    # 서버 설정
    HOST: str = "0.0.0.0"
    PORT: int = 9090

    # 슬라이스 기본값 (쿼리 파라미터 생략 시)
    DEFAULT_SCALE: int = 300
    DEFAULT_TRANSPARENCY: int = 30
    DEFAULT_WATERMARK_TEXT: str = "quadrant-slicer"

    # 워터마크 폰트 (경로 미지정 시 Pillow 내장 폰트)
    WATERMARK_FONT_PATH: str | None = None
    WATERMARK_FONT_SIZE: int = 20

    # 원격 이미지 다운로드 타임아웃 (초)
    FETCH_TIMEOUT: float = 10.0

    # 사분면 병렬 처리 스레드 수 (1이면 순차 처리)
    QUADRANT_WORKERS: int = 4

    @property
    def python_version(self) -> str:
        return f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}"

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()

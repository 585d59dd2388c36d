from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger

from core.config import settings
from processor.font import get_font
from utility.logger import setup_logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    # === 시작 ===
    setup_logger()
    logger.info(f"{settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Python {settings.python_version}")

    # 폰트를 못 읽으면 FontLoadError로 기동 자체가 실패한다
    app.state.font = get_font()
    app.state.settings = settings
    logger.info(
        f"Defaults: scale={settings.DEFAULT_SCALE}, transparency={settings.DEFAULT_TRANSPARENCY}, "
        f"workers={settings.QUADRANT_WORKERS}"
    )

    yield

    # === 종료 ===
    logger.info("Shutting down")

import uvicorn
from fastapi import FastAPI, Request

from core.config import settings
from core.error_handlers import app_exception_handler
from core.exceptions import AppException
from core.lifespan import lifespan
from core.middleware import RequestLoggingMiddleware
from router.slice_router import router as slice_router

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="이미지를 사분면 4장으로 나누고 워터마크/리사이즈를 적용하는 서비스",
    lifespan=lifespan,
)

app.add_middleware(RequestLoggingMiddleware)
app.add_exception_handler(AppException, app_exception_handler)

app.include_router(slice_router)


@app.get("/health")
async def health(request: Request):
    family, style = request.app.state.font.getname()
    return {
        "status": "ok",
        "version": request.app.state.settings.APP_VERSION,
        "python_version": request.app.state.settings.python_version,
        "font": f"{family} {style}",
    }


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        access_log=False,
    )

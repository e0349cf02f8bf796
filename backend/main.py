from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from api.images import router as images_router
from config import logger, settings as default_settings
from errors import ResizerError
from resizer import ResizeService
from schemas import ResizerSettings
from utils.image_variants import ImageCodec


def create_app(settings: Optional[ResizerSettings] = None, codec: Optional[ImageCodec] = None) -> FastAPI:
    settings = settings or default_settings

    app = FastAPI(title="Image Resizer")
    app.state.settings       = settings
    app.state.resize_service = ResizeService(settings, codec=codec)

    @app.exception_handler(ResizerError)
    def resizer_error(request: Request, exc: ResizerError) -> PlainTextResponse:
        logger.warning("%s %s → %d %s", request.method, request.url.path, exc.status_code, exc)
        return PlainTextResponse(str(exc), status_code=exc.status_code)

    app.include_router(images_router)
    return app


app = create_app()

from fastapi import Request

from resizer import ResizeService
from schemas import ResizerSettings


def get_settings(request: Request) -> ResizerSettings:
    return request.app.state.settings


def get_resize_service(request: Request) -> ResizeService:
    return request.app.state.resize_service

from typing import Optional

from fastapi import APIRouter, Depends, Request

from deps import get_resize_service, get_settings
from resizer import ResizeService
from schemas import ResizerSettings
from utils.breakpoints import parse_viewport_hint
from utils.response import emit

router = APIRouter()

# Client hint headers, consulted when the viewport cookie is absent
VIEWPORT_HEADERS = ("sec-ch-viewport-width", "viewport-width")


def viewport_hint(request: Request, cookie_name: str) -> Optional[int]:
    raw = request.cookies.get(cookie_name)
    if raw is None:
        raw = next(
            (request.headers[h] for h in VIEWPORT_HEADERS if h in request.headers),
            None,
        )
    return parse_viewport_hint(raw)


@router.get("/{image_path:path}")
def serve_image(
    image_path: str,
    request: Request,
    service: ResizeService   = Depends(get_resize_service),
    settings: ResizerSettings = Depends(get_settings),
):
    outcome = service.handle(
        image_path,
        hint=viewport_hint(request, settings.resolution_cookie),
        user_agent=request.headers.get("user-agent"),
    )
    return emit(outcome, settings.browser_cache_seconds)

import time
from email.utils import formatdate
from typing import Optional

from fastapi.responses import FileResponse

from schemas import ResizeOutcome

CONTENT_TYPES = {
    "jpeg": "image/jpeg",
    "png":  "image/png",
    "webp": "image/webp",
}


def content_type_for(fmt: Optional[str]) -> str:
    return CONTENT_TYPES.get((fmt or "").lower(), "image/webp")


def http_date(timestamp: float) -> str:
    return formatdate(timestamp, usegmt=True)


def emit(outcome: ResizeOutcome, browser_cache_seconds: int) -> FileResponse:
    """Stream the rendition (or passthrough original) with browser cache headers."""
    stat = outcome.path.stat()
    headers = {
        "Cache-Control":  f"private, max-age={browser_cache_seconds}",
        "Expires":        http_date(time.time() + browser_cache_seconds),
        "Content-Length": str(stat.st_size),
    }
    return FileResponse(
        outcome.path,
        media_type=content_type_for(outcome.format),
        headers=headers,
        stat_result=stat,
    )

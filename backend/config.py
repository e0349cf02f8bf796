import logging
import os
from pathlib import Path

from dotenv import load_dotenv

from schemas import ResizerSettings

load_dotenv()

DOCUMENT_ROOT         = os.getenv("DOCUMENT_ROOT", os.getcwd())
CACHE_DIR_NAME        = os.getenv("IMAGE_CACHE_DIR", "cache")
BREAKPOINTS           = os.getenv("BREAKPOINTS", "1200,992,768,480,320")
COMPRESSION_QUALITY   = int(os.getenv("COMPRESSION_QUALITY", "85"))
BROWSER_CACHE_SECONDS = int(os.getenv("BROWSER_CACHE_SECONDS", "604800"))
RESOLUTION_COOKIE     = os.getenv("RESOLUTION_COOKIE", "resolution")
LOG_LEVEL             = os.getenv("LOG_LEVEL", "INFO").upper()

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("image_resizer")


def parse_breakpoints(raw: str) -> tuple[int, ...]:
    try:
        ladder = tuple(int(part) for part in raw.split(",") if part.strip())
    except ValueError:
        raise RuntimeError(f"BREAKPOINTS must be a comma separated list of integers, got {raw!r}")
    if not ladder:
        raise RuntimeError("BREAKPOINTS must contain at least one width")
    if any(width <= 0 for width in ladder):
        raise RuntimeError(f"BREAKPOINTS must be positive, got {raw!r}")
    return ladder


if not 1 <= COMPRESSION_QUALITY <= 100:
    raise RuntimeError("COMPRESSION_QUALITY must be between 1 and 100")

settings = ResizerSettings(
    document_root=Path(DOCUMENT_ROOT).resolve(),
    cache_dir_name=CACHE_DIR_NAME,
    breakpoints=parse_breakpoints(BREAKPOINTS),
    compression_quality=COMPRESSION_QUALITY,
    browser_cache_seconds=BROWSER_CACHE_SECONDS,
    resolution_cookie=RESOLUTION_COOKIE,
)

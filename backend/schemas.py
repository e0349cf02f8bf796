from pathlib import Path
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict


class ResizerSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    document_root:         Path
    cache_dir_name:        str             = "cache"
    breakpoints:           Tuple[int, ...] = (1200, 992, 768, 480, 320)
    compression_quality:   int             = 85
    browser_cache_seconds: int             = 604800
    resolution_cookie:     str             = "resolution"

    @property
    def cache_root(self) -> Path:
        return self.document_root / self.cache_dir_name.strip("/")

    @property
    def max_breakpoint(self) -> int:
        return max(self.breakpoints)


class RenderRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    source_path:      Path
    source_dir:       str    # relative to the document root, "" for top level
    file_name:        str
    max_screen_width: int
    desired_width:    int
    cache_root:       Path


class ResizeOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    path:   Path
    format: Optional[str] = None
    # "passthrough", "hit" or "rendered"
    kind:   str

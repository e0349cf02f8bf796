"""
Responsive image resizing with an on-disk rendition cache.

  • Picks a target width from the breakpoint ladder using the client's
    viewport hint (cookie / client hint) or, without one, the device class
    guessed from the user agent.
  • Serves the original untouched when it is already narrower than the
    viewport; images are never upscaled.
  • Otherwise serves ``<cache>/<width>/<dir>/<file>`` if it is at least as
    new as the source, re-rendering it first when missing or stale.

Failures raise a :class:`errors.ResizerError`; the HTTP layer maps them to
status codes.
"""

import os
from pathlib import Path
from typing import Optional

from config import logger
from errors import Forbidden, NotFound
from schemas import RenderRequest, ResizeOutcome, ResizerSettings
from utils.breakpoints import is_mobile, select_breakpoint
from utils.cache_store import CacheStore
from utils.image_variants import ImageCodec, PillowCodec, Renderer


class ResizeService:
    def __init__(
        self,
        settings: ResizerSettings,
        codec: Optional[ImageCodec] = None,
        cache_store: Optional[CacheStore] = None,
    ):
        self.settings = settings
        self.root     = settings.document_root.resolve()
        self.codec    = codec or PillowCodec()
        self.cache    = cache_store or CacheStore(settings.cache_root)
        self.renderer = Renderer(
            self.codec,
            max_width=settings.max_breakpoint,
            min_quality=settings.compression_quality,
        )

    # ── Validating ────────────────────────────────────────────────────────
    def resolve_source(self, uri_path: str) -> Path:
        try:
            source = (self.root / uri_path.lstrip("/")).resolve()
            found  = source.is_relative_to(self.root) and source.is_file()
        except (OSError, ValueError) as exc:
            # NUL bytes, over-long names, symlink loops
            raise NotFound("File not found", uri_path) from exc
        if not found:
            raise NotFound("File not found", source)
        if not os.access(source, os.R_OK):
            raise Forbidden("File not readable", source)
        return source

    def build_request(self, source: Path, max_screen_width: int, desired_width: int) -> RenderRequest:
        source_dir = source.parent.relative_to(self.root).as_posix()
        return RenderRequest(
            source_path=source,
            source_dir="" if source_dir == "." else source_dir,
            file_name=source.name,
            max_screen_width=max_screen_width,
            desired_width=desired_width,
            cache_root=self.cache.cache_root,
        )

    # ── Request entry point ───────────────────────────────────────────────
    def handle(
        self,
        uri_path: str,
        hint: Optional[int] = None,
        user_agent: Optional[str] = None,
    ) -> ResizeOutcome:
        source = self.resolve_source(uri_path)
        image  = self.codec.decode(source)
        width  = self.codec.measure_width(image)
        fmt    = self.codec.image_format(image)

        max_screen_width, desired_width = select_breakpoint(
            self.settings.breakpoints, hint, is_mobile(user_agent)
        )

        if width < max_screen_width:
            logger.debug("Passthrough %s (%dpx < %dpx)", source, width, max_screen_width)
            return ResizeOutcome(path=source, format=fmt, kind="passthrough")

        request = self.build_request(source, max_screen_width, desired_width)
        return self.serve_rendition(request, image, fmt)

    # ── CacheCheck / Rendering ────────────────────────────────────────────
    def serve_rendition(self, request: RenderRequest, image, fmt: Optional[str]) -> ResizeOutcome:
        target = self.cache.rendition_path(request.desired_width, request.source_dir, request.file_name)
        self.cache.ensure_directory(target.parent)

        if self.cache.is_fresh(request.source_path, target):
            logger.debug("Cache hit %s", target)
            return ResizeOutcome(path=target, format=fmt, kind="hit")

        rendered = self.renderer.render(image, request.desired_width)
        self.cache.write(target, rendered.data)
        logger.info(
            "Rendered %s → %s (width=%d, quality=%d)",
            request.source_path, target, request.desired_width, rendered.quality,
        )
        return ResizeOutcome(path=target, format=rendered.format or fmt, kind="rendered")

#!/usr/bin/env python3
"""
Pre-render cached renditions so first visitors do not pay for resizing.

Walks the document root (or the given paths below it) for images, skipping
the cache directory itself, and renders every breakpoint width, or only the
widths passed with ``--width``. Renditions that are already fresh and images
narrower than a width are left alone.

Uses the same settings as the web service (``.env`` / environment).
"""

import argparse
from pathlib import Path
from typing import Iterable, Iterator, Optional

from config import logger, settings
from errors import ResizerError
from resizer import ResizeService

IMAGE_SUFFIXES = {".jpg", ".jpeg", ".png", ".webp", ".gif"}


def iter_images(root: Path, cache_root: Path, paths: Iterable[Path] = ()) -> Iterator[Path]:
    # relative paths are taken below the document root
    starts = [(root / p).resolve() for p in paths] or [root]
    for start in starts:
        candidates = [start] if start.is_file() else sorted(start.rglob("*"))
        for path in candidates:
            if path.suffix.lower() not in IMAGE_SUFFIXES or not path.is_file():
                continue
            if path.is_relative_to(cache_root) or not path.is_relative_to(root):
                continue
            yield path


def warm(service: ResizeService, images: Iterable[Path], widths: Optional[Iterable[int]] = None) -> dict[str, int]:
    """Render each image at each width; return counts per outcome kind."""
    widths = tuple(widths or service.settings.breakpoints)
    counts = {"rendered": 0, "hit": 0, "passthrough": 0, "failed": 0}
    for image in images:
        rel = image.relative_to(service.root).as_posix()
        for width in widths:
            try:
                outcome = service.handle(rel, hint=width)
            except ResizerError as exc:
                logger.error("Warming %s at %dpx failed: %s", rel, width, exc)
                counts["failed"] += 1
                continue
            counts[outcome.kind] += 1
            logger.debug("%s @%d → %s", rel, width, outcome.kind)
    return counts


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("paths", nargs="*", type=Path, help="files or directories below the document root")
    parser.add_argument("--width", type=int, action="append", dest="widths",
                        help="breakpoint width to render (repeatable, default: all)")
    args = parser.parse_args(argv)

    service = ResizeService(settings)
    logger.info("Warming cache %s for %s", service.cache.cache_root, service.root)
    counts = warm(service, iter_images(service.root, service.cache.cache_root.resolve(), args.paths), args.widths)
    logger.info(
        "Done: %d rendered, %d fresh, %d too narrow, %d failed",
        counts["rendered"], counts["hit"], counts["passthrough"], counts["failed"],
    )
    return 1 if counts["failed"] else 0


if __name__ == "__main__":
    raise SystemExit(main())

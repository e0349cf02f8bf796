from __future__ import annotations

import io
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Protocol

from PIL import Image, ImageOps

from errors import DecodeError, EncodeError
from utils.breakpoints import quality_for_width


class ImageCodec(Protocol):
    """Decode / scale / encode primitives the resizer relies on."""

    def decode(self, path: Path) -> Any: ...
    def measure_width(self, image: Any) -> int: ...
    def image_format(self, image: Any) -> Optional[str]: ...
    def strip_metadata(self, image: Any) -> Any: ...
    def scale(self, image: Any, width: int) -> Any: ...
    def encode(self, image: Any, fmt: Optional[str], quality: int) -> bytes: ...


def normalize_format(fmt: Optional[str]) -> Optional[str]:
    # multi-picture JPEGs from phone cameras are plain JPEG to clients
    if fmt is None:
        return None
    fmt = fmt.upper()
    return "JPEG" if fmt == "MPO" else fmt


class PillowCodec:
    def decode(self, path: Path) -> Image.Image:
        try:
            with Image.open(path) as src:
                fmt = src.format
                # first frame only, detached from the file
                img = ImageOps.exif_transpose(src)
        except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as exc:
            raise DecodeError(f"Cannot decode image ({exc})", path) from exc
        img.format = normalize_format(fmt)
        return img

    def measure_width(self, image: Image.Image) -> int:
        return image.width

    def image_format(self, image: Image.Image) -> Optional[str]:
        return normalize_format(image.format)

    def strip_metadata(self, image: Image.Image) -> Image.Image:
        # EXIF, ICC profiles, comments; orientation was applied on decode
        image.info.clear()
        return image

    def scale(self, image: Image.Image, width: int) -> Image.Image:
        current_w, current_h = image.size
        if width >= current_w:
            return image
        height = max(1, round(current_h * width / current_w))
        return image.resize((width, height), resample=Image.LANCZOS)

    def encode(self, image: Image.Image, fmt: Optional[str], quality: int) -> bytes:
        fmt = normalize_format(fmt) or "WEBP"
        save_kwargs: dict[str, Any] = {}
        if fmt == "JPEG":
            save_kwargs.update({"quality": quality, "optimize": True})
        elif fmt == "WEBP":
            save_kwargs.update({"quality": quality})
        elif fmt == "PNG":
            save_kwargs.update({"optimize": True})

        buf = io.BytesIO()
        try:
            if fmt == "JPEG" and image.mode not in ("RGB", "L", "CMYK"):
                image = image.convert("RGB")
            image.save(buf, format=fmt, **save_kwargs)
        except (OSError, ValueError, KeyError) as exc:
            raise EncodeError(f"Cannot encode {fmt} image ({exc})") from exc
        return buf.getvalue()


@dataclass(frozen=True)
class RenderedImage:
    data:    bytes
    quality: int
    format:  Optional[str]


class Renderer:
    """
    Produce a rendition: strip metadata, pick a quality from the pre-scale
    width, scale down to the target width and encode in the source format.
    """

    def __init__(self, codec: ImageCodec, max_width: int, min_quality: int):
        self.codec       = codec
        self.max_width   = max_width
        self.min_quality = min_quality

    def render(self, image: Any, target_width: int) -> RenderedImage:
        fmt      = self.codec.image_format(image)
        stripped = self.codec.strip_metadata(image)
        quality  = quality_for_width(
            self.codec.measure_width(stripped), self.max_width, self.min_quality
        )
        scaled   = self.codec.scale(stripped, target_width)
        data     = self.codec.encode(scaled, fmt, quality)
        return RenderedImage(data=data, quality=quality, format=fmt)

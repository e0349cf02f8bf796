from pathlib import Path

import pytest
from PIL import Image

from errors import DecodeError
from schemas import ResizerSettings


class FakeCodec:
    """
    Codec stand-in reading files of the form ``FAKE:<width>:<format>``.
    Records calls so tests can count decodes and encodes.
    """

    def __init__(self):
        self.decoded: list[Path] = []
        self.encoded: list[tuple[int, int]] = []

    def decode(self, path):
        raw = Path(path).read_bytes()
        if not raw.startswith(b"FAKE:"):
            raise DecodeError("Cannot decode image", path)
        _, width, fmt = raw.decode().split(":")
        self.decoded.append(Path(path))
        return {"width": int(width), "format": fmt, "stripped": False}

    def measure_width(self, image):
        return image["width"]

    def image_format(self, image):
        return image["format"]

    def strip_metadata(self, image):
        return {**image, "stripped": True}

    def scale(self, image, width):
        return {**image, "width": min(width, image["width"])}

    def encode(self, image, fmt, quality):
        self.encoded.append((image["width"], quality))
        return f"RENDITION:{image['width']}:{fmt}:{quality}".encode()


@pytest.fixture
def doc_root(tmp_path) -> Path:
    root = tmp_path / "www"
    root.mkdir()
    return root


@pytest.fixture
def settings(doc_root) -> ResizerSettings:
    return ResizerSettings(document_root=doc_root, compression_quality=85)


@pytest.fixture
def fake_codec() -> FakeCodec:
    return FakeCodec()


@pytest.fixture
def fake_image(doc_root):
    def _make(rel: str, width: int, fmt: str = "JPEG") -> Path:
        path = doc_root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(f"FAKE:{width}:{fmt}".encode())
        return path
    return _make


@pytest.fixture
def real_image(doc_root):
    def _make(rel: str, width: int, height: int, fmt: str = "JPEG", **save_kwargs) -> Path:
        path = doc_root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        mode = "RGBA" if fmt == "PNG" else "RGB"
        Image.new(mode, (width, height), color=(200, 80, 40)).save(path, format=fmt, **save_kwargs)
        return path
    return _make

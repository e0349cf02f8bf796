import os
import tempfile
from pathlib import Path

from config import logger
from errors import DirectoryCreateError, Forbidden


class CacheStore:
    """
    Filesystem cache of renditions laid out as
    ``<cache_root>/<width>/<source dir>/<file name>``.

    No locking: concurrent misses may both write the same rendition and the
    last rename wins.
    """

    def __init__(self, cache_root: Path):
        self.cache_root = Path(cache_root)

    def rendition_path(self, desired_width: int, source_dir: str, file_name: str) -> Path:
        return self.cache_root / str(desired_width) / source_dir.strip("/") / file_name

    def ensure_directory(self, path: Path) -> None:
        if path.is_dir():
            return
        try:
            path.mkdir(mode=0o755, parents=True, exist_ok=True)
        except OSError as exc:
            # another request may have created it in the meantime
            if not path.is_dir():
                raise DirectoryCreateError("Failed to create cache directory", path) from exc

    def is_fresh(self, source: Path, rendition: Path) -> bool:
        try:
            rendition_mtime = rendition.stat().st_mtime
        except FileNotFoundError:
            return False
        return rendition_mtime >= source.stat().st_mtime

    def write(self, path: Path, data: bytes) -> Path:
        """Atomically replace *path* with *data* (temp file + rename)."""
        try:
            fd, tmp_name = tempfile.mkstemp(prefix=".tmp-", suffix=path.suffix, dir=path.parent)
        except OSError as exc:
            raise Forbidden("Failed to write rendition", path) from exc
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            os.chmod(tmp_name, 0o644)
            os.replace(tmp_name, path)
        except OSError as exc:
            Path(tmp_name).unlink(missing_ok=True)
            raise Forbidden("Failed to write rendition", path) from exc
        logger.debug("Stored rendition %s (%d bytes)", path, len(data))
        return path

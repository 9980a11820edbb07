import logging
import os
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from src.domain.entities import File

logger = logging.getLogger(__name__)

RESAMPLED_DIR = "_resampled"


class FileSystemStore:
    def __init__(self, base_path: str):
        self.base_path = Path(base_path).resolve()
        if not self.base_path.exists():
            os.makedirs(self.base_path, exist_ok=True)

    def _safe_path(self, path: str) -> Path:
        # Prevent traversal
        target = (self.base_path / path).resolve()
        if not target.is_relative_to(self.base_path):
            raise ValueError(f"Path traversal attempt detected: {path}")
        return target

    def save(self, name: str, data: bytes) -> str:
        """Save bytes and return the path relative to the store root."""
        target = self._safe_path(name)
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "wb") as f:
            f.write(data)
        return str(target.relative_to(self.base_path))

    def get(self, path: str) -> bytes:
        """Retrieve bytes by path. Raises FileNotFoundError."""
        target = self._safe_path(path)
        if not target.exists():
            raise FileNotFoundError(f"File not found: {path}")
        with open(target, "rb") as f:
            return f.read()

    def exists(self, path: str) -> bool:
        return self._safe_path(path).is_file()

    def path_for(self, path: str) -> Path:
        return self._safe_path(path)

    def delete(self, path: str) -> None:
        target = self._safe_path(path)
        if target.exists():
            os.remove(target)


class LocalFileUrls:
    """
    Public URLs for files in a FileSystemStore.

    Thumbnails are generated on first request with Pillow and cached under
    _resampled/fit{w}x{h}/ next to the originals.
    """

    def __init__(self, store: FileSystemStore, base_url: str = "/assets"):
        self.store = store
        self.base_url = base_url.rstrip("/")

    def _url(self, relative: str) -> str:
        return f"{self.base_url}/{relative.lstrip('/')}"

    def file_url(self, file: File) -> str | None:
        if not file.filename or not self.store.exists(file.filename):
            return None
        return self._url(file.filename)

    def thumbnail_url(self, file: File, width: int, height: int) -> str:
        original = self.file_url(file)
        if original is None:
            return ""

        relative = f"{RESAMPLED_DIR}/fit{width}x{height}/{file.filename}"
        if self.store.exists(relative):
            return self._url(relative)

        source = self.store.path_for(file.filename)
        target = self.store.path_for(relative)
        try:
            with Image.open(source) as img:
                img.thumbnail((width, height))
                target.parent.mkdir(parents=True, exist_ok=True)
                img.save(target)
        except (OSError, UnidentifiedImageError, ValueError):
            logger.warning("Could not resample %s to %dx%d", file.filename, width, height)
            return original

        logger.debug("Resampled %s to fit %dx%d", file.filename, width, height)
        return self._url(relative)

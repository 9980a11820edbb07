"""
Asset link regenerator - points inserted images at the right stored variant.

Key behaviors:
- Only <img> elements whose src resolves to a stored file are touched
- A width/height that differs from the file's native size selects a
  resampled thumbnail URL; otherwise the original file URL is used
- Input with nothing to rewrite is returned unchanged (not re-serialised)
"""

from __future__ import annotations

import logging
import re
from typing import Protocol

from src.components.media import FileUrlPort
from src.components.richtext import HtmlDocument
from src.domain.entities import File

logger = logging.getLogger(__name__)

_RESAMPLED_PREFIX = re.compile(r"^_resampled/[^/]+/")


class FileByNamePort(Protocol):
    def get_by_filename(self, filename: str) -> File | None:
        ...


def _as_int(value: object) -> int | None:
    try:
        return int(str(value).strip().removesuffix("px"))
    except (TypeError, ValueError):
        return None


class AssetLinkRegenerator:
    def __init__(self, files: FileByNamePort, urls: FileUrlPort, base_url: str = "/assets"):
        self.files = files
        self.urls = urls
        self.base_url = base_url.rstrip("/") + "/"

    def _stored_filename(self, src: str) -> str | None:
        path = src.split("?", 1)[0].split("#", 1)[0]
        if path.startswith(self.base_url):
            relative = path[len(self.base_url):]
        elif path.startswith(self.base_url.lstrip("/")):
            relative = path[len(self.base_url.lstrip("/")):]
        else:
            return None
        return _RESAMPLED_PREFIX.sub("", relative)

    def regenerate(self, html: str) -> str:
        if not html or "<img" not in html.lower():
            return html

        doc = HtmlDocument.from_html(html)
        changed = 0
        for img in doc.find_all("img"):
            src = img.get("src")
            if not isinstance(src, str):
                continue
            filename = self._stored_filename(src)
            if filename is None:
                continue
            file = self.files.get_by_filename(filename)
            if file is None:
                continue

            width = _as_int(img.get("width"))
            height = _as_int(img.get("height"))
            resized = (
                width is not None
                and height is not None
                and (width, height) != (file.width, file.height)
            )
            new_src = (
                self.urls.thumbnail_url(file, width, height)
                if resized and width is not None and height is not None
                else self.urls.file_url(file)
            )
            if new_src and new_src != src:
                img["src"] = new_src
                changed += 1

        if not changed:
            return html
        logger.debug("Regenerated %d image link(s)", changed)
        return doc.get_content()

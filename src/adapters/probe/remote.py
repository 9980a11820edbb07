"""
Remote image probe - best-effort size and dimensions of unmanaged images.

Never raises: every failure degrades to unknown (None) values.
"""

from __future__ import annotations

import io
import logging

import httpx
from PIL import Image, UnidentifiedImageError

from src.components.media import ProbeResult

logger = logging.getLogger(__name__)

# Enough bytes for Pillow to read the header of common formats.
HEADER_BYTES = 64 * 1024


class HttpRemoteProbe:
    """RemoteProbePort using httpx and Pillow."""

    def __init__(self, *, timeout: float = 5.0, client: httpx.Client | None = None) -> None:
        self.timeout = timeout
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout, follow_redirects=True)

    def close(self) -> None:
        """Release the connection pool if this probe created it."""
        if self._owns_client:
            self._client.close()

    @property
    def closed(self) -> bool:
        return self._client.is_closed

    def probe(self, url: str) -> ProbeResult:
        size = self._content_length(url)
        dimensions = self._dimensions(url)
        width, height = dimensions if dimensions else (None, None)
        return ProbeResult(size_bytes=size, width=width, height=height)

    def _content_length(self, url: str) -> int | None:
        try:
            response = self._client.head(url, timeout=self.timeout)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("HEAD %s failed: %s", url, e)
            return None
        value = response.headers.get("content-length")
        try:
            return int(value) if value is not None else None
        except ValueError:
            return None

    def _dimensions(self, url: str) -> tuple[int, int] | None:
        try:
            with self._client.stream("GET", url, timeout=self.timeout) as response:
                response.raise_for_status()
                buffer = bytearray()
                for chunk in response.iter_bytes():
                    buffer.extend(chunk)
                    if len(buffer) >= HEADER_BYTES:
                        break
        except httpx.HTTPError as e:
            logger.warning("GET %s failed: %s", url, e)
            return None

        try:
            with Image.open(io.BytesIO(bytes(buffer))) as img:
                return img.size
        except (OSError, UnidentifiedImageError):
            logger.warning("Could not read image dimensions from %s", url)
            return None

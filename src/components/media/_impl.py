"""
Media descriptors - Classify a URL/file pair and derive insertion metadata.

Functional Core - the only I/O happens through ports passed in by the caller
(embed lookup, remote probe, thumbnail URLs).

Key behaviors:
- Classification is by extension: image, flash, otherwise embed
- Local file metadata wins over remote probes and configured defaults
- Insertion geometry scales down to the configured width, never up
- Remote probe failures degrade to unknown values, never raise
- Embed lookup failure is terminal (EmbedResolutionError)
"""

from __future__ import annotations

import html
import logging
import math
import posixpath
import re
from dataclasses import dataclass
from fractions import Fraction
from urllib.parse import urlsplit

from src.components.embeds import DEFAULT_EMBED_SIZE, EmbedLookupPort, EmbedResult, resolve_embed
from src.domain.entities import File
from src.domain.errors import ConfigurationError, EmbedIncompatibleError

from .models import (
    DEFAULT_MEDIA_CONFIG,
    AssetKind,
    AssetRef,
    InsertionGeometry,
    MediaConfig,
    ProbeResult,
)
from .ports import FileUrlPort, RemoteProbePort

logger = logging.getLogger(__name__)

# --- File Categories ---

# Order matters: the first category listing an extension wins
APP_CATEGORIES: dict[str, frozenset[str]] = {
    "archive": frozenset(["arc", "bz", "bz2", "dmg", "gz", "hqx", "jar", "rar", "tar", "tgz", "zip"]),
    "audio": frozenset(["aif", "aifc", "aiff", "apl", "au", "m4a", "mid", "mp2", "mp3", "ogg", "wav", "wma"]),
    "document": frozenset(["css", "csv", "doc", "docx", "htm", "html", "odt", "pdf", "ppt", "pptx", "rtf", "txt", "xls", "xlsx", "xml"]),
    "image": frozenset(["bmp", "gif", "ico", "jpeg", "jpg", "pcx", "png", "tif", "tiff"]),
    "image/supported": frozenset(["gif", "jpeg", "jpg", "png"]),
    "flash": frozenset(["fla", "swf"]),
    "video": frozenset(["avi", "flv", "m4v", "mkv", "mov", "mp4", "mpeg", "mpg", "ogv", "webm", "wmv"]),
}

FILE_TYPES: dict[str, str] = {
    "gif": "GIF image - good for diagrams",
    "jpg": "JPEG image - good for photos",
    "jpeg": "JPEG image - good for photos",
    "png": "PNG image - good general-purpose format",
    "ico": "Icon image",
    "tiff": "Tagged image format",
    "doc": "Word document",
    "xls": "Excel spreadsheet",
    "zip": "ZIP compressed file",
    "gz": "GZIP compressed file",
    "dmg": "Apple disk image",
    "pdf": "Adobe Acrobat PDF file",
    "mp3": "MP3 audio file",
    "wav": "WAV audo file",
    "avi": "AVI video file",
    "mpg": "MPEG video file",
    "mpeg": "MPEG video file",
    "js": "Javascript file",
    "css": "CSS file",
    "html": "HTML file",
    "htm": "HTML file",
    "swf": "Flash file",
}

# Extensions with a dedicated 32px icon
ICON_EXTENSIONS = frozenset(
    ["doc", "gif", "jpg", "mov", "mp3", "pdf", "png", "swf", "tiff", "txt", "xls", "zip"]
)

_QUERY_RE = re.compile(r"\?.*")


def get_file_extension(name: str) -> str:
    """Lower-cased extension of a file name or URL path, without the dot."""
    path = urlsplit(name).path if "://" in name else _QUERY_RE.sub("", name)
    base = posixpath.basename(path)
    if "." not in base:
        return ""
    return base.rsplit(".", 1)[1].lower()


def get_app_category(extension: str) -> str | None:
    ext = extension.lower()
    for category, extensions in APP_CATEGORIES.items():
        if ext in extensions:
            return category
    return None


def get_file_type(name: str) -> str:
    return FILE_TYPES.get(get_file_extension(name), "unknown")


def format_size(size: int) -> str:
    """Human readable byte count."""
    if size < 1024:
        return f"{size} bytes"
    if size < 1024 * 10:
        return f"{round(size / 1024 * 10) / 10:g} KB"
    if size < 1024 * 1024:
        return f"{round(size / 1024)} KB"
    if size < 1024 * 1024 * 10:
        return f"{round((size / 1024) / 1024 * 10) / 10:g} MB"
    if size < 1024 * 1024 * 1024:
        return f"{round((size / 1024) / 1024)} MB"
    return f"{round(size / (1024 * 1024 * 1024) * 10) / 10:g} GB"


def icon_for_extension(extension: str, config: MediaConfig = DEFAULT_MEDIA_CONFIG) -> str:
    ext = extension.lower()
    if ext == "jpeg":
        ext = "jpg"
    name = ext if ext in ICON_EXTENSIONS else "generic"
    return f"{config.icon_base_url}/{name}_32.gif"


def join_query(url: str, query: str) -> str:
    """Append a query fragment, respecting an existing query string."""
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{query}"


def url_basename(url: str) -> str:
    """Base file name of a URL with the query string stripped."""
    return _QUERY_RE.sub("", posixpath.basename(url))


# --- Dimension / Scaling Policy ---


def compute_insert_geometry(
    original_width: int,
    original_height: int,
    max_insert_width: int,
) -> InsertionGeometry:
    """
    Width/height for inserting an asset at most max_insert_width wide.

    Scales down proportionally, never up. Height rounds half away from zero.
    A non-positive original width or max width cannot be scaled and returns
    the original size unchanged.
    """
    if original_width <= max_insert_width:
        return InsertionGeometry(width=original_width, height=original_height)
    if original_width <= 0 or max_insert_width <= 0:
        return InsertionGeometry(width=original_width, height=original_height)

    exact = Fraction(original_height * max_insert_width, original_width)
    height = math.floor(exact + Fraction(1, 2))
    return InsertionGeometry(width=max_insert_width, height=height)


# --- Classification ---


def classify(url: str) -> AssetKind:
    """Kind for a URL, by extension. No I/O."""
    category = get_app_category(get_file_extension(url))
    if category in ("image", "image/supported"):
        return AssetKind.IMAGE
    if category == "flash":
        return AssetKind.FLASH
    return AssetKind.EMBED


# --- Descriptor ---


@dataclass
class AssetDescriptor:
    """
    Classified, metadata-bearing view over an AssetRef.

    One shape for every kind; behavior dispatches on `kind`. Metadata is
    computed at construction by create_descriptor() and never changes.
    """

    kind: AssetKind
    ref: AssetRef
    config: MediaConfig
    urls: FileUrlPort | None = None
    embed: EmbedResult | None = None
    probe: ProbeResult | None = None

    # --- Identity ---

    @property
    def url(self) -> str:
        return self.ref.url

    @property
    def file(self) -> File | None:
        return self.ref.file

    def get_file_id(self) -> int | None:
        return self.file.id if self.file else None

    def get_name(self) -> str:
        if self.kind == AssetKind.EMBED and self.embed and self.embed.title:
            return self.embed.title
        if self.file:
            return self.file.name
        return url_basename(self.url)

    def get_extension(self) -> str:
        return get_file_extension(self.get_name())

    def get_file_type(self) -> str:
        if self.kind == AssetKind.EMBED and self.embed and self.embed.type:
            return self.embed.type
        return get_file_type(self.get_name())

    def app_category(self) -> str | None:
        if self.kind == AssetKind.EMBED:
            return "embed"
        if self.file:
            return get_app_category(self.file.extension)
        return get_app_category(self.get_extension())

    # --- Embed specifics ---

    def get_type(self) -> str | None:
        return self.embed.type if self.embed else None

    def get_info(self) -> str | None:
        return self.embed.info if self.embed else None

    # --- Dimensions ---

    def get_original_width(self) -> int | None:
        """Native width when actually known (probe or stored file)."""
        if self.probe and self.probe.width:
            return self.probe.width
        if self.file and self.file.width:
            return self.file.width
        return None

    def get_original_height(self) -> int | None:
        if self.probe and self.probe.height:
            return self.probe.height
        if self.file and self.file.height:
            return self.file.height
        return None

    def get_width(self) -> int:
        if self.kind == AssetKind.EMBED and self.embed is not None:
            return self.embed.width or DEFAULT_EMBED_SIZE
        if self.kind == AssetKind.IMAGE and self.probe and self.probe.width:
            return self.probe.width
        if self.file and self.file.width:
            return self.file.width
        return self.config.insert_width

    def get_height(self) -> int:
        if self.kind == AssetKind.EMBED and self.embed is not None:
            return self.embed.height or DEFAULT_EMBED_SIZE
        if self.kind == AssetKind.IMAGE and self.probe and self.probe.height:
            return self.probe.height
        if self.file and self.file.height:
            return self.file.height
        return self.config.insert_height

    def insertion_geometry(self) -> InsertionGeometry:
        return compute_insert_geometry(
            self.get_width(), self.get_height(), self.config.insert_width
        )

    def get_insert_width(self) -> int:
        return self.insertion_geometry().width

    def get_insert_height(self) -> int:
        return self.insertion_geometry().height

    # --- Size ---

    def get_size_bytes(self) -> int | None:
        if self.file:
            # Stored files report an empty size as unknown
            return self.file.size_bytes or None
        if self.kind == AssetKind.IMAGE and self.probe and self.probe.size_bytes:
            return self.probe.size_bytes
        return None

    def get_size(self) -> str | None:
        """Formatted size, or None when unknown."""
        size = self.get_size_bytes()
        if size is None:
            return None
        return format_size(size)

    # --- Preview ---

    def _file_preview_url(self) -> str | None:
        if self.file is None or self.urls is None:
            return None
        return self.urls.thumbnail_url(
            self.file, self.config.media_preview_width, self.config.media_preview_height
        )

    def get_preview_url(self) -> str:
        if self.kind == AssetKind.EMBED:
            if self.embed and self.embed.thumbnail_url:
                return self.embed.thumbnail_url
            if self.embed and self.embed.type == "photo" and self.embed.url:
                return self.embed.url
            return self.config.default_media_icon

        if self.kind == AssetKind.IMAGE:
            return self._file_preview_url() or self.url
        # Only images are resampled; other files show their type icon
        return icon_for_extension(self.get_extension(), self.config)

    def get_external_link(self) -> str:
        title = self.file.get_title() if self.file else self.get_name()
        href = html.escape(self.url, quote=True)
        return (
            f'<a href="{href}" title="{html.escape(title, quote=True)}" target="_blank" '
            f'rel="external" class="file-url">{href}</a>'
        )


# --- Factory ---


def create_descriptor(
    ref: AssetRef,
    *,
    config: MediaConfig = DEFAULT_MEDIA_CONFIG,
    urls: FileUrlPort | None = None,
    embeds: EmbedLookupPort | None = None,
    probe: RemoteProbePort | None = None,
) -> AssetDescriptor:
    """
    Classify a ref and build its descriptor.

    Raises:
        EmbedIncompatibleError: a local file would need embed resolution.
        EmbedResolutionError: the embed lookup found nothing for the URL.
    """
    kind = classify(ref.url)

    if kind == AssetKind.EMBED:
        # Only remote resources can be resolved as embeds
        if ref.file is not None:
            raise EmbedIncompatibleError()
        if embeds is None:
            raise ConfigurationError("No embed lookup is configured")
        resolver = resolve_embed(ref.url, embeds)
        return AssetDescriptor(kind=kind, ref=ref, config=config, urls=urls, embed=resolver.result)

    probed: ProbeResult | None = None
    if kind == AssetKind.IMAGE and ref.file is None and probe is not None:
        probed = _safe_probe(probe, ref.url)

    return AssetDescriptor(kind=kind, ref=ref, config=config, urls=urls, probe=probed)


def describe_stored_file(
    file: File,
    url: str,
    *,
    config: MediaConfig = DEFAULT_MEDIA_CONFIG,
    urls: FileUrlPort | None = None,
) -> AssetDescriptor:
    """
    Descriptor for a stored file without embed resolution.

    Used for listings, where a non-image, non-flash file is shown as a
    generic file instead of failing.
    """
    kind = classify(file.name)
    if kind == AssetKind.EMBED:
        kind = AssetKind.GENERIC
    return AssetDescriptor(kind=kind, ref=AssetRef(url=url, file=file), config=config, urls=urls)


def _safe_probe(probe: RemoteProbePort, url: str) -> ProbeResult | None:
    try:
        return probe.probe(url)
    except Exception:
        logger.warning("Remote probe failed for %s", url, exc_info=True)
        return None

"""
Media component models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from src.domain.entities import File
from src.rules.models import MediaRules

# --- Asset Kind ---


class AssetKind(str, Enum):
    """Closed set of descriptor kinds, fixed at classification time."""

    IMAGE = "image"
    EMBED = "embed"
    FLASH = "flash"
    GENERIC = "generic"


# --- Configuration ---


@dataclass(frozen=True)
class MediaConfig:
    """Immutable media settings handed to descriptors."""

    insert_width: int = 600
    insert_height: int = 360
    media_preview_width: int = 176
    media_preview_height: int = 128
    allowed_extensions: tuple[str, ...] = ("jpg", "gif", "png", "swf", "jpeg")
    files_page_size: int = 7
    default_media_icon: str = "/static/images/default_media.png"
    icon_base_url: str = "/static/images/app_icons"
    uploads_folder: str = "Uploads"

    @classmethod
    def from_rules(cls, rules: MediaRules) -> MediaConfig:
        return cls(
            insert_width=rules.insert_width,
            insert_height=rules.insert_height,
            media_preview_width=rules.media_preview_width,
            media_preview_height=rules.media_preview_height,
            allowed_extensions=tuple(rules.allowed_extensions),
            files_page_size=rules.files_page_size,
            default_media_icon=rules.default_media_icon,
            icon_base_url=rules.icon_base_url,
            uploads_folder=rules.uploads_folder,
        )


DEFAULT_MEDIA_CONFIG = MediaConfig()


# --- Value Objects ---


@dataclass(frozen=True)
class AssetRef:
    """A URL, optionally backed by a stored file. Local metadata wins when present."""

    url: str
    file: File | None = None

    @property
    def is_local(self) -> bool:
        return self.file is not None


@dataclass(frozen=True)
class InsertionGeometry:
    """Width/height at which an asset is inserted into content."""

    width: int
    height: int


@dataclass(frozen=True)
class ProbeResult:
    """Best-effort metadata for an unmanaged remote image. None means unknown."""

    size_bytes: int | None = None
    width: int | None = None
    height: int | None = None


# --- Inputs / Outputs ---


@dataclass(frozen=True)
class ViewFileInput:
    """Identify a file either by stored ID or by URL."""

    file_url: str | None = None
    file_id: int | None = None


@dataclass
class ViewFileOutput:
    """A classified file and its rendered edit fields."""

    kind: AssetKind
    url: str
    html: str
    field_names: list[str] = field(default_factory=list)

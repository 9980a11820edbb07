"""
Embeds component models.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class EmbedResult:
    """Outcome of resolving a remote URL through an oEmbed-style lookup."""

    type: str
    width: int | None = None
    height: int | None = None
    thumbnail_url: str | None = None
    title: str | None = None
    info: str | None = None
    url: str | None = None  # direct media URL, set for "photo" results
    html: str | None = None

    @classmethod
    def from_oembed(cls, data: dict[str, Any]) -> EmbedResult:
        """Build from a decoded oEmbed JSON payload."""

        def as_int(value: Any) -> int | None:
            try:
                return int(value) if value not in (None, "") else None
            except (TypeError, ValueError):
                return None

        info_parts = [
            str(data[key]) for key in ("author_name", "provider_name") if data.get(key)
        ]
        return cls(
            type=str(data.get("type") or ""),
            width=as_int(data.get("width")),
            height=as_int(data.get("height")),
            thumbnail_url=data.get("thumbnail_url") or None,
            title=data.get("title") or None,
            info=" / ".join(info_parts) or None,
            url=data.get("url") or None,
            html=data.get("html") or None,
        )


@dataclass(frozen=True)
class ResolveEmbedInput:
    """Input for resolving an embed URL."""

    url: str


@dataclass(frozen=True)
class ResolveEmbedOutput:
    """Output for a resolved embed."""

    url: str
    result: EmbedResult

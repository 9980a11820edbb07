"""
Embeds component port definitions.
"""

from __future__ import annotations

from typing import Protocol

from .models import EmbedResult


class EmbedLookupPort(Protocol):
    """Resolves a URL into embed metadata."""

    def resolve(self, url: str) -> EmbedResult | None:
        """Return the embed result, or None when the URL is not an embed resource."""
        ...

"""
EmbedResolver - Resolve remote URLs into embed metadata.

Functional Core - no I/O of its own; the lookup port does the network call.

Key behaviors:
- Resolution happens once, when the resolver is created
- A lookup returning nothing is terminal: EmbedResolutionError names the URL
- Embeds always report the "embed" app category, whatever their oEmbed type
"""

from __future__ import annotations

import logging

from src.domain.errors import EmbedResolutionError

from .models import EmbedResult
from .ports import EmbedLookupPort

logger = logging.getLogger(__name__)

DEFAULT_EMBED_SIZE = 100


class EmbedResolver:
    """A resolved embed. Build with resolve_embed()."""

    def __init__(self, url: str, result: EmbedResult) -> None:
        self._url = url
        self._result = result

    @property
    def url(self) -> str:
        return self._url

    @property
    def result(self) -> EmbedResult:
        return self._result

    def get_type(self) -> str:
        return self._result.type

    def get_width(self) -> int:
        return self._result.width or DEFAULT_EMBED_SIZE

    def get_height(self) -> int:
        return self._result.height or DEFAULT_EMBED_SIZE

    def get_title(self) -> str | None:
        return self._result.title

    def get_info(self) -> str | None:
        return self._result.info

    def is_photo(self) -> bool:
        return self._result.type == "photo"

    def app_category(self) -> str:
        return "embed"


def resolve_embed(url: str, lookup: EmbedLookupPort) -> EmbedResolver:
    """
    Resolve a URL through the lookup port.

    Raises:
        EmbedResolutionError: the lookup returned no result.
    """
    result = lookup.resolve(url)
    if result is None:
        logger.info("No embed resource for %s", url)
        raise EmbedResolutionError(url)
    return EmbedResolver(url, result)

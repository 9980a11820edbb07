"""
Embeds component - Resolve embed URLs.

Shell Layer - wires the lookup port into the resolver.
"""

from __future__ import annotations

from ._impl import resolve_embed
from .models import ResolveEmbedInput, ResolveEmbedOutput
from .ports import EmbedLookupPort


def run_resolve(
    inp: ResolveEmbedInput,
    *,
    lookup: EmbedLookupPort,
) -> ResolveEmbedOutput:
    """
    Resolve an embed URL.

    Raises EmbedResolutionError when the URL cannot be resolved.
    """
    resolver = resolve_embed(inp.url, lookup)
    return ResolveEmbedOutput(url=inp.url, result=resolver.result)

"""
Embeds component - oEmbed resolution for remote media.
"""

from ._impl import DEFAULT_EMBED_SIZE, EmbedResolver, resolve_embed
from .component import run_resolve
from .models import EmbedResult, ResolveEmbedInput, ResolveEmbedOutput
from .ports import EmbedLookupPort

__all__ = [
    # Entry points
    "run_resolve",
    "resolve_embed",
    # Core
    "DEFAULT_EMBED_SIZE",
    "EmbedResolver",
    # Models
    "EmbedResult",
    "ResolveEmbedInput",
    "ResolveEmbedOutput",
    # Ports
    "EmbedLookupPort",
]

"""
Toolbar implementation - anchor scanning and URL helpers.

Key behaviors:
- Anchors are the values of name= / id= attributes in raw page HTML, quoted
  with ' or " or unquoted up to whitespace or >
- Results are distinct, in document order, with empty values dropped
- PageID request values that are not integers resolve to no page
"""

from __future__ import annotations

import re
from urllib.parse import urljoin

# Quoted values run to the matching quote; unquoted values stop at whitespace or ">".
ANCHOR_PATTERN = re.compile(
    r"""\s+(?:name|id)\s*=\s*(["'])([^\s>]*?)\1"""
    r"""|\s+(?:name|id)\s*=\s*([^"'\s>]+)(?=[\s>])""",
    re.IGNORECASE | re.MULTILINE,
)


def scan_anchors(content: str | None) -> list[str]:
    """Distinct anchor names/ids in the HTML, first occurrence first."""
    if not content:
        return []
    found: dict[str, None] = {}
    for match in ANCHOR_PATTERN.finditer(content):
        value = match.group(2) if match.group(1) else match.group(3)
        if value:
            found.setdefault(value, None)
    return list(found)


def parse_page_id(value: str | int | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def join_links(*parts: str) -> str:
    """Join URL segments with single slashes, keeping a leading slash."""
    cleaned = [str(p).strip("/") for p in parts if p and str(p).strip("/")]
    joined = "/".join(cleaned)
    if parts and str(parts[0]).startswith("/"):
        return "/" + joined
    return joined


def absolute_url(url: str, base_url: str) -> str:
    """Resolve a site-relative or root-relative URL against the site base."""
    base = base_url if base_url.endswith("/") else base_url + "/"
    return urljoin(base, url)

"""
Richtext component port definitions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from ._impl import HtmlDocument
    from .models import RichTextValidationError


class RecordPort(Protocol):
    """The record an editor field saves into."""

    def has_field(self, name: str) -> bool:
        """Whether the record declares the field."""
        ...

    def escape_type_for_field(self, name: str) -> str:
        """'xml' for HTML-typed fields."""
        ...

    def set_field(self, name: str, value: Any) -> None:
        """Assign the field value."""
        ...


class SanitizerPort(Protocol):
    """Allow-list sanitizer over a parsed document."""

    errors: list[RichTextValidationError]

    def sanitize(self, doc: HtmlDocument) -> HtmlDocument:
        """Remove disallowed markup. May mutate and return the same document."""
        ...


class LinkRegeneratorPort(Protocol):
    """Rewrites asset references in HTML to their canonical links."""

    def regenerate(self, html: str) -> str:
        ...

"""
Toolbar component port definitions.
"""

from __future__ import annotations

from typing import Protocol

from src.domain.entities import Page


class PageRepoPort(Protocol):
    """Access to site tree pages."""

    def get_by_id(self, page_id: int) -> Page | None:
        """Get page by ID."""
        ...

    def search(self, term: str) -> list[Page]:
        """Pages whose menu title or title contains the term (case-insensitive)."""
        ...

    def save(self, page: Page) -> Page:
        """Persist a page."""
        ...

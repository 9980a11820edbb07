"""
Toolbar component models.
"""

from __future__ import annotations

from dataclasses import dataclass, field

# --- Configuration ---


@dataclass(frozen=True)
class ToolbarSettings:
    """Routing and site settings for the editor toolbar."""

    # Link of the controller the toolbar is mounted on
    controller_link: str = "/admin"
    name: str = "editor"
    # Base for turning relative FileURLs into absolute ones
    base_url: str = "http://localhost:8000/"
    locale: str = "en_US"


DEFAULT_TOOLBAR_SETTINGS = ToolbarSettings()


# --- Input Models ---


@dataclass(frozen=True)
class GetAnchorsInput:
    """Raw PageID request value."""

    page_id: str | int | None = None


# --- Output Models ---


@dataclass(frozen=True)
class GetAnchorsOutput:
    page_id: int
    anchors: list[str] = field(default_factory=list)
    success: bool = True

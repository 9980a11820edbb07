"""
Toolbar component - Insert-link / insert-media dialogs, file view and anchors.
"""

from ._impl import ANCHOR_PATTERN, absolute_url, join_links, parse_page_id, scan_anchors
from .component import (
    LINK_TYPES,
    HtmlEditorToolbar,
    run_get_anchors,
    run_view_file,
)
from .models import (
    DEFAULT_TOOLBAR_SETTINGS,
    GetAnchorsInput,
    GetAnchorsOutput,
    ToolbarSettings,
)
from .ports import PageRepoPort

__all__ = [
    # Entry points
    "run_get_anchors",
    "run_view_file",
    "HtmlEditorToolbar",
    # Helpers
    "ANCHOR_PATTERN",
    "absolute_url",
    "join_links",
    "parse_page_id",
    "scan_anchors",
    # Configuration
    "DEFAULT_TOOLBAR_SETTINGS",
    "LINK_TYPES",
    "ToolbarSettings",
    # Models
    "GetAnchorsInput",
    "GetAnchorsOutput",
    # Ports
    "PageRepoPort",
]

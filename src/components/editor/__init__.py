"""
Editor component - HTML editor form field and editor config registry.
"""

from ._impl import (
    EditorConfigRegistry,
    HtmlEditorField,
    HtmlEditorFieldReadonly,
    field_id,
    render_attributes,
    title_from_name,
)
from .component import build_field, run_render, run_save_into
from .models import (
    DEFAULT_FIELD_SETTINGS,
    EditorConfig,
    EditorFieldSettings,
    RenderFieldInput,
    RenderFieldOutput,
)

__all__ = [
    # Entry points
    "run_render",
    "run_save_into",
    "build_field",
    # Fields
    "HtmlEditorField",
    "HtmlEditorFieldReadonly",
    # Configuration
    "DEFAULT_FIELD_SETTINGS",
    "EditorConfig",
    "EditorConfigRegistry",
    "EditorFieldSettings",
    # Models
    "RenderFieldInput",
    "RenderFieldOutput",
    # Helpers
    "field_id",
    "render_attributes",
    "title_from_name",
]

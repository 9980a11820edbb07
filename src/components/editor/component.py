"""
Editor component - Render editor fields and save their content.

Key behaviors:
- run_render builds the field (or its readonly form) and returns its markup
- run_save_into saves a submitted value through the field's pipeline
"""

from __future__ import annotations

from src.components.richtext import LinkRegeneratorPort, RecordPort, SaveHtmlOutput
from src.shell.hooks.editor_hooks import EditorHooks

from ._impl import EditorConfigRegistry, HtmlEditorField
from .models import DEFAULT_FIELD_SETTINGS, EditorFieldSettings, RenderFieldInput, RenderFieldOutput


def build_field(
    inp: RenderFieldInput,
    *,
    registry: EditorConfigRegistry,
    settings: EditorFieldSettings = DEFAULT_FIELD_SETTINGS,
) -> HtmlEditorField:
    return HtmlEditorField(
        inp.name,
        inp.title,
        inp.value,
        inp.config,
        registry=registry,
        settings=settings,
    )


# --- Component Entry Points ---


def run_render(
    inp: RenderFieldInput,
    *,
    registry: EditorConfigRegistry,
    settings: EditorFieldSettings = DEFAULT_FIELD_SETTINGS,
) -> RenderFieldOutput:
    """Render an editor field, or its readonly form."""
    field = build_field(inp, registry=registry, settings=settings)
    if inp.readonly:
        readonly = field.readonly()
        return RenderFieldOutput(
            html=readonly.render(),
            field_type=readonly.field_type,
            attributes=readonly.attributes(),
        )
    return RenderFieldOutput(
        html=field.render(),
        field_type=field.field_type,
        attributes=field.attributes(),
    )


def run_save_into(
    name: str,
    value: str,
    record: RecordPort,
    *,
    registry: EditorConfigRegistry,
    settings: EditorFieldSettings = DEFAULT_FIELD_SETTINGS,
    hooks: EditorHooks | None = None,
    regenerator: LinkRegeneratorPort | None = None,
) -> SaveHtmlOutput:
    """Save a submitted value into a record field through an editor field."""
    field = HtmlEditorField(
        name,
        value=value,
        registry=registry,
        settings=settings,
        hooks=hooks,
        regenerator=regenerator,
    )
    return field.save_into(record)

"""
Richtext component - Save pipeline for editor HTML.

Key behaviors:
- The target field must exist on the record and be HTML-typed (escape type
  "xml"); anything else is a ConfigurationError raised before any work
- Stages run in a fixed order: regenerate asset links, parse, sanitize
  (only when server-side sanitisation is on), process_html hooks, persist
- The sanitizer runs exactly once per save when enabled and never otherwise
"""

from __future__ import annotations

import logging

from src.domain.errors import ConfigurationError
from src.shell.hooks.editor_hooks import EditorHooks, ExtensionPoint

from ._impl import HtmlDocument
from .models import SaveHtmlInput, SaveHtmlOutput
from .ports import LinkRegeneratorPort, RecordPort, SanitizerPort

logger = logging.getLogger(__name__)


def check_html_field(record: RecordPort, field_name: str) -> None:
    """Raise ConfigurationError unless the record stores HTML in the field."""
    if not record.has_field(field_name):
        raise ConfigurationError(
            f"HTML editor fields must save into an HTML field; '{field_name}' is not declared"
        )
    escape_type = record.escape_type_for_field(field_name)
    if escape_type != "xml":
        raise ConfigurationError(
            f"HTML editor fields must save into an HTML field; '{field_name}' "
            f"has escape type '{escape_type}'"
        )


# --- Component Entry Points ---


def run_save(
    inp: SaveHtmlInput,
    record: RecordPort,
    *,
    regenerator: LinkRegeneratorPort | None = None,
    sanitizer: SanitizerPort | None = None,
    sanitise_server_side: bool = False,
    hooks: EditorHooks | None = None,
) -> SaveHtmlOutput:
    """
    Save submitted editor HTML into a record field.

    Args:
        inp: Field name and submitted value
        record: Target record
        regenerator: Rewrites asset links before parsing (optional)
        sanitizer: Used only when sanitise_server_side is True
        sanitise_server_side: Server-side sanitisation switch
        hooks: process_html hooks receive the parsed document

    Raises:
        ConfigurationError: target field is not HTML-typed, or sanitisation is
            on without a sanitizer
    """
    check_html_field(record, inp.field_name)

    html = inp.value or ""
    if regenerator is not None:
        html = regenerator.regenerate(html)

    doc = HtmlDocument.from_html(html)

    errors = []
    if sanitise_server_side:
        if sanitizer is None:
            raise ConfigurationError("Server-side sanitisation is enabled but no sanitizer is set")
        doc = sanitizer.sanitize(doc)
        errors = list(sanitizer.errors)

    if hooks is not None:
        doc = hooks.run(
            ExtensionPoint.PROCESS_HTML,
            doc,
            record=record,
            field_name=inp.field_name,
        )

    content = doc.get_content()
    record.set_field(inp.field_name, content)

    logger.debug(
        "Saved %d chars into %s (sanitized=%s)",
        len(content),
        inp.field_name,
        sanitise_server_side,
    )
    return SaveHtmlOutput(
        field_name=inp.field_name,
        content=content,
        sanitized=sanitise_server_side,
        errors=errors,
    )



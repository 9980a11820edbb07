"""
Editor implementation - HtmlEditorField, its readonly form and the config registry.

Key behaviors:
- The field renders as a textarea flagged for the client editor
  (tinymce="true"), sized from the configured row count, and names its
  editor config in data-config
- Saving delegates to the richtext save pipeline; the sanitizer is built from
  the field's editor config only when server-side sanitisation is on
- Readonly rendering shows the stored HTML as-is, or "(not set)" for empty
  content, with the value carried in a hidden input
"""

from __future__ import annotations

import html
import logging
import re
from collections.abc import Mapping

from src.components.richtext import (
    HtmlSanitizer,
    LinkRegeneratorPort,
    RecordPort,
    SanitizerPort,
    SaveHtmlInput,
    SaveHtmlOutput,
    parse_valid_elements,
    run_save,
)
from src.domain.errors import ConfigurationError
from src.rules.models import EditorRules
from src.shell.hooks.editor_hooks import EditorHooks

from .models import DEFAULT_FIELD_SETTINGS, EditorConfig, EditorFieldSettings

logger = logging.getLogger(__name__)

# Pixels of editor height per textarea row.
ROW_HEIGHT_PX = 16

DEFAULT_COLS = 20


# --- Config Registry ---


class EditorConfigRegistry:
    """Named editor configs plus the identifier of the active one."""

    def __init__(self, configs: Mapping[str, EditorConfig], active: str) -> None:
        if active not in configs:
            raise ConfigurationError(f"Unknown editor config '{active}'")
        self._configs = dict(configs)
        self._active = active

    @classmethod
    def from_rules(cls, rules: EditorRules) -> EditorConfigRegistry:
        configs = {
            identifier: EditorConfig.from_rules(identifier, config)
            for identifier, config in rules.configs.items()
        }
        return cls(configs, rules.active_config)

    def identifiers(self) -> list[str]:
        return list(self._configs)

    def get(self, identifier: str) -> EditorConfig:
        try:
            return self._configs[identifier]
        except KeyError:
            raise ConfigurationError(f"Unknown editor config '{identifier}'") from None

    def get_active_identifier(self) -> str:
        return self._active

    def get_active(self) -> EditorConfig:
        return self._configs[self._active]

    def set_active(self, identifier: str) -> None:
        self.get(identifier)
        self._active = identifier
        logger.debug("Active editor config is now %s", identifier)


# --- Helpers ---


def field_id(name: str) -> str:
    """HTML id derived from a field name."""
    return re.sub(r"[^a-zA-Z0-9\-_]", "_", name)


def title_from_name(name: str) -> str:
    """'MetaDescription' -> 'Meta Description'."""
    return re.sub(r"(?<=[a-z0-9])(?=[A-Z])", " ", name)


def render_attributes(attributes: Mapping[str, str | None]) -> str:
    return " ".join(
        f'{key}="{html.escape(str(value), quote=True)}"'
        for key, value in attributes.items()
        if value is not None
    )


# --- Fields ---


class HtmlEditorField:
    """A textarea that the client upgrades to a WYSIWYG HTML editor."""

    field_type = "htmleditor"

    def __init__(
        self,
        name: str,
        title: str | None = None,
        value: str = "",
        config: str | None = None,
        *,
        registry: EditorConfigRegistry,
        settings: EditorFieldSettings = DEFAULT_FIELD_SETTINGS,
        hooks: EditorHooks | None = None,
        regenerator: LinkRegeneratorPort | None = None,
        sanitizer: SanitizerPort | None = None,
    ) -> None:
        self.name = name
        self.title = title if title is not None else title_from_name(name)
        self.value = value or ""
        self.config = registry.get(config).identifier if config else registry.get_active_identifier()
        self.rows = settings.rows
        self.cols = DEFAULT_COLS
        self.extra_classes: list[str] = []
        self._registry = registry
        self._settings = settings
        self._hooks = hooks
        self._regenerator = regenerator
        self._sanitizer = sanitizer

    def set_value(self, value: str | None) -> HtmlEditorField:
        self.value = value or ""
        return self

    def add_extra_class(self, css_class: str) -> HtmlEditorField:
        for name in css_class.split():
            if name not in self.extra_classes:
                self.extra_classes.append(name)
        return self

    def attributes(self) -> dict[str, str]:
        """Attributes of the rendered textarea."""
        return {
            "name": self.name,
            "class": " ".join([self.field_type, *self.extra_classes]),
            "id": field_id(self.name),
            "rows": str(self.rows),
            "cols": str(self.cols),
            "tinymce": "true",
            "style": f"width: 97%; height: {self.rows * ROW_HEIGHT_PX}px",
            "data-config": self.config,
        }

    def render(self) -> str:
        value = html.escape(self.value, quote=True)
        return f"<textarea {render_attributes(self.attributes())}>{value}</textarea>"

    def sanitizer(self) -> SanitizerPort:
        """The injected sanitizer, else one built from the field's editor config."""
        if self._sanitizer is None:
            config = self._registry.get(self.config)
            self._sanitizer = HtmlSanitizer(
                parse_valid_elements(config.valid_elements, config.extended_valid_elements)
            )
        return self._sanitizer

    def save_into(self, record: RecordPort) -> SaveHtmlOutput:
        """Run the save pipeline for this field's value into the record."""
        sanitise = self._settings.sanitise_server_side
        return run_save(
            SaveHtmlInput(field_name=self.name, value=self.value),
            record,
            regenerator=self._regenerator,
            sanitizer=self.sanitizer() if sanitise else None,
            sanitise_server_side=sanitise,
            hooks=self._hooks,
        )

    def readonly(self) -> HtmlEditorFieldReadonly:
        return HtmlEditorFieldReadonly(self.name, self.title, self.value)

    def disabled(self) -> HtmlEditorFieldReadonly:
        return self.readonly()


class HtmlEditorFieldReadonly:
    """Display-only rendering of editor content."""

    field_type = "htmleditorfield readonly"

    def __init__(self, name: str, title: str | None = None, value: str = "") -> None:
        self.name = name
        self.title = title if title is not None else title_from_name(name)
        self.value = value or ""

    def attributes(self) -> dict[str, str]:
        return {"name": self.name, "id": field_id(self.name), "class": self.field_type}

    def render(self) -> str:
        shown = self.value if self.value and self.value != "<p></p>" else "<i>(not set)</i>"
        hidden_value = html.escape(self.value, quote=True)
        return (
            f'<span class="readonly typography" id="{field_id(self.name)}">{shown}</span>'
            f'<input type="hidden" name="{html.escape(self.name)}" value="{hidden_value}" />'
        )

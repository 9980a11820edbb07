"""
Form model - Fields, field lists and forms rendered to admin markup.

A small admin form model with enough structure
for extension hooks to find, insert and remove fields by name, and for the
toolbar endpoints to return markup.

Key behaviors:
- FieldList lookups recurse into composite fields
- insert_before / insert_after search nested lists
- Rendering escapes every value and attribute
"""

from __future__ import annotations

import html
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

# --- Field Types ---

TEXT = "text"
TEXTAREA = "textarea"
EMAIL = "email"
HIDDEN = "hidden"
CHECKBOX = "checkbox"
LITERAL = "literal"
COMPOSITE = "composite"
FIELD_GROUP = "fieldgroup"
OPTIONSET = "optionset"
DROPDOWN = "dropdown"
TREE_DROPDOWN = "treedropdown"
UPLOAD = "upload"
GRID = "grid"
READONLY = "readonly"
DATE_DISABLED = "date_disabled"

CONTAINER_TYPES = frozenset([COMPOSITE, FIELD_GROUP])


def _esc(value: Any) -> str:
    return html.escape("" if value is None else str(value), quote=True)


def _render_attrs(attributes: dict[str, Any]) -> str:
    parts = []
    for key, val in attributes.items():
        if val is None or val is False:
            continue
        if val is True:
            parts.append(f' {_esc(key)}="true"')
        else:
            parts.append(f' {_esc(key)}="{_esc(val)}"')
    return "".join(parts)


@dataclass
class FormField:
    """A single form field, or a container of fields."""

    name: str
    field_type: str = TEXT
    title: str | None = None
    value: Any = None
    options: dict[str, str] = field(default_factory=dict)
    children: FieldList | None = None
    extra_classes: list[str] = field(default_factory=list)
    attributes: dict[str, Any] = field(default_factory=dict)
    description: str | None = None
    max_length: int | None = None
    dont_escape: bool = False
    # Per-option attributes for grid and tree rows, keyed like options
    option_attributes: dict[str, dict[str, Any]] = field(default_factory=dict)

    def add_extra_class(self, classes: str) -> FormField:
        for cls in classes.split():
            if cls not in self.extra_classes:
                self.extra_classes.append(cls)
        return self

    def remove_extra_class(self, classes: str) -> FormField:
        for cls in classes.split():
            if cls in self.extra_classes:
                self.extra_classes.remove(cls)
        return self

    def set_attribute(self, name: str, value: Any) -> FormField:
        self.attributes[name] = value
        return self

    def set_value(self, value: Any) -> FormField:
        self.value = value
        return self

    def set_description(self, description: str) -> FormField:
        self.description = description
        return self

    @property
    def is_container(self) -> bool:
        return self.field_type in CONTAINER_TYPES

    # --- Rendering ---

    def _class_attr(self) -> str:
        classes = [self.field_type, *self.extra_classes]
        return " ".join(c for c in classes if c)

    def _extra_attrs(self) -> str:
        return _render_attrs(self.attributes)

    def render_input(self) -> str:
        name = _esc(self.name)
        maxlength = f' maxlength="{self.max_length}"' if self.max_length else ""
        attrs = self._extra_attrs()

        if self.field_type == LITERAL:
            return "" if self.value is None else str(self.value)
        if self.field_type in CONTAINER_TYPES:
            inner = self.children.render() if self.children else ""
            return f'<div class="{_esc(self._class_attr())}" id="{name}"{attrs}>{inner}</div>'
        if self.field_type == TEXTAREA:
            return f'<textarea name="{name}" id="{name}"{attrs}>{_esc(self.value)}</textarea>'
        if self.field_type == CHECKBOX:
            checked = " checked" if self.value else ""
            return f'<input type="checkbox" name="{name}" id="{name}" value="1"{checked}{attrs} />'
        if self.field_type == HIDDEN:
            return f'<input type="hidden" name="{name}" value="{_esc(self.value)}"{attrs} />'
        if self.field_type in (OPTIONSET, DROPDOWN):
            return self._render_options(name, attrs)
        if self.field_type in (READONLY, DATE_DISABLED):
            shown = str(self.value) if self.dont_escape else _esc(self.value)
            return f'<span class="readonly" id="{name}"{attrs}>{shown}</span>'
        if self.field_type == UPLOAD:
            return f'<input type="file" name="{name}" id="{name}"{attrs} />'
        if self.field_type in (TREE_DROPDOWN, GRID):
            rows = "".join(
                f'<li data-id="{_esc(key)}"{_render_attrs(self.option_attributes.get(key, {}))}>'
                f"{_esc(label)}</li>"
                for key, label in self.options.items()
            )
            inner = f"<ul>{rows}</ul>" if rows else ""
            return (
                f'<div class="{_esc(self._class_attr())}" id="{name}" '
                f'data-value="{_esc(self.value)}"{attrs}>{inner}</div>'
            )
        input_type = "email" if self.field_type == EMAIL else "text"
        return (
            f'<input type="{input_type}" name="{name}" id="{name}" '
            f'value="{_esc(self.value)}"{maxlength}{attrs} />'
        )

    def _render_options(self, name: str, attrs: str) -> str:
        if self.field_type == DROPDOWN:
            opts = "".join(
                f'<option value="{_esc(key)}"{" selected" if key == self.value else ""}>'
                f"{_esc(label)}</option>"
                for key, label in self.options.items()
            )
            return f'<select name="{name}" id="{name}"{attrs}>{opts}</select>'
        items = "".join(
            f'<li><input type="radio" name="{name}" value="{_esc(key)}"'
            f'{" checked" if key == self.value else ""} /> <label>{_esc(label)}</label></li>'
            for key, label in self.options.items()
        )
        return f'<ul class="optionset" id="{name}"{attrs}>{items}</ul>'

    def render(self) -> str:
        if self.field_type in (LITERAL, HIDDEN) or self.field_type in CONTAINER_TYPES:
            return self.render_input()
        # Titles may carry markup (step labels); they are trusted template text
        label = f'<label class="left" for="{_esc(self.name)}">{self.title}</label>' if self.title else ""
        description = (
            f'<span class="description">{_esc(self.description)}</span>' if self.description else ""
        )
        return (
            f'<div class="field {_esc(self._class_attr())}" id="{_esc(self.name)}_Holder">'
            f"{label}<div class=\"middleColumn\">{self.render_input()}</div>{description}</div>"
        )


class FieldList:
    """Ordered list of fields with name-based manipulation."""

    def __init__(self, *fields: FormField) -> None:
        self._fields: list[FormField] = list(fields)

    def __iter__(self) -> Iterator[FormField]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def push(self, fld: FormField) -> None:
        self._fields.append(fld)

    def names(self) -> list[str]:
        """Names of all fields, depth first."""
        result: list[str] = []
        for fld in self._fields:
            result.append(fld.name)
            if fld.children is not None:
                result.extend(fld.children.names())
        return result

    def data_fields(self) -> dict[str, FormField]:
        """Every non-container, non-literal field keyed by name."""
        result: dict[str, FormField] = {}
        for fld in self._fields:
            if fld.children is not None:
                result.update(fld.children.data_fields())
            elif fld.field_type != LITERAL:
                result[fld.name] = fld
        return result

    def field_by_name(self, name: str) -> FormField | None:
        for fld in self._fields:
            if fld.name == name:
                return fld
            if fld.children is not None:
                found = fld.children.field_by_name(name)
                if found is not None:
                    return found
        return None

    def _insert(self, name: str, new: FormField, offset: int) -> bool:
        for idx, fld in enumerate(self._fields):
            if fld.name == name:
                self._fields.insert(idx + offset, new)
                return True
            if fld.children is not None and fld.children._insert(name, new, offset):
                return True
        return False

    def insert_before(self, name: str, new: FormField) -> bool:
        """Insert before the named field. Returns False if it was not found."""
        return self._insert(name, new, 0)

    def insert_after(self, name: str, new: FormField) -> bool:
        """Insert after the named field. Returns False if it was not found."""
        return self._insert(name, new, 1)

    def remove_by_name(self, name: str, data_field_only: bool = False) -> bool:
        for idx, fld in enumerate(self._fields):
            if fld.name == name and not (data_field_only and fld.field_type == LITERAL):
                del self._fields[idx]
                return True
            if fld.children is not None and fld.children.remove_by_name(name, data_field_only):
                return True
        return False

    def render(self) -> str:
        return "".join(fld.render() for fld in self._fields)


def composite(name: str, *fields: FormField, extra_classes: str = "") -> FormField:
    fld = FormField(name=name, field_type=COMPOSITE, children=FieldList(*fields))
    if extra_classes:
        fld.add_extra_class(extra_classes)
    return fld


def literal(name: str, content: str) -> FormField:
    return FormField(name=name, field_type=LITERAL, value=content)


@dataclass
class Form:
    """A named form posting to a controller action."""

    name: str
    action: str
    fields: FieldList
    actions: FieldList = field(default_factory=FieldList)
    extra_classes: list[str] = field(default_factory=list)
    has_validator: bool = True
    security_token_enabled: bool = True

    def add_extra_class(self, classes: str) -> Form:
        for cls in classes.split():
            if cls not in self.extra_classes:
                self.extra_classes.append(cls)
        return self

    def unset_validator(self) -> None:
        self.has_validator = False

    def disable_security_token(self) -> None:
        self.security_token_enabled = False

    def render(self) -> str:
        classes = _esc(" ".join(self.extra_classes))
        return (
            f'<form id="Form_{_esc(self.name)}" action="{_esc(self.action)}" method="post" '
            f'enctype="multipart/form-data" class="{classes}">'
            f"<fieldset>{self.fields.render()}</fieldset>"
            f'<div class="Actions">{self.actions.render()}</div></form>'
        )

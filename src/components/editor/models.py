"""
Editor component models.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from src.rules.models import EditorConfigRules, EditorRules

# --- Configuration ---


@dataclass(frozen=True)
class EditorConfig:
    """One named client-side editor configuration."""

    identifier: str
    valid_elements: str = ""
    extended_valid_elements: str = ""

    @classmethod
    def from_rules(cls, identifier: str, rules: EditorConfigRules) -> EditorConfig:
        return cls(
            identifier=identifier,
            valid_elements=rules.valid_elements,
            extended_valid_elements=rules.extended_valid_elements,
        )


@dataclass(frozen=True)
class EditorFieldSettings:
    """Process-wide editor field switches."""

    rows: int = 30
    sanitise_server_side: bool = False

    @classmethod
    def from_rules(cls, rules: EditorRules) -> EditorFieldSettings:
        return cls(
            rows=rules.rows,
            sanitise_server_side=rules.sanitise_server_side,
        )


DEFAULT_FIELD_SETTINGS = EditorFieldSettings()


# --- Input Models ---


@dataclass(frozen=True)
class RenderFieldInput:
    """Input for rendering an editor field."""

    name: str
    title: str | None = None
    value: str = ""
    config: str | None = None
    readonly: bool = False


# --- Output Models ---


@dataclass(frozen=True)
class RenderFieldOutput:
    """Rendered field markup and the attributes it was built from."""

    html: str
    field_type: str
    attributes: dict[str, str] = field(default_factory=dict)

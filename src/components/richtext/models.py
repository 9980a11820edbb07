"""
Richtext component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field

# --- Validation Error ---


@dataclass(frozen=True)
class RichTextValidationError:
    """Something the sanitizer removed, with where it was."""

    code: str
    message: str
    path: str | None = None


# --- Input Models ---


@dataclass(frozen=True)
class SaveHtmlInput:
    """Input for saving submitted editor HTML into a record field."""

    field_name: str
    value: str


# --- Output Models ---


@dataclass(frozen=True)
class SaveHtmlOutput:
    """Output of the save pipeline."""

    field_name: str
    content: str
    sanitized: bool = False
    errors: list[RichTextValidationError] = field(default_factory=list)
    success: bool = True


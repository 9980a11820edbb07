"""
EditorHooks - Ordered extension points for the editor field and toolbar.

Lets integrators customise forms, file fields and the HTML about to be saved
without subclassing.

Key behaviors:
- Callables are registered per extension point and run in registration order
- Each callable receives the mutable subject plus keyword context
- A callable returning a non-None value replaces the subject for the next one
- Disabled hooks (HooksConfig.enabled = False) pass the subject through
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


# --- Extension Points ---


class ExtensionPoint(str, Enum):
    """Named extension points."""

    PROCESS_HTML = "process_html"
    UPDATE_LINK_FORM = "update_link_form"
    UPDATE_MEDIA_FORM = "update_media_form"
    UPDATE_ATTACH_PARENT_ID = "update_attach_parent_id"
    UPDATE_ALLOWED_EXTENSIONS = "update_allowed_extensions"
    GET_FIELDS_FOR_FILE = "get_fields_for_file"
    UPDATE_FIELDS = "update_fields"
    UPDATE_FIELDS_FOR_FILE = "update_fields_for_file"
    GET_PREVIEW = "get_preview"


Hook = Callable[..., Any]


# --- Hooks Configuration ---


@dataclass
class HooksConfig:
    """Configuration for editor hooks."""

    enabled: bool = True


# --- Registry ---


class EditorHooks:
    """
    Registry of hook callables keyed by extension point.

    Instances are cheap; the app builds one at startup and hands it to the
    field and toolbar.
    """

    def __init__(self, config: HooksConfig | None = None) -> None:
        self._config = config or HooksConfig()
        self._hooks: dict[ExtensionPoint, list[Hook]] = {}

    def register(self, point: ExtensionPoint, hook: Hook) -> Hook:
        """Append a hook to an extension point. Returns the hook (usable as decorator)."""
        self._hooks.setdefault(point, []).append(hook)
        return hook

    def on(self, point: ExtensionPoint) -> Callable[[Hook], Hook]:
        """Decorator form of register()."""

        def decorator(hook: Hook) -> Hook:
            return self.register(point, hook)

        return decorator

    def hooks_for(self, point: ExtensionPoint) -> list[Hook]:
        return list(self._hooks.get(point, []))

    def has_hooks(self, point: ExtensionPoint) -> bool:
        return self._config.enabled and bool(self._hooks.get(point))

    def run(self, point: ExtensionPoint, subject: Any, **context: Any) -> Any:
        """
        Run every hook for a point against the subject.

        Returns the (possibly replaced) subject.
        """
        if not self._config.enabled:
            return subject

        for hook in self._hooks.get(point, []):
            result = hook(subject, **context)
            if result is not None:
                subject = result

        if point in self._hooks:
            logger.debug("Ran %d hook(s) for %s", len(self._hooks[point]), point.value)
        return subject

    def first(self, point: ExtensionPoint, **context: Any) -> Any:
        """
        Return the first non-None value produced by a hook, or None.

        Used by override points (get_fields_for_file, get_preview) where a hook
        supplies a replacement instead of mutating a subject.
        """
        if not self._config.enabled:
            return None

        for hook in self._hooks.get(point, []):
            result = hook(**context)
            if result is not None:
                return result
        return None

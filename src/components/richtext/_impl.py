"""
Richtext implementation - HTML document wrapper and allow-list sanitizer.

Key behaviors:
- HtmlDocument parses tolerant HTML fragments with BeautifulSoup and
  serialises them back without adding wrapper elements
- Editor configs declare allowed markup in TinyMCE valid_elements syntax;
  parse_valid_elements turns that into a SanitizerConfig
- HtmlSanitizer unwraps disallowed elements (keeping their text), removes
  script/style with their content, drops disallowed attributes and
  forbidden URL protocols
- Links opening a new window get rel="noopener noreferrer"
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from fnmatch import fnmatchcase

from bs4 import BeautifulSoup
from bs4.dammit import EntitySubstitution
from bs4.element import Tag
from bs4.formatter import HTMLFormatter

from src.rules.models import EditorConfigRules

from .models import RichTextValidationError

logger = logging.getLogger(__name__)

# Minimal entity escaping, HTML void elements (<br>, not <br/>).
_FORMATTER = HTMLFormatter(
    entity_substitution=EntitySubstitution.substitute_xml,
    void_element_close_prefix=None,
)


# --- Document ---


class HtmlDocument:
    """A parsed HTML fragment."""

    def __init__(self, soup: BeautifulSoup) -> None:
        self.soup = soup

    @classmethod
    def from_html(cls, html: str | None) -> HtmlDocument:
        return cls(BeautifulSoup(html or "", "html.parser"))

    def find_all(self, name: str | None = None, **attrs: object) -> list[Tag]:
        if name is None:
            return list(self.soup.find_all(True, **attrs))
        return list(self.soup.find_all(name, **attrs))

    def get_content(self) -> str:
        """Serialise the fragment back to an HTML string."""
        return self.soup.decode(formatter=_FORMATTER)

    def __str__(self) -> str:
        return self.get_content()


# --- Configuration ---


@dataclass(frozen=True)
class ElementRule:
    """One allowed element and the attribute patterns it accepts."""

    name: str
    attributes: frozenset[str] = frozenset()

    def allows_attribute(self, attr: str) -> bool:
        return any(fnmatchcase(attr, pattern) for pattern in self.attributes)


@dataclass(frozen=True)
class SanitizerConfig:
    """Allow-list built from an editor config."""

    elements: dict[str, ElementRule] = field(default_factory=dict)

    # alias -> canonical element name ("b" -> "strong")
    aliases: dict[str, str] = field(default_factory=dict)

    global_attributes: frozenset[str] = frozenset()

    # Removed together with their content
    remove_with_content: frozenset[str] = frozenset(["script", "style"])

    forbid_protocols: frozenset[str] = frozenset(["javascript:", "vbscript:", "data:"])

    url_attributes: frozenset[str] = frozenset(["href", "src", "action", "cite", "longdesc"])

    add_noopener: bool = True

    def rule_for(self, name: str) -> ElementRule | None:
        return self.elements.get(name) or self.elements.get("*")


def split_rules(text: str) -> list[str]:
    """Split a valid_elements string on commas outside [...] blocks."""
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    for ch in text:
        if ch == "[":
            depth += 1
        elif ch == "]":
            depth = max(depth - 1, 0)
        if ch == "," and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(ch)
    parts.append("".join(current))
    return [p.strip() for p in parts if p.strip()]


_RULE_PATTERN = re.compile(r"^([^\[]+?)\s*(?:\[(.*)\])?$", re.DOTALL)
_ATTR_END = re.compile(r"[=:<]")


def _parse_attributes(attr_text: str) -> frozenset[str]:
    names: set[str] = set()
    for raw in attr_text.split("|"):
        raw = raw.strip().lstrip("!")
        if not raw:
            continue
        # Defaults (=), forced values (:) and enums (<) carry no allow-list meaning.
        name = _ATTR_END.split(raw, maxsplit=1)[0].strip().lower()
        if name:
            names.add(name)
    return frozenset(names)


def parse_valid_elements(valid_elements: str, extended_valid_elements: str = "") -> SanitizerConfig:
    """
    Build a SanitizerConfig from TinyMCE valid_elements syntax.

    Supports "@[...]" global attributes, "a/b" aliases, "-", "#", "+" and "!"
    element prefixes, and wildcard attribute names such as "data*".
    Extended rules replace base rules for the same element.
    """
    elements: dict[str, ElementRule] = {}
    aliases: dict[str, str] = {}
    global_attributes: frozenset[str] = frozenset()

    for rule in split_rules(valid_elements) + split_rules(extended_valid_elements):
        match = _RULE_PATTERN.match(rule)
        if not match:
            logger.warning("Ignoring unparseable element rule: %s", rule)
            continue

        names = [n.strip().lstrip("-#+!").lower() for n in match.group(1).split("/")]
        names = [n for n in names if n]
        attributes = _parse_attributes(match.group(2) or "")
        if not names:
            continue

        if names[0] == "@":
            global_attributes = global_attributes | attributes
            continue

        canonical = names[0]
        elements[canonical] = ElementRule(name=canonical, attributes=attributes)
        for alias in names[1:]:
            aliases[alias] = canonical

    return SanitizerConfig(
        elements=elements,
        aliases=aliases,
        global_attributes=global_attributes,
    )


def config_from_rules(rules: EditorConfigRules) -> SanitizerConfig:
    return parse_valid_elements(rules.valid_elements, rules.extended_valid_elements)


# --- URL Checks ---


def is_safe_url(url: str, config: SanitizerConfig) -> bool:
    """False when the URL uses a forbidden protocol."""
    if not url:
        return True
    # Browsers ignore embedded whitespace and control chars in the scheme.
    compact = re.sub(r"[\s\x00-\x1f]+", "", url).lower()
    return not any(compact.startswith(protocol) for protocol in config.forbid_protocols)


# --- Sanitizer ---


class HtmlSanitizer:
    """
    Allow-list sanitizer over an HtmlDocument.

    The errors from the latest sanitize() call are kept on .errors.
    """

    def __init__(self, config: SanitizerConfig) -> None:
        self._config = config
        self.errors: list[RichTextValidationError] = []

    @property
    def config(self) -> SanitizerConfig:
        return self._config

    def sanitize(self, doc: HtmlDocument) -> HtmlDocument:
        self.errors = []
        for tag in doc.find_all():
            if tag.decomposed:
                continue
            self._sanitize_tag(tag)

        if self.errors:
            logger.info("Sanitizer removed %d item(s)", len(self.errors))
        return doc

    def _sanitize_tag(self, tag: Tag) -> None:
        config = self._config
        name = tag.name.lower()

        if name in config.remove_with_content:
            self._error("stripped_tag", f"Tag '{name}' was removed with its content", name)
            tag.decompose()
            return

        canonical = config.aliases.get(name, name)
        rule = config.rule_for(canonical)
        if rule is None:
            self._error("stripped_tag", f"Tag '{name}' was stripped", name)
            tag.unwrap()
            return

        if canonical != name:
            tag.name = canonical

        for attr in list(tag.attrs):
            attr_name = attr.lower()
            if not (
                rule.allows_attribute(attr_name)
                or any(fnmatchcase(attr_name, p) for p in config.global_attributes)
            ):
                del tag[attr]
                self._error(
                    "stripped_attribute",
                    f"Attribute '{attr_name}' stripped from '{canonical}'",
                    canonical,
                )
                continue

            if attr_name in config.url_attributes:
                value = tag.get(attr)
                if isinstance(value, str) and not is_safe_url(value, config):
                    del tag[attr]
                    self._error(
                        "unsafe_url",
                        f"Unsafe URL protocol in {attr_name}: {value[:50]}",
                        canonical,
                    )

        if config.add_noopener and canonical == "a" and tag.get("target") == "_blank":
            rel = tag.get("rel") or []
            if isinstance(rel, str):
                rel = rel.split()
            for token in ("noopener", "noreferrer"):
                if token not in rel:
                    rel.append(token)
            tag["rel"] = rel

    def _error(self, code: str, message: str, path: str) -> None:
        self.errors.append(RichTextValidationError(code=code, message=message, path=path))


def create_sanitizer(rules: EditorConfigRules) -> HtmlSanitizer:
    return HtmlSanitizer(config_from_rules(rules))

"""
Richtext component - HTML parsing, sanitisation and the editor save pipeline.
"""

from ._impl import (
    ElementRule,
    HtmlDocument,
    HtmlSanitizer,
    SanitizerConfig,
    config_from_rules,
    create_sanitizer,
    is_safe_url,
    parse_valid_elements,
    split_rules,
)
from .component import check_html_field, run_save
from .models import (
    RichTextValidationError,
    SaveHtmlInput,
    SaveHtmlOutput,
)
from .ports import LinkRegeneratorPort, RecordPort, SanitizerPort

__all__ = [
    # Entry points
    "run_save",
    "check_html_field",
    # Document / sanitizer
    "HtmlDocument",
    "HtmlSanitizer",
    "create_sanitizer",
    # Configuration
    "ElementRule",
    "SanitizerConfig",
    "config_from_rules",
    "parse_valid_elements",
    "split_rules",
    "is_safe_url",
    # Input models
    "SaveHtmlInput",
    # Output models
    "SaveHtmlOutput",
    "RichTextValidationError",
    # Ports
    "LinkRegeneratorPort",
    "RecordPort",
    "SanitizerPort",
]

from __future__ import annotations

from .classifier import contains_dangerous_content  # noqa: F401
from .engine import HtmlSanitizer, default_sanitizer  # noqa: F401
from .escaping import AttributeValue, EscapeState, escape_attribute_value  # noqa: F401
from .policy import (  # noqa: F401
    DEFAULT_POLICY,
    PARAGRAPH_POLICY,
    PLAIN_TEXT_POLICY,
    SanitizerPolicy,
    get_policy,
)
from .scrubber import DANGEROUS_PATTERNS, PatternRule, scrub  # noqa: F401

__all__ = [
    "HtmlSanitizer",
    "default_sanitizer",
    "contains_dangerous_content",
    "scrub",
    "PatternRule",
    "DANGEROUS_PATTERNS",
    "SanitizerPolicy",
    "DEFAULT_POLICY",
    "PARAGRAPH_POLICY",
    "PLAIN_TEXT_POLICY",
    "get_policy",
    "AttributeValue",
    "EscapeState",
    "escape_attribute_value",
]

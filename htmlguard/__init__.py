from __future__ import annotations

from htmlguard.errors import ContentTooLargeError
from htmlguard.extensions import HtmlGuard, guard
from htmlguard.sanitizer import (
    DEFAULT_POLICY,
    PARAGRAPH_POLICY,
    PLAIN_TEXT_POLICY,
    HtmlSanitizer,
    SanitizerPolicy,
)
from htmlguard.utils.html_sanitizer import (
    contains_dangerous_content,
    is_safe_html,
    remove_dangerous_patterns_only,
    sanitize_blog_paragraph,
    sanitize_html,
)

__all__ = [
    "sanitize_html",
    "sanitize_blog_paragraph",
    "remove_dangerous_patterns_only",
    "contains_dangerous_content",
    "is_safe_html",
    "HtmlSanitizer",
    "SanitizerPolicy",
    "DEFAULT_POLICY",
    "PARAGRAPH_POLICY",
    "PLAIN_TEXT_POLICY",
    "HtmlGuard",
    "guard",
    "ContentTooLargeError",
]

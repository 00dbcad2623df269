"""
HTML sanitization utilities for rich-text editor content.

Provides DOMPurify-equivalent functionality on top of the allowlist engine in
``htmlguard.sanitizer``: call ``sanitize_html`` before persisting editor
content, and again at render time if you want defense in depth; running it
twice is safe.
"""
from __future__ import annotations

from htmlguard.errors import ContentTooLargeError
from htmlguard.sanitizer.classifier import contains_dangerous_content
from htmlguard.sanitizer.engine import HtmlSanitizer, default_sanitizer
from htmlguard.sanitizer.policy import DEFAULT_POLICY, PARAGRAPH_POLICY, SanitizerPolicy
from htmlguard.sanitizer.values import is_safe_url, sanitize_attribute_value

# Read-only views of the default allowlist
ALLOWED_TAGS = DEFAULT_POLICY.allowed_tags
ALLOWED_ATTRIBUTES = DEFAULT_POLICY.allowed_attributes

_paragraph_sanitizer = HtmlSanitizer(PARAGRAPH_POLICY)

__all__ = [
    "ALLOWED_TAGS",
    "ALLOWED_ATTRIBUTES",
    "sanitize_html",
    "sanitize_blog_paragraph",
    "remove_dangerous_patterns_only",
    "contains_dangerous_content",
    "is_safe_html",
    "is_allowed_tag",
    "is_allowed_attribute",
    "is_safe_url",
    "sanitize_attribute_value",
    "enforce_input_limit",
]


def sanitize_html(html_content: str | None) -> str:
    """
    Sanitize HTML content to prevent XSS attacks while allowing safe formatting.

    Removes dangerous elements, attributes, URL schemes and CSS primitives,
    then keeps only allowlisted tags and attributes.

    Args:
        html_content: Raw HTML content to sanitize

    Returns:
        Sanitized HTML content safe for rendering, "" for empty or None input
    """
    return default_sanitizer.sanitize(html_content)


def sanitize_blog_paragraph(paragraph_content: str | None) -> str:
    """
    Sanitize paragraph content specifically for blog posts.

    Uses a more restrictive set for paragraphs: basic formatting, links,
    lists and inline code.

    Args:
        paragraph_content: Raw paragraph HTML content

    Returns:
        Sanitized paragraph content
    """
    return _paragraph_sanitizer.sanitize(paragraph_content)


def remove_dangerous_patterns_only(html_content: str | None) -> str:
    """Coarse pre-filter: the pattern scrubber without tag/attribute allowlisting."""
    return default_sanitizer.scrub(html_content)


def is_safe_html(html_content: str | None) -> bool:
    """
    Check if HTML content is already clean.

    Args:
        html_content: HTML content to check

    Returns:
        True if sanitizing would not change the content
    """
    if not html_content:
        return True

    # Sanitize and compare - if they're the same, it was already safe
    return sanitize_html(html_content) == html_content


def is_allowed_tag(tag_name: str, policy: SanitizerPolicy = DEFAULT_POLICY) -> bool:
    return policy.is_allowed_tag(tag_name)


def is_allowed_attribute(
    tag_name: str,
    attr_name: str,
    policy: SanitizerPolicy = DEFAULT_POLICY,
) -> bool:
    """Check an attribute against the tag-specific list, then the global one."""
    return policy.is_allowed_attribute(tag_name, attr_name)


def enforce_input_limit(html_content: str | None, max_bytes: int | None) -> str:
    """
    Reject content above the byte ceiling before it reaches the sanitizer.

    Raises:
        ContentTooLargeError: If the UTF-8 encoded content exceeds max_bytes
    """
    html_content = html_content or ""
    if max_bytes is None:
        return html_content

    size = len(html_content.encode("utf-8"))
    if size > max_bytes:
        raise ContentTooLargeError(size, max_bytes)
    return html_content

"""
Dangerous content classifier.

Independent of the scrubber and the sanitizer on purpose: it shares none of
their patterns or code, so it can be used to verify their output.
"""
from __future__ import annotations

import re

_CHECKS = (
    re.compile(r"<script\b", re.IGNORECASE),
    # Event handlers
    re.compile(r"\son\w+\s*=", re.IGNORECASE),
    re.compile(r"javascript\s*:", re.IGNORECASE),
    re.compile(r"vbscript\s*:", re.IGNORECASE),
    # Data URLs other than images
    re.compile(r"data\s*:\s*(?!image/)", re.IGNORECASE),
    # CSS injection
    re.compile(r"expression\s*\(", re.IGNORECASE),
    re.compile(r"behavior\s*:", re.IGNORECASE),
    re.compile(r"-moz-binding\s*:", re.IGNORECASE),
    re.compile(r"<style\b", re.IGNORECASE),
    # Embedded content and foreign markup
    re.compile(r"<(?:iframe|object|embed|svg|math|template)\b", re.IGNORECASE),
    # Forms
    re.compile(r"<(?:form|input|button|textarea|select)\b", re.IGNORECASE),
    # Document-level tags
    re.compile(r"<(?:meta|link|base)\b", re.IGNORECASE),
    # Media
    re.compile(r"<(?:audio|video|source|track)\b", re.IGNORECASE),
    # Legacy tags
    re.compile(
        r"<(?:marquee|bgsound|blink|layer|keygen|isindex|applet|frame|frameset)\b",
        re.IGNORECASE,
    ),
)


def contains_dangerous_content(html: str | None) -> bool:
    """
    Check if HTML content contains any dangerous pattern.

    Args:
        html: HTML content to check

    Returns:
        True if content contains dangerous patterns
    """
    if not html or not isinstance(html, str):
        return False

    return any(check.search(html) for check in _CHECKS)

"""
Attribute value sanitizing: URL schemes for href/src, injection primitives for style.
"""
from __future__ import annotations

import html
import re
from typing import Iterable

from htmlguard.sanitizer.policy import URL_ATTRIBUTES
from htmlguard.sanitizer.scrubber import MAX_SCRUB_PASSES

# Browsers ignore ASCII whitespace and control characters inside a scheme
_URL_IGNORED_RE = re.compile(r"[\x00-\x20\x7f]+")

_UNSAFE_SCHEMES = ("javascript:", "vbscript:")

_CSS_UNSAFE_SCHEME = r"(?:(?:java|vb)script\s*:|data\s*:(?!\s*image/))"

_STYLE_RULES = (
    # expression(...), one level of nested parentheses
    re.compile(r"expression\s*\((?:[^()]|\([^()]*\))*\)?", re.IGNORECASE),
    re.compile(
        rf"url\s*\(\s*(?:\"\s*{_CSS_UNSAFE_SCHEME}[^\"]*\"|'\s*{_CSS_UNSAFE_SCHEME}[^']*'"
        rf"|{_CSS_UNSAFE_SCHEME}[^)]*)\s*\)?",
        re.IGNORECASE,
    ),
    re.compile(r"behavior\s*:[^;]*;?", re.IGNORECASE),
    re.compile(r"-moz-binding\s*:[^;]*;?", re.IGNORECASE),
    re.compile(r"@import[^;]*;?", re.IGNORECASE),
)

_CSS_COMMENT_RE = re.compile(r"/\*.*?(?:\*/|$)", re.DOTALL)
_CSS_ESCAPE_RE = re.compile(r"\\([0-9a-fA-F]{1,6})\s?|\\(.)", re.DOTALL)
_STYLE_RESIDUE_RE = re.compile(
    r"expression\(|behavior:|-moz-binding|@import|javascript:|vbscript:|data:(?!image/)",
)


def is_safe_url(url: str | None) -> bool:
    """
    Check that a URL does not use a script-capable scheme.

    Character references are decoded first, so ``&#106;avascript:`` is
    treated like ``javascript:``.

    Args:
        url: Attribute value as authored; empty or missing is safe

    Returns:
        False for javascript:, vbscript: and non-image data: URLs
    """
    if not url:
        return True

    normalized = _URL_IGNORED_RE.sub("", html.unescape(url)).lower()
    if normalized.startswith(_UNSAFE_SCHEMES):
        return False
    if normalized.startswith("data:") and not normalized.startswith("data:image/"):
        return False
    return True


def _decode_css_escape(match: re.Match[str]) -> str:
    if match.group(1):
        codepoint = int(match.group(1), 16)
        if 0 < codepoint <= 0x10FFFF:
            return chr(codepoint)
        return ""
    return match.group(2)


def _normalize_style(style: str) -> str:
    text = html.unescape(style)
    text = _CSS_COMMENT_RE.sub("", text)
    text = _CSS_ESCAPE_RE.sub(_decode_css_escape, text)
    return re.sub(r"\s+", "", text).lower()


def sanitize_style(style: str) -> str | None:
    """Strip CSS injection primitives from a style attribute value.

    Returns ``None`` when the attribute should be dropped: nothing is left,
    removals keep splicing new primitives together, or an obfuscated
    primitive (comments, CSS escapes, entities) is still recognisable once
    the value is normalized.
    """
    for _ in range(MAX_SCRUB_PASSES):
        cleaned = style
        for rule in _STYLE_RULES:
            cleaned = rule.sub("", cleaned)
        if cleaned == style:
            break
        style = cleaned
    else:
        return None

    if not style.strip():
        return None
    if _STYLE_RESIDUE_RE.search(_normalize_style(style)):
        return None
    return style


def sanitize_attribute_value(
    tag_name: str,
    attr_name: str,
    value: str,
    url_attributes: Iterable[str] = URL_ATTRIBUTES,
) -> str | None:
    """
    Sanitize one allowed attribute value.

    Args:
        tag_name: Tag the attribute belongs to
        attr_name: Attribute name
        value: Value as authored, before escaping
        url_attributes: Attribute names holding URLs

    Returns:
        The value to keep, or None to drop the attribute entirely
    """
    attr = attr_name.lower()

    if attr in url_attributes:
        return value if is_safe_url(value) else None

    if attr == "style":
        return sanitize_style(value)

    return value

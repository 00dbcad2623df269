"""
Sanitizer policies: which tags and attributes may survive.

A policy is an immutable value handed to ``HtmlSanitizer`` at construction,
so alternative allowlists (a paragraph-only profile, a plain text profile)
can be used side by side with the default one.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping

from htmlguard.sanitizer.scrubber import DANGEROUS_PATTERNS, PatternRule

GLOBAL_ATTRIBUTES_KEY = "*"

# Allowed HTML tags for rich-text editor content
ALLOWED_TAGS = [
    # Text formatting
    'p', 'br', 'span', 'div',
    'strong', 'b', 'em', 'i', 'u', 's', 'strike',
    'sub', 'sup', 'mark',
    # Headings
    'h1', 'h2', 'h3', 'h4', 'h5', 'h6',
    # Lists
    'ul', 'ol', 'li',
    # Links and images
    'a', 'img',
    # Tables
    'table', 'thead', 'tbody', 'tfoot', 'tr', 'th', 'td',
    # Code
    'pre', 'code',
    # Quotes and sections
    'blockquote', 'hr', 'figure', 'figcaption',
]

ALLOWED_ATTRIBUTES = {
    'a': ['href', 'title', 'target', 'rel'],
    'img': ['src', 'alt', 'title', 'width', 'height', 'loading'],
    'code': ['class', 'data-language'],
    'pre': ['class', 'data-language'],
    'span': ['class', 'style'],
    'div': ['class', 'style'],
    'p': ['class', 'style'],
    'table': ['class', 'style'],
    'td': ['class', 'style', 'colspan', 'rowspan'],
    'th': ['class', 'style', 'colspan', 'rowspan', 'scope'],
    '*': ['class', 'id'],  # Allow id and class on all elements
}

# Paragraph content only needs inline formatting, links and lists
PARAGRAPH_TAGS = [
    'strong', 'b', 'em', 'i', 'u', 's', 'mark', 'small', 'sup', 'sub',
    'a', 'code', 'br', 'span', 'ul', 'ol', 'li',
]

PARAGRAPH_ATTRIBUTES = {
    'a': ['href', 'title', 'target', 'rel'],
    '*': ['class', 'id'],
}

URL_ATTRIBUTES = ('href', 'src')
VOID_TAGS = ('br', 'hr', 'img')


def _freeze_attributes(table: Mapping[str, Iterable[str]]) -> Mapping[str, frozenset[str]]:
    return MappingProxyType({
        tag.lower(): frozenset(attr.lower() for attr in attrs)
        for tag, attrs in table.items()
    })


@dataclass(frozen=True)
class SanitizerPolicy:
    """An allowlist-driven sanitizer configuration.

    - Tags not in ``allowed_tags`` are dropped (the tag, not its text).
    - Attributes not in ``allowed_attributes[tag]`` or ``allowed_attributes["*"]``
      are dropped, each one independently of its siblings.
    - Values of ``url_attributes`` are checked for unsafe schemes.
    """

    name: str
    allowed_tags: frozenset[str]
    allowed_attributes: Mapping[str, frozenset[str]]
    dangerous_patterns: tuple[PatternRule, ...] = DANGEROUS_PATTERNS
    url_attributes: frozenset[str] = field(default_factory=lambda: frozenset(URL_ATTRIBUTES))
    void_tags: frozenset[str] = field(default_factory=lambda: frozenset(VOID_TAGS))

    @classmethod
    def build(
        cls,
        name: str,
        tags: Iterable[str],
        attributes: Mapping[str, Iterable[str]],
    ) -> "SanitizerPolicy":
        return cls(
            name=name,
            allowed_tags=frozenset(tag.lower() for tag in tags),
            allowed_attributes=_freeze_attributes(attributes),
        )

    def is_allowed_tag(self, tag_name: str) -> bool:
        return tag_name.lower() in self.allowed_tags

    def is_allowed_attribute(self, tag_name: str, attr_name: str) -> bool:
        """Two-level lookup: tag-specific attributes, then global ones."""
        tag = tag_name.lower()
        attr = attr_name.lower()
        empty: frozenset[str] = frozenset()
        if attr in self.allowed_attributes.get(tag, empty):
            return True
        return attr in self.allowed_attributes.get(GLOBAL_ATTRIBUTES_KEY, empty)


DEFAULT_POLICY = SanitizerPolicy.build("default", ALLOWED_TAGS, ALLOWED_ATTRIBUTES)
PARAGRAPH_POLICY = SanitizerPolicy.build("paragraph", PARAGRAPH_TAGS, PARAGRAPH_ATTRIBUTES)
PLAIN_TEXT_POLICY = SanitizerPolicy.build("plain_text", (), {})

POLICIES: Mapping[str, SanitizerPolicy] = MappingProxyType({
    policy.name: policy for policy in (DEFAULT_POLICY, PARAGRAPH_POLICY, PLAIN_TEXT_POLICY)
})


def get_policy(name: str) -> SanitizerPolicy:
    """Look up a named profile.

    Raises:
        ValueError: If no profile has that name
    """
    try:
        return POLICIES[name.strip().lower()]
    except KeyError:
        raise ValueError(f"unknown sanitizer profile: {name!r}") from None

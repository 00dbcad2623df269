"""Attribute value escaping with an explicit escape state."""
from __future__ import annotations

import enum
import re
from dataclasses import dataclass

_CORE_ENTITIES = {
    "&amp;": "&",
    "&quot;": '"',
    "&lt;": "<",
    "&gt;": ">",
}
_CORE_ENTITY_RE = re.compile("|".join(re.escape(entity) for entity in _CORE_ENTITIES))


class EscapeState(enum.Enum):
    RAW = "raw"
    ESCAPED = "escaped"


def _decode_core_entities(text: str) -> str:
    # Single left-to-right pass: "&amp;lt;" decodes to "&lt;", not "<"
    return _CORE_ENTITY_RE.sub(lambda m: _CORE_ENTITIES[m.group(0)], text)


def _encode(text: str) -> str:
    return (
        text.replace("&", "&amp;")
        .replace('"', "&quot;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
    )


@dataclass(frozen=True)
class AttributeValue:
    """An attribute value together with the state its text is in.

    Values read from markup are ``ESCAPED``: they may already hold entity
    references from an earlier sanitizer pass. ``escaped()`` always decodes
    the four core entities first, so escaping twice never yields ``&amp;amp;``.
    """

    text: str
    state: EscapeState = EscapeState.ESCAPED

    def decoded(self) -> str:
        if self.state is EscapeState.RAW:
            return self.text
        return _decode_core_entities(self.text)

    def escaped(self) -> str:
        return _encode(self.decoded())

    def replace(self, text: str) -> "AttributeValue":
        return AttributeValue(text, self.state)


def escape_attribute_value(value: str) -> str:
    """
    Escape a markup attribute value for output inside double quotes.

    Idempotent: ``escape_attribute_value(escape_attribute_value(v))`` equals
    ``escape_attribute_value(v)``.

    Args:
        value: Attribute value as authored

    Returns:
        The value with ``& " < >`` encoded exactly once
    """
    return AttributeValue(value, EscapeState.ESCAPED).escaped()

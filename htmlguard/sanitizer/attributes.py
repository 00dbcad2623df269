"""
Attribute parsing and allowlist filtering.

``scan_attributes`` is the attribute half of the tokenizer state machine: it
starts right after a tag name and stops on the ``>`` that closes the tag,
honouring quotes, so a ``>`` inside a quoted value never ends the tag early.
"""
from __future__ import annotations

import enum
from typing import NamedTuple

from htmlguard.sanitizer.escaping import AttributeValue, EscapeState
from htmlguard.sanitizer.policy import DEFAULT_POLICY, SanitizerPolicy
from htmlguard.sanitizer.values import sanitize_attribute_value

WHITESPACE = "\t\n\f\r "


class _State(enum.Enum):
    BEFORE_ATTRIBUTE_NAME = enum.auto()
    ATTRIBUTE_NAME = enum.auto()
    AFTER_ATTRIBUTE_NAME = enum.auto()
    BEFORE_ATTRIBUTE_VALUE = enum.auto()
    ATTRIBUTE_VALUE_DOUBLE = enum.auto()
    ATTRIBUTE_VALUE_SINGLE = enum.auto()
    ATTRIBUTE_VALUE_UNQUOTED = enum.auto()
    AFTER_ATTRIBUTE_VALUE_QUOTED = enum.auto()
    SELF_CLOSING_START = enum.auto()


class AttributePair(NamedTuple):
    name: str
    value: AttributeValue


class AttributeScan(NamedTuple):
    pairs: list[AttributePair]
    # Index just past the closing '>', None when the input ended first
    end: int | None
    self_closing: bool


def scan_attributes(text: str, pos: int = 0) -> AttributeScan:
    """
    Parse ``name=value`` pairs starting at ``pos`` up to the end of the tag.

    Supports double-quoted, single-quoted, unquoted and valueless attributes.
    Names are lower-cased; values are kept as authored.

    Args:
        text: The markup being tokenized
        pos: Index right after the tag name

    Returns:
        The pairs found, where the tag ended and whether it was self-closing
    """
    pairs: list[AttributePair] = []
    state = _State.BEFORE_ATTRIBUTE_NAME
    name: list[str] = []
    value: list[str] = []
    length = len(text)

    def emit() -> None:
        if name:
            pairs.append(AttributePair(
                "".join(name).lower(),
                AttributeValue("".join(value), EscapeState.ESCAPED),
            ))
        name.clear()
        value.clear()

    while pos < length:
        char = text[pos]
        pos += 1

        if state is _State.BEFORE_ATTRIBUTE_NAME:
            if char in WHITESPACE:
                continue
            if char == "/":
                state = _State.SELF_CLOSING_START
            elif char == ">":
                return AttributeScan(pairs, pos, False)
            else:
                name.append(char)
                state = _State.ATTRIBUTE_NAME

        elif state is _State.ATTRIBUTE_NAME:
            if char in WHITESPACE:
                state = _State.AFTER_ATTRIBUTE_NAME
            elif char == "/":
                emit()
                state = _State.SELF_CLOSING_START
            elif char == "=":
                state = _State.BEFORE_ATTRIBUTE_VALUE
            elif char == ">":
                emit()
                return AttributeScan(pairs, pos, False)
            else:
                name.append(char)

        elif state is _State.AFTER_ATTRIBUTE_NAME:
            if char in WHITESPACE:
                continue
            if char == "/":
                emit()
                state = _State.SELF_CLOSING_START
            elif char == "=":
                state = _State.BEFORE_ATTRIBUTE_VALUE
            elif char == ">":
                emit()
                return AttributeScan(pairs, pos, False)
            else:
                emit()
                name.append(char)
                state = _State.ATTRIBUTE_NAME

        elif state is _State.BEFORE_ATTRIBUTE_VALUE:
            if char in WHITESPACE:
                continue
            if char == '"':
                state = _State.ATTRIBUTE_VALUE_DOUBLE
            elif char == "'":
                state = _State.ATTRIBUTE_VALUE_SINGLE
            elif char == ">":
                emit()
                return AttributeScan(pairs, pos, False)
            else:
                value.append(char)
                state = _State.ATTRIBUTE_VALUE_UNQUOTED

        elif state is _State.ATTRIBUTE_VALUE_DOUBLE:
            if char == '"':
                emit()
                state = _State.AFTER_ATTRIBUTE_VALUE_QUOTED
            else:
                value.append(char)

        elif state is _State.ATTRIBUTE_VALUE_SINGLE:
            if char == "'":
                emit()
                state = _State.AFTER_ATTRIBUTE_VALUE_QUOTED
            else:
                value.append(char)

        elif state is _State.ATTRIBUTE_VALUE_UNQUOTED:
            if char in WHITESPACE:
                emit()
                state = _State.BEFORE_ATTRIBUTE_NAME
            elif char == ">":
                emit()
                return AttributeScan(pairs, pos, False)
            else:
                value.append(char)

        elif state is _State.AFTER_ATTRIBUTE_VALUE_QUOTED:
            if char in WHITESPACE:
                state = _State.BEFORE_ATTRIBUTE_NAME
            elif char == "/":
                state = _State.SELF_CLOSING_START
            elif char == ">":
                return AttributeScan(pairs, pos, False)
            else:
                pos -= 1
                state = _State.BEFORE_ATTRIBUTE_NAME

        elif state is _State.SELF_CLOSING_START:
            if char == ">":
                return AttributeScan(pairs, pos, True)
            pos -= 1
            state = _State.BEFORE_ATTRIBUTE_NAME

    # EOF inside the tag. An unterminated quoted value is never kept.
    if state not in (_State.ATTRIBUTE_VALUE_DOUBLE, _State.ATTRIBUTE_VALUE_SINGLE):
        emit()
    return AttributeScan(pairs, None, False)


def parse_attributes(raw: str) -> list[AttributePair]:
    """Parse a raw attribute string such as ``href="x" title='y' id=z``."""
    return scan_attributes(raw).pairs


def filter_pairs(
    tag_name: str,
    pairs: list[AttributePair],
    policy: SanitizerPolicy = DEFAULT_POLICY,
) -> list[tuple[str, str]]:
    """
    Keep allowed, safe attributes and escape their values.

    Each attribute is decided on its own; the first occurrence of a repeated
    name wins. Output order follows input order.

    Returns:
        ``(name, escaped_value)`` pairs ready to emit
    """
    kept: list[tuple[str, str]] = []
    seen: set[str] = set()

    for pair in pairs:
        if pair.name in seen:
            continue
        seen.add(pair.name)

        if not policy.is_allowed_attribute(tag_name, pair.name):
            continue

        cleaned = sanitize_attribute_value(
            tag_name, pair.name, pair.value.text, policy.url_attributes
        )
        if cleaned is None:
            continue

        kept.append((pair.name, pair.value.replace(cleaned).escaped()))

    return kept


def render_attributes(attributes: list[tuple[str, str]]) -> str:
    return "".join(f' {name}="{value}"' for name, value in attributes)


def filter_attributes(
    tag_name: str,
    raw: str,
    policy: SanitizerPolicy = DEFAULT_POLICY,
) -> str:
    """
    Turn a raw attribute string into the sanitized string to re-emit.

    Args:
        tag_name: Lower-cased tag name
        raw: Attribute string as authored
        policy: Allowlist to apply

    Returns:
        Attributes as `` name="value"`` segments, or an empty string
    """
    return render_attributes(filter_pairs(tag_name, parse_attributes(raw), policy))

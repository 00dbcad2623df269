"""
Markup tokenizer: splits scrubbed markup into text runs and tag tokens.

This is a simplified state machine scoped to what the allowlist needs, not
the full HTML tokenization algorithm. Anything it cannot confidently read as
a tag is either escaped (a stray ``<``) or dropped (comments, doctypes,
tags cut off by the end of the input).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Union

from htmlguard.sanitizer.attributes import WHITESPACE, AttributePair, scan_attributes

ESCAPED_LT = "&lt;"


@dataclass(frozen=True)
class TextToken:
    data: str


@dataclass(frozen=True)
class TagToken:
    name: str
    is_closing: bool = False
    is_self_closing: bool = False
    attributes: tuple[AttributePair, ...] = field(default=(), compare=False)


Token = Union[TextToken, TagToken]


def _skip_comment(html: str, pos: int) -> int:
    """Return the index after ``-->`` for a comment opened at ``pos``."""
    end = html.find("-->", pos + 4)
    if end == -1:
        return len(html)
    return end + 3


def _skip_bogus(html: str, pos: int) -> int:
    """Return the index after the next ``>`` (doctype, processing instruction)."""
    end = html.find(">", pos)
    if end == -1:
        return len(html)
    return end + 1


def _read_tag_name(html: str, pos: int) -> int:
    length = len(html)
    while pos < length and html[pos] not in WHITESPACE and html[pos] not in "/>":
        pos += 1
    return pos


def tokenize(html: str) -> Iterator[Token]:
    """
    Yield text and tag tokens for ``html``.

    Rules:
        - ``<`` followed by a letter starts a tag, ``</`` + letter an end tag
        - ``<`` followed by anything else is text, yielded as ``&lt;``
        - comments, ``<!...>``, ``<?...>`` and ``</>`` yield nothing
        - a tag, comment or quoted value cut off by the end of the input
          drops everything from its ``<`` onwards
    """
    length = len(html)
    pos = 0

    while pos < length:
        lt = html.find("<", pos)
        if lt == -1:
            yield TextToken(html[pos:])
            return
        if lt > pos:
            yield TextToken(html[pos:lt])

        nxt = html[lt + 1] if lt + 1 < length else ""

        if nxt.isascii() and nxt.isalpha():
            closing = False
            name_start = lt + 1
        elif nxt == "/":
            after = html[lt + 2] if lt + 2 < length else ""
            if after.isascii() and after.isalpha():
                closing = True
                name_start = lt + 2
            elif after == "":
                return
            else:
                pos = _skip_bogus(html, lt + 2)
                continue
        elif nxt == "!":
            if html.startswith("<!--", lt):
                pos = _skip_comment(html, lt)
            else:
                pos = _skip_bogus(html, lt + 2)
            continue
        elif nxt == "?":
            pos = _skip_bogus(html, lt + 2)
            continue
        else:
            yield TextToken(ESCAPED_LT)
            pos = lt + 1
            continue

        name_end = _read_tag_name(html, name_start)
        scan = scan_attributes(html, name_end)
        if scan.end is None:
            # EOF inside the tag: fail closed
            return

        yield TagToken(
            name=html[name_start:name_end].lower(),
            is_closing=closing,
            is_self_closing=scan.self_closing,
            attributes=tuple(scan.pairs),
        )
        pos = scan.end

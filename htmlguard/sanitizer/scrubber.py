"""
Pattern scrubber: removes whole dangerous constructs from raw markup.

Runs before tokenization, over the raw string, so it also catches constructs
the tokenizer would never see as tags (schemes in text, broken tags, CSS
primitives inside attribute values).
"""
from __future__ import annotations

import re
from typing import NamedTuple, Optional

import structlog

logger = structlog.get_logger(__name__)

# Passes allowed before scrub() gives up on the input
MAX_SCRUB_PASSES = 16


class PatternRule(NamedTuple):
    """A single scrub rule.

    Plain rules substitute every match of ``pattern``. Element rules also
    carry ``closing``: ``pattern`` then finds start tags and each element is
    removed from its start tag through the first closing tag after it.
    """

    name: str
    pattern: re.Pattern[str]
    replacement: str = ""
    closing: Optional[re.Pattern[str]] = None

    def apply(self, html: str) -> str:
        if self.closing is None:
            return self.pattern.sub(self.replacement, html)
        return _remove_elements(html, self.pattern, self.closing, self.replacement)


def _remove_elements(
    html: str,
    start: re.Pattern[str],
    closing: re.Pattern[str],
    replacement: str,
) -> str:
    """Remove ``<name ...>body</name>`` spans in one left-to-right scan.

    Same matches as ``<name\\b[^>]*>.*?</name\\s*>`` but linear: once a start
    tag has no ``>`` or no closing tag after it, no later start tag can have
    one either, so scanning stops there.
    """
    parts: list[str] = []
    pos = 0
    for match in start.finditer(html):
        begin = match.start()
        if begin < pos:
            continue
        tag_end = html.find(">", match.end())
        if tag_end == -1:
            break
        close = closing.search(html, tag_end + 1)
        if close is None:
            break
        parts.append(html[pos:begin])
        parts.append(replacement)
        pos = close.end()

    if not parts:
        return html
    parts.append(html[pos:])
    return "".join(parts)


_FLAGS = re.IGNORECASE | re.DOTALL

# Elements removed together with their body
CONTAINER_ELEMENTS = (
    "script", "style", "svg", "math", "iframe", "object", "form", "button",
    "textarea", "select", "template", "audio", "video", "applet", "frameset",
    "marquee", "blink", "layer", "noscript",
)

# Elements that never carry a body worth keeping
VOID_ELEMENTS = (
    "embed", "input", "meta", "link", "base", "source", "track", "frame",
    "bgsound", "keygen", "isindex",
)

_SCHEME = r"(?:(?:java|vb)script\s*:|data\s*:(?!\s*image/))"


def _container_rules(name: str) -> list[PatternRule]:
    return [
        # <name ...>body</name>, tolerant of whitespace before '>'
        PatternRule(
            f"{name}_element",
            re.compile(rf"<{name}\b", _FLAGS),
            closing=re.compile(rf"</{name}\s*>", _FLAGS),
        ),
        # unpaired or self-closing start, '>' may be missing
        PatternRule(f"{name}_start", re.compile(rf"<{name}\b[^>]*>?", _FLAGS)),
        PatternRule(f"{name}_end", re.compile(rf"</{name}\b[^>]*>?", _FLAGS)),
    ]


def _void_rules(name: str) -> list[PatternRule]:
    return [
        PatternRule(f"{name}_start", re.compile(rf"<{name}\b[^>]*>?", _FLAGS)),
        PatternRule(f"{name}_end", re.compile(rf"</{name}\b[^>]*>?", _FLAGS)),
    ]


def _build_rules() -> tuple[PatternRule, ...]:
    rules: list[PatternRule] = []

    rules.extend(_container_rules("script"))

    # Inline event handlers: quoted first, then unquoted (possibly empty) values.
    # Names only match at the start of a word run to keep scanning linear.
    rules.append(PatternRule(
        "event_handler_quoted",
        re.compile(r"\bon\w+\s*=\s*(?:\"[^\"]*\"|'[^']*')", _FLAGS),
    ))
    rules.append(PatternRule(
        "event_handler_unquoted",
        re.compile(r"\bon\w+\s*=\s*[^\s>]*", _FLAGS),
    ))

    # Whole attributes whose value starts with a dangerous scheme
    rules.append(PatternRule(
        "dangerous_url_attribute",
        re.compile(
            rf"(?<![\w:-])[\w:-]+\s*=\s*(?:\"\s*{_SCHEME}[^\"]*\"|'\s*{_SCHEME}[^']*'|{_SCHEME}[^\s>]*)",
            _FLAGS,
        ),
    ))

    # Schemes anywhere else, including text and obfuscated placements
    rules.append(PatternRule("javascript_scheme", re.compile(r"javascript\s*:", _FLAGS)))
    rules.append(PatternRule("vbscript_scheme", re.compile(r"vbscript\s*:", _FLAGS)))
    rules.append(PatternRule("data_scheme", re.compile(r"data\s*:\s*(?!image/)", _FLAGS)))

    # CSS injection primitives
    rules.append(PatternRule("css_expression", re.compile(r"expression\s*\(", _FLAGS)))
    rules.append(PatternRule("css_behavior", re.compile(r"behavior\s*:[^;\"'<>]*;?", _FLAGS)))
    rules.append(PatternRule("css_moz_binding", re.compile(r"-moz-binding\s*:[^;\"'<>]*;?", _FLAGS)))

    for name in CONTAINER_ELEMENTS[1:]:
        rules.extend(_container_rules(name))
    for name in VOID_ELEMENTS:
        rules.extend(_void_rules(name))

    return tuple(rules)


DANGEROUS_PATTERNS: tuple[PatternRule, ...] = _build_rules()


def scrub_once(html: str, rules: tuple[PatternRule, ...] = DANGEROUS_PATTERNS) -> str:
    """Apply every rule once, in order."""
    for rule in rules:
        html = rule.apply(html)
    return html


def scrub(
    html: str,
    rules: tuple[PatternRule, ...] = DANGEROUS_PATTERNS,
    max_passes: int = MAX_SCRUB_PASSES,
) -> str:
    """
    Remove dangerous constructs until no rule matches anymore.

    Removing one match can splice its neighbours into a new match
    (``<scr<script></script>ipt>``), so the rule list is re-applied until a
    pass leaves the string unchanged. Each nesting level of such splices
    costs one pass; input still changing after ``max_passes`` is discarded.

    Args:
        html: Any string, including malformed or partial markup
        rules: Rules to apply, in order
        max_passes: Upper bound on full passes over the rule list

    Returns:
        The string with every rule match removed, or "" when the bound is hit
    """
    if not html:
        return ""

    for _ in range(max_passes):
        cleaned = scrub_once(html, rules)
        if cleaned == html:
            return html
        html = cleaned

    logger.warning("scrub_fail_closed", input_length=len(html), passes=max_passes)
    return ""

"""
HTML sanitizer engine.

Pipeline per pass: pattern scrub -> tokenize -> per-tag allowlist rewrite
(attributes filtered, values sanitized and escaped). Passes repeat until
the rewrite no longer changes the scrubbed text, which makes the result a
fixed point: sanitizing it again returns it unchanged.
"""
from __future__ import annotations

import re

import structlog

from htmlguard.sanitizer.attributes import filter_pairs, render_attributes
from htmlguard.sanitizer.policy import DEFAULT_POLICY, SanitizerPolicy
from htmlguard.sanitizer.scrubber import scrub
from htmlguard.sanitizer.tokenizer import TagToken, TextToken, tokenize

logger = structlog.get_logger(__name__)

_ANGLE_BRACKETS_RE = re.compile(r"[<>]")


class HtmlSanitizer:
    """Allowlist HTML sanitizer bound to one immutable policy.

    Instances hold no mutable state and can be shared between threads.
    """

    MAX_PASSES = 8

    def __init__(self, policy: SanitizerPolicy = DEFAULT_POLICY) -> None:
        self._policy = policy

    @property
    def policy(self) -> SanitizerPolicy:
        return self._policy

    def scrub(self, html: str) -> str:
        """Pattern scrubber alone, without tag/attribute allowlisting."""
        if not isinstance(html, str) or not html:
            return ""
        return scrub(html, self._policy.dangerous_patterns)

    def sanitize(self, html: object) -> str:
        """
        Sanitize HTML content to prevent XSS while keeping allowed formatting.

        Never raises: empty, ``None`` and non-string input yield ``""``.

        Args:
            html: Raw HTML content, typically from a WYSIWYG editor

        Returns:
            Sanitized HTML, a fixed point of this method
        """
        if not isinstance(html, str) or not html:
            return ""

        current = html
        dropped_total = 0
        for passes in range(1, self.MAX_PASSES + 1):
            scrubbed = self.scrub(current)
            rewritten, dropped = self._rewrite(scrubbed)
            dropped_total += dropped
            if rewritten == scrubbed:
                logger.debug(
                    "html_sanitized",
                    policy=self._policy.name,
                    input_length=len(html),
                    output_length=len(rewritten),
                    passes=passes,
                    dropped_tags=dropped_total,
                )
                return rewritten
            current = rewritten

        logger.warning(
            "sanitizer_fail_closed",
            policy=self._policy.name,
            input_length=len(html),
            passes=self.MAX_PASSES,
        )
        return self.scrub(_ANGLE_BRACKETS_RE.sub("", current))

    def _rewrite(self, html: str) -> tuple[str, int]:
        """Re-emit allowed tags in canonical form and drop every other tag."""
        parts: list[str] = []
        dropped = 0

        for token in tokenize(html):
            if isinstance(token, TextToken):
                parts.append(token.data)
                continue

            rendered = self._render_tag(token)
            if rendered is None:
                dropped += 1
            else:
                parts.append(rendered)

        return "".join(parts), dropped

    def _render_tag(self, token: TagToken) -> str | None:
        if not self._policy.is_allowed_tag(token.name):
            return None

        # Attributes on closing tags carry nothing worth keeping
        if token.is_closing:
            return f"</{token.name}>"

        attrs = render_attributes(filter_pairs(token.name, list(token.attributes), self._policy))
        if token.is_self_closing or token.name in self._policy.void_tags:
            return f"<{token.name}{attrs} />"
        return f"<{token.name}{attrs}>"


default_sanitizer = HtmlSanitizer()

from __future__ import annotations

from typing import Any

import structlog
from flask import Flask, current_app
from markupsafe import Markup

from htmlguard.config import Config
from htmlguard.logging_config import configure_logging
from htmlguard.sanitizer.engine import HtmlSanitizer
from htmlguard.sanitizer.policy import PARAGRAPH_POLICY, get_policy
from htmlguard.utils.html_sanitizer import enforce_input_limit

logger = structlog.get_logger(__name__)

EXTENSION_KEY = "htmlguard"


class HtmlGuard:
    """Flask integration for the sanitizer.

    Registers the ``safe_html`` and ``safe_paragraph`` template filters and
    exposes ``sanitize()`` bound to the configured profile.
    """

    def __init__(self, app: Flask | None = None) -> None:
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        for key in dir(Config):
            if key.startswith("HTMLGUARD_"):
                app.config.setdefault(key, getattr(Config, key))

        # Raises ValueError on an unknown profile name
        policy = get_policy(app.config["HTMLGUARD_PROFILE"])

        if app.config["HTMLGUARD_CONFIGURE_LOGGING"]:
            configure_logging(app.config["HTMLGUARD_LOG_LEVEL"])

        app.extensions[EXTENSION_KEY] = {
            "sanitizer": HtmlSanitizer(policy),
            "paragraph_sanitizer": HtmlSanitizer(PARAGRAPH_POLICY),
        }

        # Register template filters for HTML sanitization
        @app.template_filter("safe_html")
        def safe_html_filter(html_content: str) -> Markup:
            """Template filter to sanitize HTML content for safe rendering."""
            return Markup(self.sanitize(html_content))

        @app.template_filter("safe_paragraph")
        def safe_paragraph_filter(paragraph_content: str) -> Markup:
            """Template filter to sanitize paragraph content for safe rendering."""
            return Markup(self._render(paragraph_content, "paragraph_sanitizer"))

    def _state(self) -> dict[str, Any]:
        return current_app.extensions[EXTENSION_KEY]

    def sanitize(self, html_content: str | None) -> str:
        """Sanitize content for rendering with the configured profile."""
        return self._render(html_content, "sanitizer")

    def sanitize_for_storage(self, html_content: str | None) -> str:
        """
        Sanitize content that is about to be persisted.

        Raises:
            ContentTooLargeError: If the content exceeds HTMLGUARD_MAX_INPUT_BYTES
        """
        limit = current_app.config["HTMLGUARD_MAX_INPUT_BYTES"]
        html_content = enforce_input_limit(html_content, limit)
        return self._state()["sanitizer"].sanitize(html_content)

    def _render(self, html_content: str | None, key: str) -> str:
        if not isinstance(html_content, str):
            return ""
        limit = current_app.config["HTMLGUARD_MAX_INPUT_BYTES"]
        encoded = html_content.encode("utf-8")
        if limit is not None and len(encoded) > limit:
            # Rendering must not fail on stored content; truncate instead
            logger.warning("render_input_truncated", size=len(encoded), limit=limit)
            html_content = encoded[:limit].decode("utf-8", errors="ignore")
        return self._state()[key].sanitize(html_content)


guard: HtmlGuard = HtmlGuard()

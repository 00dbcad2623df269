"""Test configuration and fixtures for the HTML sanitizer."""

import re
from typing import Generator

import pytest
from flask import Flask
from flask.testing import FlaskClient

from htmlguard.extensions import HtmlGuard
from htmlguard.sanitizer import HtmlSanitizer
from htmlguard.sanitizer.policy import DEFAULT_POLICY

_OUTPUT_TAG_RE = re.compile(r"<(/?)([a-z0-9]+)((?:\s+[a-z0-9-]+=\"[^\"]*\")*)\s*/?>")
_OUTPUT_ATTR_RE = re.compile(r"\s+([a-z0-9-]+)=\"[^\"]*\"")


@pytest.fixture
def app() -> Generator[Flask, None, None]:
    """Create a Flask application with the sanitizer extension."""
    app = Flask(__name__)
    app.config.update({
        'TESTING': True,
        'HTMLGUARD_PROFILE': 'default',
        'HTMLGUARD_MAX_INPUT_BYTES': 4096,
        'HTMLGUARD_CONFIGURE_LOGGING': False,
    })
    HtmlGuard(app)

    with app.app_context():
        yield app


@pytest.fixture
def client(app: Flask) -> FlaskClient:
    """Create a test client."""
    return app.test_client()


@pytest.fixture
def sanitizer() -> HtmlSanitizer:
    """A sanitizer bound to the default policy."""
    return HtmlSanitizer(DEFAULT_POLICY)


def output_tags(html: str) -> list[tuple[str, list[str]]]:
    """Return (tag name, attribute names) for every tag in sanitizer output."""
    return [
        (match.group(2), _OUTPUT_ATTR_RE.findall(match.group(3)))
        for match in _OUTPUT_TAG_RE.finditer(html)
    ]


@pytest.fixture
def tag_inventory():
    """Expose output_tags to tests as a fixture."""
    return output_tags

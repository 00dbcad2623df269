"""Tests for the Flask integration and logging setup."""

import pytest
import structlog
from flask import Flask, g, render_template_string
from structlog.testing import capture_logs

from htmlguard import logging_config
from htmlguard.config import Config
from htmlguard.errors import ContentTooLargeError
from htmlguard.extensions import EXTENSION_KEY, HtmlGuard, guard
from htmlguard.sanitizer import HtmlSanitizer


def make_app(**config):
    app = Flask(__name__)
    app.config.update({'TESTING': True, 'HTMLGUARD_CONFIGURE_LOGGING': False})
    app.config.update(config)
    return app


class TestHtmlGuard:
    """Extension setup and sanitizing through the app."""

    def test_defaults_from_config(self):
        app = make_app()
        HtmlGuard(app)
        assert app.config['HTMLGUARD_PROFILE'] == Config.HTMLGUARD_PROFILE
        assert app.config['HTMLGUARD_MAX_INPUT_BYTES'] == Config.HTMLGUARD_MAX_INPUT_BYTES
        assert isinstance(app.extensions[EXTENSION_KEY]['sanitizer'], HtmlSanitizer)

    def test_unknown_profile_fails_at_startup(self):
        with pytest.raises(ValueError, match='unknown sanitizer profile'):
            HtmlGuard(make_app(HTMLGUARD_PROFILE='permissive'))

    def test_init_app_later(self):
        app = make_app(HTMLGUARD_PROFILE='plain_text')
        extension = HtmlGuard()
        extension.init_app(app)
        with app.app_context():
            assert extension.sanitize('<p>Hello <b>World</b></p>') == 'Hello World'

    def test_sanitize_uses_configured_profile(self, app):
        assert guard.sanitize('<p>x</p><script>y</script>') == '<p>x</p>'

    def test_sanitize_non_string(self, app):
        assert guard.sanitize(None) == ''

    def test_render_truncates_oversized_input(self, app):
        app.config['HTMLGUARD_MAX_INPUT_BYTES'] = 10
        with capture_logs() as logs:
            result = guard.sanitize('<p>abcdefghijkl</p>')
        assert result == '<p>abcdefg'
        assert any(entry['event'] == 'render_input_truncated' for entry in logs)

    def test_truncation_keeps_whole_characters(self, app):
        app.config['HTMLGUARD_MAX_INPUT_BYTES'] = 4
        assert guard.sanitize('abéé') == 'abé'

    def test_storage_rejects_oversized_input(self, app):
        app.config['HTMLGUARD_MAX_INPUT_BYTES'] = 10
        with pytest.raises(ContentTooLargeError) as exc_info:
            guard.sanitize_for_storage('<p>abcdefghijkl</p>')
        assert exc_info.value.size == 19
        assert exc_info.value.limit == 10

    def test_storage_sanitizes(self, app):
        assert guard.sanitize_for_storage('<a href="javascript:x()">y</a>') == '<a>y</a>'


class TestTemplateFilters:
    """Template filters render sanitized markup without double escaping."""

    def test_safe_html_filter(self, app):
        rendered = render_template_string(
            '{{ body|safe_html }}',
            body='<p>Hi &amp; bye</p><img src=x onerror=alert(1)>',
        )
        assert rendered == '<p>Hi &amp; bye</p><img src="x" />'

    def test_safe_paragraph_filter(self, app):
        rendered = render_template_string(
            '{{ body|safe_paragraph }}',
            body='<h1>Title</h1><strong>bold</strong> <a href="/x" style="color:red">l</a>',
        )
        assert rendered == 'Title<strong>bold</strong> <a href="/x">l</a>'

    def test_filter_in_request(self, app, client):
        @app.route('/preview')
        def preview():
            return render_template_string('<div>{{ body|safe_html }}</div>', body='<b onclick=x>ok</b>')

        response = client.get('/preview')
        assert response.status_code == 200
        assert response.get_data(as_text=True) == '<div><b>ok</b></div>'


class TestLogging:
    """Structured log events and logging setup."""

    def test_fail_closed_is_logged(self, monkeypatch):
        monkeypatch.setattr(HtmlSanitizer, 'MAX_PASSES', 1)
        with capture_logs() as logs:
            HtmlSanitizer().sanitize('<custom>x</custom>')
        events = [entry for entry in logs if entry['event'] == 'sanitizer_fail_closed']
        assert len(events) == 1
        assert events[0]['log_level'] == 'warning'
        assert events[0]['policy'] == 'default'

    def test_sanitized_is_logged(self):
        with capture_logs() as logs:
            HtmlSanitizer().sanitize('<p>x</p><foo>y</foo>')
        entry = next(entry for entry in logs if entry['event'] == 'html_sanitized')
        assert entry['dropped_tags'] == 2
        assert entry['passes'] == 2

    def test_configure_logging(self, monkeypatch):
        captured = {}
        monkeypatch.setattr(structlog, 'configure', lambda **kwargs: captured.update(kwargs))
        logging_config.configure_logging('not-a-level')
        assert logging_config.add_request_id in captured['processors']
        assert captured['cache_logger_on_first_use'] is True

    def test_request_id_outside_app_context(self):
        assert logging_config.add_request_id(None, 'info', {'event': 'x'}) == {'event': 'x'}

    def test_request_id_inside_app_context(self, app):
        g.request_id = 'abc123'
        event = logging_config.add_request_id(None, 'info', {'event': 'x'})
        assert event['request_id'] == 'abc123'

"""Tests for the sanitizer facade in htmlguard.utils.html_sanitizer."""

import pytest

from htmlguard.errors import ContentTooLargeError
from htmlguard.sanitizer.policy import PARAGRAPH_POLICY
from htmlguard.utils.html_sanitizer import (
    ALLOWED_ATTRIBUTES,
    ALLOWED_TAGS,
    contains_dangerous_content,
    enforce_input_limit,
    is_allowed_attribute,
    is_allowed_tag,
    is_safe_html,
    remove_dangerous_patterns_only,
    sanitize_blog_paragraph,
    sanitize_html,
)


class TestHTMLSanitizer:
    """Test cases for HTML sanitization."""

    def test_sanitize_basic_html(self):
        """Test sanitizing basic allowed HTML."""
        html = '<p>This is a <strong>test</strong> paragraph.</p>'
        result = sanitize_html(html)
        assert result == html

    def test_sanitize_removes_script_tags(self):
        """Test that script tags are removed."""
        html = '<p>Safe content</p><script>alert("xss")</script>'
        result = sanitize_html(html)
        assert '<script>' not in result
        assert 'alert("xss")' not in result
        assert '<p>Safe content</p>' in result

    def test_sanitize_removes_dangerous_attributes(self):
        """Test that dangerous attributes are removed."""
        html = '<p onclick="alert(\'xss\')">Click me</p>'
        result = sanitize_html(html)
        assert 'onclick' not in result
        assert '<p>Click me</p>' == result

    def test_sanitize_allows_safe_attributes(self):
        """Test that safe attributes are preserved."""
        html = '<a href="https://example.com" title="Example">Link</a>'
        result = sanitize_html(html)
        assert 'href="https://example.com"' in result
        assert 'title="Example"' in result

    def test_sanitize_removes_disallowed_tags(self):
        """Test that disallowed tags are removed."""
        html = '<p>Safe</p><iframe src="evil.com"></iframe>'
        result = sanitize_html(html)
        assert '<iframe' not in result
        assert result == '<p>Safe</p>'

    def test_sanitize_keeps_text_of_unknown_tags(self):
        """Unknown tags are dropped but their text survives."""
        assert sanitize_html('<custom-tag>text</custom-tag>') == 'text'

    def test_sanitize_preserves_formatting(self):
        """Test that formatting tags are preserved."""
        html = '<h1>Title</h1><p>Text with <em>emphasis</em> and <strong>bold</strong>.</p>'
        result = sanitize_html(html)
        assert '<h1>Title</h1>' in result
        assert '<em>emphasis</em>' in result
        assert '<strong>bold</strong>' in result

    def test_sanitize_preserves_lists(self):
        """Test that list tags are preserved."""
        html = '<ul><li>Item 1</li><li>Item 2</li></ul>'
        result = sanitize_html(html)
        assert '<ul>' in result
        assert '<li>Item 1</li>' in result
        assert '<li>Item 2</li>' in result

    def test_sanitize_preserves_tables(self):
        """Tables keep their cell attributes."""
        html = '<table><tr><td colspan="2">Cell</td></tr></table>'
        assert sanitize_html(html) == html

    def test_sanitize_normalizes_void_tags(self):
        """Void tags are emitted in self-closing form."""
        assert sanitize_html('line<br>break<hr>') == 'line<br />break<hr />'
        assert sanitize_html('<img src="a.png" alt="A">') == '<img src="a.png" alt="A" />'

    def test_sanitize_empty_input(self):
        """Test sanitizing empty input."""
        assert sanitize_html('') == ''
        assert sanitize_html(None) == ''

    def test_sanitize_non_string_input(self):
        """Non-string input never raises."""
        assert sanitize_html(42) == ''
        assert sanitize_html(b'<p>bytes</p>') == ''

    def test_allowed_tags_configuration(self):
        """Test that allowed tags are properly configured."""
        expected_tags = {
            'p', 'br', 'strong', 'em', 'u', 'ul', 'ol', 'li', 'a', 'blockquote', 'code', 'pre',
            'img', 'table', 'h1', 'h6', 'figure', 'figcaption',
        }
        assert set(ALLOWED_TAGS) >= expected_tags
        assert 'script' not in ALLOWED_TAGS

    def test_allowed_attributes_configuration(self):
        """Test that allowed attributes are properly configured."""
        assert 'href' in ALLOWED_ATTRIBUTES.get('a', [])
        assert 'title' in ALLOWED_ATTRIBUTES.get('a', [])
        assert 'src' in ALLOWED_ATTRIBUTES.get('img', [])
        assert ALLOWED_ATTRIBUTES['*'] == frozenset({'class', 'id'})

    def test_allowlist_is_read_only(self):
        """The default allowlist cannot be mutated at runtime."""
        with pytest.raises(TypeError):
            ALLOWED_ATTRIBUTES['a'] = frozenset({'onclick'})
        with pytest.raises(AttributeError):
            ALLOWED_TAGS.add('script')


class TestAllowlistHelpers:
    """Test cases for tag and attribute lookups."""

    def test_is_allowed_tag_case_insensitive(self):
        assert is_allowed_tag('P') is True
        assert is_allowed_tag('Table') is True
        assert is_allowed_tag('script') is False

    def test_is_allowed_attribute_tag_specific(self):
        assert is_allowed_attribute('a', 'href') is True
        assert is_allowed_attribute('img', 'href') is False
        assert is_allowed_attribute('td', 'ROWSPAN') is True

    def test_is_allowed_attribute_global(self):
        """Global attributes apply to every tag."""
        assert is_allowed_attribute('h2', 'id') is True
        assert is_allowed_attribute('li', 'class') is True
        assert is_allowed_attribute('li', 'style') is False

    def test_helpers_accept_a_policy(self):
        assert is_allowed_tag('small', PARAGRAPH_POLICY) is True
        assert is_allowed_tag('small') is False
        assert is_allowed_attribute('p', 'style', PARAGRAPH_POLICY) is False


class TestParagraphSanitizer:
    """Test cases for the paragraph profile."""

    def test_keeps_inline_formatting(self):
        html = '<strong>bold</strong> and <a href="https://example.com">link</a>'
        assert sanitize_blog_paragraph(html) == html

    def test_drops_block_tags(self):
        result = sanitize_blog_paragraph('<h1>Title</h1><table><tr><td>x</td></tr></table>')
        assert result == 'Titlex'

    def test_drops_style_attribute(self):
        result = sanitize_blog_paragraph('<span style="color:red" class="note">x</span>')
        assert result == '<span class="note">x</span>'


class TestSafetyChecks:
    """Test cases for is_safe_html and the coarse scrubber."""

    def test_is_safe_html_clean_content(self):
        assert is_safe_html('<p>Hello <em>World</em></p>') is True
        assert is_safe_html('') is True

    def test_is_safe_html_dangerous_content(self):
        assert is_safe_html('<p onclick="x()">Hello</p>') is False
        assert is_safe_html('<script>alert(1)</script>') is False

    def test_is_safe_html_surrounding_whitespace(self):
        """Whitespace around clean markup is kept by the sanitizer."""
        assert is_safe_html(' <p>x</p>\n') is True
        assert is_safe_html(' <p onclick="x()">x</p> ') is False

    def test_remove_dangerous_patterns_only_keeps_unknown_tags(self):
        """The scrubber does no allowlisting of its own."""
        result = remove_dangerous_patterns_only('<custom>ok</custom><script>alert(1)</script>')
        assert result == '<custom>ok</custom>'

    def test_remove_dangerous_patterns_only_empty(self):
        assert remove_dangerous_patterns_only(None) == ''
        assert remove_dangerous_patterns_only('') == ''

    def test_contains_dangerous_content_reexported(self):
        assert contains_dangerous_content('<script>') is True


class TestInputLimit:
    """Test cases for the input size ceiling."""

    def test_within_limit(self):
        assert enforce_input_limit('<p>ok</p>', 100) == '<p>ok</p>'

    def test_no_limit(self):
        assert enforce_input_limit('x' * 10000, None) == 'x' * 10000

    def test_none_becomes_empty(self):
        assert enforce_input_limit(None, 10) == ''

    def test_limit_counts_utf8_bytes(self):
        """Multi-byte characters count by encoded size."""
        with pytest.raises(ContentTooLargeError) as exc_info:
            enforce_input_limit('é' * 6, 10)
        assert exc_info.value.size == 12
        assert exc_info.value.limit == 10
        assert isinstance(exc_info.value, ValueError)

"""Unit tests for the snippet matcher."""

import pytest

from core.models import Strategy
from detection.document import parse_html
from detection.snippet import NO_CONTEXT, extract_matched_code, match_snippet


class TestMatchSnippet:
    def test_exact_match(self, facebook_head_page):
        result = match_snippet(facebook_head_page, "fbq('init','123')")
        assert result.found is True
        assert result.source_strategy == Strategy.exact

    def test_exact_match_tolerates_whitespace(self, facebook_head_page):
        result = match_snippet(facebook_head_page, "\n  fbq('init','123')\n")
        assert result.source_strategy == Strategy.exact

    def test_minified_page_matches_only_fuzzy(self):
        html = "<script>fbq('init','123');fbq('track','PageView');</script>"
        snippet = "fbq('init', '123');\nfbq('track', 'PageView');"
        result = match_snippet(html, snippet)
        assert result.found is True
        assert result.source_strategy == Strategy.fuzzy

    def test_requoted_page_matches_fuzzy(self):
        html = '<head><script>fbq("init","123")</script></head>'
        result = match_snippet(html, "fbq( 'init', '123' )")
        assert result.source_strategy == Strategy.fuzzy

    @pytest.mark.parametrize("snippet", [None, "", "   \n\t"])
    def test_empty_snippet_never_matches(self, facebook_head_page, snippet):
        result = match_snippet(facebook_head_page, snippet)
        assert result.found is False
        assert result.source_strategy is None

    def test_absent_snippet(self, facebook_head_page):
        assert match_snippet(facebook_head_page, "ttq.load('ABC')").found is False


class TestExtractMatchedCode:
    def test_context_from_inline_script(self, facebook_head_page):
        page = parse_html(facebook_head_page)
        assert extract_matched_code(page, "fbq('init','123')") == "fbq('init','123')"

    def test_keeps_original_smart_quotes(self):
        page = parse_html("<head><script>fbq(‘init’,‘123’)</script></head>")
        code = extract_matched_code(page, "fbq('init','123')")
        assert "‘" in code

    def test_falls_back_to_whole_document(self, facebook_head_page):
        page = parse_html(facebook_head_page)
        code = extract_matched_code(page, "<script>fbq('init','123')</script>")
        assert "<script>fbq('init','123')</script>" in code

    def test_falls_back_to_parser_serialization(self):
        page = parse_html("<html><body><p>Thanks</p><img src=https://t.example/p.gif height=1></body></html>")
        code = extract_matched_code(page, '<img src="https://t.example/p.gif" height="1"/>')
        assert code != NO_CONTEXT
        assert "https://t.example/p.gif" in code

    def test_context_is_bounded(self):
        filler = "x" * 500
        page = parse_html(f"<script>{filler} fbq('init','1') {filler}</script>")
        code = extract_matched_code(page, "fbq('init','1')")
        assert len(code) == len("fbq('init','1')") + 200

    def test_no_context(self, facebook_head_page):
        page = parse_html(facebook_head_page)
        assert extract_matched_code(page, "pintrk('load')") == NO_CONTEXT

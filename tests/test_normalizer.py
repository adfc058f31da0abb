"""Unit tests for text normalization."""

from detection.normalizer import (
    collapse_whitespace,
    decode_basic_entities,
    normalize_loose,
    normalize_strict,
)


class TestNormalizeStrict:
    def test_collapses_and_trims_whitespace(self):
        assert normalize_strict("  fbq( 'init',\n\t'123' )  ") == "fbq( 'init', '123' )"

    def test_maps_curly_quotes_to_straight(self):
        assert normalize_strict("fbq(‘init’, “123”)") == "fbq('init', \"123\")"

    def test_keeps_case_and_content(self):
        assert normalize_strict("FBQ('Init')") == "FBQ('Init')"

    def test_empty_input(self):
        assert normalize_strict("") == ""
        assert collapse_whitespace("   ") == ""

    def test_quote_mapping_preserves_length(self):
        text = "a ‘b’ “c”"
        assert len(normalize_strict(text)) == len(collapse_whitespace(text))


class TestNormalizeLoose:
    def test_strips_case_quotes_comments_and_whitespace(self):
        assert normalize_loose("<!-- pixel -->FBQ('init', \"123\");;") == "fbq(init,123);"

    def test_minified_and_formatted_code_compare_equal(self):
        formatted = "fbq('init', '123');\nfbq('track', 'PageView');"
        minified = 'fbq("init","123");fbq("track","PageView");'
        assert normalize_loose(formatted) == normalize_loose(minified)

    def test_normalizes_brace_spacing(self):
        assert normalize_loose("function() {\n  go();\n}\n)") == "function(){go();})"

    def test_multiline_comment_removed(self):
        assert normalize_loose("a<!--\nhidden\n-->b") == "ab"

    def test_empty_input(self):
        assert normalize_loose("") == ""


def test_decode_basic_entities():
    assert decode_basic_entities("fbq(&quot;init&quot;) &#39;x&#39; &amp;&lt;&gt;") == "fbq(\"init\") 'x' &<>"

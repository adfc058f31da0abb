"""Unit tests for vendor signature and external script detection."""

from core.models import Strategy
from detection.document import parse_html
from detection.signatures import (
    BODY_LABEL,
    HEAD_LABEL,
    INLINE_LABEL,
    UNCLEAR_LABEL,
    detect_external_script,
    detect_vendor_signature,
)

FB_LOADER = "https://connect.facebook.net/en_US/fbevents.js"


class TestVendorSignature:
    def test_tiktok_in_body(self, tiktok_body_page):
        hit = detect_vendor_signature(parse_html(tiktok_body_page), "TikTok")
        assert hit.found is True
        assert hit.source_strategy == Strategy.vendor_signature
        assert hit.fragment == r"ttq\s*\."
        assert hit.placement == BODY_LABEL
        assert "ttq.load('abc')" in hit.context

    def test_facebook_in_head(self, facebook_head_page):
        hit = detect_vendor_signature(parse_html(facebook_head_page), "Facebook")
        assert hit.placement == HEAD_LABEL

    def test_placement_unclear_without_sections(self):
        hit = detect_vendor_signature(parse_html("<script>fbq('init','1')</script>"), "Facebook")
        assert hit.placement == UNCLEAR_LABEL

    def test_context_window(self):
        html = "a" * 300 + "fbq(" + "b" * 300
        hit = detect_vendor_signature(parse_html(html), "Facebook")
        assert len(hit.context) == 360
        assert hit.context.startswith("a" * 120 + "fbq(")

    def test_first_pattern_wins(self):
        html = "<body>connect.facebook.net pixel <script>fbq('init','1')</script></body>"
        hit = detect_vendor_signature(parse_html(html), "Facebook")
        assert hit.fragment == r"fbq\s*\("

    def test_unknown_platform(self, facebook_head_page):
        assert detect_vendor_signature(parse_html(facebook_head_page), "MySpace") is None

    def test_no_signature(self, empty_page):
        assert detect_vendor_signature(parse_html(empty_page), "Facebook") is None


class TestExternalScript:
    def test_loader_in_head(self):
        page = parse_html(f'<html><head><script async src="{FB_LOADER}"></script></head><body></body></html>')
        hit = detect_external_script(page, "Facebook")
        assert hit.source_strategy == Strategy.external_script
        assert hit.placement == HEAD_LABEL
        assert hit.context == f"External script detected: {FB_LOADER}"
        assert hit.fragment == FB_LOADER

    def test_loader_in_body(self):
        page = parse_html(f'<html><head></head><body><script src="{FB_LOADER}"></script></body></html>')
        assert detect_external_script(page, "Facebook").placement == BODY_LABEL

    def test_loader_with_query_string_in_head(self):
        src = "https://www.googletagmanager.com/gtag/js?id=AW-1&l=dataLayer"
        page = parse_html(f'<html><head><script src="{src}"></script></head><body></body></html>')
        hit = detect_external_script(page, "Google Ads")
        assert hit.placement == HEAD_LABEL

    def test_inline_call_token(self):
        page = parse_html("<html><body><script>gtag('event', 'conversion');</script></body></html>")
        hit = detect_external_script(page, "Google Ads")
        assert hit.placement == INLINE_LABEL
        assert hit.fragment == "inline"
        assert hit.context == "gtag('event', 'conversion');..."

    def test_inline_preview_truncated(self):
        body = "fbq('track','Lead');" + "x" * 400
        hit = detect_external_script(parse_html(f"<script>{body}</script>"), "Facebook")
        assert hit.context == body[:200] + "..."

    def test_loader_preferred_over_inline(self):
        page = parse_html(
            "<html><head><script>fbq('init','1')</script></head>"
            f'<body><script src="{FB_LOADER}"></script></body></html>'
        )
        hit = detect_external_script(page, "Facebook")
        assert hit.fragment == FB_LOADER

    def test_unrelated_scripts(self):
        page = parse_html('<script src="https://cdn.example.com/app.js"></script><script>init()</script>')
        assert detect_external_script(page, "Facebook") is None

    def test_unknown_platform(self):
        page = parse_html(f'<script src="{FB_LOADER}"></script>')
        assert detect_external_script(page, "MySpace") is None

"""
Catalog-driven detection used when no literal snippet matched.

Vendor signatures recognise a platform's call pattern or host fragment
anywhere in the page. External-script detection looks for the platform's
loader URL on <script src> elements first, then for its call token inside
inline scripts.
"""
from typing import Optional

from core.models import MatchResult, Strategy
from detection.catalog import get_catalog
from detection.document import PageDocument

HEAD_LABEL = "Found in <head> section"
BODY_LABEL = "Found in <body> section"
UNCLEAR_LABEL = "Found in page but placement unclear"
INLINE_LABEL = "Found in inline script"

CONTEXT_BEFORE = 120
CONTEXT_AFTER = 240
INLINE_PREVIEW_CHARS = 200


# ── Vendor signature ──────────────────────────────────────────────────────────

def detect_vendor_signature(page: PageDocument, platform: str) -> Optional[MatchResult]:
    text = page.lower_html
    for pattern in get_catalog(platform).vendor_patterns:
        match = pattern.search(text)
        if not match:
            continue
        start = match.start()
        context = text[max(0, start - CONTEXT_BEFORE):min(len(text), start + CONTEXT_AFTER)]
        if pattern.search(page.head_html):
            placement = HEAD_LABEL
        elif pattern.search(page.body_html):
            placement = BODY_LABEL
        else:
            placement = UNCLEAR_LABEL
        return MatchResult(
            found=True,
            context=context,
            source_strategy=Strategy.vendor_signature,
            fragment=pattern.pattern,
            placement=placement,
        )
    return None


# ── External / inline script ──────────────────────────────────────────────────

def detect_external_script(page: PageDocument, platform: str) -> Optional[MatchResult]:
    catalog = get_catalog(platform)

    for src, element in page.external_scripts():
        if not any(pattern.search(src) for pattern in catalog.external_patterns):
            continue
        in_head = page.in_head(element) or src in page.head_html
        return MatchResult(
            found=True,
            context=f"External script detected: {src}",
            source_strategy=Strategy.external_script,
            fragment=src,
            placement=HEAD_LABEL if in_head else BODY_LABEL,
        )

    token = catalog.inline_call_token
    if token:
        for content in page.inline_scripts():
            if token in content:
                return MatchResult(
                    found=True,
                    context=content[:INLINE_PREVIEW_CHARS] + "...",
                    source_strategy=Strategy.external_script,
                    fragment="inline",
                    placement=INLINE_LABEL,
                )
    return None

"""
Pixel/account ID extraction and comparison.

Patterns run over the raw HTML so quoted literals and query-string IDs are
seen exactly as served. IDs are opaque tokens: comparison is exact and
case-sensitive.
"""
import re

from core.models import PixelIdOutcome
from detection.catalog import get_catalog

CONTEXT_CHARS = 100


def _context(html: str, start: int, end: int) -> str:
    return html[max(0, start - CONTEXT_CHARS):min(len(html), end + CONTEXT_CHARS)]


def validate_pixel_id(html: str, platform: str, expected_id: str) -> PixelIdOutcome:
    for pattern in get_catalog(platform).id_patterns:
        match = pattern.search(html)
        if not match:
            continue
        found_id = next((g for g in match.groups() if g), None)
        if found_id is None:
            continue
        is_match = found_id == expected_id
        return PixelIdOutcome(
            found=True,
            found_id=found_id,
            expected_id=expected_id,
            match=is_match,
            mismatch=not is_match,
            context=_context(html, match.start(), match.end()),
        )

    # Literal fallback for IDs embedded where the catalog does not look
    # (data attributes, comments). Any occurrence counts, related or not.
    if expected_id:
        match = re.search(f"[\"']?{re.escape(expected_id)}[\"']?", html)
        if match:
            return PixelIdOutcome(
                found=True,
                found_id=expected_id,
                expected_id=expected_id,
                match=True,
                mismatch=False,
                context=_context(html, match.start(), match.end()),
            )

    return PixelIdOutcome(found=False, expected_id=expected_id, match=False, mismatch=False)

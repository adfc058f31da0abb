"""
Snippet matcher: exact (strict-normalized) then fuzzy (loose-normalized)
containment of a user-supplied snippet in the page.
"""
from typing import Optional

from core.models import MatchResult, Strategy
from detection.document import PageDocument, canonical_fragment
from detection.normalizer import collapse_whitespace, normalize_loose, normalize_strict

NO_CONTEXT = "Code snippet found but could not extract context"
CONTEXT_CHARS = 100


def match_snippet(html: str, snippet: Optional[str]) -> MatchResult:
    """An absent or blank snippet is never found."""
    normalized_snippet = normalize_strict(snippet or "")
    if not normalized_snippet:
        return MatchResult(found=False)

    if normalized_snippet in normalize_strict(html):
        return MatchResult(found=True, source_strategy=Strategy.exact, fragment=normalized_snippet)

    loose_snippet = normalize_loose(snippet)
    if loose_snippet and loose_snippet in normalize_loose(html):
        return MatchResult(found=True, source_strategy=Strategy.fuzzy, fragment=loose_snippet)

    return MatchResult(found=False)


def _window(text: str, normalized_snippet: str) -> Optional[str]:
    # Strict normalization maps quotes one-for-one, so an offset in the
    # normalized text is the same offset in the whitespace-collapsed text.
    collapsed = collapse_whitespace(text)
    index = normalize_strict(collapsed).find(normalized_snippet)
    if index < 0:
        return None
    start = max(0, index - CONTEXT_CHARS)
    end = min(len(collapsed), index + len(normalized_snippet) + CONTEXT_CHARS)
    return collapsed[start:end]


def extract_matched_code(page: PageDocument, snippet: Optional[str]) -> str:
    """
    Context around the snippet as it appears on the page, original quote
    characters intact so the code-quality scan can see smart quotes.
    Inline scripts are searched first, then the whole document, then the
    parser's serialization of it against the snippet serialized the same way.
    """
    normalized_snippet = normalize_strict(snippet or "")
    if not normalized_snippet:
        return NO_CONTEXT
    for content in page.inline_scripts():
        window = _window(content, normalized_snippet)
        if window is not None:
            return window
    window = _window(page.html, normalized_snippet)
    if window is None:
        window = _window(page.serialize(), normalize_strict(canonical_fragment(snippet)))
    return window if window is not None else NO_CONTEXT

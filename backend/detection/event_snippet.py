"""Validation of the secondary (event-level) snippet some platforms emit separately."""
from core.models import EventSnippetOutcome
from detection.catalog import get_catalog
from detection.normalizer import normalize_strict


def validate_event_snippet(html: str, event_snippet: str, platform: str) -> EventSnippetOutcome:
    normalized = normalize_strict(event_snippet)
    found = bool(normalized) and normalized in normalize_strict(html)

    fallback = get_catalog(platform).event_fallback_pattern
    if not found and fallback is not None:
        match = fallback.search(html)
        if match:
            return EventSnippetOutcome(
                found=True,
                found_event=match.group(0),
                expected_event=event_snippet,
                match=True,
            )

    return EventSnippetOutcome(
        found=found,
        found_event=normalized if found else None,
        expected_event=event_snippet,
        match=found,
    )

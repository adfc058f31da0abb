"""
Issue detection and troubleshooting text.

Snippet issues come from the code the user supplied; code issues come from
what was actually matched on the page. Both lists are merged and deduplicated
by value before reporting.
"""
import re
from typing import Iterable, Optional

from core.models import Placement
from detection.catalog import get_catalog
from detection.normalizer import decode_basic_entities
from detection.placement import SectionPlacement

NO_ISSUES = "No specific issues detected"

_DOUBLED_QUOTES_RE = re.compile(r'"{2,}')
_SMART_QUOTES_RE = re.compile(r"[“”‘’]")


def check_snippet_issues(snippet: str, platform: str, event_name: Optional[str] = None) -> list[str]:
    issues = []
    if '""' in snippet:
        issues.append("Double quotes detected - should be single quotes or proper escaped quotes")
    if "&quot;" in snippet:
        issues.append("HTML entities detected - should use proper quotes")
    for token in get_catalog(platform).required_tokens:
        if token not in snippet:
            issues.append(f"{platform} pixel should contain {token} function")
    if event_name and event_name.lower() not in snippet.lower():
        issues.append(f'Event name "{event_name}" not found in pixel snippet')
    return issues


def check_code_issues(code: str, event_name: Optional[str] = None) -> list[str]:
    issues = []
    if _DOUBLED_QUOTES_RE.search(code):
        issues.append('Page code contains doubled quotes ("") which can break pixels')
    if _SMART_QUOTES_RE.search(code):
        issues.append("Smart quotes detected (e.g., “ ” ‘ ’), replace with straight quotes")
    if event_name and event_name.lower() not in code.lower():
        issues.append(f'Event name "{event_name}" not found in detected code')
    return issues


def event_name_present(html: str, event_name: str) -> bool:
    lower_html = html.lower()
    lower_event = event_name.lower()
    return lower_event in lower_html or lower_event in decode_basic_entities(lower_html)


def drop_event_name_issues(issues: list[str]) -> list[str]:
    return [i for i in issues if "event name" not in i.lower()]


def dedupe(issues: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(issues))


def _placement_advice(
    expected: Placement,
    detected_placement: str,
    trigger_contains: Optional[str],
) -> Optional[str]:
    if expected == Placement.url_trigger:
        rule = (trigger_contains or "").strip()
        return (
            f'The page URL does not contain "{rule}" - update the trigger rule '
            "or check the pixel on a URL the trigger fires on"
        )
    if expected == Placement.head:
        if detected_placement == SectionPlacement.body.value:
            return "Move the pixel code from the <body> section to the <head> section"
        if detected_placement == SectionPlacement.unclear.value:
            return "Place the pixel code inside the <head> section"
    if expected == Placement.body:
        if detected_placement == SectionPlacement.head.value:
            return "Move the pixel code from the <head> section to the <body> section"
        if detected_placement == SectionPlacement.unclear.value:
            return "Place the pixel code inside the <body> section"
    return None


def build_troubleshooting(
    is_correct_placement: bool,
    expected: Placement,
    detected_placement: str,
    issues: list[str],
    platform: str,
    trigger_contains: Optional[str] = None,
) -> str:
    advice = []

    if not is_correct_placement:
        line = _placement_advice(expected, detected_placement, trigger_contains)
        if line:
            advice.append(line)

    if issues:
        advice.append("Fix the following issues:")
        advice.extend(f"• {issue}" for issue in issues)

    advice.extend(get_catalog(platform).placement_notes)

    return "\n".join(advice) if advice else NO_ISSUES

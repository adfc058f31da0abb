"""
Placement classification: which document section holds the pixel, whether
that satisfies the expected placement, and URL-trigger rule evaluation.
"""
from enum import Enum
from typing import Iterable, Optional

from core.models import Placement


class SectionPlacement(str, Enum):
    head = "Found in <head> section"
    body = "Found in <body> section"
    both = "Found in both <head> and <body> sections"
    unclear = "Found in page but placement unclear"


def classify_section(head: str, body: str, fragments: Iterable[str]) -> SectionPlacement:
    """
    head/body and fragments must be normalized the same way. A section holds
    the tag if any candidate fragment occurs in it.
    """
    candidates = [f for f in fragments if f]
    in_head = any(f in head for f in candidates)
    in_body = any(f in body for f in candidates)
    if in_head and in_body:
        return SectionPlacement.both
    if in_head:
        return SectionPlacement.head
    if in_body:
        return SectionPlacement.body
    return SectionPlacement.unclear


def is_correct_placement(expected: Placement, section: SectionPlacement) -> bool:
    if expected == Placement.unspecified:
        return True
    if section == SectionPlacement.both:
        return expected in (Placement.head, Placement.body)
    if expected == Placement.head:
        return section == SectionPlacement.head
    if expected == Placement.body:
        return section == SectionPlacement.body
    return False


def evaluate_trigger(url: str, trigger_contains: Optional[str]) -> tuple[bool, str]:
    """Case-sensitive literal substring test of the page URL."""
    rule = (trigger_contains or "").strip()
    matches = bool(rule) and rule in url
    if matches:
        return True, f'URL matches rule: contains "{rule}"'
    return False, f'URL does not match rule: contains "{rule}"'

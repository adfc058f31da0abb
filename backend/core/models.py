from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from pydantic.alias_generators import to_camel
from typing import Optional
from enum import Enum


# ── Enums ─────────────────────────────────────────────────────────────────────

class Placement(str, Enum):
    head = "Head"
    body = "Body"
    url_trigger = "Trigger: Page URL contains"
    unspecified = "No specific placement"


class PlacementMethod(str, Enum):
    direct_html = "HTML Placement"
    tag_manager = "GTM Placement"


class Strategy(str, Enum):
    exact = "exact"
    fuzzy = "fuzzy"
    vendor_signature = "vendor_signature"
    external_script = "external_script"
    pixel_id_search = "pixel_id_search"


class VerdictStatus(str, Enum):
    passed = "pass"
    failed = "fail"
    error = "error"


# ── Request ───────────────────────────────────────────────────────────────────

class DetectionRequest(BaseModel):
    """
    One pixel check. Accepts snake_case or camelCase keys (the form posts
    camelCase). Frozen once validated.
    """
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    url: str
    platform: str
    placement: Placement
    placement_method: PlacementMethod = PlacementMethod.direct_html
    snippet: Optional[str] = None
    event_name: Optional[str] = None
    trigger_contains: Optional[str] = None
    pixel_id: str
    event_snippet: Optional[str] = None

    @field_validator("url")
    @classmethod
    def url_is_http(cls, v):
        v = v.strip()
        if not v.lower().startswith(("http://", "https://")):
            raise ValueError("URL must start with http:// or https://")
        return v

    @model_validator(mode="after")
    def trigger_requires_substring(self):
        if self.placement == Placement.url_trigger and not (self.trigger_contains or "").strip():
            raise ValueError("triggerContains is required when placement is a URL trigger")
        return self


# ── Detection results ─────────────────────────────────────────────────────────

# Outcomes go back to the form in camelCase, the way the request arrives.
_WIRE_CONFIG = ConfigDict(populate_by_name=True, alias_generator=to_camel)


class MatchResult(BaseModel):
    found: bool
    context: str = ""
    source_strategy: Optional[Strategy] = None
    fragment: Optional[str] = None   # pattern source, script URL or "inline"
    placement: Optional[str] = None  # placement label guessed by the strategy


class PixelIdOutcome(BaseModel):
    model_config = _WIRE_CONFIG

    found: bool
    found_id: Optional[str] = None
    expected_id: str
    match: bool
    mismatch: bool
    context: Optional[str] = None


class EventSnippetOutcome(BaseModel):
    model_config = _WIRE_CONFIG

    found: bool
    found_event: Optional[str] = None
    expected_event: str
    match: bool


class Verdict(BaseModel):
    model_config = _WIRE_CONFIG

    status: VerdictStatus
    summary: str
    detected_placement: str = ""
    matched_code: Optional[str] = None
    troubleshooting: str = ""
    issues: list[str] = []
    pixel_id_result: Optional[PixelIdOutcome] = None
    event_snippet_result: Optional[EventSnippetOutcome] = None
    method: Optional[str] = None     # static | browser | browser-fallback
    strategy: Optional[Strategy] = None
    message: Optional[str] = None    # set on error verdicts


# ── Fetch ─────────────────────────────────────────────────────────────────────

class FetchResult(BaseModel):
    url: str
    ok: bool
    status_code: int
    reason: str = ""
    text: str = ""

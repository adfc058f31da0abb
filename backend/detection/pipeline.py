"""
Pixel check orchestrator.

Direct-HTML mode matches the user's snippet (exact, then fuzzy) and, if that
misses, falls back to vendor signatures and external scripts. A snippet hit
is classified by section, validated for ID and event snippet, and scanned for
issues. Tag-manager mode refetches the page with a browser header profile and
runs pixel ID, vendor signature and external script detection in that order.

Detection itself is synchronous and pure; only the fetches await. Every path
returns a Verdict: fetch failures and misses become fail/error verdicts, and
run_pixel_check converts unexpected exceptions into a generic error verdict.
"""
import logging
from typing import Optional

from core.models import (
    DetectionRequest,
    MatchResult,
    Placement,
    PlacementMethod,
    Strategy,
    Verdict,
    VerdictStatus,
)
from detection.catalog import get_catalog
from detection.document import PageDocument, canonical_fragment, parse_html
from detection.event_snippet import validate_event_snippet
from detection.fetcher import BROWSER_HEADERS, FetchError, Fetcher, HttpFetcher, minimal_headers
from detection.issues import (
    NO_ISSUES,
    build_troubleshooting,
    check_code_issues,
    check_snippet_issues,
    dedupe,
    drop_event_name_issues,
    event_name_present,
)
from detection.normalizer import normalize_loose, normalize_strict
from detection.pixel_id import validate_pixel_id
from detection.placement import classify_section, evaluate_trigger, is_correct_placement
from detection.signatures import detect_external_script, detect_vendor_signature
from detection.snippet import extract_matched_code, match_snippet

logger = logging.getLogger(__name__)

NOT_FOUND = "Not found"
GTM_PLACEMENT = "Found via GTM/browser detection"
GENERIC_ERROR = "An error occurred while checking the pixel"

_SNIPPET_NOT_FOUND_HELP = (
    "The provided pixel snippet was not found anywhere on the page. "
    "Please verify the snippet is correct and has been properly implemented."
)
_BROWSER_NOT_FOUND_HELP = (
    "The pixel was not found using browser automation. "
    "Please verify the GTM implementation is correct and the pixel is firing."
)
_FALLBACK_SUMMARIES = {
    Strategy.vendor_signature: "Pixel detected by vendor signature (fuzzy match)",
    Strategy.external_script: "Pixel detected via external script loading",
}


# ── Shared helpers ────────────────────────────────────────────────────────────

def _error_verdict(message: str) -> Verdict:
    return Verdict(status=VerdictStatus.error, summary=message, message=message)


def _snippet_not_found() -> Verdict:
    return Verdict(
        status=VerdictStatus.failed,
        summary="Pixel snippet not found on the page",
        detected_placement=NOT_FOUND,
        troubleshooting=_SNIPPET_NOT_FOUND_HELP,
        method="static",
    )


def _summary(passed: bool, issues: list[str], pass_summary: str) -> str:
    if passed:
        return pass_summary
    if issues:
        return f"Pixel found but issues detected: {issues[0]}"
    return "Pixel placement or configuration needs attention"


def _id_and_event_checks(html: str, request: DetectionRequest):
    """Pixel ID and event snippet outcomes plus the issues they raise."""
    issues = []
    pixel_id_result = None
    if request.pixel_id:
        pixel_id_result = validate_pixel_id(html, request.platform, request.pixel_id)
        if pixel_id_result.mismatch:
            issues.append(
                f"Pixel ID mismatch: Expected {request.pixel_id}, found {pixel_id_result.found_id}"
            )

    event_snippet_result = None
    if request.event_snippet and request.event_snippet.strip():
        event_snippet_result = validate_event_snippet(html, request.event_snippet, request.platform)
        if not event_snippet_result.found:
            issues.append("Event snippet not found on the page")

    return pixel_id_result, event_snippet_result, issues


def _log_diagnostics(page: PageDocument, request: DetectionRequest, log: logging.Logger) -> None:
    if not log.isEnabledFor(logging.DEBUG):
        return
    catalog = get_catalog(request.platform)
    if catalog.is_empty:
        log.debug("No detection catalog for platform %r", request.platform)
        return
    log.debug(
        "%s diagnostics for %s: html=%d chars, vendor=%s, loader_scripts=%s, "
        "inline_token=%s, pixel_id_in_page=%s",
        request.platform,
        request.url,
        len(page.html),
        [p.pattern for p in catalog.vendor_patterns if p.search(page.lower_html)],
        [src for src, _ in page.external_scripts()
         if any(p.search(src) for p in catalog.external_patterns)],
        bool(catalog.inline_call_token) and catalog.inline_call_token in page.html,
        bool(request.pixel_id) and request.pixel_id.lower() in page.lower_html,
    )


# ── Direct HTML placement ─────────────────────────────────────────────────────

def _fallback_verdict(page: PageDocument, request: DetectionRequest, hit: MatchResult) -> Verdict:
    # Signature evidence passes; ID and event snippet problems are advice only.
    pixel_id_result, event_snippet_result, notes = _id_and_event_checks(page.html, request)
    notes = dedupe(notes)
    return Verdict(
        status=VerdictStatus.passed,
        summary=_FALLBACK_SUMMARIES[hit.source_strategy],
        detected_placement=hit.placement or "",
        matched_code=hit.context,
        troubleshooting="\n".join(notes) if notes else NO_ISSUES,
        issues=[],
        pixel_id_result=pixel_id_result,
        event_snippet_result=event_snippet_result,
        method="static",
        strategy=hit.source_strategy,
    )


def check_pixel_placement(
    page: PageDocument,
    request: DetectionRequest,
    log: Optional[logging.Logger] = None,
) -> Verdict:
    """Direct-HTML verdict for an already fetched page."""
    log = log or logger
    _log_diagnostics(page, request, log)

    hit = match_snippet(page.html, request.snippet)
    log.debug("Snippet match for %s: %s", request.url, hit.source_strategy or "none")

    if not hit.found:
        # A URL trigger is only meaningful for code that is on the page.
        if request.placement == Placement.url_trigger:
            return _snippet_not_found()
        fallback = (
            detect_vendor_signature(page, request.platform)
            or detect_external_script(page, request.platform)
        )
        if fallback is None:
            log.info("No %s pixel evidence found on %s", request.platform, request.url)
            return _snippet_not_found()
        log.info("%s pixel found on %s via %s", request.platform, request.url,
                 fallback.source_strategy.value)
        return _fallback_verdict(page, request, fallback)

    snippet = request.snippet
    if hit.source_strategy == Strategy.exact:
        normalize = normalize_strict
    else:
        normalize = normalize_loose
    section = classify_section(
        normalize(page.head_html),
        normalize(page.body_html),
        [normalize(snippet), normalize(canonical_fragment(snippet))],
    )
    detected_placement = section.value
    is_correct = is_correct_placement(request.placement, section)

    if request.placement == Placement.url_trigger:
        is_correct, detected_placement = evaluate_trigger(request.url, request.trigger_contains)

    matched_code = extract_matched_code(page, snippet)

    issues = dedupe(
        check_snippet_issues(normalize_strict(snippet), request.platform, request.event_name)
        + check_code_issues(matched_code, request.event_name)
    )
    # Presence anywhere on the page outweighs absence from the matched window.
    if request.event_name and event_name_present(page.html, request.event_name):
        issues = drop_event_name_issues(issues)

    pixel_id_result, event_snippet_result, extra_issues = _id_and_event_checks(page.html, request)
    issues = dedupe(issues + extra_issues)

    passed = is_correct and not issues
    return Verdict(
        status=VerdictStatus.passed if passed else VerdictStatus.failed,
        summary=_summary(passed, issues, "Pixel is correctly placed and configured"),
        detected_placement=detected_placement,
        matched_code=matched_code,
        troubleshooting=build_troubleshooting(
            is_correct,
            request.placement,
            detected_placement,
            issues,
            request.platform,
            request.trigger_contains,
        ),
        issues=issues,
        pixel_id_result=pixel_id_result,
        event_snippet_result=event_snippet_result,
        method="static",
        strategy=hit.source_strategy,
    )


# ── Tag-manager placement ─────────────────────────────────────────────────────

def detect_in_fetched_html(
    html: str,
    request: DetectionRequest,
    method: str = "browser",
    log: Optional[logging.Logger] = None,
) -> Verdict:
    """Pixel ID, then vendor signature, then external script; first hit passes."""
    log = log or logger
    page = parse_html(html)
    _log_diagnostics(page, request, log)

    pixel_id_result = None
    if request.pixel_id:
        pixel_id_result = validate_pixel_id(html, request.platform, request.pixel_id)
        if pixel_id_result.found and pixel_id_result.match:
            return Verdict(
                status=VerdictStatus.passed,
                summary="Pixel detected via browser automation (GTM)",
                detected_placement=GTM_PLACEMENT,
                matched_code=pixel_id_result.context,
                troubleshooting=NO_ISSUES,
                pixel_id_result=pixel_id_result,
                method=method,
                strategy=Strategy.pixel_id_search,
            )

    vendor_hit = detect_vendor_signature(page, request.platform)
    if vendor_hit:
        return Verdict(
            status=VerdictStatus.passed,
            summary="Pixel detected via browser automation (vendor pattern)",
            detected_placement=GTM_PLACEMENT,
            matched_code=vendor_hit.context,
            troubleshooting=NO_ISSUES,
            pixel_id_result=pixel_id_result,
            method=method,
            strategy=Strategy.vendor_signature,
        )

    external_hit = detect_external_script(page, request.platform)
    if external_hit:
        return Verdict(
            status=VerdictStatus.passed,
            summary="Pixel detected via browser automation (external script)",
            detected_placement=external_hit.placement or GTM_PLACEMENT,
            matched_code=external_hit.context,
            troubleshooting=NO_ISSUES,
            pixel_id_result=pixel_id_result,
            method=method,
            strategy=Strategy.external_script,
        )

    log.info("No %s pixel evidence in %s fetch of %s", request.platform, method, request.url)
    return Verdict(
        status=VerdictStatus.failed,
        summary="Pixel not found via browser automation (GTM)",
        detected_placement=NOT_FOUND,
        troubleshooting=_BROWSER_NOT_FOUND_HELP,
        pixel_id_result=pixel_id_result,
        method=method,
    )


async def _fetch_html(fetcher: Fetcher, url: str, headers: dict[str, str]) -> str:
    result = await fetcher.fetch(url, headers)
    if not result.ok:
        raise FetchError.from_result(result)
    return result.text


async def check_with_browser(
    fetcher: Fetcher,
    request: DetectionRequest,
    log: Optional[logging.Logger] = None,
) -> Verdict:
    """Browser-profile fetch with one minimal-profile fallback, then detection."""
    log = log or logger
    try:
        html = await _fetch_html(fetcher, request.url, BROWSER_HEADERS)
        method = "browser"
    except FetchError as exc:
        log.warning("Browser-profile fetch of %s failed, retrying with minimal headers: %s",
                    request.url, exc)
        try:
            html = await _fetch_html(fetcher, request.url, minimal_headers())
            method = "browser-fallback"
        except FetchError as fallback_exc:
            details = f"Enhanced fetch failed: {exc}. Fallback also failed: {fallback_exc}"
            log.error("Both fetches of %s failed: %s", request.url, details)
            return Verdict(
                status=VerdictStatus.failed,
                summary=f"Browser automation failed: {details}",
                detected_placement=NOT_FOUND,
                troubleshooting=f"Browser automation error: {details}",
                method="browser",
            )

    log.debug("Fetched %d chars of %s (%s)", len(html), request.url, method)
    return detect_in_fetched_html(html, request, method, log)


# ── Entry point ───────────────────────────────────────────────────────────────

async def run_pixel_check(
    request: DetectionRequest,
    fetcher: Optional[Fetcher] = None,
    log: Optional[logging.Logger] = None,
) -> Verdict:
    """Fetch the page and produce a verdict. Never raises."""
    log = log or logger
    fetcher = fetcher or HttpFetcher()
    try:
        try:
            result = await fetcher.fetch(request.url, minimal_headers())
        except FetchError as exc:
            log.warning("Fetch of %s failed: %s", request.url, exc)
            return _error_verdict(f"Failed to fetch website: {exc}")
        if not result.ok:
            log.warning("Fetch of %s returned %s", request.url, result.status_code)
            return _error_verdict(f"Failed to fetch website: {result.status_code} {result.reason}")

        if request.placement_method == PlacementMethod.direct_html:
            return check_pixel_placement(parse_html(result.text), request, log)
        return await check_with_browser(fetcher, request, log)
    except Exception:
        log.exception("Error checking %s pixel on %s", request.platform, request.url)
        return _error_verdict(GENERIC_ERROR)

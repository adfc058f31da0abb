"""
/api/check-pixel — Verify a pixel's presence, placement and configuration.
Also: list the platforms the detector has catalogs for.
"""
from fastapi import APIRouter, Depends

from core.models import DetectionRequest, Verdict
from detection.catalog import get_catalog, supported_platforms
from detection.fetcher import Fetcher, HttpFetcher
from detection.pipeline import run_pixel_check

router = APIRouter(prefix="/api", tags=["pixel"])


def get_fetcher() -> Fetcher:
    return HttpFetcher()


@router.post(
    "/check-pixel",
    response_model=Verdict,
    response_model_by_alias=True,
    response_model_exclude_none=True,
)
async def check_pixel(payload: DetectionRequest, fetcher: Fetcher = Depends(get_fetcher)):
    """
    Fetch the page and check the pixel. Always answers 200 with a verdict;
    fetch failures and unexpected errors come back as status "error".
    """
    return await run_pixel_check(payload, fetcher)


@router.get("/platforms")
async def list_platforms():
    platforms = []
    for name in supported_platforms():
        catalog = get_catalog(name)
        platforms.append({
            "platform": name,
            "vendorSignatures": len(catalog.vendor_patterns),
            "loaderScripts": len(catalog.external_patterns),
            "pixelIdPatterns": len(catalog.id_patterns),
            "eventSnippetFallback": catalog.event_fallback_pattern is not None,
        })
    return platforms

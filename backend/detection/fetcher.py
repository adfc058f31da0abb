"""
Page fetching over httpx.

Two header profiles: a minimal one identifying the tool, and a full desktop
Chrome profile used in tag-manager mode to get the page a normal visitor gets.
"""
import logging
from typing import Optional, Protocol

import httpx

from core.config import get_settings
from core.models import FetchResult

logger = logging.getLogger(__name__)

BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": (
        "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,"
        "image/apng,*/*;q=0.8,application/signed-exchange;v=b3;q=0.7"
    ),
    "Accept-Language": "en-US,en;q=0.9",
    "Accept-Encoding": "gzip, deflate",
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
    "Sec-Ch-Ua": '"Not_A Brand";v="8", "Chromium";v="120", "Google Chrome";v="120"',
    "Sec-Ch-Ua-Mobile": "?0",
    "Sec-Ch-Ua-Platform": '"macOS"',
    "Sec-Fetch-Dest": "document",
    "Sec-Fetch-Mode": "navigate",
    "Sec-Fetch-Site": "none",
    "Sec-Fetch-User": "?1",
    "Upgrade-Insecure-Requests": "1",
}


def minimal_headers() -> dict[str, str]:
    return {"User-Agent": get_settings().user_agent}


class FetchError(Exception):
    """A page could not be fetched (transport failure or non-2xx status)."""

    def __init__(self, message: str, status_code: Optional[int] = None, reason: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason

    @classmethod
    def from_result(cls, result: FetchResult, prefix: str = "Failed to fetch") -> "FetchError":
        return cls(
            f"{prefix}: {result.status_code} {result.reason}".rstrip(),
            status_code=result.status_code,
            reason=result.reason,
        )


class Fetcher(Protocol):
    async def fetch(self, url: str, headers: dict[str, str]) -> FetchResult: ...


class HttpFetcher:
    """
    GET a page with the given headers. Returns the response whatever its
    status; raises FetchError only when no response arrived.
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        follow_redirects: Optional[bool] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self.timeout = settings.fetch_timeout if timeout is None else timeout
        self.follow_redirects = (
            settings.follow_redirects if follow_redirects is None else follow_redirects
        )
        self.transport = transport

    async def fetch(self, url: str, headers: dict[str, str]) -> FetchResult:
        try:
            async with httpx.AsyncClient(
                follow_redirects=self.follow_redirects,
                timeout=self.timeout,
                headers=headers,
                transport=self.transport,
            ) as client:
                resp = await client.get(url)
        except httpx.TimeoutException as exc:
            raise FetchError(f"Timed out fetching {url}") from exc
        except httpx.HTTPError as exc:
            raise FetchError(str(exc) or exc.__class__.__name__) from exc

        logger.debug("Fetched %s: %s (%d chars)", url, resp.status_code, len(resp.text))
        return FetchResult(
            url=str(resp.url),
            ok=resp.is_success,
            status_code=resp.status_code,
            reason=resp.reason_phrase,
            text=resp.text,
        )

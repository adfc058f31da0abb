"""Shared fixtures for pixel checker tests."""

import pytest

from core.models import DetectionRequest, FetchResult, Placement, PlacementMethod
from detection.fetcher import FetchError


FACEBOOK_HEAD_PAGE = """<!DOCTYPE html>
<html>
<head>
  <title>Shop</title>
  <script>fbq('init','123')</script>
</head>
<body>
  <h1>Welcome</h1>
</body>
</html>"""

TIKTOK_BODY_PAGE = """<html>
<head><title>Landing</title></head>
<body>
  <p>Hello</p>
  <script>ttq.load('ABC')</script>
</body>
</html>"""

EMPTY_PAGE = "<html><head><title>Nothing</title></head><body><p>No pixels here</p></body></html>"


class FakeFetcher:
    """
    Replays scripted responses in call order. Each entry is either a
    FetchResult, an HTML string (served as 200 OK) or an exception to raise.
    """

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    async def fetch(self, url, headers):
        self.calls.append((url, dict(headers)))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        if isinstance(response, str):
            return FetchResult(url=url, ok=True, status_code=200, reason="OK", text=response)
        return response


def make_request(**overrides) -> DetectionRequest:
    values = {
        "url": "https://shop.example.com/checkout/thank-you",
        "platform": "Facebook",
        "placement": Placement.head,
        "placement_method": PlacementMethod.direct_html,
        "pixel_id": "123",
    }
    values.update(overrides)
    return DetectionRequest(**values)


@pytest.fixture
def facebook_head_page():
    return FACEBOOK_HEAD_PAGE


@pytest.fixture
def tiktok_body_page():
    return TIKTOK_BODY_PAGE


@pytest.fixture
def empty_page():
    return EMPTY_PAGE


@pytest.fixture
def fetch_error():
    return FetchError("Failed to fetch: 503 Service Unavailable", status_code=503,
                      reason="Service Unavailable")

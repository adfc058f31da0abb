"""
Per-platform detection catalogs.

Each platform is a data record; every detector looks its platform up here and
runs the same algorithm. Unknown platforms get an empty record, which makes
every catalog-driven check report "not found" instead of raising.
"""
import re
from dataclasses import dataclass
from typing import Optional


def _rx(*patterns: str) -> tuple[re.Pattern, ...]:
    return tuple(re.compile(p, re.IGNORECASE) for p in patterns)


@dataclass(frozen=True)
class PlatformCatalog:
    name: str = ""
    vendor_patterns: tuple[re.Pattern, ...] = ()     # call signature / host fragment
    external_patterns: tuple[re.Pattern, ...] = ()   # loader script URLs
    id_patterns: tuple[re.Pattern, ...] = ()         # capture the account/pixel ID
    inline_call_token: Optional[str] = None          # last-resort inline script signal
    required_tokens: tuple[str, ...] = ()            # must appear in a supplied snippet
    event_fallback_pattern: Optional[re.Pattern] = None
    placement_notes: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.vendor_patterns or self.external_patterns or self.id_patterns)


# ── Catalog table ─────────────────────────────────────────────────────────────

CATALOGS: dict[str, PlatformCatalog] = {
    "Facebook": PlatformCatalog(
        name="Facebook",
        vendor_patterns=_rx(r"fbq\s*\(", r"facebook.*pixel"),
        external_patterns=_rx(r"connect\.facebook\.net.*fbevents", r"facebook\.com.*tr\?id"),
        id_patterns=_rx(
            r"""fbq\s*\(\s*['"]init['"]\s*,\s*['"]([^'"]+)['"]""",
            r"facebook\.com/tr\?id=([^&\"']+)",
        ),
        inline_call_token="fbq(",
        required_tokens=("fbq",),
        placement_notes=(
            "Ensure the pixel is placed before the closing </head> tag for optimal performance",
        ),
    ),
    "Google Ads": PlatformCatalog(
        name="Google Ads",
        vendor_patterns=_rx(r"gtag\s*\(", r"google-?ads|googletagmanager"),
        external_patterns=_rx(r"googletagmanager\.com", r"google-analytics\.com"),
        id_patterns=_rx(
            r"""gtag\s*\(\s*['"]config['"]\s*,\s*['"]([^'"]+)['"]""",
            r"""gtag\s*\(\s*['"]js['"]\s*,\s*new\s+Date\(\)\s*\)\s*;\s*gtag\s*\(\s*['"]config['"]\s*,\s*['"]([^'"]+)['"]""",
            r"googletagmanager\.com/gtag/js\?id=([^&\"']+)",
        ),
        inline_call_token="gtag(",
        required_tokens=("gtag",),
        placement_notes=("Google Ads pixels work best when placed in the <head> section",),
    ),
    "TikTok": PlatformCatalog(
        name="TikTok",
        vendor_patterns=_rx(r"ttq\s*\.", r"tiktok-?analytics"),
        external_patterns=_rx(r"tiktok\.com.*analytics", r"analytics\.tiktok\.com"),
        id_patterns=_rx(
            r"""ttq\s*\.\s*load\s*\(\s*['"]([^'"]+)['"]""",
            r"""ttq\s*\.\s*init\s*\(\s*['"]([^'"]+)['"]""",
        ),
        inline_call_token="ttq.",
        required_tokens=("ttq",),
    ),
    "Pinterest": PlatformCatalog(
        name="Pinterest",
        vendor_patterns=_rx(r"pintrk\s*\(", r"ct\.pinimg\.com|pinterest"),
        external_patterns=_rx(r"pinterest\.com.*pt\.js", r"s\.pinimg\.com/ct/core\.js"),
        id_patterns=_rx(r"""pintrk\s*\(\s*['"]load['"]\s*,\s*['"]([^'"]+)['"]"""),
        inline_call_token="pintrk(",
    ),
    "LinkedIn": PlatformCatalog(
        name="LinkedIn",
        vendor_patterns=_rx(
            r"lintrk\s*\(",
            r"snap\.licdn\.com",
            r"_linkedin_partner_id",
            r"linkedin_data_partner_ids",
        ),
        external_patterns=_rx(r"snap\.licdn\.com", r"px\.ads\.linkedin\.com"),
        id_patterns=_rx(
            r"""lintrk\s*\(\s*['"]page['"]\s*,\s*['"]([^'"]+)['"]""",
            r"""_linkedin_partner_id\s*=\s*["']([^"']+)["']""",
            r"px\.ads\.linkedin\.com.*pid=([^&\"']+)",
            r"""linkedin_partner_id\s*=\s*["']([^"']+)["']""",
        ),
        inline_call_token="lintrk(",
    ),
    "Snapchat": PlatformCatalog(
        name="Snapchat",
        vendor_patterns=_rx(r"snaptr\s*\(", r"sc-static\.net"),
        external_patterns=_rx(r"sc-static\.net"),
        id_patterns=_rx(r"""snaptr\s*\(\s*['"]init['"]\s*,\s*['"]([^'"]+)['"]"""),
        inline_call_token="snaptr(",
    ),
    "Reddit": PlatformCatalog(
        name="Reddit",
        vendor_patterns=_rx(r"rdt\s*\(", r"www\.redditstatic\.com"),
        external_patterns=_rx(r"redditstatic\.com/ads/pixel\.js"),
        id_patterns=_rx(r"""rdt\s*\(\s*['"]init['"]\s*,\s*['"]([^'"]+)['"]"""),
        inline_call_token="rdt(",
    ),
    "Amazon": PlatformCatalog(
        name="Amazon",
        vendor_patterns=_rx(r"amzn-?pixels?", r"aax\.amazon-adsystem\.com"),
        external_patterns=_rx(r"amazon-adsystem\.com", r"aax\.amazon-adsystem\.com"),
        id_patterns=_rx(
            r"""amzn\s*\(\s*['"]addTag['"]\s*,\s*['"]([^'"]+)['"]""",
            r"""amzn\s*\(\s*['"]setRegion['"]\s*,\s*['"]([^'"]+)['"]""",
            r"""amzn\s*\(\s*['"]trackEvent['"]\s*,\s*['"]([^'"]+)['"]""",
            r"amazon-adsystem\.com.*id=([^&\"']+)",
            r"aax\.amazon-adsystem\.com.*id=([^&\"']+)",
        ),
        inline_call_token="amzn(",
    ),
    "Xandr": PlatformCatalog(
        name="Xandr",
        vendor_patterns=_rx(r"pixie\s*\(", r"acdn\.adnxs\.com.*pixie", r"adnxs\.com"),
        external_patterns=_rx(r"acdn\.adnxs\.com.*pixie", r"adnxs\.com"),
        id_patterns=_rx(
            r"""pixie\s*\(\s*['"]init['"]\s*,\s*['"]([^'"]+)['"]""",
            r"""pixie\s*\(\s*['"]event['"]\s*,\s*['"]([^'"]+)['"]""",
            r"adnxs\.com.*id=([^&\"']+)",
            r"acdn\.adnxs\.com.*id=([^&\"']+)",
        ),
        inline_call_token="pixie(",
        event_fallback_pattern=re.compile(
            r"""pixie\s*\(\s*['"]event['"]\s*,\s*['"]([^'"]+)['"]""", re.IGNORECASE
        ),
    ),
    "GroundTruth": PlatformCatalog(
        name="GroundTruth",
        vendor_patterns=_rx(r"groundtruth"),
    ),
    "Nextdoor": PlatformCatalog(
        name="Nextdoor",
        vendor_patterns=_rx(r"nextdoor"),
        external_patterns=_rx(r"ads\.nextdoor\.com/public/pixel"),
        id_patterns=_rx(r"""ndp\s*\(\s*['"]init['"]\s*,\s*['"]([^'"]+)['"]"""),
        inline_call_token="ndp(",
    ),
}

EMPTY_CATALOG = PlatformCatalog()


def get_catalog(platform: str) -> PlatformCatalog:
    return CATALOGS.get(platform, EMPTY_CATALOG)


def supported_platforms() -> list[str]:
    return list(CATALOGS)

"""
Data Ingestion - Link Normalization.

The normalized link is the identity of an article: it keys per-run dedup and
the sentiment cache. Tracking parameters (utm_*, any case) and the fragment
are removed; every other query segment is kept verbatim and in order.
Anything that is not an absolute URL passes through unchanged.
"""

from typing import Optional
from urllib.parse import unquote_plus, urlsplit, urlunsplit


TRACKING_PREFIX = "utm_"


def _is_tracking(segment: str) -> bool:
    key = unquote_plus(segment.split("=", 1)[0])
    return key.lower().startswith(TRACKING_PREFIX)


def normalize_link(url: Optional[str]) -> str:
    """Strip utm_* query params and the fragment from an absolute URL."""
    if not url:
        return ""
    try:
        parts = urlsplit(url)
    except ValueError:
        return url
    if not parts.scheme or not parts.netloc:
        return url

    kept = [seg for seg in parts.query.split("&") if seg and not _is_tracking(seg)]
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "&".join(kept), ""))


def link_hostname(url: str) -> Optional[str]:
    """Hostname of an absolute URL without a leading 'www.'; None if invalid."""
    try:
        hostname = urlsplit(url).hostname
    except ValueError:
        return None
    if not hostname:
        return None
    return hostname[4:] if hostname.startswith("www.") else hostname

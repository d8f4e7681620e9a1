from urllib.parse import urlsplit

import httpx

from cors_proxy.errors import InvalidURLError, DESTINATION


def extract_proxied_url(path: str, query: str = "") -> str:
    """
    Extract the proxied URL from the inbound path and query string.

    ``/https://example.com/page`` with query ``x=1`` yields
    ``https://example.com/page?x=1``. A bare ``/`` yields an empty string.
    """
    if query:
        path = f"{path}?{query}"
    return path[1:]


def validate_url(raw: str, kind: str = DESTINATION) -> httpx.URL:
    """Parse an absolute URL, raising InvalidURLError when scheme or host is missing."""
    try:
        parts = urlsplit(raw)
        if not parts.scheme or not parts.netloc:
            raise InvalidURLError(kind, raw)
        url = httpx.URL(raw)
    except (ValueError, httpx.InvalidURL):
        raise InvalidURLError(kind, raw)

    if not url.host:
        raise InvalidURLError(kind, raw)
    return url


def url_hostname(url: httpx.URL) -> str:
    """Hostname in its ASCII form, with internationalized names in punycode."""
    return url.raw_host.decode("ascii")

from typing import Mapping

import httpx
from fastapi.responses import Response
from starlette.datastructures import MutableHeaders

# Hop-by-hop headers that should NOT be relayed (RFC 7230 section 6.1)
HOP_BY_HOP_HEADERS = {
    "connection",
    "keep-alive",
    "proxy-authenticate",
    "proxy-authorization",
    "te",
    "trailers",
    "transfer-encoding",
    "upgrade",
}

# httpx hands back the decoded body, so the upstream framing no longer applies
BODY_FRAMING_HEADERS = {"content-encoding", "content-length"}

MAX_AGE_OVERRIDE_HEADER = "Access-Control-Max-Age-Override"


def clone_headers(headers: httpx.Headers) -> MutableHeaders:
    """
    Copy upstream headers into a new collection that is safe to mutate.

    Values are copied as raw bytes, so non-ASCII header values pass through
    untouched. Repeated headers such as Set-Cookie keep every value.
    Hop-by-hop and body framing headers are left out of the copy.
    """
    raw = []
    for name, value in headers.raw:
        name = name.lower()
        name_str = name.decode("latin-1")
        if name_str in HOP_BY_HOP_HEADERS or name_str in BODY_FRAMING_HEADERS:
            continue
        raw.append((name, value))
    return MutableHeaders(raw=raw)


def apply_cors_headers(
    method: str, request_headers: Mapping[str, str], headers: MutableHeaders
) -> MutableHeaders:
    """Add the CORS headers that let a browser read the proxied response."""
    headers["Access-Control-Allow-Origin"] = "*"

    max_age_override = request_headers.get(MAX_AGE_OVERRIDE_HEADER)
    if method.upper() == "OPTIONS" and max_age_override:
        headers["Access-Control-Max-Age"] = max_age_override

    request_methods = request_headers.get(
        "Access-Control-Request-Methods"
    ) or request_headers.get("Access-Control-Request-Method")
    if request_methods:
        headers["Access-Control-Allow-Methods"] = request_methods

    request_header_names = request_headers.get("Access-Control-Request-Headers")
    if request_header_names:
        headers["Access-Control-Allow-Headers"] = request_header_names

    headers["Access-Control-Expose-Headers"] = "*"
    return headers


def rewrite_response(
    upstream: httpx.Response, method: str, request_headers: Mapping[str, str]
) -> Response:
    """Rebuild the upstream response with its status and body and CORS-enabled headers."""
    headers = apply_cors_headers(
        method, request_headers, clone_headers(upstream.headers)
    )

    response = Response(content=upstream.content, status_code=upstream.status_code)
    response.raw_headers.extend(headers.raw)
    return response

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse, Response
from opentelemetry import trace

from cors_proxy.proxy.access_control import (
    require_origin_header,
    verify_destination,
    verify_origin,
)
from cors_proxy.proxy.cors_headers import rewrite_response
from cors_proxy.proxy.fetcher import fetch_destination
from cors_proxy.proxy.url import extract_proxied_url, url_hostname, validate_url
from cors_proxy.settings import ProxySettings
from cors_proxy.utils.traced_requests import traced_request
from cors_proxy.vars import SERVICE_NAME

router = APIRouter()
tracer = trace.get_tracer(__name__)
logger = logging.getLogger("uvicorn.error")

PROXY_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS"]


def get_settings(request: Request) -> ProxySettings:
    return request.app.state.settings


def get_request_path(request: Request) -> str:
    """Return the inbound path, still percent-encoded when the server provides it."""
    raw_path = request.scope.get("raw_path")
    if raw_path:
        return raw_path.split(b"?", 1)[0].decode("latin-1")
    return request.url.path


def get_request_origin(request: Request):
    return request.headers.get("origin") or request.headers.get("x-requested-with")


async def handle_request(request: Request, settings: ProxySettings) -> Response:
    """
    Proxy one inbound request to the URL embedded in its path.

    Raises ProxyError subclasses for rejected requests and upstream failures;
    the application turns those into plain-text responses.
    """
    raw_destination = extract_proxied_url(
        get_request_path(request), str(request.url.query)
    )
    if not raw_destination:
        return PlainTextResponse(f"{SERVICE_NAME} is up and running 👍")

    raw_origin = get_request_origin(request)
    require_origin_header(raw_origin, settings.require_origin)

    destination = validate_url(raw_destination)
    verify_destination(destination, settings.destination_filter)
    origin = verify_origin(raw_origin, settings.origin_filter)

    with traced_request(
        tracer,
        "proxy.request",
        f"Proxying {request.method} -> {destination}",
        extra_attrs={
            "proxy.method": request.method,
            "proxy.destination": str(destination),
            "proxy.origin": url_hostname(origin) if origin else None,
        },
    ) as span:
        upstream = await fetch_destination(
            destination,
            timeout=settings.timeout,
            follow_redirects=settings.follow_redirects,
        )
        span.set_attribute("proxy.status_code", upstream.status_code)
        return rewrite_response(upstream, request.method, request.headers)


# Register catch-all route for proxying
@router.api_route("/{path:path}", methods=PROXY_METHODS)
async def proxy_all(
    request: Request, path: str, settings: ProxySettings = Depends(get_settings)
):
    """Catch-all route that proxies the URL in the path and adds CORS headers."""
    return await handle_request(request, settings)

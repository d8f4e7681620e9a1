import logging

import httpx
from opentelemetry import trace

from cors_proxy.errors import UpstreamError
from cors_proxy.utils.exception_logging import (
    format_exception_message,
    log_exception_with_details,
)

tracer = trace.get_tracer(__name__)
logger = logging.getLogger("uvicorn.error")


async def fetch_destination(
    url: httpx.URL,
    timeout: float = 30.0,
    follow_redirects: bool = True,
) -> httpx.Response:
    """
    Fetch the destination with a plain GET and buffer the whole body.

    Only the URL is forwarded; the inbound method, body and headers are not.
    Upstream error statuses are returned like any other response. Transport
    failures become UpstreamError.
    """
    with tracer.start_as_current_span("proxy.fetch") as span:
        span.set_attribute("proxy.destination", str(url))
        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(timeout),
                follow_redirects=follow_redirects,
            ) as client:
                response = await client.get(url)
        except httpx.TimeoutException as e:
            span.set_attribute("proxy.error", "timeout")
            log_exception_with_details(logger, f"[Fetch] Timeout for {url}", e)
            raise UpstreamError(str(url), f"timed out fetching {url}")
        except httpx.ConnectError as e:
            span.set_attribute("proxy.error", "connection_failed")
            log_exception_with_details(logger, f"[Fetch] Cannot connect to {url}", e)
            raise UpstreamError(
                str(url), f"cannot connect to {url.host}: {format_exception_message(e)}"
            )
        except httpx.HTTPError as e:
            span.set_attribute("proxy.error", type(e).__name__)
            log_exception_with_details(logger, f"[Fetch] Failed for {url}", e)
            raise UpstreamError(str(url), format_exception_message(e))

        span.set_attribute("proxy.status_code", response.status_code)
        logger.debug(
            f"[Fetch] {url} answered {response.status_code} with {len(response.content)} bytes"
        )
        return response

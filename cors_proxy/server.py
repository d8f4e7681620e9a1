import logging
from typing import Optional, Sequence

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider, ReadableSpan
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    SpanExporter,
    SpanExportResult,
)
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from prometheus_fastapi_instrumentator import Instrumentator
from prometheus_client import Info

from cors_proxy.errors import ProxyError
from cors_proxy.proxy.route import router
from cors_proxy.settings import ProxySettings
from cors_proxy.vars import SERVICE_NAME, OTLP_ENDPOINT, OTLP_HEADERS

logger = logging.getLogger("uvicorn.error")


class FilteringSpanExporter(SpanExporter):
    """
    Exporter wrapper that drops the per-message ASGI send spans.

    The FastAPI instrumentation records a child span for every ASGI send
    event. The body send of a buffered proxy reply carries nothing the
    request span does not already record.
    """

    def __init__(self, exporter: SpanExporter):
        self.exporter = exporter

    def export(self, spans: Sequence[ReadableSpan]) -> SpanExportResult:
        filtered_spans = [
            span
            for span in spans
            if not (
                span.attributes
                and span.attributes.get("asgi.event.type") == "http.response.body"
            )
        ]
        if filtered_spans:
            return self.exporter.export(filtered_spans)
        return SpanExportResult.SUCCESS

    def shutdown(self):
        return self.exporter.shutdown()

    def force_flush(self, timeout_millis: int = 30000):
        return self.exporter.force_flush(timeout_millis)


def configure_tracing() -> None:
    tracer_provider = TracerProvider(
        resource=Resource.create({"service.name": SERVICE_NAME})
    )
    if OTLP_ENDPOINT:
        otlp_exporter = OTLPSpanExporter(
            endpoint=OTLP_ENDPOINT,
            headers=((OTLP_HEADERS).split(",") if OTLP_HEADERS else None),
        )
        tracer_provider.add_span_processor(
            BatchSpanProcessor(FilteringSpanExporter(otlp_exporter))
        )
    trace.set_tracer_provider(tracer_provider)


async def proxy_error_handler(request: Request, exc: ProxyError) -> PlainTextResponse:
    return PlainTextResponse(exc.message, status_code=exc.status_code)


def create_app(settings: Optional[ProxySettings] = None) -> FastAPI:
    app = FastAPI(title=SERVICE_NAME)
    app.state.settings = settings or ProxySettings.from_env()
    logger.info(
        f"[Startup] destination filter={app.state.settings.destination_filter} "
        f"origin filter={app.state.settings.origin_filter} "
        f"require origin={app.state.settings.require_origin}"
    )

    # Metrics must be registered before the catch-all proxy route
    Instrumentator().instrument(app).expose(app)

    FastAPIInstrumentor.instrument_app(app)

    app.add_exception_handler(ProxyError, proxy_error_handler)
    app.include_router(router)
    return app


configure_tracing()

# Add app_name to the metrics
app_info = Info("fastapi_app_info", "Application Info")
app_info.info({"app_name": SERVICE_NAME})

app = create_app()

from typing import Dict, Optional

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from alias_proxy.vars import OTLP_ENDPOINT, OTLP_HEADERS, SERVICE_NAME

_configured = False


def parse_otlp_headers(raw: str) -> Optional[Dict[str, str]]:
    """Parse ``key=value,key2=value2`` into a header mapping."""
    headers: Dict[str, str] = {}
    for entry in raw.split(","):
        key, sep, value = entry.partition("=")
        if sep and key.strip():
            headers[key.strip()] = value.strip()
    return headers or None


def configure_tracing() -> None:
    """Install the tracer provider once per process; export only when an endpoint is set."""
    global _configured
    if _configured:
        return
    provider = TracerProvider(resource=Resource.create({"service.name": SERVICE_NAME}))
    if OTLP_ENDPOINT:
        exporter = OTLPSpanExporter(
            endpoint=OTLP_ENDPOINT, headers=parse_otlp_headers(OTLP_HEADERS)
        )
        provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)
    _configured = True


def instrument_app(app: FastAPI) -> None:
    """Server spans for every inbound request; proxy_request spans nest under them."""
    FastAPIInstrumentor.instrument_app(
        app,
        excluded_urls="",
        server_request_hook=None,
        client_request_hook=None,
    )

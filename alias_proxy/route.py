import logging
from dataclasses import dataclass

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import Response
from opentelemetry import trace

from alias_proxy.config import ProxyConfig
from alias_proxy.errors import BodyTooLarge, ProxyError
from alias_proxy.forwarder import Forwarder, prepare_headers
from alias_proxy.host_map import HostMap
from alias_proxy.pipeline import rewrite_response
from alias_proxy.rewrite import scheme
from alias_proxy.utils.exception_logging import log_request_error
from alias_proxy.vars import MAX_REQUEST_BODY_BYTES

router = APIRouter()
tracer = trace.get_tracer(__name__)


@dataclass(frozen=True)
class ProxyContext:
    """Everything a request handler needs, built once at startup."""

    config: ProxyConfig
    host_map: HostMap
    forwarder: Forwarder
    logger: logging.Logger
    max_body_bytes: int = MAX_REQUEST_BODY_BYTES


def get_target_url(request: Request, origin: str, https: bool) -> str:
    """Origin URL for the request, keeping the raw path and query untouched."""
    path = request.scope.get("raw_path") or request.url.path.encode("utf-8")
    url = f"{scheme(https)}://{origin}{path.decode('latin-1')}"
    query = request.scope.get("query_string", b"")
    if query:
        url = f"{url}?{query.decode('latin-1')}"
    return url


async def read_body(request: Request, limit: int) -> bytes:
    body = bytearray()
    async for chunk in request.stream():
        body += chunk
        if limit and len(body) > limit:
            raise BodyTooLarge(f"request body exceeds {limit} bytes")
    return bytes(body)


async def forward_to_origin(request: Request, ctx: ProxyContext) -> Response:
    """
    Resolve the alias the client dialed, forward the request to its origin and
    rewrite the answer. Every failure ends here as an HTTP error status.
    """
    url = str(request.url)
    ctx.logger.info(f"{request.method} {url}")

    with tracer.start_as_current_span("proxy_request") as span:
        alias = request.headers.get("host", "")
        span.set_attribute("proxy.alias", alias)
        span.set_attribute("proxy.method", request.method)
        try:
            origin = ctx.host_map.resolve_origin(alias)
            span.set_attribute("proxy.origin", origin)

            target_url = get_target_url(request, origin, ctx.config.origin_uses_https)
            span.set_attribute("proxy.target_url", target_url)

            body = await read_body(request, ctx.max_body_bytes)
            upstream = await ctx.forwarder.forward(
                request.method,
                target_url,
                prepare_headers(request.headers.items()),
                body,
            )
            span.set_attribute("proxy.status_code", upstream.status_code)
            return await rewrite_response(upstream, ctx.config)
        except ProxyError as e:
            log_request_error(ctx.logger, request.method, url, e)
            span.set_attribute("proxy.error", type(e).__name__)
            raise HTTPException(status_code=e.status_code, detail=e.detail) from e
        except Exception as e:
            log_request_error(ctx.logger, request.method, url, e)
            span.set_attribute("proxy.error", type(e).__name__)
            raise


async def proxy_all(request: Request) -> Response:
    """Catch-all endpoint that proxies every request by its Host header."""
    return await forward_to_origin(request, request.app.state.proxy)


# A plain route with no method list accepts any method, including extension
# methods such as PROPFIND.
router.add_route("/{path:path}", proxy_all, include_in_schema=False)

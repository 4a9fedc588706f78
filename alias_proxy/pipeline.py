"""
Turns an upstream httpx response into the response sent to the client.

Textual bodies are decoded, rewritten and sent uncompressed; everything else is
streamed through untouched. Header values are rewritten in every case, so
origin hosts leaking through Location, Set-Cookie and the like are mapped to
their aliases as well.
"""

from typing import AsyncIterator, Dict, List

import httpx
from fastapi.responses import Response, StreamingResponse
from starlette.background import BackgroundTask

from alias_proxy.config import ProxyConfig
from alias_proxy.errors import TransportError
from alias_proxy.forwarder import response_headers
from alias_proxy.rewrite import (
    decode_body,
    encode_text,
    is_rewritable,
    rewrite_hosts,
    strip_encoding_headers,
)


def rewrite_headers(headers: Dict[str, List[str]], config: ProxyConfig) -> Dict[str, str]:
    """
    Rewrite every value of a header multimap in place, then join multiple
    values of one header with "," for the outgoing response.
    """
    for values in headers.values():
        for i, value in enumerate(values):
            values[i] = rewrite_hosts(value, config.host_rules, config.alias_uses_https)
    return {name: ",".join(values) for name, values in headers.items()}


async def read_text(response: httpx.Response) -> str:
    try:
        return await decode_body(response)
    except httpx.HTTPError as e:
        raise TransportError(f"reading body from {response.request.url}: {e}") from e


async def stream_raw(response: httpx.Response) -> AsyncIterator[bytes]:
    """Relay the undecoded body, closing the upstream response however the stream ends."""
    try:
        async for chunk in response.aiter_raw():
            yield chunk
    finally:
        await response.aclose()


async def rewrite_response(response: httpx.Response, config: ProxyConfig) -> Response:
    """
    Build the client response for ``response``. The upstream response is
    closed before returning unless its body is handed to a streaming
    response; then stream_raw closes it when the stream ends or is abandoned,
    and the background task covers a stream that is never iterated.
    """
    headers = response_headers(response)
    content_type = response.headers.get("content-type", "")

    if not is_rewritable(response.status_code, content_type):
        return StreamingResponse(
            stream_raw(response),
            status_code=response.status_code,
            headers=rewrite_headers(headers, config),
            background=BackgroundTask(response.aclose),
        )

    try:
        text = await read_text(response)
    finally:
        await response.aclose()

    text = rewrite_hosts(text, config.host_rules, config.alias_uses_https)
    strip_encoding_headers(headers)

    return Response(
        content=encode_text(text),
        status_code=response.status_code,
        headers=rewrite_headers(headers, config),
    )

import logging
from typing import Dict, List, Optional, Tuple

import httpx

from alias_proxy.errors import InvalidUpstreamProxy, TransportError
from alias_proxy.vars import MAX_REDIRECTS, PROXY_TIMEOUT

# Hop-by-hop headers that should NOT be forwarded (RFC 2616)
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

REDIRECT_STATUS_CODES = {301, 302, 303, 307, 308}

HeaderList = List[Tuple[str, str]]


def prepare_headers(headers: HeaderList) -> HeaderList:
    """Copy request headers for forwarding, minus hop-by-hop and Host."""
    return [
        (name, value)
        for name, value in headers
        if name.lower() not in HOP_BY_HOP_HEADERS and name.lower() != "host"
    ]


def with_host(headers: HeaderList, url: httpx.URL) -> HeaderList:
    """Address the request to the host it is actually sent to."""
    return [("host", url.netloc.decode("ascii"))] + [
        (name, value) for name, value in headers if name.lower() != "host"
    ]


class Forwarder:
    """
    Sends the inbound request on to the origin.

    The request body is buffered by the caller so it can be replayed: every
    redirect hop is re-sent with the original method, headers and body,
    instead of httpx's browser-like downgrade to a bodyless GET. The shared
    httpx client is created on first use so that a bad upstream proxy URL
    fails the request that needs it rather than the process.
    """

    def __init__(
        self,
        upstream_proxy: Optional[str] = None,
        logger: Optional[logging.Logger] = None,
        timeout: float = PROXY_TIMEOUT,
        max_redirects: int = MAX_REDIRECTS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.upstream_proxy = upstream_proxy
        self.logger = logger or logging.getLogger("uvicorn.error")
        self.timeout = timeout
        self.max_redirects = max_redirects
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is not None:
            return self._client

        proxy = None
        if self.upstream_proxy:
            try:
                proxy = httpx.Proxy(self.upstream_proxy)
            except (ValueError, httpx.InvalidURL) as e:
                raise InvalidUpstreamProxy(
                    f"invalid proxy URL {self.upstream_proxy!r}: {e}"
                ) from e

        self._client = httpx.AsyncClient(
            proxy=proxy,
            transport=self._transport,
            timeout=httpx.Timeout(self.timeout),
            follow_redirects=False,
            trust_env=False,
        )
        return self._client

    async def forward(
        self,
        method: str,
        url: str,
        headers: HeaderList,
        body: Optional[bytes],
    ) -> httpx.Response:
        """
        Issue the request and follow redirects, returning the final response
        with its body still unread. The caller must close it.
        """
        client = self._get_client()
        content = body or None
        timeout = httpx.Timeout(self.timeout).as_dict()

        try:
            target = httpx.URL(url)
            for _ in range(self.max_redirects + 1):
                # Built directly rather than via client.build_request so that none of
                # the client's default headers (User-Agent, Accept-Encoding, ...) are added
                request = httpx.Request(
                    method,
                    target,
                    headers=with_host(headers, target),
                    content=content,
                    extensions={"timeout": timeout},
                )
                response = await client.send(request, stream=True)
                location = response.headers.get("location")
                if response.status_code not in REDIRECT_STATUS_CODES or not location:
                    return response

                await response.aclose()
                target = target.join(location)
                self.logger.debug(f"Following redirect {method} {request.url} -> {target}")
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError(f"{method} {url}: {e}") from e

        raise TransportError(f"{method} {url}: stopped after {self.max_redirects} redirects")

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


def response_headers(response: httpx.Response) -> Dict[str, List[str]]:
    """Group upstream response headers by lower-cased name, dropping hop-by-hop ones."""
    grouped: Dict[str, List[str]] = {}
    for name, value in response.headers.multi_items():
        name = name.lower()
        if name in HOP_BY_HOP_HEADERS:
            continue
        grouped.setdefault(name, []).append(value)
    return grouped

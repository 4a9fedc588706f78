import gzip
from typing import Callable, Dict, List, Optional

import httpx


def raw_response(
    status_code: int = 200,
    body: bytes = b"",
    headers: Optional[Dict[str, str]] = None,
) -> httpx.Response:
    """
    A response whose body is still an unread stream, like one coming off the
    wire. ``httpx.Response(content=...)`` is read eagerly, which makes
    ``aiter_raw`` unusable on it.
    """
    return httpx.Response(status_code, headers=headers or {}, stream=httpx.ByteStream(body))


def gzipped(text: str) -> bytes:
    return gzip.compress(text.encode("utf-8"))


class MockUpstream:
    """
    Stand-in origin server. Records every request it receives and answers
    with ``handler``, which tests replace as needed.
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.handler: Callable[[httpx.Request], httpx.Response] = lambda request: raw_response(
            200, b"ok", {"content-type": "text/plain"}
        )
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

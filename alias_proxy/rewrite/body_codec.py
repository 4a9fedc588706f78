"""
Decoding of upstream bodies into text for rewriting.

Only gzip is understood, and it is decoded by httpx itself; any other
Content-Encoding value (including none) is taken as the raw body bytes. The
decoded body is buffered whole because a substitution may straddle any chunk
boundary. Rewritten bodies go back to the client uncompressed, so the encoding
and framing headers are dropped rather than recomputed.
"""

from typing import List, MutableMapping

import httpx

from alias_proxy.errors import BodyDecodeError

# Body bytes that are not valid UTF-8 are carried as lone surrogates so they
# come back out unchanged in encode_text.
TEXT_ENCODING = "utf-8"
TEXT_ERRORS = "surrogateescape"

ENCODING_HEADERS = ("content-encoding", "content-length", "transfer-encoding")


async def decode_body(response: httpx.Response) -> str:
    """Consume the body of ``response`` and return it as text."""
    if response.headers.get("content-encoding", "") == "gzip":
        chunks = response.aiter_bytes()
    else:
        chunks = response.aiter_raw()

    buf = bytearray()
    try:
        async for chunk in chunks:
            buf += chunk
    except httpx.DecodingError as e:
        raise BodyDecodeError(f"gzip reader error: {e}") from e
    return bytes(buf).decode(TEXT_ENCODING, TEXT_ERRORS)


def encode_text(text: str) -> bytes:
    return text.encode(TEXT_ENCODING, TEXT_ERRORS)


def strip_encoding_headers(headers: MutableMapping[str, List[str]]) -> None:
    """Drop encoding and framing headers from a lower-cased header multimap."""
    for name in ENCODING_HEADERS:
        headers.pop(name, None)

import gzip
import zlib

import pytest

from alias_proxy.errors import BodyDecodeError
from alias_proxy.rewrite.body_codec import decode_body, encode_text, strip_encoding_headers
from alias_proxy.utils_tests.upstream import raw_response


@pytest.mark.asyncio
async def test_identity_body():
    response = raw_response(200, b"hello world")
    assert await decode_body(response) == "hello world"


@pytest.mark.asyncio
async def test_unknown_encoding_is_passed_through():
    compressed = zlib.compress(b"origin.example")
    response = raw_response(200, compressed, {"content-encoding": "deflate"})

    text = await decode_body(response)

    assert encode_text(text) == compressed


@pytest.mark.asyncio
async def test_gzip_body():
    data = gzip.compress("visit origin.example today".encode("utf-8"))
    response = raw_response(200, data, {"content-encoding": "gzip"})

    assert await decode_body(response) == "visit origin.example today"


@pytest.mark.asyncio
async def test_malformed_gzip():
    response = raw_response(200, b"this is not gzip", {"content-encoding": "gzip"})

    with pytest.raises(BodyDecodeError, match="gzip reader error"):
        await decode_body(response)


@pytest.mark.asyncio
async def test_empty_gzip_body():
    response = raw_response(200, b"", {"content-encoding": "gzip"})
    assert await decode_body(response) == ""


@pytest.mark.asyncio
async def test_non_utf8_bytes_survive_round_trip():
    raw = b"caf\xe9 origin.example \xff"
    text = await decode_body(raw_response(200, raw))

    assert "origin.example" in text
    assert encode_text(text) == raw


def test_strip_encoding_headers():
    headers = {
        "content-encoding": ["gzip"],
        "content-length": ["42"],
        "transfer-encoding": ["chunked"],
        "content-type": ["text/html"],
    }

    strip_encoding_headers(headers)

    assert headers == {"content-type": ["text/html"]}

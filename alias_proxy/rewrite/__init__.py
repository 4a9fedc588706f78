from alias_proxy.rewrite.body_codec import decode_body, encode_text, strip_encoding_headers
from alias_proxy.rewrite.content import is_rewritable, is_textual
from alias_proxy.rewrite.substitutor import rewrite_hosts, scheme

__all__ = [
    "decode_body",
    "encode_text",
    "strip_encoding_headers",
    "is_rewritable",
    "is_textual",
    "rewrite_hosts",
    "scheme",
]

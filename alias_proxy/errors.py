"""
Error taxonomy of the proxy.

Every error raised while serving a request derives from ProxyError and knows
the status code and message the client receives for it. ConfigLoadError is the
only one that is fatal for the process.
"""

from typing import Optional


class ProxyError(Exception):
    status_code: int = 500
    detail: str = "Internal Server Error"

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        if detail is not None:
            self.detail = detail


class ConfigLoadError(ProxyError):
    """Configuration file missing or malformed."""


class HostNotMapped(ProxyError):
    status_code = 404
    detail = "Not Found"

    def __init__(self, host: str):
        super().__init__(f"no host rule for alias {host!r}")
        self.host = host


class InvalidUpstreamProxy(ProxyError):
    status_code = 502
    detail = "Proxy error"


class TransportError(ProxyError):
    status_code = 502
    detail = "Proxy error"


class BodyDecodeError(ProxyError):
    status_code = 500
    detail = "Failed to rewrite response"


class BodyTooLarge(ProxyError):
    status_code = 413
    detail = "Request body too large"

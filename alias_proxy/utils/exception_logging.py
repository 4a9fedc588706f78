"""
Logging of request failures with the request they belong to.
"""

import logging

from alias_proxy.errors import BodyDecodeError, BodyTooLarge, HostNotMapped, ProxyError


def _safe_str(obj) -> str:
    """
    Safely convert an object to string, falling back to repr and then the type name.
    """
    try:
        return str(obj)
    except Exception:
        try:
            return repr(obj)
        except Exception:
            return f"<{type(obj).__name__} object (string conversion failed)>"


def level_for(exception: Exception) -> int:
    if isinstance(exception, (HostNotMapped, BodyTooLarge)):
        return logging.WARNING
    return logging.ERROR


def format_exception_message(exception: Exception) -> str:
    """
    Format an exception with its cause, e.g. the httpx error behind a TransportError.
    """
    message = f"{type(exception).__name__}: {_safe_str(exception)}"
    cause = exception.__cause__
    if cause is not None and _safe_str(cause) not in message:
        message = f"{message} (caused by {type(cause).__name__}: {_safe_str(cause)})"
    return message


def log_request_error(
    logger: logging.Logger,
    method: str,
    url: str,
    exception: Exception,
) -> None:
    """
    Log an error raised while proxying ``method url``.

    Expected proxy errors are logged without a traceback, except body decode
    failures; anything unexpected gets the full traceback.
    """
    with_traceback = isinstance(exception, BodyDecodeError) or not isinstance(
        exception, ProxyError
    )
    logger.log(
        level_for(exception),
        f"[Proxy] {method} {url} failed: {format_exception_message(exception)}",
        exc_info=exception if with_traceback else None,
    )

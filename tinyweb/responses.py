"""Error responses and connection writes that tolerate a vanished client."""

from __future__ import annotations

import logging
from typing import Any

from tinyweb.rio import write_all

log = logging.getLogger(__name__)


def safe_write(conn: Any, data: bytes) -> bool:
    """Write *data* to *conn*; return False if the client closed the connection.

    Errors other than a broken pipe propagate.
    """
    try:
        write_all(conn, data)
    except BrokenPipeError:
        log.warning("EPIPE: client closed connection")
        return False
    return True


def _encode(text: Any) -> bytes:
    return str(text).encode("utf-8", errors="replace")


def _build_error_parts(cause, errnum, shortmsg, longmsg) -> tuple[bytes, bytes]:
    body = b"".join(
        [
            b"<html>\r\n",
            b"<head><title>Tiny Error</title></head>\r\n",
            b"<body>\r\n",
            b"<h1>" + _encode(errnum) + b": " + _encode(shortmsg) + b"</h1>\r\n",
            b"<p>" + _encode(longmsg) + b": " + _encode(cause) + b"</p>\r\n",
            b"<hr>\r\n",
            b"<small>The Tiny Web Server</small>\r\n",
            b"</body>\r\n</html>\r\n",
        ]
    )
    headers = b"".join(
        [
            b"HTTP/1.0 " + _encode(errnum) + b" " + _encode(shortmsg) + b"\r\n",
            b"Content-type: text/html\r\n",
            b"Content-length: " + str(len(body)).encode("ascii") + b"\r\n\r\n",
        ]
    )
    return headers, body


def build_error_response(cause, errnum, shortmsg, longmsg) -> bytes:
    """Return the complete HTTP/1.0 error response (headers and HTML body)."""
    headers, body = _build_error_parts(cause, errnum, shortmsg, longmsg)
    return headers + body


def client_error(conn: Any, cause, errnum, shortmsg, longmsg) -> bool:
    """Send an HTTP error response to *conn*; return False if the client went away."""
    headers, body = _build_error_parts(cause, errnum, shortmsg, longmsg)
    if not safe_write(conn, headers):
        return False
    return safe_write(conn, body)
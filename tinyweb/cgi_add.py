"""CGI program that adds two numbers given as ``first`` and ``second``."""

from __future__ import annotations

import os
import re
import sys

_PARAM_VALUE = re.compile(r"=\s*([+-]?\d+)")
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def get_param(query: str, key: str) -> int | None:
    """Return the integer following the first ``key=`` in *query*, or None."""
    pos = query.find(key)
    if pos < 0:
        return None
    match = _PARAM_VALUE.match(query, pos + len(key))
    return int(match.group(1)) if match else None


def render(method: str | None, query: str | None, body: bytes | str | None) -> bytes:
    """Produce the full CGI output for a request.

    POST takes its parameters from *body*; other methods from *query*.
    HEAD gets the headers without the body.
    """
    method = method or ""
    if method.upper() == "POST":
        source = body.decode("latin-1") if isinstance(body, bytes) else (body or "")
    else:
        source = query
    first = get_param(source, "first") if source else None
    second = get_param(source, "second") if source else None

    if first is None or second is None:
        status = "Status: HTTP/1.0 400 Bad Request\r\n"
        content = (
            "<head><title>Tiny Error</title></head>\r\n"
            "<h1>400 Bad Request</h1>\r\n"
            "<p>Missing or invalid parameters. Usage: ?first=1&second=2</p>\r\n"
        )
    else:
        status = "Status: HTTP/1.0 200 OK\r\n"
        content = (
            "<head><title>Tiny Web Server</title></head>\r\n"
            "<h1>Tiny CGI add</h1>\r\n"
            f"<p>The answer is: {first} + {second} = {first + second}\r\n<p>"
        )
    content += "<hr>\r\n<small>The Tiny Web Server</small>\r\n"
    encoded = content.encode("latin-1")

    headers = (
        status
        + "Connection: close\r\n"
        + f"Content-length: {len(encoded)}\r\n"
        + "Content-type: text/html\r\n\r\n"
    ).encode("latin-1")
    if method.upper() == "HEAD":
        return headers
    return headers + encoded


def main(argv: list[str] | None = None) -> int:
    """Run as a CGI program using the process environment and standard streams."""
    method = os.environ.get("REQUEST_METHOD", "")
    body = b""
    if method.upper() == "POST":
        match = _LEADING_INT.match(os.environ.get("CONTENT_LENGTH", ""))
        length = max(0, int(match.group(1))) if match else 0
        body = sys.stdin.buffer.read(length)
    output = render(method, os.environ.get("QUERY_STRING"), body)
    sys.stdout.buffer.write(output)
    sys.stdout.buffer.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())
"""A tiny HTTP/1.0 server for static files and CGI programs."""

from __future__ import annotations

import io
import logging
import os
import re
import socket
import stat
import subprocess
import sys
from dataclasses import dataclass
from typing import Any

from tinyweb.net import open_listenfd
from tinyweb.responses import client_error, safe_write
from tinyweb.rio import MAXLINE, RobustReader, read_exact

log = logging.getLogger(__name__)

SUPPORTED_METHODS = ("GET", "HEAD", "POST")
DOCUMENT_ROOT = "public"

_FILETYPES = {
    ".html": "text/html",
    ".png": "image/png",
    ".gif": "image/gif",
    ".jpg": "image/jpeg",
    ".flac": "audio/flac",
    ".mp4": "video/mp4",
}

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

_children: list[subprocess.Popen] = []


@dataclass(frozen=True)
class Request:
    """The three fields of an HTTP request line."""

    method: str
    uri: str
    version: str


def _atoi(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def _decode(data: bytes | str) -> str:
    return data.decode("latin-1") if isinstance(data, bytes) else data


def parse_request_line(line: bytes | str) -> Request:
    """Split a request line into method, URI and version; missing fields are empty."""
    fields = _decode(line).split()
    fields += [""] * (3 - len(fields))
    return Request(fields[0], fields[1], fields[2])


def read_request_headers(reader: RobustReader, method: str) -> int:
    """Consume the header block and return the Content-Length of a POST, else 0."""
    is_post = method.upper() == "POST"
    content_len = 0
    while True:
        raw = reader.readline(MAXLINE)
        if not raw:
            break
        line = _decode(raw)
        log.info("%s", line.rstrip("\r\n"))
        if line == "\r\n":
            break
        if is_post and line[:15].lower() == "content-length:":
            content_len = _atoi(line[15:])
    return content_len


def parse_uri(uri: str) -> tuple[bool, str, str]:
    """Map a URI to ``(is_static, filename, cgiargs)``.

    Static content lives under ``public/``; URIs naming ``cgi-bin`` are
    dynamic and resolved relative to the working directory.
    """
    if "cgi-bin" not in uri:
        if uri.endswith("/"):
            return True, f"{DOCUMENT_ROOT}{uri}index.html", ""
        return True, f"{DOCUMENT_ROOT}{uri}", ""
    path, sep, cgiargs = uri.partition("?")
    return False, f".{path}", cgiargs if sep else ""


def get_filetype(filename: str) -> str:
    """Return the MIME type for *filename* based on its last extension."""
    dot = filename.rfind(".")
    if dot < 0:
        return "text/plain"
    return _FILETYPES.get(filename[dot:], "text/plain")


def serve_static(conn: Any, filename: str, filesize: int, method: str) -> None:
    """Send the headers and, unless the method is HEAD, the contents of *filename*."""
    headers = (
        "HTTP/1.0 200 OK\r\n"
        "Server: Tiny Web Server\r\n"
        "Connection: close\r\n"
        f"Content-length: {filesize}\r\n"
        f"Content-type: {get_filetype(filename)}\r\n\r\n"
    )
    if not safe_write(conn, headers.encode("latin-1")):
        return
    log.info("[[ Response headers ]]:\n%s", headers.rstrip("\r\n"))

    if method.upper() == "HEAD":
        return

    with open(filename, "rb") as src:
        data = read_exact(src, filesize)
    if len(data) < filesize:
        log.error(
            "serve_static(): short read, expected %d, got %d", filesize, len(data)
        )
        client_error(
            conn,
            filename,
            "500",
            "Internal Server Error",
            "Tiny couldn't read the file completely",
        )
        return
    safe_write(conn, data)


def _connection_fd(conn: Any) -> int | None:
    try:
        return conn.fileno()
    except (AttributeError, io.UnsupportedOperation):
        return None


def serve_dynamic(
    conn: Any, filename: str, cgiargs: str, method: str, body: bytes
) -> subprocess.Popen | None:
    """Run the CGI program *filename* with its output going to the client.

    The server sends the status line and Server header; the program sends
    the rest. A POST body is fed to the program's standard input. When
    *conn* has a file descriptor the program writes to it directly and the
    running process is returned; otherwise its output is collected and
    forwarded, and the finished process is returned. Returns None if the
    program could not be started.
    """
    partial = b"HTTP/1.0 200 OK\r\nServer: Tiny Web Server\r\n"
    if not safe_write(conn, partial):
        return None

    is_post = method.upper() == "POST"
    env = dict(os.environ)
    env["QUERY_STRING"] = cgiargs
    env["REQUEST_METHOD"] = method
    env["CONTENT_LENGTH"] = str(len(body))

    fd = _connection_fd(conn)
    stdin = subprocess.PIPE if is_post else subprocess.DEVNULL
    stdout: Any = fd if fd is not None else subprocess.PIPE
    try:
        proc = subprocess.Popen([filename], stdin=stdin, stdout=stdout, env=env)
    except OSError as exc:
        log.error("could not run CGI program %s: %s", filename, exc)
        return None

    if fd is None:
        output, _ = proc.communicate(body if is_post else None)
        safe_write(conn, output)
        return proc

    if is_post:
        try:
            proc.stdin.write(body)
        except BrokenPipeError:
            log.warning("CGI program %s closed its input early", filename)
        finally:
            try:
                proc.stdin.close()
            except BrokenPipeError:
                pass
    _children.append(proc)
    return proc


def _reap_children() -> None:
    _children[:] = [proc for proc in _children if proc.poll() is None]


def handle_connection(conn: Any) -> None:
    """Read one HTTP request from *conn* and send the response."""
    reader = RobustReader(conn)
    line = reader.readline(MAXLINE)
    log.info("[[ Request headers ]]:\n%s", _decode(line).rstrip("\r\n"))
    request = parse_request_line(line)
    method, uri = request.method, request.uri

    if method.upper() not in SUPPORTED_METHODS:
        client_error(
            conn, method, "501", "Not implemented", "Tiny dose not implement this method"
        )
        return

    if ".." in uri:
        client_error(
            conn,
            uri,
            "403",
            "Forbidden",
            'Path traversal is not allowed, including ".." in',
        )
        return

    content_len = read_request_headers(reader, method)
    body = reader.readn(content_len)

    is_static, filename, cgiargs = parse_uri(uri)
    try:
        info = os.stat(filename)
    except OSError:
        client_error(conn, filename, "404", "Not found", "Tiny couldn't find this file")
        return

    regular = stat.S_ISREG(info.st_mode)
    if is_static:
        if not regular or not info.st_mode & stat.S_IRUSR:
            client_error(
                conn, filename, "403", "Forbidden", "Tiny couldn't read this file"
            )
            return
        if method.upper() == "POST":
            client_error(
                conn,
                filename,
                "405",
                "Method Not Allowed",
                "Tiny does not allow POST for static content",
            )
            return
        serve_static(conn, filename, info.st_size, method)
    else:
        if not regular or not info.st_mode & stat.S_IXUSR:
            client_error(
                conn, filename, "403", "Forbidden", "Tiny couldn't run this CGI program"
            )
            return
        serve_dynamic(conn, filename, cgiargs, method, body)


def echo(conn: Any) -> None:
    """Echo lines back to *conn* until a blank CRLF line or end of stream."""
    reader = RobustReader(conn)
    while True:
        line = reader.readline(MAXLINE)
        if not line or line == b"\r\n":
            break
        if not safe_write(conn, line):
            break


def serve_forever(port: str | int) -> None:
    """Accept connections on *port* and serve one request on each, forever."""
    with open_listenfd(port) as listener:
        while True:
            conn, addr = listener.accept()
            with conn:
                try:
                    host, serv = socket.getnameinfo(addr, 0)
                except OSError:
                    host, serv = str(addr[0]), str(addr[1])
                print(f"Accepted connection from ({host}, {serv})", flush=True)
                try:
                    handle_connection(conn)
                except OSError:
                    log.exception("error while serving %s:%s", host, serv)
            _reap_children()


def main(argv: list[str] | None = None) -> int:
    """Run the server on the port given as the only argument."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 1:
        prog = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "tiny"
        print(f"Usage: {prog} <port>", file=sys.stderr)
        return 1
    logging.basicConfig(level=logging.INFO, format="%(message)s", stream=sys.stdout)
    try:
        serve_forever(args[0])
    except KeyboardInterrupt:
        return 0
    return 0


if __name__ == "__main__":
    sys.exit(main())
"""Protocol-independent helpers for opening listening and client sockets."""

from __future__ import annotations

import logging
import socket

LISTENQ = 1024

log = logging.getLogger(__name__)


def _resolve(host: str | None, port: str | int, flags: int) -> list[tuple]:
    try:
        return socket.getaddrinfo(host, str(port), type=socket.SOCK_STREAM, flags=flags)
    except socket.gaierror as exc:
        where = f"{host}:{port}" if host is not None else f"port {port}"
        log.error("getaddrinfo failed (%s): %s", where, exc)
        raise


def open_listenfd(port: str | int, backlog: int = LISTENQ) -> socket.socket:
    """Open a socket listening on *port* on any local address.

    Each resolved address is tried in turn until one binds. Raises
    ``socket.gaierror`` if the port cannot be resolved and ``OSError``
    if no address could be bound or listened on.
    """
    flags = socket.AI_PASSIVE | socket.AI_ADDRCONFIG | socket.AI_NUMERICSERV
    candidates = _resolve(None, port, flags)

    last_error: OSError | None = None
    for family, socktype, proto, _canonname, sockaddr in candidates:
        try:
            sock = socket.socket(family, socktype, proto)
        except OSError as exc:
            last_error = exc
            continue
        # Avoid "Address already in use" when restarting quickly.
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            sock.bind(sockaddr)
        except OSError as exc:
            last_error = exc
            sock.close()
            continue
        try:
            sock.listen(backlog)
        except OSError:
            sock.close()
            raise
        return sock

    raise OSError(f"could not bind a listening socket on port {port}") from last_error


def open_clientfd(hostname: str, port: str | int) -> socket.socket:
    """Connect to *hostname* on *port* and return the connected socket.

    Each resolved address is tried in turn until one connects. Raises
    ``socket.gaierror`` if the address cannot be resolved and ``OSError``
    if every connection attempt fails.
    """
    flags = socket.AI_NUMERICSERV | socket.AI_ADDRCONFIG
    candidates = _resolve(hostname, port, flags)

    last_error: OSError | None = None
    for family, socktype, proto, _canonname, sockaddr in candidates:
        try:
            sock = socket.socket(family, socktype, proto)
        except OSError as exc:
            last_error = exc
            continue
        try:
            sock.connect(sockaddr)
        except OSError as exc:
            last_error = exc
            sock.close()
            continue
        return sock

    if last_error is not None:
        raise last_error
    raise OSError(f"could not connect to {hostname}:{port}")
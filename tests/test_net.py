import socket

import pytest

from tinyweb.net import open_clientfd, open_listenfd


def _port_of(sock: socket.socket) -> int:
    return sock.getsockname()[1]


def test_listen_socket_is_stream_and_reuses_address():
    with open_listenfd("0") as listener:
        assert listener.type == socket.SOCK_STREAM
        reuse = listener.getsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR)
        assert bool(reuse) is True
        assert _port_of(listener) > 0


def test_listen_accepts_integer_port():
    with open_listenfd(0, 16) as listener:
        assert listener.type == socket.SOCK_STREAM
        assert _port_of(listener) > 0


def test_client_and_server_round_trip():
    with open_listenfd("0") as listener:
        port = _port_of(listener)
        with open_clientfd("localhost", str(port)) as client:
            conn, _addr = listener.accept()
            with conn:
                client.sendall(b"GET / HTTP/1.0\r\n\r\n")
                received = b""
                while len(received) < 18:
                    chunk = conn.recv(64)
                    if not chunk:
                        break
                    received += chunk
                assert received == b"GET / HTTP/1.0\r\n\r\n"

                conn.sendall(b"pong")
                assert client.recv(4) == b"pong"


def test_client_peer_matches_listener_port():
    with open_listenfd("0") as listener:
        port = _port_of(listener)
        with open_clientfd("localhost", port) as client:
            conn, _addr = listener.accept()
            with conn:
                assert client.getpeername()[1] == port


def test_listen_rejects_non_numeric_port():
    with pytest.raises(socket.gaierror):
        open_listenfd("http")


def test_client_rejects_non_numeric_port():
    with pytest.raises(socket.gaierror):
        open_clientfd("localhost", "http")


def test_client_connect_to_closed_port_raises():
    with open_listenfd("0") as listener:
        port = _port_of(listener)
    with pytest.raises(OSError):
        open_clientfd("localhost", str(port))
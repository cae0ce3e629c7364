import io
import sys

from tinyweb.cgi_add import get_param, main, render


def _split(output: bytes):
    head, _, body = output.partition(b"\r\n\r\n")
    return head, body


def _content_length(head: bytes) -> int:
    for line in head.split(b"\r\n"):
        if line.startswith(b"Content-length: "):
            return int(line[len(b"Content-length: "):])
    raise KeyError("Content-length")


def test_get_param_reads_both_values():
    query = "first=1&second=2"
    assert get_param(query, "first") == 1
    assert get_param(query, "second") == 2


def test_get_param_missing_key():
    assert get_param("first=1", "second") is None


def test_get_param_non_numeric():
    assert get_param("first=abc&second=2", "first") is None


def test_get_param_negative_and_spaces():
    assert get_param("first= -7", "first") == -7


def test_get_param_uses_first_occurrence():
    assert get_param("firstx=1&first=2", "first") is None


def test_render_success_status_and_length():
    output = render("GET", "first=1&second=2", None)
    head, body = _split(output)
    assert head.startswith(b"Status: HTTP/1.0 200 OK\r\n")
    assert b"Content-type: text/html" in head
    assert _content_length(head) == len(body)
    assert b"The answer is: 1 + 2 = 3" in body


def test_render_missing_params_is_400():
    output = render("GET", "first=1", None)
    head, body = _split(output)
    assert head.startswith(b"Status: HTTP/1.0 400 Bad Request\r\n")
    assert b"<h1>400 Bad Request</h1>" in body
    assert _content_length(head) == len(body)


def test_render_without_query_is_400():
    assert render("GET", None, None).startswith(b"Status: HTTP/1.0 400 Bad Request")


def test_render_head_omits_body():
    head_only = render("HEAD", "first=4&second=5", None)
    full = render("GET", "first=4&second=5", None)
    assert _split(head_only)[1] == b""
    assert _split(full)[0] == _split(head_only)[0]


def test_render_post_matches_get():
    assert render("post", None, b"first=4&second=5") == render(
        "GET", "first=4&second=5", None
    )


def test_render_post_ignores_query():
    output = render("POST", "first=1&second=2", b"")
    assert output.startswith(b"Status: HTTP/1.0 400 Bad Request")


def test_main_get(monkeypatch, capsysbinary):
    monkeypatch.setenv("REQUEST_METHOD", "GET")
    monkeypatch.setenv("QUERY_STRING", "first=2&second=3")
    monkeypatch.delenv("CONTENT_LENGTH", raising=False)
    assert main([]) == 0
    assert capsysbinary.readouterr().out == render("GET", "first=2&second=3", None)


def test_main_post(monkeypatch, capsysbinary):
    data = b"first=6&second=8"
    monkeypatch.setenv("REQUEST_METHOD", "POST")
    monkeypatch.setenv("CONTENT_LENGTH", str(len(data)))
    monkeypatch.delenv("QUERY_STRING", raising=False)
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(data + b"junk")))
    assert main([]) == 0
    assert capsysbinary.readouterr().out == render("POST", None, data)
# tinyweb

A small HTTP/1.0 server. It serves static files from `./public/` and runs
CGI programs found under `./cgi-bin/`. It handles one connection at a time
and one request per connection.

## Installing

```
pip install .
```

## Running the server

```
tinyweb 8000
```

The server takes exactly one argument, the port to listen on. With any other
number of arguments it prints a usage line and exits with status 1. It prints
`Accepted connection from (host, port)` for each connection, logs the request
line, the request headers and the response headers it sends, and closes each
connection after its response. Ctrl-C stops it.

### What it serves

- A URI that does not contain `cgi-bin` is static content. It maps to a file
  under `public/`; a URI that ends in `/` maps to `index.html` in that
  directory. The content type comes from the last extension of the file name
  (`.html`, `.png`, `.gif`, `.jpg`, `.flac`, `.mp4`); anything else is sent as
  `text/plain`. For `HEAD` only the headers are sent.
- A URI that contains `cgi-bin` is dynamic content, resolved relative to the
  directory the server runs in. The part after `?` is put in `QUERY_STRING`.
  The program runs with `REQUEST_METHOD` and `CONTENT_LENGTH` set. The server
  sends the status line and a `Server` header; the program writes the rest,
  and its standard output goes straight to the client. For `POST` the request
  body (as long as its `Content-Length` header says) goes to the program's
  standard input.

The methods `GET`, `HEAD` and `POST` are supported. The server answers with an
HTML error page for:

| Status | When |
| ------ | ---- |
| 501 | the method is not `GET`, `HEAD` or `POST` |
| 403 | the URI contains `..`, or the file is not a regular file the owner can read (static) or run (CGI) |
| 404 | the file does not exist |
| 405 | `POST` to static content |
| 500 | a static file could not be read completely |

### What it does not do

There is no concurrency (requests are served one after another), no
keep-alive, no directory listings and no configuration beyond the port. The
document root and CGI directory are fixed relative to the working directory.

## The `add` CGI program

`tinyweb-add` is a CGI program that adds two integers given as
`first=1&second=2`. For `POST` it reads them from the request body (up to
`CONTENT_LENGTH` bytes of standard input); for other methods from
`QUERY_STRING`. If either is missing or not a number it answers with
`Status: HTTP/1.0 400 Bad Request`. For `HEAD` it sends only the headers.

To use it with the server, put an executable called `add` under `cgi-bin/`
in the directory you start the server from, for example a shell script that
runs `tinyweb-add`. Then request:

```
http://localhost:8000/cgi-bin/add?first=1&second=2
```

## Using it as a library

- `tinyweb.rio`: `RobustReader(stream, bufsize)` is a buffered reader over a
  socket or binary stream, with `read`, `readn`, `readline` and the
  `buffered` count. `read_exact(stream, n)` reads up to `n` bytes, stopping
  early only at end of stream; `write_all(stream, data)` writes every byte.
- `tinyweb.responses`: `build_error_response` returns a complete error
  response; `client_error` sends one. `safe_write` returns `False` instead of
  raising when the client has closed its connection.
- `tinyweb.net`: `open_listenfd(port, backlog)` returns a listening socket and
  `open_clientfd(hostname, port)` a connected one; each tries every resolved
  address in turn.
- `tinyweb.server`: `Request`, `parse_request_line`, `read_request_headers`,
  `parse_uri`, `get_filetype`, `serve_static`, `serve_dynamic`,
  `handle_connection`, `echo`, `serve_forever` and `main`.
- `tinyweb.cgi_add`: `get_param(query, key)`, `render(method, query, body)`
  and `main`.

## Tests

```
pip install .[test]
pytest
```
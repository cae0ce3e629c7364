"""A tiny HTTP/1.0 server for static files and CGI programs, with an add CGI program."""

__version__ = "0.1.0"
__all__ = ["cgi_add", "net", "responses", "rio", "server"]
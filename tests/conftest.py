from __future__ import annotations

import socket
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest


class _Handler(BaseHTTPRequestHandler):
    protocol_version = "HTTP/1.1"

    def log_message(self, format, *args) -> None:  # noqa: A002 - silence test output
        pass

    def _reply(self, status: int, body: bytes, headers: dict[str, str] | None = None) -> None:
        self.send_response(status)
        self.send_header("Content-Type", "text/plain; charset=utf-8")
        self.send_header("Content-Length", str(len(body)))
        for name, value in (headers or {}).items():
            self.send_header(name, value)
        self.end_headers()
        if self.command != "HEAD":
            self.wfile.write(body)

    def _read_body(self) -> bytes:
        length = int(self.headers.get("Content-Length") or 0)
        return self.rfile.read(length) if length else b""

    def do_GET(self) -> None:
        if self.path == "/redirect":
            self._reply(302, b"", {"Location": "/index.html"})
            return
        if self.path == "/missing":
            self._reply(404, b"not found")
            return
        agent = self.headers.get("User-Agent", "")
        self._reply(200, b"<h1>index</h1>", {"X-Method": "GET", "X-Agent": agent})

    def do_HEAD(self) -> None:
        self.do_GET()

    def _echo(self) -> None:
        body = self._read_body()
        self._reply(
            200,
            body,
            {
                "X-Method": self.command,
                "X-Received": str(len(body)),
                "X-Test": self.headers.get("X-Test", ""),
            },
        )

    do_POST = _echo
    do_PUT = _echo
    do_DELETE = _echo
    do_PATCH = _echo


@pytest.fixture(scope="session")
def http_server():
    server = ThreadingHTTPServer(("127.0.0.1", 0), _Handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{server.server_address[1]}"
    finally:
        server.shutdown()
        server.server_close()


@pytest.fixture
def closed_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]

"""Shared fixtures for waitfor tests."""

import os
import socket
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest


@pytest.fixture
def data_file(tmp_path):
    """An existing file with a little content."""
    path = tmp_path / "data.json"
    path.write_text("{}")
    return path


def _shift_mtime(path, seconds: float):
    st = os.stat(path)
    os.utime(path, ns=(st.st_atime_ns, st.st_mtime_ns + int(seconds * 1_000_000_000)))


@pytest.fixture
def shift_mtime():
    """Move a file's mtime by ``seconds`` (negative = into the past)."""
    return _shift_mtime


@pytest.fixture
def counter():
    """A probe that counts its calls and returns a fixed answer."""
    class Counter:
        def __init__(self):
            self.calls = 0
            self.answer = True

        def __call__(self):
            self.calls += 1
            return self.answer

    return Counter()


@pytest.fixture
def listening_port():
    """Port of a local TCP socket that accepts connections."""
    server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    server.bind(("127.0.0.1", 0))
    server.listen(8)
    try:
        yield server.getsockname()[1]
    finally:
        server.close()


@pytest.fixture
def closed_port():
    """Port on 127.0.0.1 with nothing listening on it."""
    s = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    s.bind(("127.0.0.1", 0))
    port = s.getsockname()[1]
    s.close()
    return port


@pytest.fixture
def http_server():
    """Local HTTP server; ``/NNN`` answers with status NNN."""
    class Handler(BaseHTTPRequestHandler):
        def do_GET(self):
            code = int(self.path.strip("/") or 200)
            self.send_response(code)
            self.send_header("Content-Length", "0")
            self.end_headers()

        def log_message(self, *args):
            pass

    server = ThreadingHTTPServer(("127.0.0.1", 0), Handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{server.server_address[1]}"
    finally:
        server.shutdown()
        server.server_close()

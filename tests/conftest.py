from __future__ import annotations
import socket
import threading
from dataclasses import dataclass, field
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pytest

PROXY_VARS = ("HTTP_PROXY", "HTTPS_PROXY", "ALL_PROXY", "http_proxy", "https_proxy", "all_proxy")

@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Own config file per test, and no proxy between us and 127.0.0.1."""
    monkeypatch.setenv("ATMYSTIC_DL_CONFIG", str(tmp_path / "cfg" / "config.json"))
    monkeypatch.delenv("ATMYSTIC_DL_DIR", raising=False)
    for var in PROXY_VARS:
        monkeypatch.delenv(var, raising=False)

# ---- local HTTP server standing in for raw.githubusercontent.com -------------
Response = Tuple[int, bytes]

@dataclass
class LocalServer:
    base_url: str
    routes: Dict[str, List[Response]] = field(default_factory=dict)
    hits: List[str] = field(default_factory=list)

    def add(self, name: str, *responses: Response) -> None:
        """Responses are served in order; the last one repeats."""
        self.routes["/" + name] = list(responses)

    def next_response(self, path: str) -> Response:
        seq = self.routes.get(path)
        if not seq:
            return 404, b"404: Not Found"
        return seq.pop(0) if len(seq) > 1 else seq[0]

@pytest.fixture
def server():
    state = LocalServer(base_url="")

    class Handler(BaseHTTPRequestHandler):
        def do_GET(self):
            state.hits.append(self.path)
            status, body = state.next_response(self.path)
            self.send_response(status)
            self.send_header("Content-Type", "text/plain; charset=utf-8")
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)

        def log_message(self, *args):
            pass

    httpd = ThreadingHTTPServer(("127.0.0.1", 0), Handler)
    state.base_url = f"http://127.0.0.1:{httpd.server_address[1]}/"
    t = threading.Thread(target=httpd.serve_forever, daemon=True)
    t.start()
    try:
        yield state
    finally:
        httpd.shutdown()
        httpd.server_close()

@pytest.fixture
def dead_base_url():
    """A localhost port nobody listens on: connection refused, instantly."""
    s = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    s.bind(("127.0.0.1", 0))
    port = s.getsockname()[1]
    s.close()
    return f"http://127.0.0.1:{port}/"

# ---- client doubles ----------------------------------------------------------
class FakeClient:
    def __init__(self, name: str, body: bytes = b"", error: Optional[BaseException] = None):
        self.name = name
        self.body = body
        self.error = error
        self.calls = 0
        self.closed = False

    def download(self, url: str, out_path: Path, on_progress=None) -> int:
        self.calls += 1
        if self.error is not None:
            raise self.error
        out_path.write_bytes(self.body)
        if on_progress:
            on_progress(len(self.body), len(self.body))
        return len(self.body)

    def close(self) -> None:
        self.closed = True

class CountingClient:
    """Wraps a real client and counts how often it was asked to download."""

    def __init__(self, inner):
        self.inner = inner
        self.name = inner.name
        self.calls = 0

    def download(self, url, out_path, on_progress=None):
        self.calls += 1
        return self.inner.download(url, out_path, on_progress)

    def close(self):
        self.inner.close()

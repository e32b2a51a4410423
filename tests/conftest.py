"""
pytest configuration and fixtures.
"""

import socket
import threading
from pathlib import Path
from typing import Callable, Generator
import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from statichttpd import HTTPServer, ServerConfig


PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01\x08\x02"
GIF_BYTES = b"GIF89a\x01\x00\x01\x00\x80\x00\x00\xff\xff\xff\x00\x00\x00,"
JPG_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00\xff\xd9"


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample HTTP GET request."""
    return (
        b"GET /about?lang=en HTTP/1.1\r\n"
        b"Host: localhost:2728\r\n"
        b"User-Agent: pytest\r\n"
        b"Accept: text/html\r\n"
        b"\r\n"
    )


@pytest.fixture
def sample_post_request() -> bytes:
    """Sample HTTP POST request with a form body."""
    body = b"name=John&email=john%40example.com"
    return (
        b"POST / HTTP/1.1\r\n"
        b"Host: localhost:2728\r\n"
        b"Content-Type: application/x-www-form-urlencoded\r\n"
        + f"Content-Length: {len(body)}\r\n".encode()
        + b"\r\n"
        + body
    )


@pytest.fixture
def docroot(tmp_path: Path) -> Path:
    """
    A document root with one file of every served type.

        htdocs/
        ├── index.html
        ├── about.html
        ├── data.xyz
        ├── css/site.css
        ├── js/app.js
        ├── img/logo.png
        ├── img/anim.gif
        ├── img/photo.jpg
        └── docs/index.html
    """
    root = tmp_path / "htdocs"
    (root / "css").mkdir(parents=True)
    (root / "js").mkdir()
    (root / "img").mkdir()
    (root / "docs").mkdir()

    (root / "index.html").write_bytes(b"<h1>Home</h1>\n")
    (root / "about.html").write_bytes(b"<h1>About</h1>\n")
    (root / "data.xyz").write_bytes(b"unknown extension\n")
    (root / "css" / "site.css").write_bytes(b"body { margin: 0; }\n")
    (root / "js" / "app.js").write_bytes(b"console.log('hi');\n")
    (root / "img" / "logo.png").write_bytes(PNG_BYTES)
    (root / "img" / "anim.gif").write_bytes(GIF_BYTES)
    (root / "img" / "photo.jpg").write_bytes(JPG_BYTES)
    (root / "docs" / "index.html").write_bytes(b"<h1>Docs</h1>\n")
    return root


@pytest.fixture
def config(docroot: Path) -> ServerConfig:
    """Test server configuration serving the temporary document root."""
    return ServerConfig(
        host="127.0.0.1",
        port=0,  # Let OS pick a free port
        document_root=str(docroot),
        accept_poll_interval=0.05,
        log_level="WARNING",
    )


@pytest.fixture
def free_port() -> int:
    """Get a free port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(('127.0.0.1', 0))
        return s.getsockname()[1]


def fetch(port: int, raw_request: bytes, timeout: float = 5.0) -> bytes:
    """Send a raw request and read until the server closes the connection."""
    with socket.create_connection(("127.0.0.1", port), timeout=timeout) as s:
        s.sendall(raw_request)
        return recv_all(s)


def recv_all(s: socket.socket) -> bytes:
    chunks = []
    while True:
        chunk = s.recv(4096)
        if not chunk:
            break
        chunks.append(chunk)
    return b"".join(chunks)


class TestServer:
    """Test server helper that runs in a background thread."""

    __test__ = False  # Not a test class, despite the name

    def __init__(self, server: HTTPServer):
        self.server = server
        self._thread: threading.Thread = None

    @property
    def port(self) -> int:
        return self.server.address[1]

    def start(self):
        """Start server in background thread."""
        self._thread = threading.Thread(target=self.server.run, daemon=True)
        self._thread.start()

        if not self.server.wait_until_listening(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def fetch(self, raw_request: bytes) -> bytes:
        return fetch(self.port, raw_request)

    def stop(self):
        """Stop the server."""
        self.server.shutdown()

        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)

    @property
    def stopped(self) -> bool:
        return self._thread is not None and not self._thread.is_alive()


@pytest.fixture
def make_test_server() -> Generator[Callable[[HTTPServer], TestServer], None, None]:
    """Wrap servers in TestServer helpers; any still running are stopped after the test."""
    created = []

    def factory(server: HTTPServer) -> TestServer:
        test_srv = TestServer(server)
        created.append(test_srv)
        return test_srv

    yield factory

    for test_srv in created:
        test_srv.stop()


@pytest.fixture
def test_server(config: ServerConfig, make_test_server) -> TestServer:
    """A running server on a free port, stopped after the test."""
    test_srv = make_test_server(HTTPServer(config))
    test_srv.start()
    return test_srv

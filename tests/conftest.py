"""
pytest configuration and fixtures.
"""

import os
import socket
import threading
import time
from typing import Generator
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from staticgate import ServerConfig, StaticServer, serve
from staticgate.http import HTTPRequest


@pytest.fixture
def fixtures_root(tmp_path: Path) -> Path:
    """
    A small site to serve:

        hello.txt            "world"
        index.txt            "text index"
        world/index.html     "html index"
        .hidden              "secret"
        .git/config          "[core]"
        sub/.env             "KEY=1"
    """
    root = tmp_path / "fixtures"
    root.mkdir()
    (root / "hello.txt").write_text("world")
    (root / "index.txt").write_text("text index")
    (root / "world").mkdir()
    (root / "world" / "index.html").write_text("html index")
    (root / ".hidden").write_text("secret")
    (root / ".git").mkdir()
    (root / ".git" / "config").write_text("[core]")
    (root / "sub").mkdir()
    (root / "sub" / ".env").write_text("KEY=1")
    return root


@pytest.fixture
def outside_file(tmp_path: Path) -> Path:
    """A file next to the root that no request may reach."""
    secret = tmp_path / "secret.txt"
    secret.write_text("do not serve")
    return secret


@pytest.fixture
def make_request():
    """Build an HTTPRequest from a raw request-target."""
    def _make(target: str, method: str = "GET", headers=None) -> HTTPRequest:
        return HTTPRequest.from_target(method, target, headers=headers)
    return _make


@pytest.fixture
def free_port() -> int:
    """Get a free port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(('127.0.0.1', 0))
        return s.getsockname()[1]


class RunningServer:
    """StaticServer running in a background thread."""

    def __init__(self, server: StaticServer):
        self.server = server
        self.host, self.port = server.bind()
        self._thread: threading.Thread = None

    def start(self):
        self._thread = threading.Thread(target=self.server.serve_forever, daemon=True)
        self._thread.start()

        # Wait for server to be ready
        for _ in range(50):  # 5 seconds max
            try:
                with socket.create_connection((self.host, self.port), timeout=0.5):
                    return
            except OSError:
                time.sleep(0.1)

        raise RuntimeError("Server failed to start")

    def stop(self):
        self.server.shutdown()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)
        self.server._shutdown()


@pytest.fixture
def running_server(fixtures_root: Path, free_port: int) -> Generator[RunningServer, None, None]:
    """Serve fixtures_root with index.txt as the directory index."""
    server = StaticServer(
        serve(str(fixtures_root), index="index.txt"),
        ServerConfig(host="127.0.0.1", port=free_port, log_level="WARNING"),
    )
    running = RunningServer(server)
    running.start()

    yield running

    running.stop()


@pytest.fixture
def in_tmp_cwd(tmp_path: Path) -> Generator[Path, None, None]:
    """Run the test with tmp_path as the working directory."""
    previous = os.getcwd()
    os.chdir(tmp_path)
    try:
        yield tmp_path
    finally:
        os.chdir(previous)

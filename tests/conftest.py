"""Pytest configuration and shared fixtures for coder_gateway tests."""

import hashlib
import os
import sys
import threading
from collections.abc import Callable, Generator
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Sequence

import pytest
import requests

from coder_gateway.core.interfaces import CommandResult, ProcessRunner
from coder_gateway.core.telemetry import get_telemetry

OVERRIDE_BODY = b"#!/bin/sh\necho 'override binary'\n"

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="fake CLI binaries are shell scripts")


class _DeploymentHandler(BaseHTTPRequestHandler):
    """Serves /bin/coder-* like a deployment, honouring If-None-Match."""

    server: "MockDeployment"

    def do_GET(self) -> None:  # noqa: N802
        srv = self.server
        body = srv.binary_body
        code = 200
        if self.path == "/bin/override":
            body = OVERRIDE_BODY
        elif not self.path.startswith("/bin/coder-"):
            code, body = 404, b"not found"
        elif srv.error_code:
            code, body = srv.error_code, f"error code {srv.error_code}".encode()
        elif self.headers.get("If-None-Match") == f'"{hashlib.sha1(body).hexdigest()}"':
            code = 304

        srv.requests.append((self.path, self.headers.get("If-None-Match"), code))
        self.send_response(code)
        if code == 304:
            self.end_headers()
            return
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format: str, *args: object) -> None:
        pass


class MockDeployment(ThreadingHTTPServer):
    """Local HTTP server standing in for a deployment's binary endpoint."""

    daemon_threads = True

    def __init__(self, error_code: int = 0) -> None:
        super().__init__(("127.0.0.1", 0), _DeploymentHandler)
        self.error_code = error_code
        self.url = f"http://127.0.0.1:{self.server_port}"
        self.binary_body = f"#!/bin/sh\necho '{self.url}'\n".encode()
        self.requests: list[tuple[str, str | None, int]] = []
        self._thread = threading.Thread(target=self.serve_forever, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self.shutdown()
        self.server_close()


class FakeRunner(ProcessRunner):
    """Process runner returning scripted results and recording calls."""

    def __init__(self, exit_code: int = 0, stdout: str = "", stderr: str = "") -> None:
        self.result = CommandResult(exit_code=exit_code, stdout=stdout, stderr=stderr)
        self.calls: list[list[str]] = []

    def run(self, args: Sequence[str], timeout: float | None = None) -> CommandResult:
        self.calls.append([str(a) for a in args])
        return self.result


@pytest.fixture
def deployment_server() -> Generator[Callable[..., MockDeployment], None, None]:
    """Factory starting mock deployments; all are stopped after the test."""
    servers: list[MockDeployment] = []

    def start(error_code: int = 0) -> MockDeployment:
        srv = MockDeployment(error_code)
        servers.append(srv)
        return srv

    yield start
    for srv in servers:
        srv.stop()


@pytest.fixture
def http_session() -> Generator[requests.Session, None, None]:
    """Session that ignores proxy settings from the environment."""
    session = requests.Session()
    session.trust_env = False
    yield session
    session.close()


@pytest.fixture
def cache_root(tmp_path: Path) -> Path:
    return tmp_path / "cache"


@pytest.fixture(autouse=True)
def clean_telemetry() -> Generator[None, None, None]:
    get_telemetry().clear()
    yield
    get_telemetry().clear()


def make_executable(path: Path, contents: str = "#!/bin/sh\n") -> Path:
    """Write a file and mark it executable."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(contents)
    os.chmod(path, 0o755)
    return path

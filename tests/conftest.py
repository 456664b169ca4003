from pathlib import Path

import httpx
import pytest
from fastapi.testclient import TestClient

from app import create_app
from core.config import Config, UpstreamSettings

DATA_DIR = Path(__file__).parent / "data"
UPSTREAM_URL = "http://upstream.local:11434"


class RecordingLogger:
    """RequestLogger that keeps every call for assertions."""

    def __init__(self):
        self.forwarded = []
        self.responses = []
        self.preflights = []
        self.errors = []

    def log_forward(self, method, target_url, headers, body):
        self.forwarded.append((method, target_url))

    def log_response(self, method, path, status):
        self.responses.append((method, path, status))

    def log_preflight(self, path):
        self.preflights.append(path)

    def log_error(self, status, message):
        self.errors.append((status, message))


class MockUpstream:
    """Mock upstream handler recording each received request."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.handler = lambda request: httpx.Response(200, json={"ok": True})

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)


@pytest.fixture
def config():
    return Config(upstream=UpstreamSettings(base_url=UPSTREAM_URL))


@pytest.fixture
def logger():
    return RecordingLogger()


@pytest.fixture
def upstream():
    return MockUpstream()


@pytest.fixture
def client(config, logger, upstream):
    app = create_app(config, logger, transport=httpx.MockTransport(upstream))
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def tls_files():
    """Matching self-signed certificate and key for localhost."""
    return DATA_DIR / "cert.pem", DATA_DIR / "key.pem"

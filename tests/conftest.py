"""Pytest configuration and fixtures."""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from starlette.requests import HTTPConnection

from propdesk.core.config import GatewayConfig, Settings
from propdesk.main import create_app

TEST_SECRET = "test-secret-key-for-the-propdesk-authorization-gateway-0123456789abcdef"


class RecordingKeyProvider:
    """Signing key provider that counts calls and can be told to fail."""

    def __init__(self, secret: str = TEST_SECRET, error: Exception | None = None):
        self.secret = secret
        self.error = error
        self.calls = 0

    async def __call__(self) -> str:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.secret


def make_connection(
    path: str,
    query: str = "",
    cookies: dict[str, str] | None = None,
    headers: dict[str, str] | None = None,
) -> HTTPConnection:
    """Build a bare HTTP connection for exercising the reader and gateway directly."""
    raw_headers = [(b"host", b"test")]
    if cookies:
        cookie_header = "; ".join(f"{name}={value}" for name, value in cookies.items())
        raw_headers.append((b"cookie", cookie_header.encode("latin1")))
    for name, value in (headers or {}).items():
        raw_headers.append((name.lower().encode("latin1"), value.encode("latin1")))

    return HTTPConnection(
        {
            "type": "http",
            "method": "GET",
            "scheme": "http",
            "server": ("test", 80),
            "root_path": "",
            "path": path,
            "query_string": query.encode("latin1"),
            "headers": raw_headers,
        }
    )


@pytest.fixture
def settings() -> Settings:
    """Test settings; no environment lookups."""
    return Settings(
        environment="test",
        session_secret_key=TEST_SECRET,
        static_dir="does-not-exist",
    )


@pytest.fixture
def gateway_config(settings: Settings) -> GatewayConfig:
    return settings.gateway_config()


@pytest.fixture
def key_provider() -> RecordingKeyProvider:
    return RecordingKeyProvider()


@pytest.fixture
def app(settings: Settings, key_provider: RecordingKeyProvider):
    return create_app(settings=settings, key_provider=key_provider)


@pytest_asyncio.fixture
async def client(app):
    """Async test client; redirects are not followed so the gateway's answer is visible."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        ac.key_provider = app.state.gateway.reader.key_provider
        yield ac

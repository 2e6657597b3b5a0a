import json
from typing import Callable, Dict, List, Tuple
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from resendex import ClientConfig, Resend

API_KEY = 're_test_0123456789'


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


class FakeApi:
    """Request handler for httpx.MockTransport that records every request."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self._routes: Dict[Tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}

    def reply(self, method: str, path: str, status_code: int = 200, **kwargs):
        self._routes[(method, path)] = lambda request: httpx.Response(status_code, **kwargs)

    def fail(self, method: str, path: str, exc_type=httpx.ConnectError, message='Connection refused'):
        def raise_error(request):
            raise exc_type(message, request=request)

        self._routes[(method, path)] = raise_error

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self._routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(
                404, json={'statusCode': 404, 'name': 'not_found', 'message': 'Route not found'}
            )
        return route(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self):
        return json.loads(self.last.content)


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def mock_sleep():
    """Fixture to mock asyncio.sleep to avoid actual waiting in tests."""
    with patch('asyncio.sleep', new_callable=AsyncMock) as mock:
        yield mock


@pytest.fixture
def mock_blocking_sleep():
    """Fixture to mock time.sleep for the blocking limiter path."""
    with patch('time.sleep') as mock:
        yield mock


@pytest.fixture
def api():
    return FakeApi()


@pytest.fixture
def config():
    # High enough that tests never wait on the limiter
    return ClientConfig(api_key=API_KEY, rate_limit=1000)


@pytest.fixture
def make_client(api):
    """Factory for clients wired to the fake API."""

    def factory(blocking=False, **options):
        options.setdefault('rate_limit', 1000)
        return Resend(API_KEY, blocking=blocking, transport=httpx.MockTransport(api.handler), **options)

    return factory


@pytest.fixture
def email_payload():
    return {
        'from_': 'Acme <onboarding@resend.dev>',
        'to': 'delivered@resend.dev',
        'subject': 'Hello',
        'html': '<p>It works</p>',
    }

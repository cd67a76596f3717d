"""
Pytest Configuration

Shared fakes and fixtures: a scripted stand-in for the aiohttp session
manager, stub backends, a temporary SQLite store and an API client with
its service dependencies overridden.
"""

import json
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from naoload.api import dependencies
from naoload.api.app import create_app
from naoload.api.middleware import rate_limit
from naoload.api.routers.health import get_store
from naoload.services.database import Database
from naoload.services.rate_limiter import DownloadRateLimiter
from naoload.services.resolver import ResolverService
from naoload.services.resolver.platforms import KNOWN_PLATFORMS
from naoload.services.usage import UsageLogger


# =============================================================================
# HTTP Fakes
# =============================================================================

class FakeResponse:
    """Minimal aiohttp response: status plus a text body."""

    def __init__(self, status=200, payload=None, text=None):
        self.status = status
        if text is None:
            text = "" if payload is None else json.dumps(payload)
        self._text = text

    async def text(self):
        return self._text

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


class FakeSession:
    """
    Replays queued responses in order, recording every call.

    Queue items are FakeResponse objects or exceptions to raise.
    """

    def __init__(self, responses=()):
        self.responses = list(responses)
        self.calls = []

    def _next(self, method, url, kwargs):
        self.calls.append(SimpleNamespace(method=method, url=url, kwargs=kwargs))
        if not self.responses:
            raise AssertionError(f"unexpected {method} {url}")
        item = self.responses.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item

    def get(self, url, **kwargs):
        return self._next("GET", url, kwargs)

    def post(self, url, **kwargs):
        return self._next("POST", url, kwargs)

    @property
    def urls(self):
        return [call.url for call in self.calls]


# =============================================================================
# Backend Stub
# =============================================================================

class StubBackend:
    """Backend double returning a fixed result or raising a fixed error."""

    def __init__(
        self,
        name="stub",
        result=None,
        error=None,
        platforms=KNOWN_PLATFORMS,
        kinds=frozenset({"video", "audio"}),
        generic=False,
    ):
        self.name = name
        self.result = result
        self.error = error
        self.platforms = platforms
        self.kinds = kinds
        self.generic = generic
        self.calls = []

    async def resolve(self, url, identifier, kind, platform):
        self.calls.append(SimpleNamespace(url=url, identifier=identifier, kind=kind, platform=platform))
        if self.error is not None:
            raise self.error
        return self.result


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def db(tmp_path):
    return Database(str(tmp_path / "naoload.db"))


@pytest.fixture
def make_api(db, monkeypatch):
    """Build a TestClient wired to stub backends and a temp store."""

    def _make(backends=(), password="secret", store=True, throttle=1000):
        monkeypatch.setattr(
            rate_limit, "_throttle",
            rate_limit.BurstThrottle(limit=throttle, window=60),
        )
        app = create_app()

        database = db if store else None
        resolver = ResolverService(list(backends))
        limiter = DownloadRateLimiter(database, {"video": 4, "audio": 10})
        usage = UsageLogger(database)

        app.dependency_overrides[dependencies.get_resolver_service] = lambda: resolver
        app.dependency_overrides[dependencies.get_limiter] = lambda: limiter
        app.dependency_overrides[dependencies.get_usage] = lambda: usage
        app.dependency_overrides[dependencies.get_admin_password] = lambda: password
        app.dependency_overrides[get_store] = lambda: database

        return SimpleNamespace(
            client=TestClient(app),
            resolver=resolver,
            limiter=limiter,
            usage=usage,
        )

    return _make

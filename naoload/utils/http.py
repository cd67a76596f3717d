"""
NaoLoad - HTTP Utilities
========================

Shared HTTP session for all resolver backends.
"""

import aiohttp

from naoload.core.constants import USER_AGENT

# Default timeout for upstream API calls
UPSTREAM_TIMEOUT = aiohttp.ClientTimeout(total=30, connect=10)


def make_timeout(total: float) -> aiohttp.ClientTimeout:
    """Build a client timeout with a 10s connect cap."""
    return aiohttp.ClientTimeout(total=total, connect=min(10.0, total))


class HTTPSessionManager:
    """Lazy-initialized HTTP session manager."""

    _session: aiohttp.ClientSession | None = None

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create the HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(headers={"User-Agent": USER_AGENT})
        return self._session

    def get(self, url: str, **kwargs):
        """Return a GET request context manager (use with async with)."""
        kwargs.setdefault("timeout", UPSTREAM_TIMEOUT)
        return self.session.get(url, **kwargs)

    def post(self, url: str, **kwargs):
        """Return a POST request context manager (use with async with)."""
        kwargs.setdefault("timeout", UPSTREAM_TIMEOUT)
        return self.session.post(url, **kwargs)

    async def close(self) -> None:
        """Close the session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None


# Global instance
http_session = HTTPSessionManager()

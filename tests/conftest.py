from __future__ import annotations

import httpx
import pytest

from config import Settings


@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch) -> Settings:
    monkeypatch.setenv("PEEPHOLE_ROOM_NAME", "room1")
    monkeypatch.setenv("PEEPHOLE_CACHE_EXPIRY", "5s")
    monkeypatch.setenv("XMPP_SERVER", "census.test")
    monkeypatch.setenv("PROSODY_HTTP_PORT", "5280")
    return Settings()


class CensusUpstream:
    """Fake room census endpoint that counts requests."""

    def __init__(self, body: bytes | str = b'{"room_census": []}', status_code: int = 200):
        self.body = body
        self.status_code = status_code
        self.error: Exception | None = None
        self.calls = 0

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls += 1
        if self.error is not None:
            raise self.error
        body = self.body.encode() if isinstance(self.body, str) else self.body
        return httpx.Response(self.status_code, content=body)

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self))


@pytest.fixture
def upstream() -> CensusUpstream:
    return CensusUpstream()

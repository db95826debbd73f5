from __future__ import annotations

from pathlib import Path
import sys

import httpx
import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.config import Settings, get_settings
from app.handlers.generation_handler import get_gemini_client
from app.main import app
from app.services.gemini import GeminiClient


class FakeUpstream:
    """httpx.MockTransport handler that records every outbound request."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.response = httpx.Response(200, json={"predictions": [{"bytesBase64Encoded": "abc"}]})
        self.error: Exception | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.response

    @property
    def call_count(self) -> int:
        return len(self.requests)


def make_settings(api_key: str | None = "test-key") -> Settings:
    return Settings(
        _env_file=None,
        GEMINI_API_KEY=api_key,
        GEMINI_BASE_URL="https://upstream.test/v1beta",
    )


@pytest.fixture()
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture()
def settings() -> Settings:
    return make_settings()


@pytest.fixture()
def client(settings: Settings, upstream: FakeUpstream):
    async def _gemini_client():
        gemini = GeminiClient.from_settings(settings, transport=httpx.MockTransport(upstream))
        try:
            yield gemini
        finally:
            await gemini.close()

    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_gemini_client] = _gemini_client
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()

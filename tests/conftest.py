from __future__ import annotations

from typing import Any, Callable

import httpx
import pytest

import genova_image.serve.fastapi_app as app_mod

API_KEY = "sk-test-secret-key"
BASE_URL = "https://provider.example/v1"


class FakeProvider:
    """Records outbound calls and answers with a configurable response."""

    def __init__(self) -> None:
        self.calls: list[httpx.Request] = []
        self.responder: Callable[[httpx.Request], httpx.Response] = lambda request: httpx.Response(
            200, json={"data": [{"url": "https://files.example/img.png"}]}
        )

    def reply(self, status: int, **kwargs: Any) -> None:
        self.responder = lambda request: httpx.Response(status, **kwargs)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        return self.responder(request)


@pytest.fixture
def provider_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("GENOVA_CONFIG", "GENOVA_TIMEOUT", "NEXT_PUBLIC_API_KEY", "NEXT_PUBLIC_API_BASE_URL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("GENOVA_API_KEY", API_KEY)
    monkeypatch.setenv("GENOVA_API_BASE_URL", BASE_URL)


@pytest.fixture
def provider(monkeypatch: pytest.MonkeyPatch, provider_env: None) -> FakeProvider:
    fake = FakeProvider()

    def _client(cfg: Any) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(fake.handler), timeout=cfg.timeout)

    monkeypatch.setattr(app_mod, "_provider_client", _client)
    return fake

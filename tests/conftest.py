from __future__ import annotations

import io
import json
from typing import Any
from urllib.error import HTTPError, URLError

import pytest
from fastapi.testclient import TestClient

from cep_weather.adapters import http as upstream_http
from cep_weather.main import create_app
from cep_weather.settings import AppSettings, EnvSettings

VIACEP_URL = "https://viacep.com.br/ws/"
WEATHERAPI_URL = "https://api.weatherapi.com/v1/current.json"

SAO_PAULO = {
    "cep": "01001-000",
    "logradouro": "Praça da Sé",
    "localidade": "São Paulo",
    "uf": "SP",
}


def make_settings(api_key: str = "test-key") -> AppSettings:
    return AppSettings(env=EnvSettings(_env_file=None, weather_api_key=api_key))


class FakeResponse:
    def __init__(self, status: int, body: bytes) -> None:
        self.status = status
        self._body = body

    def read(self) -> bytes:
        return self._body

    def __enter__(self) -> FakeResponse:
        return self

    def __exit__(self, *exc_info: Any) -> bool:
        return False


class FakeUpstreams:
    """Stands in for urlopen, answering by URL prefix and recording every call."""

    def __init__(self) -> None:
        self.calls: list[str] = []
        self._routes: list[tuple[str, int, bytes | None, Exception | None]] = []

    def add(
        self,
        prefix: str,
        *,
        status: int = 200,
        payload: Any = None,
        body: bytes | None = None,
        error: Exception | None = None,
    ) -> None:
        if payload is not None:
            body = json.dumps(payload).encode("utf-8")
        self._routes.insert(0, (prefix, status, body, error))

    def __call__(self, request, timeout=None):
        url = request.full_url
        self.calls.append(url)
        for prefix, status, body, error in self._routes:
            if not url.startswith(prefix):
                continue
            if error is not None:
                raise error
            if status >= 400:
                raise HTTPError(url, status, "error", None, io.BytesIO(body or b""))
            return FakeResponse(status, body or b"")
        raise URLError(f"no fake route for {url}")


@pytest.fixture
def upstreams(monkeypatch: pytest.MonkeyPatch) -> FakeUpstreams:
    fake = FakeUpstreams()
    monkeypatch.setattr(upstream_http, "urlopen", fake)
    return fake


@pytest.fixture
def settings() -> AppSettings:
    return make_settings()


@pytest.fixture
def client(settings: AppSettings, upstreams: FakeUpstreams):
    with TestClient(create_app(settings)) as test_client:
        yield test_client

"""Shared pytest fixtures for authbridge tests."""

from __future__ import annotations

from typing import Any, Callable, Dict, Tuple, Union
from urllib.parse import parse_qs, urlsplit

import httpx
import pytest

from authbridge.integrations.oauth.base import ProviderDefinition
from authbridge.integrations.oauth.definition import resolve_provider_definition

Responder = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


class MockHTTP:
    """Records requests sent through an ``httpx.MockTransport``."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: Dict[Tuple[str, str], Responder] = {}

    def add(self, method: str, url: str, responder: Responder) -> None:
        self._routes[(method.upper(), url)] = responder

    def add_json(self, method: str, url: str, payload: Any, status_code: int = 200) -> None:
        self.add(method, url, httpx.Response(status_code, json=payload))

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, f"{request.url.scheme}://{request.url.host}{request.url.path}")
        responder = self._routes.get(key)
        if responder is None:
            return httpx.Response(404, json={"message": "not found"})
        if callable(responder):
            return responder(request)
        return responder

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self._handle))

    @staticmethod
    def form(request: httpx.Request) -> Dict[str, str]:
        """Decode an urlencoded request body into single values."""
        return {key: values[0] for key, values in parse_qs(request.content.decode()).items()}

    @staticmethod
    def query(url: str) -> Dict[str, str]:
        """Decode the query string of a URL into single values."""
        return {key: values[0] for key, values in parse_qs(urlsplit(str(url)).query).items()}


def map_acme_profile(profile):
    return {
        "id": profile.get("sub"),
        "name": profile.get("name"),
        "email": profile.get("email"),
        "image": profile.get("picture"),
    }


ACME_DEFAULTS = {
    "id": "acme",
    "name": "Acme",
    "type": "oauth",
    "authorization": {
        "url": "https://idp.example.com/authorize",
        "params": {"scope": "openid profile"},
    },
    "token": "https://idp.example.com/token",
    "userinfo": "https://idp.example.com/userinfo",
    "profile": map_acme_profile,
    "display": {"logo": "/acme.svg"},
}


@pytest.fixture
def http_mock() -> MockHTTP:
    return MockHTTP()


@pytest.fixture
def acme_defaults() -> Dict[str, Any]:
    return dict(ACME_DEFAULTS)


@pytest.fixture
def acme(acme_defaults) -> ProviderDefinition:
    """Baseline provider using the default implementation for every step."""
    return resolve_provider_definition(
        {"client_id": "acme-client", "client_secret": "acme-secret"},
        acme_defaults,
    )

# tests/conftest.py
from typing import Any, Dict, List, Tuple

import pytest
from fastapi.testclient import TestClient

from lookup_gateway.api.app import create_app
from lookup_gateway.api_manager.base import FetchResult, InMemoryQuotaStore, SourceDescriptor, SourceFetcher
from lookup_gateway.utils.settings import settings_from_dict


class FakeFetcher(SourceFetcher):
    """Answers from a {source_name: body | FetchResult} table and records calls."""

    def __init__(self, responses: Dict[str, Any]) -> None:
        self.responses = responses
        self.calls: List[Tuple[str, str]] = []

    def fetch(self, source: SourceDescriptor, query: str) -> FetchResult:
        self.calls.append((source.name, query))
        answer = self.responses.get(source.name)
        if isinstance(answer, FetchResult):
            return answer
        if answer is None:
            return FetchResult(ok=False, source=source.name, error="timeout")
        return FetchResult(ok=True, source=source.name, data=answer, status_code=200)


def make_config(limit: int = 100, email_enabled: bool = True, sources=None) -> Dict[str, Any]:
    if sources is None:
        sources = [
            {"name": "A", "url_template": "https://a.example/?mobile={query}", "response_shape": "nested_result"},
            {"name": "B", "url_template": "https://b.example/lookup/{query}", "response_shape": "generic"},
        ]
    return {
        "branding": {"brand": "TEST BRAND", "owner": "@owner", "telegram": "https://t.me/test"},
        "quota": {"limit": limit, "window_hours": 24, "eviction_rate": 0},
        "upstream": {"sources": sources},
        "email": {"enabled": email_enabled},
    }


@pytest.fixture
def fake_fetcher():
    return FakeFetcher(
        {
            "A": {"data": {"result": []}},
            "B": {"result": [{"name": "Ravi Kumar", "credit": "AnshAPI", "address": "Delhi via AnshAPI"}]},
        }
    )


@pytest.fixture
def quota_store():
    return InMemoryQuotaStore()


@pytest.fixture
def gateway_app(fake_fetcher, quota_store):
    return create_app(settings_from_dict(make_config()), quota_store=quota_store, fetcher=fake_fetcher)


@pytest.fixture
def client(gateway_app):
    with TestClient(gateway_app) as c:
        yield c

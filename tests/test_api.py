"""HTTP surface tests using FastAPI's TestClient and a fake upstream."""

from fastapi.testclient import TestClient

from conftest import FakeFetcher, make_config

from lookup_gateway.api.app import create_app
from lookup_gateway.api_manager.base import InMemoryQuotaStore
from lookup_gateway.utils.settings import settings_from_dict


def test_home_document(client) -> None:
    r = client.get("/")
    assert r.status_code == 200
    body = r.json()
    assert body["brand"] == "TEST BRAND"
    assert "example" in body


def test_home_does_not_consume_quota(client, quota_store) -> None:
    client.get("/")
    assert len(quota_store) == 0


def test_health(client) -> None:
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "healthy"}


def test_mobile_lookup_success(client, fake_fetcher) -> None:
    """A answers empty, B answers; the result is sanitized."""
    r = client.get("/", params={"num": "+917070096514"})
    assert r.status_code == 200, r.text
    data = r.json()["data"]
    assert data["success"] is True
    assert data["result"] == [{"name": "Ravi Kumar", "address": "Delhi"}]
    assert data["brand"] == "TEST BRAND"
    assert data["searches_remaining"] == 99
    assert r.headers["X-Brand"] == "TEST BRAND"
    assert r.headers["Cache-Control"] == "public, max-age=60"
    assert fake_fetcher.calls == [("A", "7070096514"), ("B", "7070096514")]


def test_mobile_aliases(client) -> None:
    for param in ("mobile", "number"):
        r = client.get(f"/?{param}=7070096514")
        assert r.status_code == 200, param


def test_remaining_decreases(client) -> None:
    first = client.get("/?num=7070096514").json()["data"]["searches_remaining"]
    second = client.get("/?num=7070096514").json()["data"]["searches_remaining"]
    assert second == first - 1


def test_invalid_number(client, fake_fetcher) -> None:
    r = client.get("/?num=99999")
    assert r.status_code == 400
    assert r.json() == {"success": False, "error": "Invalid Indian Mobile Number", "brand": "TEST BRAND"}
    assert fake_fetcher.calls == []


def test_not_found_when_all_sources_fail() -> None:
    fetcher = FakeFetcher({"A": None, "B": {"result": []}})
    app = create_app(settings_from_dict(make_config()), fetcher=fetcher)
    with TestClient(app) as c:
        r = c.get("/?num=7070096514")
    assert r.status_code == 404
    assert r.json()["success"] is False
    assert r.json()["error"] == "No data found"


def test_no_sources_configured() -> None:
    app = create_app(settings_from_dict(make_config(sources=[])), fetcher=FakeFetcher({}))
    with TestClient(app) as c:
        r = c.get("/?num=7070096514")
    assert r.status_code == 404
    assert r.json()["brand"] == "TEST BRAND"


def test_quota_exceeded() -> None:
    fetcher = FakeFetcher({"A": {"result": ["x"]}})
    app = create_app(settings_from_dict(make_config(limit=2)), quota_store=InMemoryQuotaStore(), fetcher=fetcher)
    with TestClient(app) as c:
        assert c.get("/?num=7070096514").status_code == 200
        assert c.get("/?num=7070096514").status_code == 200
        r = c.get("/?num=7070096514")
    assert r.status_code == 403
    body = r.json()
    assert body["status"] == 403
    assert body["BRAND"] == "TEST BRAND"
    assert body["contact"] == "DM @owner for premium access with custom name"
    assert r.headers["X-Brand"] == "TEST BRAND"
    assert len(fetcher.calls) == 2


def test_quota_is_per_client() -> None:
    app = create_app(settings_from_dict(make_config(limit=1)), fetcher=FakeFetcher({"A": {"result": ["x"]}}))
    with TestClient(app) as c:
        assert c.get("/?num=7070096514", headers={"CF-Connecting-IP": "1.1.1.1"}).status_code == 200
        assert c.get("/?num=7070096514", headers={"CF-Connecting-IP": "1.1.1.1"}).status_code == 403
        assert c.get("/?num=7070096514", headers={"CF-Connecting-IP": "2.2.2.2"}).status_code == 200


def test_method_not_allowed(client) -> None:
    r = client.post("/")
    assert r.status_code == 405
    assert r.json()["error"] == "Method not allowed"
    assert client.put("/?num=7070096514").status_code == 405
    assert client.delete("/anything").status_code == 405


def test_email_invalid(client) -> None:
    r = client.get("/?email=not-an-email")
    assert r.status_code == 400
    assert r.json()["error"] == "Invalid Email Address"


def test_email_not_implemented(client) -> None:
    r = client.get("/?email=user@example.com")
    assert r.status_code == 501
    assert r.json()["error"] == "Email lookup coming soon"


def test_email_disabled_falls_through() -> None:
    app = create_app(settings_from_dict(make_config(email_enabled=False)), fetcher=FakeFetcher({}))
    with TestClient(app) as c:
        r = c.get("/?email=user@example.com")
    assert r.status_code == 400
    assert r.json()["error"] == "Missing or invalid search parameter"


def test_missing_parameter(client) -> None:
    r = client.get("/?foo=bar")
    assert r.status_code == 400
    assert r.json()["error"] == "Missing or invalid search parameter"


def test_empty_number_is_missing(client) -> None:
    r = client.get("/?num=")
    assert r.status_code == 400
    assert r.json()["error"] == "Missing or invalid search parameter"


def test_response_is_pretty_printed(client) -> None:
    r = client.get("/")
    assert "\n  " in r.text

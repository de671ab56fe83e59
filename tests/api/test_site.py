"""
API tests for the assembled edge app (`main.create_app`) using FastAPI's TestClient.

Covers:
- Content URLs: rewritten under the namespace, then resolved to the client page
- Static assets: served directly, never rewritten
- Unknown URLs: answered with the client 404 page
- /health and /metrics: handled by the app itself, exempt from the rewrite

The app is built with an in-memory asset store so no build directory is needed.
"""

from fastapi.testclient import TestClient

from asset_store import InMemoryAssetStore
from main import create_app


def _client(files, rewrite_enabled=True):
    store = InMemoryAssetStore(files)
    return TestClient(create_app(store=store, rewrite_enabled=rewrite_enabled)), store


def test_content_url_is_served_from_namespaced_client_page():
    client, store = _client({"/client/webflow/docs/intro/index.html": "intro page"})

    resp = client.get("/docs/intro")

    assert resp.status_code == 200
    assert resp.text == "intro page"
    assert store.requested == ["/client/webflow/docs/intro/index.html"]


def test_root_is_served_from_namespaced_home():
    client, store = _client({"/client/webflow/index.html": "home"})

    resp = client.get("/")

    assert resp.text == "home"


def test_static_asset_is_not_rewritten():
    client, store = _client({"/_astro/app.js": "console.log(1)"})

    resp = client.get("/_astro/app.js")

    assert resp.text == "console.log(1)"
    assert store.requested == ["/_astro/app.js"]


def test_unknown_url_gets_not_found_page():
    client, store = _client({"/client/404.html": "not here"})

    resp = client.get("/nope")

    assert resp.text == "not here"
    assert store.requested[-1] == "/client/404.html"


def test_without_rewrite_paths_reach_router_unchanged():
    client, store = _client({"/client/docs/index.html": "docs"}, rewrite_enabled=False)

    resp = client.get("/docs/")

    assert resp.text == "docs"
    assert store.requested == ["/client/docs/index.html"]


def test_head_request_is_supported():
    client, _ = _client({"/client/webflow/index.html": "home"})

    resp = client.head("/")

    assert resp.status_code == 200


def test_health_is_not_rewritten():
    client, store = _client({})

    resp = client.get("/health")

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert "version" in body
    assert store.requested == []


def test_metrics_exposes_lookup_counters():
    client, _ = _client({"/client/webflow/index.html": "home"})
    client.get("/")

    resp = client.get("/metrics")

    assert resp.status_code == 200
    assert "asset_lookups_total" in resp.text
    assert "path_rewrites_total" in resp.text

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from footage_proxy.config import ProxySettings, get_settings
from footage_proxy.forward import build_target_url, encode_body
from footage_proxy.main import app, get_transport

ORIGIN = "http://proxy-backend.test"


@pytest.fixture
def proxy_client():
    seen: list[httpx.Request] = []
    state = {"handler": lambda request: httpx.Response(200, json={"ok": True})}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return state["handler"](request)

    app.dependency_overrides[get_settings] = lambda: ProxySettings(backend_url=ORIGIN)
    app.dependency_overrides[get_transport] = lambda: httpx.MockTransport(handler)
    try:
        yield TestClient(app), seen, state
    finally:
        app.dependency_overrides.clear()


def test_get_is_forwarded_without_body_and_relayed_verbatim(proxy_client) -> None:
    client, seen, state = proxy_client
    state["handler"] = lambda request: httpx.Response(201, json={"items": [1, 2]})

    response = client.get("/api/a/b")

    assert response.status_code == 201
    assert response.json() == {"items": [1, 2]}
    outbound = seen[0]
    assert outbound.method == "GET"
    assert str(outbound.url) == f"{ORIGIN}/a/b"
    assert outbound.content == b""


def test_post_body_is_reserialized_and_inbound_headers_dropped(proxy_client) -> None:
    client, seen, _ = proxy_client

    response = client.post(
        "/api/generate-story",
        json={"videoId": "v1", "prompt": "sunset"},
        headers={"Authorization": "Bearer token", "x-custom": "1"},
    )

    assert response.status_code == 200
    outbound = seen[0]
    assert outbound.method == "POST"
    assert json.loads(outbound.content) == {"videoId": "v1", "prompt": "sunset"}
    assert outbound.headers["content-type"] == "application/json"
    assert "authorization" not in outbound.headers
    assert "x-custom" not in outbound.headers


def test_backend_error_status_is_relayed(proxy_client) -> None:
    client, _, state = proxy_client
    state["handler"] = lambda request: httpx.Response(404, json={"error": "no such video"})

    response = client.delete("/api/videos/v1")

    assert response.status_code == 404
    assert response.json() == {"error": "no such video"}


def test_connection_failure_returns_fixed_envelope(proxy_client) -> None:
    client, _, state = proxy_client

    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    state["handler"] = refuse

    response = client.get("/api/health")

    assert response.status_code == 500
    assert response.json() == {"error": "Backend connection failed", "details": "connection refused"}


def test_non_json_backend_response_returns_fixed_envelope(proxy_client) -> None:
    client, _, state = proxy_client
    state["handler"] = lambda request: httpx.Response(200, text="<html>oops</html>")

    response = client.get("/api/health")

    assert response.status_code == 500
    assert response.json()["error"] == "Backend connection failed"
    assert response.json()["details"]


def test_request_id_is_echoed(proxy_client) -> None:
    client, _, _ = proxy_client

    response = client.get("/api/health", headers={"x-request-id": "req-1"})

    assert response.headers["x-request-id"] == "req-1"


def test_missing_path_forwards_to_bare_origin(proxy_client) -> None:
    client, seen, _ = proxy_client

    response = client.get("/api/")

    assert response.status_code == 200
    assert str(seen[0].url) == f"{ORIGIN}/"


def test_build_target_url_joins_segments() -> None:
    assert build_target_url(ORIGIN, ["a", "b"]) == f"{ORIGIN}/a/b"
    assert build_target_url(ORIGIN, "health") == f"{ORIGIN}/health"
    assert build_target_url(ORIGIN, None) == f"{ORIGIN}/"


def test_encode_body() -> None:
    assert encode_body(b"") is None
    assert json.loads(encode_body(b'{"a": 1}')) == {"a": 1}
    assert encode_body(b"plain") == '"plain"'

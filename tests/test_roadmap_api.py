"""프롬프트부터 트리까지 HTTP API 전체 흐름 시뮬레이션 테스트."""
from __future__ import annotations

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from roadmap_backend.app import app
from roadmap_backend.deps.ollama import get_ollama_client

ROADMAP = {
    "title": "Backend",
    "description": "Server side development",
    "link": None,
    "children": [
        {
            "title": "Languages",
            "description": "Pick one",
            "link": None,
            "children": [{"title": "Python", "description": "", "link": "https://docs.python.org", "children": []}],
        },
        {"title": "Databases", "description": "SQL first", "link": None, "children": []},
    ],
}


@pytest.fixture
def api(make_ollama):
    state = {"respond": lambda request: httpx.Response(200, json={"response": json.dumps(ROADMAP)})}
    ollama, handler = make_ollama(lambda request: state["respond"](request))

    app.dependency_overrides[get_ollama_client] = lambda: ollama

    with TestClient(app) as test_client:
        yield test_client, state, handler

    app.dependency_overrides.clear()


def test_generate_returns_tree(api):
    test_client, _, handler = api

    resp = test_client.post("/roadmaps/generate", json={"prompt": "Backend developer"})

    assert resp.status_code == 200
    assert resp.json() == ROADMAP
    assert handler.last_payload["prompt"].endswith("\nBackend developer")


def test_answer_returns_raw_model_text(api):
    test_client, state, _ = api
    inner = '{"title":"X","children":[]}'
    state["respond"] = lambda request: httpx.Response(200, json={"response": inner})

    resp = test_client.post("/roadmaps/answer", json={"prompt": "x"})

    assert resp.status_code == 200
    assert resp.json() == {"answer": inner}


def test_parse_does_not_call_model(api):
    test_client, _, handler = api

    resp = test_client.post("/roadmaps/parse", json={"json_text": '{"title": "Solo"}'})

    assert resp.status_code == 200
    assert resp.json() == {"title": "Solo", "description": None, "link": None, "children": []}
    assert handler.requests == []


def test_remote_error_maps_to_bad_gateway(api):
    test_client, state, _ = api
    state["respond"] = lambda request: httpx.Response(500, text="server overloaded")

    resp = test_client.post("/roadmaps/generate", json={"prompt": "x"})

    assert resp.status_code == 502
    body = resp.json()
    assert body["kind"] == "remote"
    assert body["status_code"] == 500
    assert "server overloaded" in body["detail"]


def test_unreachable_ollama_maps_to_service_unavailable(api):
    test_client, state, _ = api

    def refuse(request):
        raise httpx.ConnectError("connection refused")

    state["respond"] = refuse

    resp = test_client.post("/roadmaps/generate", json={"prompt": "x"})

    assert resp.status_code == 503
    assert resp.json()["kind"] == "transport"


def test_non_json_answer_maps_to_unprocessable(api):
    test_client, state, _ = api
    state["respond"] = lambda request: httpx.Response(200, json={"response": "Sure! Here is your roadmap:"})

    resp = test_client.post("/roadmaps/generate", json={"prompt": "x"})

    assert resp.status_code == 422
    assert resp.json()["kind"] == "schema"


def test_request_id_is_echoed(api):
    test_client, _, _ = api

    resp = test_client.get("/healthz", headers={"x-request-id": "abc-123"})

    assert resp.json() == {"status": "ok"}
    assert resp.headers["x-request-id"] == "abc-123"


def test_metrics_exposes_ollama_counters(api):
    test_client, _, _ = api
    test_client.post("/roadmaps/generate", json={"prompt": "x"})

    resp = test_client.get("/metrics")

    assert resp.status_code == 200
    assert "ollama_requests_total" in resp.text
    assert "api_requests_total" in resp.text


def test_request_id_is_generated_when_missing(api):
    test_client, _, _ = api

    resp = test_client.get("/healthz")

    assert len(resp.headers["x-request-id"]) == 32

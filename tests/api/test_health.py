from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

from fastapi.testclient import TestClient

from kafka_gateway.core.lifecycle import LifecycleManager


def test_health_check(client: TestClient) -> None:
    resp = client.get("/health_check")

    assert resp.status_code == 200
    assert resp.headers["content-type"] == "application/json"
    assert resp.json() == {"status": "ok"}


def test_health_check_under_concurrent_load(client: TestClient) -> None:
    with ThreadPoolExecutor(max_workers=8) as pool:
        responses = list(pool.map(lambda _: client.get("/health_check"), range(32)))

    assert {r.status_code for r in responses} == {200}
    assert all(r.json() == {"status": "ok"} for r in responses)


def test_health_check_while_draining(
    client: TestClient, lifecycle: LifecycleManager
) -> None:
    lifecycle.begin_draining()

    resp = client.get("/health_check")

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_unknown_path_is_json(client: TestClient) -> None:
    resp = client.get("/nope")

    assert resp.status_code == 404
    assert resp.headers["content-type"] == "application/json"
    assert resp.json() == {"error": "not found"}


def test_wrong_method_is_json(client: TestClient) -> None:
    resp = client.post("/health_check")

    assert resp.status_code == 405
    assert resp.json() == {"error": "method not allowed"}

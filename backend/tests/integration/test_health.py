"""Integration test for the health endpoint."""

from __future__ import annotations


def test_health_endpoint(client) -> None:
    """Health check should return OK payload."""

    resp = client.get("/api/v1/health")

    assert resp.status_code == 200
    data = resp.get_json()
    assert data["status"] == "ok"
    assert data["db"] == "ok"
    assert data["ledger"] == "sql"
    assert "redis" not in data
    assert {"version", "commit"} <= data.keys()


def test_health_reports_redis(app, client, fake_redis) -> None:
    app.extensions["redis_client"] = fake_redis

    data = client.get("/api/v1/health").get_json()

    assert data["redis"] == "ok"

"""Submit & Data routes: phase one of the submission and the uploaded listing.

Tests cover:
    - POST /submit validation (name/height bounds, types, unknown keys) → 400
    - POST /submit returns a fresh uploadId each call
    - GET /data lists nothing until a file is bound
    - GET /health reports registry size
"""

import uuid

import pytest


async def test_submit_returns_upload_id(client, registry):
    res = await client.post("/submit", json={"name": "Alice", "height": 170})
    assert res.status_code == 200
    upload_id = uuid.UUID(res.json()["uploadId"])
    assert registry.exists(upload_id)


async def test_submit_height_optional(client, registry):
    res = await client.post("/submit", json={"name": "Bob"})
    assert res.status_code == 200
    record = registry.get(uuid.UUID(res.json()["uploadId"]))
    assert record.height is None


async def test_submit_ids_are_unique(client):
    ids = set()
    for _ in range(5):
        res = await client.post("/submit", json={"name": "Alice"})
        ids.add(res.json()["uploadId"])
    assert len(ids) == 5


@pytest.mark.parametrize("payload", [
    {},
    {"name": ""},
    {"name": "x" * 101},
    {"name": 123},
    {"name": "Alice", "height": 0},
    {"name": "Alice", "height": -1},
    {"name": "Alice", "height": 501},
    {"name": "Alice", "height": True},
    {"name": "Alice", "height": "170"},
    {"name": "Alice", "height": 1.5},
    {"name": "Alice", "age": 30},
])
async def test_submit_schema_violation_is_400(client, registry, payload):
    res = await client.post("/submit", json=payload)
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"
    assert len(registry) == 0


async def test_submit_rejects_non_json(client):
    res = await client.post(
        "/submit", content=b"name=Alice",
        headers={"content-type": "application/x-www-form-urlencoded"},
    )
    assert res.status_code == 400


async def test_data_empty_before_any_upload(client, upload_id):
    res = await client.get("/data")
    assert res.status_code == 200
    assert res.json() == []


async def test_data_is_idempotent(client, registry, upload_id):
    registry.bind(uuid.UUID(upload_id), "photo.png")
    first = (await client.get("/data")).json()
    second = (await client.get("/data")).json()
    assert first == second
    assert len(first) == 1


async def test_health_reports_submission_count(client, upload_id):
    res = await client.get("/health")
    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "healthy"
    assert body["submissions"] == 1


async def test_cors_allows_any_origin(client):
    res = await client.get("/data", headers={"origin": "http://example.com"})
    assert res.headers["access-control-allow-origin"] == "*"

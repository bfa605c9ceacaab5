"""Upload route: phase two end to end over HTTP.

Tests cover:
    - Register → upload → listed in GET /data
    - Unknown id, non-UUID id, wrong field, empty form, missing filename
    - Malformed/truncated bodies, size limit (declared and streamed), media type
    - Second upload to the same id rejected with 409
"""

import uuid


async def upload_bytes(client, upload_id, body, content_type):
    return await client.post(
        f"/upload/{upload_id}", content=body, headers={"content-type": content_type},
    )


async def test_end_to_end_upload_is_listed(client, upload_id):
    res = await client.post(
        f"/upload/{upload_id}",
        files={"file": ("photo.png", b"\x89PNG\r\n\x1a\n", "image/png")},
    )
    assert res.status_code == 200
    assert res.json() == {"result": True}

    data = (await client.get("/data")).json()
    assert data == [
        {"id": upload_id, "name": "Alice", "height": 170, "file": "photo.png"},
    ]


async def test_upload_to_unregistered_id_fails(client, upload_id, multipart_body, multipart_content_type):
    other = str(uuid.uuid4())
    res = await upload_bytes(
        client, other,
        multipart_body([("file", "photo.png", b"data")]), multipart_content_type,
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "UNKNOWN_UPLOAD_ID"
    assert res.json()["error"]["message"] == f"Unknown upload ID {other}"
    assert (await client.get("/data")).json() == []


async def test_upload_with_non_uuid_id_is_400(client, multipart_body, multipart_content_type):
    res = await upload_bytes(
        client, "not-a-uuid",
        multipart_body([("file", "photo.png", b"data")]), multipart_content_type,
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_wrong_field_name_is_422_and_not_listed(client, upload_id, multipart_body, multipart_content_type):
    res = await upload_bytes(
        client, upload_id,
        multipart_body([("notfile", "photo.png", b"data")]), multipart_content_type,
    )
    assert res.status_code == 422
    assert res.json()["error"]["code"] == "INVALID_PAYLOAD"
    assert (await client.get("/data")).json() == []


async def test_extra_non_file_part_is_422(client, upload_id, multipart_body, multipart_content_type):
    body = multipart_body([
        ("file", "photo.png", b"data"),
        ("comment", None, b"hello"),
    ])
    res = await upload_bytes(client, upload_id, body, multipart_content_type)
    assert res.status_code == 422


async def test_empty_form_is_422(client, upload_id, multipart_body, multipart_content_type):
    res = await upload_bytes(client, upload_id, multipart_body([]), multipart_content_type)
    assert res.status_code == 422
    assert (await client.get("/data")).json() == []


async def test_missing_filename_is_422(client, upload_id, multipart_body, multipart_content_type):
    res = await upload_bytes(
        client, upload_id,
        multipart_body([("file", None, b"data")]), multipart_content_type,
    )
    assert res.status_code == 422


async def test_truncated_body_is_400(client, upload_id, multipart_body, multipart_content_type):
    body = multipart_body([("file", "photo.png", b"data" * 100)])
    res = await upload_bytes(client, upload_id, body[:-30], multipart_content_type)
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "MALFORMED_STREAM"
    assert (await client.get("/data")).json() == []


async def test_garbage_body_is_400(client, upload_id, multipart_content_type):
    res = await upload_bytes(client, upload_id, b"this is not multipart", multipart_content_type)
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "MALFORMED_STREAM"


async def test_non_multipart_is_415(client, upload_id):
    res = await client.post(f"/upload/{upload_id}", json={"file": "photo.png"})
    assert res.status_code == 415
    assert res.json()["error"]["code"] == "UNSUPPORTED_MEDIA_TYPE"


async def test_declared_length_over_limit_is_413(client, upload_id, multipart_body, multipart_content_type, settings):
    body = multipart_body([("file", "big.bin", b"z" * (settings.max_upload_bytes + 1))])
    res = await upload_bytes(client, upload_id, body, multipart_content_type)
    assert res.status_code == 413
    assert res.json()["error"]["code"] == "PAYLOAD_TOO_LARGE"


async def test_streamed_body_over_limit_is_413(client, upload_id, multipart_body, multipart_content_type, settings):
    body = multipart_body([("file", "big.bin", b"z" * (settings.max_upload_bytes + 1))])

    async def chunks():
        for i in range(0, len(body), 4096):
            yield body[i:i + 4096]

    res = await upload_bytes(client, upload_id, chunks(), multipart_content_type)
    assert res.status_code == 413
    assert (await client.get("/data")).json() == []


async def test_second_upload_is_409(client, upload_id, multipart_body, multipart_content_type):
    first = await upload_bytes(
        client, upload_id,
        multipart_body([("file", "first.png", b"one")]), multipart_content_type,
    )
    assert first.status_code == 200
    second = await upload_bytes(
        client, upload_id,
        multipart_body([("file", "second.png", b"two")]), multipart_content_type,
    )
    assert second.status_code == 409
    assert (await client.get("/data")).json()[0]["file"] == "first.png"


async def test_failed_upload_can_be_retried(client, upload_id, multipart_body, multipart_content_type):
    bad = await upload_bytes(
        client, upload_id,
        multipart_body([("notfile", "photo.png", b"data")]), multipart_content_type,
    )
    assert bad.status_code == 422
    good = await upload_bytes(
        client, upload_id,
        multipart_body([("file", "photo.png", b"data")]), multipart_content_type,
    )
    assert good.status_code == 200


async def test_listing_counts_only_successful_uploads(client, multipart_body, multipart_content_type):
    ids = []
    for name in ("a", "b", "c", "d"):
        res = await client.post("/submit", json={"name": name})
        ids.append(res.json()["uploadId"])

    await upload_bytes(client, ids[0], multipart_body([("file", "a.png", b"1")]), multipart_content_type)
    await upload_bytes(client, ids[1], multipart_body([("nope", "b.png", b"2")]), multipart_content_type)
    await upload_bytes(client, ids[3], multipart_body([("file", "d.png", b"4")]), multipart_content_type)

    data = (await client.get("/data")).json()
    assert sorted(item["name"] for item in data) == ["a", "d"]

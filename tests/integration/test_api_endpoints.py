import json

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def upload(client, sender=None, name="sample.png"):
    files = {"image": (name, PNG_BYTES, "image/png")}
    data = {"senderName": sender} if sender is not None else {}
    return client.post("/api/upload", files=files, data=data)


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "healthy"}


def test_upload_and_list(client):
    r = upload(client, "Alice")
    assert r.status_code == 201, r.text
    data = r.json()
    assert data["message"] == "Upload successful"
    assert data["link"] == f"/view/{data['id']}"

    r2 = client.get("/api/images")
    assert r2.status_code == 200
    images = r2.json()
    assert len(images) == 1
    assert images[0]["id"] == data["id"]
    assert images[0]["senderName"] == "Alice"
    assert images[0]["originalName"] == "sample.png"
    assert images[0]["fileSize"] == len(PNG_BYTES)
    assert images[0]["views"] == []


def test_upload_without_file(client):
    r = client.post("/api/upload", data={"senderName": "Alice"})
    assert r.status_code == 400
    assert r.json() == {"error": "No image uploaded"}
    assert client.get("/api/images").json() == []


def test_upload_defaults_sender(client):
    entry_id = upload(client).json()["id"]
    assert client.get(f"/api/image/{entry_id}").json()["senderName"] == "Anonymous"


def test_uploaded_file_is_served(client):
    entry_id = upload(client).json()["id"]
    filename = client.get(f"/api/image/{entry_id}").json()["filename"]

    r = client.get(f"/uploads/{filename}")
    assert r.status_code == 200
    assert r.content == PNG_BYTES


def test_track_view_with_coordinates(client):
    entry_id = upload(client, "Alice").json()["id"]

    r = client.post(f"/api/track/{entry_id}", json={"latitude": 1.5, "longitude": 2.5})
    assert r.status_code == 200
    assert r.json() == {"success": True}

    entry = client.get(f"/api/image/{entry_id}").json()
    assert len(entry["views"]) == 1
    view = entry["views"][0]
    assert (view["latitude"], view["longitude"]) == (1.5, 2.5)
    assert view["timestamp"]


def test_track_view_user_agent(client):
    entry_id = upload(client).json()["id"]

    client.post(f"/api/track/{entry_id}", json={}, headers={"User-Agent": "HeaderAgent/1.0"})
    client.post(f"/api/track/{entry_id}", json={"userAgent": "BodyAgent/2.0"}, headers={"User-Agent": "HeaderAgent/1.0"})
    client.post(f"/api/track/{entry_id}", headers={"User-Agent": "NoBody/3.0"})

    agents = [v["userAgent"] for v in client.get(f"/api/image/{entry_id}").json()["views"]]
    assert agents == ["HeaderAgent/1.0", "BodyAgent/2.0", "NoBody/3.0"]


def test_track_unknown_id(client):
    upload(client, "Alice")
    before = client.get("/api/images").json()

    r = client.post("/api/track/abc", json={"latitude": 1.5, "longitude": 2.5})
    assert r.status_code == 404
    assert r.json() == {"error": "Image not found"}
    assert client.get("/api/images").json() == before


def test_get_unknown_image(client):
    r = client.get("/api/image/abc")
    assert r.status_code == 404
    assert r.json() == {"error": "Not found"}


def test_uploads_get_distinct_ids(client):
    ids = {upload(client, name=f"{n}.png").json()["id"] for n in range(10)}
    assert len(ids) == 10
    assert len(client.get("/api/images").json()) == 10


def test_view_page_served(client):
    entry_id = upload(client).json()["id"]
    r = client.get(f"/view/{entry_id}")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/html")
    assert "/api/track/" in r.text


def test_index_page_served(client):
    r = client.get("/")
    assert r.status_code == 200
    assert "/api/upload" in r.text


def test_corrupt_store_returns_503(client, settings):
    settings.database_path.write_text("not json")

    r = client.get("/api/images")
    assert r.status_code == 503
    assert "error" in r.json()

    r2 = client.post("/api/track/abc", json={})
    assert r2.status_code == 503
    # the process keeps serving other requests
    assert client.get("/health").status_code == 200


def _strict_json(text):
    def reject(token):
        raise ValueError(f"non-standard JSON token {token}")

    return json.loads(text, parse_constant=reject)


def test_non_finite_coordinates_rejected(client, settings):
    entry_id = upload(client).json()["id"]

    for body in (b'{"latitude": 1e999}', b'{"longitude": -1e999}', b'{"latitude": NaN}'):
        r = client.post(f"/api/track/{entry_id}", content=body, headers={"Content-Type": "application/json"})
        assert r.status_code == 422, body

    rows = _strict_json(settings.database_path.read_text())
    assert rows[0]["views"] == []


def test_plain_text_body_still_records_view(client):
    entry_id = upload(client).json()["id"]

    r = client.post(
        f"/api/track/{entry_id}",
        content=b"hello",
        headers={"Content-Type": "text/plain", "User-Agent": "Beacon/1.0"},
    )
    assert r.status_code == 200
    views = client.get(f"/api/image/{entry_id}").json()["views"]
    assert [v["userAgent"] for v in views] == ["Beacon/1.0"]
    assert views[0]["latitude"] is None


def test_malformed_json_body(client):
    entry_id = upload(client).json()["id"]

    r = client.post(f"/api/track/{entry_id}", content=b"{oops", headers={"Content-Type": "application/json"})
    assert r.status_code == 422
    assert client.get(f"/api/image/{entry_id}").json()["views"] == []

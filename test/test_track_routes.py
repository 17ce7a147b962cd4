"""
Tests de las rutas HTTP con el repositorio inyectado (mongomock + media simulado).
"""

from google.cloud.exceptions import ServiceUnavailable

from config import settings


def create(client, **fields):
    payload = {"title": "Song", "artist": "Artist", **fields}
    resp = client.post("/api/tracks", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_root(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.json()["version"] == settings.VERSION


def test_health(client, monkeypatch):
    monkeypatch.setattr("routes.health_routes.ping", lambda db: True)
    body = client.get("/health").json()
    assert body["status"] == "healthy"
    assert body["services"] == {"database": "ok", "media": "ok"}


def test_genres(client):
    resp = client.get("/api/genres")
    assert resp.status_code == 200
    assert len(resp.json()) == 13


def test_create_and_get_by_slug(client):
    track = create(client, title="Hey Jude", genres=["Rock"])

    assert track["slug"] == "hey-jude"
    resp = client.get("/api/tracks/hey-jude")
    assert resp.status_code == 200
    assert resp.json()["id"] == track["id"]


def test_create_duplicate_slug_conflict(client):
    create(client, slug="dup")
    resp = client.post("/api/tracks", json={"title": "x", "artist": "y", "slug": "dup"})
    assert resp.status_code == 409


def test_create_requires_title_and_artist(client):
    resp = client.post("/api/tracks", json={"title": "only title"})
    assert resp.status_code == 422


def test_get_missing_track(client):
    assert client.get("/api/tracks/nope").status_code == 404


def test_list_tracks_with_meta(client):
    for i in range(7):
        create(client, title=f"Song {i}", genres=["Jazz"] if i % 2 else ["Pop"])

    body = client.get("/api/tracks", params={"page": 2, "limit": 3}).json()
    assert body["meta"] == {"total": 7, "page": 2, "limit": 3, "totalPages": 3}
    assert [t["title"] for t in body["data"]] == ["Song 3", "Song 2", "Song 1"]

    jazz = client.get("/api/tracks", params={"genre": "Jazz"}).json()
    assert jazz["meta"]["total"] == 3


def test_list_tracks_rejects_bad_params(client):
    assert client.get("/api/tracks", params={"page": 0}).status_code == 422
    assert client.get("/api/tracks", params={"order": "sideways"}).status_code == 422


def test_update_track(client):
    track = create(client)

    resp = client.put(f"/api/tracks/{track['id']}", json={"album": "Abbey Road"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["album"] == "Abbey Road"
    assert body["title"] == "Song"
    assert body["id"] == track["id"]


def test_update_missing_track(client):
    assert client.put("/api/tracks/missing", json={"title": "x"}).status_code == 404


def test_update_slug_conflict(client):
    create(client, title="a", slug="a")
    b = create(client, title="b", slug="b")
    assert client.put(f"/api/tracks/{b['id']}", json={"slug": "a"}).status_code == 409


def test_delete_track(client):
    track = create(client)
    assert client.delete(f"/api/tracks/{track['id']}").status_code == 204
    assert client.delete(f"/api/tracks/{track['id']}").status_code == 404


def test_delete_track_media_failure(client, media_store):
    track = create(client)
    client.post(
        f"/api/tracks/{track['id']}/upload",
        files={"file": ("song.mp3", b"ID3", "audio/mpeg")},
    )
    media_store.delete.side_effect = ServiceUnavailable("down")

    assert client.delete(f"/api/tracks/{track['id']}").status_code == 502
    assert client.get(f"/api/tracks/{track['slug']}").status_code == 200


def test_batch_delete(client):
    a = create(client, title="a")["id"]
    b = create(client, title="b")["id"]

    resp = client.post("/api/tracks/delete", json={"ids": [a, "missing", b]})

    assert resp.status_code == 200
    assert resp.json() == {"success": [a, b], "failed": ["missing"]}


def test_upload_and_delete_audio(client, media_store):
    track = create(client)

    resp = client.post(
        f"/api/tracks/{track['id']}/upload",
        files={"file": ("song.mp3", b"ID3", "audio/mpeg")},
    )
    assert resp.status_code == 200
    assert resp.json()["audioFile"].endswith(track["id"])
    media_store.upload.assert_called_once_with(track["id"], "song.mp3", b"ID3")

    resp = client.delete(f"/api/tracks/{track['id']}/file")
    assert resp.status_code == 200
    assert resp.json()["audioFile"] == ""

    assert client.delete(f"/api/tracks/{track['id']}/file").status_code == 404


def test_upload_rejects_wrong_type(client):
    track = create(client)
    resp = client.post(
        f"/api/tracks/{track['id']}/upload",
        files={"file": ("cover.png", b"\x89PNG", "image/png")},
    )
    assert resp.status_code == 400


def test_upload_too_large(client, monkeypatch):
    track = create(client)
    monkeypatch.setattr(settings, "MAX_FILE_SIZE", 4)
    resp = client.post(
        f"/api/tracks/{track['id']}/upload",
        files={"file": ("song.wav", b"RIFF0000", "audio/wav")},
    )
    assert resp.status_code == 413


def test_upload_missing_track(client):
    resp = client.post(
        "/api/tracks/missing/upload",
        files={"file": ("song.mp3", b"ID3", "audio/mpeg")},
    )
    assert resp.status_code == 404


def test_upload_media_failure(client, media_store):
    track = create(client)
    media_store.upload.side_effect = ServiceUnavailable("down")
    resp = client.post(
        f"/api/tracks/{track['id']}/upload",
        files={"file": ("song.mp3", b"ID3", "audio/mpeg")},
    )
    assert resp.status_code == 502


def test_update_rejects_null_fields(client):
    track = create(client, genres=["Rock"])

    resp = client.put(f"/api/tracks/{track['id']}", json={"title": None, "genres": None})
    assert resp.status_code == 422

    assert client.get(f"/api/tracks/{track['slug']}").json()["title"] == "Song"
    listing = client.get("/api/tracks")
    assert listing.status_code == 200
    assert listing.json()["data"][0]["genres"] == ["Rock"]


def test_delete_without_media_store(client, repo):
    track = create(client)
    client.post(
        f"/api/tracks/{track['id']}/upload",
        files={"file": ("song.mp3", b"ID3", "audio/mpeg")},
    )
    repo.media_store = None

    assert client.delete(f"/api/tracks/{track['id']}").status_code == 503
    assert client.delete(f"/api/tracks/{track['id']}/file").status_code == 503
    assert client.get(f"/api/tracks/{track['slug']}").status_code == 200

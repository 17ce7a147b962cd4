"""
Fixtures compartidos: colección Mongo en memoria (mongomock), media store
simulado y cliente HTTP con el repositorio inyectado.
"""

import itertools
from unittest.mock import Mock

import mongomock
import pytest
from fastapi.testclient import TestClient

import repositories.track_repository as track_repository
from models.track import TrackCreate
from repositories.track_repository import TrackRepository
from routes.dependencies import get_track_repository
from storage.media_store import GCSMediaStore


@pytest.fixture
def clock(monkeypatch):
    """Reloj determinista: cada llamada avanza un segundo."""
    ticks = itertools.count()

    def fake_now():
        n = next(ticks)
        return f"2024-01-01T{n // 3600:02d}:{n // 60 % 60:02d}:{n % 60:02d}.000Z"

    monkeypatch.setattr(track_repository, "now_iso", fake_now)
    return fake_now


@pytest.fixture
def collection():
    return mongomock.MongoClient().db.tracks


@pytest.fixture
def media_store():
    store = Mock(spec=GCSMediaStore)
    store.upload.side_effect = lambda track_id, file_name, data: (
        f"https://storage.googleapis.com/test-bucket/tracks/{track_id}"
    )
    store.delete.return_value = True
    return store


@pytest.fixture
def repo(collection, media_store, clock):
    repository = TrackRepository(collection, media_store)
    repository.ensure_indexes()
    return repository


@pytest.fixture
def make_track(repo):
    def _make(title="Song", artist="Artist", **fields):
        return repo.create_track(TrackCreate(title=title, artist=artist, **fields))
    return _make


@pytest.fixture
def client(repo):
    from main import app

    app.dependency_overrides[get_track_repository] = lambda: repo
    yield TestClient(app)
    app.dependency_overrides.clear()

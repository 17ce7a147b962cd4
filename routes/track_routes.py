# backend/routes/track_routes.py
import logging
import math
from typing import Annotated

from fastapi import APIRouter, Depends, File, HTTPException, Query, Response, UploadFile
from google.cloud.exceptions import GoogleCloudError
from pymongo.errors import DuplicateKeyError

from config import settings
from models.track import (
    BatchDeleteRequest, BatchDeleteResult, Track, TrackCreate, TrackPage, TrackQuery, TrackUpdate
)
from repositories.track_repository import TrackRepository
from routes.dependencies import get_track_repository
from storage.media_store import MediaStoreUnavailable

router = APIRouter()
LOG = logging.getLogger("routes.tracks")

Repo = Annotated[TrackRepository, Depends(get_track_repository)]

ALLOWED_AUDIO_TYPES = {"audio/mpeg", "audio/mp3", "audio/wav", "audio/x-wav", "audio/wave"}


def _media_error(track_id: str, e: Exception) -> HTTPException:
    LOG.exception(f"❌ Error del almacenamiento de audio para track {track_id}")
    if isinstance(e, MediaStoreUnavailable):
        return HTTPException(status_code=503, detail="Almacenamiento de audio no configurado")
    return HTTPException(status_code=502, detail=f"Error en almacenamiento de audio: {e}")

# ------------------------------------------------------------
# 🔹 Listar tracks (paginado / filtrado)
# ------------------------------------------------------------
@router.get("/tracks", summary="Listar tracks", response_model=TrackPage)
def list_tracks(query: Annotated[TrackQuery, Query()], repo: Repo):
    tracks, total = repo.get_tracks(query)
    return {
        "data": tracks,
        "meta": {
            "total": total,
            "page": query.page,
            "limit": query.limit,
            "totalPages": math.ceil(total / query.limit),
        },
    }

# ------------------------------------------------------------
# 🔹 Obtener track por slug
# ------------------------------------------------------------
@router.get("/tracks/{slug}", summary="Obtener track por slug", response_model=Track)
def get_track(slug: str, repo: Repo):
    track = repo.get_track_by_slug(slug)
    if not track:
        raise HTTPException(status_code=404, detail="Track no encontrado")
    return track

# ------------------------------------------------------------
# 🔹 Crear track
# ------------------------------------------------------------
@router.post("/tracks", summary="Crear track", status_code=201, response_model=Track)
def add_track(track: TrackCreate, repo: Repo):
    try:
        return repo.create_track(track)
    except DuplicateKeyError:
        LOG.warning(f"⚠️ Slug duplicado al crear track: {track.slug or track.title}")
        raise HTTPException(status_code=409, detail="Ya existe un track con ese slug")

# ------------------------------------------------------------
# 🔹 Actualizar track
# ------------------------------------------------------------
@router.put("/tracks/{track_id}", summary="Actualizar track", response_model=Track)
def edit_track(track_id: str, track: TrackUpdate, repo: Repo):
    try:
        updated = repo.update_track(track_id, track.model_dump(exclude_unset=True))
    except DuplicateKeyError:
        raise HTTPException(status_code=409, detail="Ya existe un track con ese slug")
    if not updated:
        raise HTTPException(status_code=404, detail="Track no encontrado")
    return updated

# ------------------------------------------------------------
# 🔹 Eliminar varios tracks
# ------------------------------------------------------------
@router.post("/tracks/delete", summary="Eliminar varios tracks", response_model=BatchDeleteResult)
def remove_tracks(payload: BatchDeleteRequest, repo: Repo):
    LOG.info(f"🗑️ Borrado múltiple solicitado: {len(payload.ids)} tracks")
    return repo.delete_multiple_tracks(payload.ids)

# ------------------------------------------------------------
# 🔹 Eliminar track
# ------------------------------------------------------------
@router.delete("/tracks/{track_id}", summary="Eliminar track", status_code=204)
def remove_track(track_id: str, repo: Repo):
    try:
        deleted = repo.delete_track(track_id)
    except (GoogleCloudError, MediaStoreUnavailable) as e:
        raise _media_error(track_id, e)
    if not deleted:
        raise HTTPException(status_code=404, detail="Track no encontrado")
    return Response(status_code=204)

# ------------------------------------------------------------
# 🔹 Subir audio
# ------------------------------------------------------------
@router.post("/tracks/{track_id}/upload", summary="Subir archivo de audio", response_model=Track)
def upload_audio(track_id: str, repo: Repo, file: UploadFile = File(...)):
    if file.content_type not in ALLOWED_AUDIO_TYPES:
        raise HTTPException(status_code=400, detail="Tipo de archivo no permitido (solo MP3/WAV)")

    data = file.file.read(settings.MAX_FILE_SIZE + 1)
    if len(data) > settings.MAX_FILE_SIZE:
        raise HTTPException(status_code=413, detail="El archivo excede el tamaño máximo")

    try:
        track = repo.attach_audio_file(track_id, file.filename or track_id, data)
    except (GoogleCloudError, MediaStoreUnavailable) as e:
        raise _media_error(track_id, e)
    if not track:
        raise HTTPException(status_code=404, detail="Track no encontrado")
    return track

# ------------------------------------------------------------
# 🔹 Eliminar audio
# ------------------------------------------------------------
@router.delete("/tracks/{track_id}/file", summary="Eliminar archivo de audio", response_model=Track)
def remove_audio(track_id: str, repo: Repo):
    try:
        deleted = repo.delete_audio_file(track_id)
    except (GoogleCloudError, MediaStoreUnavailable) as e:
        raise _media_error(track_id, e)
    if not deleted:
        raise HTTPException(status_code=404, detail="Track o archivo no encontrado")
    return repo.get_track_by_id(track_id)

# ------------------------------------------------------------
# 🔹 Géneros disponibles
# ------------------------------------------------------------
@router.get("/genres", summary="Listar géneros")
def list_genres(repo: Repo):
    return repo.get_genres()

# backend/routes/dependencies.py
from fastapi import Request

from repositories.track_repository import TrackRepository


def get_track_repository(request: Request) -> TrackRepository:
    """Repositorio creado en el arranque de la app (ver main.lifespan)."""
    return request.app.state.track_repository

# backend/routes/health_routes.py
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from database.connection import ping
from repositories.track_repository import TrackRepository
from routes.dependencies import get_track_repository

router = APIRouter()


@router.get("/health", summary="Estado del servicio")
def health_check(repo: TrackRepository = Depends(get_track_repository)):
    """Chequeo para balanceadores y monitoreo."""
    checks = {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "services": {},
    }

    if ping(repo.collection.database):
        checks["services"]["database"] = "ok"
    else:
        checks["services"]["database"] = "error"
        checks["status"] = "unhealthy"

    checks["services"]["media"] = "ok" if repo.media_store is not None else "not configured"
    return checks

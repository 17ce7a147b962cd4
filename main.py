from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import settings
from database.connection import TRACKS_COLLECTION_NAME, create_mongo_client, get_music_db
from repositories.track_repository import TrackRepository
from storage.media_store import GCSMediaStore

# =====================================================
# * Importación de Routers
# =====================================================
from routes.track_routes import router as track_router
from routes.health_routes import router as health_router

# =====================================================
# * Configuración de Logging global
# =====================================================
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s - %(message)s"
)
logger = logging.getLogger("main")


# =====================================================
# * Inicialización de Base de Datos y almacenamiento
# =====================================================
def build_media_store():
    if not settings.GCS_BUCKET_NAME:
        logger.warning("⚠️ GCS_BUCKET_NAME no configurado: subida de audios deshabilitada.")
        return None
    return GCSMediaStore(
        bucket_name=settings.GCS_BUCKET_NAME,
        folder=settings.MEDIA_FOLDER,
        project_id=settings.GCS_PROJECT_ID,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    # ConfigurationError / fallo de conexión abortan antes de aceptar tráfico
    client = create_mongo_client()
    db = get_music_db(client)

    repository = TrackRepository(db[TRACKS_COLLECTION_NAME], build_media_store())
    repository.ensure_indexes()
    app.state.track_repository = repository

    logger.info(f"🌍 {settings.PROJECT_NAME} iniciado en modo '{settings.ENV}'.")
    try:
        yield
    finally:
        client.close()
        logger.info("🛑 Conexión a MongoDB cerrada.")


# =====================================================
# * Inicialización de la aplicación
# =====================================================
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="API for managing music tracks",
    version=settings.VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

# =====================================================
# * Registro de Rutas
# =====================================================
app.include_router(track_router, prefix="/api", tags=["Tracks"])
app.include_router(health_router, tags=["Health"])


# =====================================================
# * Ruta raíz
# =====================================================
@app.get("/", summary="Ruta raíz del backend")
def root():
    return {
        "message": f"🚀 {settings.PROJECT_NAME} activo",
        "version": settings.VERSION,
        "env": settings.ENV
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)

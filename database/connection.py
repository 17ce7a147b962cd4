# backend/database/connection.py
import logging
from typing import Optional
from pymongo import MongoClient
from pymongo.database import Database
from config import settings

logger = logging.getLogger("database")

TRACKS_COLLECTION_NAME = "tracks"

# ============================================================
# 🔧 CLIENTE MONGO
# ============================================================
def create_mongo_client(uri: Optional[str] = None) -> MongoClient:
    """Crea el cliente Mongo. Sin URI configurada el arranque se aborta."""
    mongo_uri = uri or settings.require("MONGODB_URI")
    return MongoClient(mongo_uri)

# ============================================================
# 🎵 CONEXIÓN A BASE DE DATOS DE MÚSICA
# ============================================================
def get_music_db(client: MongoClient, db_name: Optional[str] = None) -> Database:
    name = db_name or settings.MONGO_DB
    try:
        client.admin.command("ping")
    except Exception as e:
        logger.error(f"❌ Error conectando a MongoDB ({name}): {e}")
        raise
    logger.info(f"✅ Conectado a base de música: {name}")
    return client[name]

# ============================================================
# 🩺 ESTADO DE LA CONEXIÓN
# ============================================================
def ping(db: Database) -> bool:
    try:
        db.command("ping")
        return True
    except Exception as e:
        logger.warning(f"⚠️ MongoDB no responde: {e}")
        return False

# backend/config.py
import os
from dotenv import load_dotenv
from pathlib import Path

# ============================================================
# 🌍 DETECTAR ENTORNO Y CARGAR .env CORRESPONDIENTE
# ============================================================
ENV = os.getenv("ENV", "development")

BASE_DIR = Path(__file__).resolve().parent
env_file = BASE_DIR / f".env.{ENV}"
load_dotenv(env_file if env_file.exists() else BASE_DIR / ".env")


class ConfigurationError(RuntimeError):
    """Falta una variable de entorno obligatoria."""


# ============================================================
# ⚙️ CONFIGURACIÓN GENERAL
# ============================================================
class Settings:
    PROJECT_NAME: str = os.getenv("PROJECT_NAME", "Music Tracks API")
    VERSION: str = os.getenv("VERSION", "1.0.0")

    # 🔹 MongoDB (catálogo de tracks)
    MONGODB_URI: str = os.getenv("MONGODB_URI", "")
    MONGO_DB: str = os.getenv("MONGO_DB", "music")

    # 🔹 Almacenamiento de audio (Google Cloud Storage)
    GCS_BUCKET_NAME: str = os.getenv("GCS_BUCKET_NAME", "")
    GCS_PROJECT_ID: str = os.getenv("GCS_PROJECT_ID", "")
    MEDIA_FOLDER: str = os.getenv("MEDIA_FOLDER", "tracks")
    MAX_FILE_SIZE: int = int(os.getenv("MAX_FILE_SIZE", str(10 * 1024 * 1024)))

    # 🔹 Servidor
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))
    ALLOWED_ORIGINS: list = os.getenv("ALLOWED_ORIGINS", "*").split(",")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    DEBUG: bool = ENV == "development"
    ENV: str = ENV

    def require(self, name: str) -> str:
        """Devuelve el valor de una opción obligatoria o aborta el arranque."""
        value = getattr(self, name, None)
        if not value:
            raise ConfigurationError(f"❌ {name} no está definido en el entorno (.env)")
        return value


settings = Settings()

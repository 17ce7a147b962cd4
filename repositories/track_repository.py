# backend/repositories/track_repository.py
import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.collection import Collection

from models.track import BatchDeleteResult, TrackCreate, TrackQuery
from storage.media_store import GCSMediaStore, MediaStoreUnavailable

logger = logging.getLogger("repositories.tracks")

# Catálogo fijo, no se deriva de los tracks guardados
GENRES = [
    "Rock", "Pop", "Hip Hop", "Jazz", "Classical", "Electronic",
    "R&B", "Country", "Folk", "Reggae", "Metal", "Blues", "Indie",
]

# Campos que nunca se modifican desde un update
PROTECTED_FIELDS = ("_id", "id", "createdAt", "updatedAt")

NO_ID = {"_id": 0}


def now_iso() -> str:
    """Marca de tiempo UTC en ISO-8601 con milisegundos (ej. 2024-05-01T10:00:00.000Z)."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def slugify(text: str) -> str:
    """'Bohemian Rhapsody!' -> 'bohemian-rhapsody'"""
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")


def build_track_filter(query: TrackQuery) -> Dict[str, Any]:
    """Traduce los parámetros de búsqueda a un filtro Mongo."""
    filters: Dict[str, Any] = {}

    if query.search:
        pattern = {"$regex": re.escape(query.search), "$options": "i"}
        filters["$or"] = [
            {"title": pattern},
            {"artist": pattern},
            {"album": pattern},
        ]

    if query.genre:
        filters["genres"] = query.genre

    if query.artist:
        filters["artist"] = {"$regex": re.escape(query.artist), "$options": "i"}

    return filters


def build_track_sort(query: TrackQuery) -> List[Tuple[str, int]]:
    direction = ASCENDING if query.order == "asc" else DESCENDING
    sort = [(query.sort, direction)]
    # desempate estable para que las páginas no se solapen
    if query.sort != "id":
        sort.append(("id", direction))
    return sort


# ============================================================
# 🎵 Repositorio de tracks
# ============================================================
class TrackRepository:
    """
    Acceso a datos de tracks.

    La colección Mongo y el almacenamiento de audio se inyectan, así las
    rutas y los tests pueden pasar sus propias instancias.
    """

    def __init__(self, collection: Collection, media_store: Optional[GCSMediaStore] = None):
        self.collection = collection
        self.media_store = media_store

    def ensure_indexes(self):
        self.collection.create_index("id", unique=True)
        self.collection.create_index("slug", unique=True)
        logger.info("📇 Índices únicos 'id' y 'slug' verificados.")

    def _require_media_store(self) -> GCSMediaStore:
        if self.media_store is None:
            raise MediaStoreUnavailable("Media store no configurado (GCS_BUCKET_NAME)")
        return self.media_store

    # --------------------------------------------------------
    # 🔹 Crear track
    # --------------------------------------------------------
    def create_track(self, track: TrackCreate) -> Dict[str, Any]:
        """Inserta un track nuevo. DuplicateKeyError si el slug ya existe."""
        now = now_iso()
        doc = {
            **track.model_dump(),
            "id": str(ObjectId()),
            "audioFile": "",
            "createdAt": now,
            "updatedAt": now,
        }
        if not doc.get("slug"):
            doc["slug"] = slugify(doc["title"]) or doc["id"]

        self.collection.insert_one(doc)
        doc.pop("_id", None)
        logger.info(f"✅ Track creado: {doc['title']} ({doc['id']})")
        return doc

    # --------------------------------------------------------
    # 🔹 Actualizar track
    # --------------------------------------------------------
    def update_track(self, track_id: str, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        # None nunca se guarda: title/artist/slug son obligatorios y el resto tiene default
        changes = {
            k: v for k, v in updates.items()
            if k not in PROTECTED_FIELDS and v is not None
        }
        changes["updatedAt"] = now_iso()

        doc = self.collection.find_one_and_update(
            {"id": track_id},
            {"$set": changes},
            projection=NO_ID,
            return_document=ReturnDocument.AFTER,
        )
        if not doc:
            logger.warning(f"⚠️ Track no encontrado para actualizar: {track_id}")
            return None

        logger.info(f"📝 Track actualizado: {track_id}")
        return doc

    # --------------------------------------------------------
    # 🔹 Obtener track
    # --------------------------------------------------------
    def get_track_by_id(self, track_id: str) -> Optional[Dict[str, Any]]:
        return self.collection.find_one({"id": track_id}, NO_ID)

    def get_track_by_slug(self, slug: str) -> Optional[Dict[str, Any]]:
        return self.collection.find_one({"slug": slug}, NO_ID)

    # --------------------------------------------------------
    # 🔹 Listado paginado / filtrado
    # --------------------------------------------------------
    def get_tracks(self, query: Optional[TrackQuery] = None) -> Tuple[List[Dict[str, Any]], int]:
        """Devuelve (página de tracks, total de coincidencias sin paginar)."""
        query = query or TrackQuery()
        filters = build_track_filter(query)

        total = self.collection.count_documents(filters)
        cursor = (
            self.collection.find(filters, NO_ID)
            .sort(build_track_sort(query))
            .skip((query.page - 1) * query.limit)
            .limit(query.limit)
        )
        tracks = list(cursor)
        logger.debug(f"🔎 {len(tracks)}/{total} tracks para filtro {filters}")
        return tracks, total

    # --------------------------------------------------------
    # 🔹 Eliminar track (con su audio)
    # --------------------------------------------------------
    def delete_track(self, track_id: str) -> bool:
        """
        Elimina el track y, antes, su audio remoto.

        Si falla el borrado del audio la excepción se propaga y el registro
        queda intacto.
        """
        track = self.get_track_by_id(track_id)
        if not track:
            logger.warning(f"⚠️ No se encontró track para eliminar: {track_id}")
            return False

        if track.get("audioFile"):
            self._require_media_store().delete(track_id)

        deleted = self.collection.find_one_and_delete({"id": track_id})
        if not deleted:
            # otro request lo eliminó entre medio
            return False

        logger.info(f"🗑️ Track eliminado: {track_id}")
        return True

    def delete_multiple_tracks(self, track_ids: List[str]) -> BatchDeleteResult:
        results = BatchDeleteResult()

        for track_id in track_ids:
            try:
                deleted = self.delete_track(track_id)
            except Exception:
                logger.exception(f"❌ Error eliminando track {track_id}")
                deleted = False

            if deleted:
                results.success.append(track_id)
            else:
                results.failed.append(track_id)

        logger.info(f"🗑️ Borrado múltiple: {len(results.success)} ok, {len(results.failed)} fallidos")
        return results

    # --------------------------------------------------------
    # 🔹 Archivos de audio
    # --------------------------------------------------------
    def save_audio_file(self, track_id: str, file_name: str, data: bytes) -> str:
        """Sube el audio y devuelve su URL. Errores de GCS se propagan."""
        return self._require_media_store().upload(track_id, file_name, data)

    def attach_audio_file(self, track_id: str, file_name: str, data: bytes) -> Optional[Dict[str, Any]]:
        if not self.get_track_by_id(track_id):
            return None
        url = self.save_audio_file(track_id, file_name, data)
        return self.update_track(track_id, {"audioFile": url})

    def delete_audio_file(self, track_id: str) -> bool:
        track = self.get_track_by_id(track_id)
        if not track or not track.get("audioFile"):
            return False

        self._require_media_store().delete(track_id)
        self.update_track(track_id, {"audioFile": ""})
        return True

    # --------------------------------------------------------
    # 🔹 Géneros
    # --------------------------------------------------------
    def get_genres(self) -> List[str]:
        return list(GENRES)

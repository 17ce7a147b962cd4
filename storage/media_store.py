"""
Almacenamiento de archivos de audio en Google Cloud Storage.

Cada track tiene como máximo un objeto remoto, con clave `<folder>/<track_id>`,
de modo que el borrado no depende del nombre original del archivo.
"""

import io
import logging
import mimetypes
from typing import Optional

from google.cloud import storage
from google.cloud.exceptions import NotFound

logger = logging.getLogger("storage.media")

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class MediaStoreUnavailable(RuntimeError):
    """No hay bucket configurado para guardar audios."""


class GCSMediaStore:
    """Sube y elimina audios de un bucket de GCS."""

    def __init__(
        self,
        bucket_name: str,
        folder: str = "tracks",
        project_id: Optional[str] = None,
        client: Optional[storage.Client] = None,
    ):
        if not bucket_name:
            raise ValueError("Bucket name must be provided (GCS_BUCKET_NAME)")
        self.bucket_name = bucket_name
        self.folder = folder.strip("/") or "tracks"
        self.project_id = project_id or None
        self._client = client
        self._bucket: Optional[storage.Bucket] = None

    @property
    def client(self) -> storage.Client:
        if self._client is None:
            self._client = storage.Client(project=self.project_id)
        return self._client

    @property
    def bucket(self) -> storage.Bucket:
        if self._bucket is None:
            self._bucket = self.client.bucket(self.bucket_name)
        return self._bucket

    def key_for(self, track_id: str) -> str:
        return f"{self.folder}/{track_id}"

    def upload(self, track_id: str, file_name: str, data: bytes) -> str:
        """
        Sube el contenido como stream y devuelve la URL pública del objeto.

        Raises:
            GoogleCloudError: si GCS rechaza la subida
        """
        key = self.key_for(track_id)
        content_type = mimetypes.guess_type(file_name or "")[0] or DEFAULT_CONTENT_TYPE
        blob = self.bucket.blob(key)
        blob.content_disposition = f'inline; filename="{file_name}"'
        blob.upload_from_file(io.BytesIO(data), size=len(data), content_type=content_type)
        logger.info(f"☁️ Audio subido: gs://{self.bucket_name}/{key} ({len(data)} bytes)")
        return blob.public_url

    def delete(self, track_id: str) -> bool:
        """Elimina el objeto; False si ya no existía."""
        key = self.key_for(track_id)
        try:
            self.bucket.blob(key).delete()
        except NotFound:
            logger.warning(f"⚠️ Objeto inexistente en GCS: {key}")
            return False
        logger.info(f"🗑️ Audio eliminado: gs://{self.bucket_name}/{key}")
        return True

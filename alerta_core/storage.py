"""
Subida de imágenes (perfil y grupos) a Supabase Storage.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Optional

from supabase import Client, create_client

from .config import get_settings

logger = logging.getLogger(__name__)


class StorageError(RuntimeError):
    pass


class ImageTooLargeError(StorageError):
    pass


def build_object_path(folder: str, prefix: str, filename: str, timestamp_ms: Optional[int] = None) -> str:
    """
    Arma la ruta del objeto: "{folder}/{prefix}_{timestamp}{ext}".

    >>> build_object_path("grupos", "abc", "foto.PNG", 1700000000000)
    'grupos/abc_1700000000000.png'
    """
    ts = timestamp_ms if timestamp_ms is not None else int(time.time() * 1000)
    ext = Path(filename or "").suffix.lower()
    return f"{folder}/{prefix}_{ts}{ext}"


class SupabaseImageStorage:
    def __init__(self, url: Optional[str] = None, service_key: Optional[str] = None, bucket: Optional[str] = None, max_bytes: Optional[int] = None):
        settings = get_settings()
        self.url = url or settings.supabase_url
        self.service_key = service_key or settings.supabase_service_role_key
        self.bucket = bucket or settings.storage_bucket
        self.max_bytes = max_bytes or settings.max_image_bytes
        self._client: Optional[Client] = None

    def _get_client(self) -> Client:
        if not self.url or not self.service_key:
            raise StorageError("SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY no están configuradas en el .env")
        if self._client is None:
            self._client = create_client(self.url, self.service_key)
        return self._client

    def upload_image(self, folder: str, prefix: str, filename: str, content: bytes, content_type: Optional[str]) -> str:
        """
        Sube una imagen y devuelve su URL pública.

        Raises:
            ImageTooLargeError: Si supera el tamaño máximo configurado
            StorageError: Si Supabase rechaza la subida
        """
        if len(content) > self.max_bytes:
            raise ImageTooLargeError(
                f"La imagen supera el tamaño máximo de {self.max_bytes // (1024 * 1024)} MB"
            )

        path = build_object_path(folder, prefix, filename)
        bucket = self._get_client().storage.from_(self.bucket)
        try:
            bucket.upload(path, content, {"content-type": content_type or "application/octet-stream"})
        except Exception as e:
            raise StorageError(f"Error subiendo imagen {path}: {e}") from e

        logger.info(f"🖼️  Imagen subida: {path}")
        return bucket.get_public_url(path)

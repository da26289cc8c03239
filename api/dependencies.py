"""
Dependencias de FastAPI para los servicios externos.

Cada servicio (geocodificación, WhatsApp, identidad, imágenes) se construye
una sola vez y se inyecta con `Depends(...)`. En tests se reemplazan con
`app.dependency_overrides`.
"""

from functools import lru_cache
import logging

from alerta_core.geocoding import GoogleGeocoder
from alerta_core.identity import SupabaseIdentityProvider
from alerta_core.notifications import WhatsAppNotifier
from alerta_core.storage import SupabaseImageStorage

logger = logging.getLogger(__name__)


@lru_cache
def get_geocoder() -> GoogleGeocoder:
    return GoogleGeocoder()


@lru_cache
def get_notifier() -> WhatsAppNotifier:
    return WhatsAppNotifier()


@lru_cache
def get_identity_provider() -> SupabaseIdentityProvider:
    provider = SupabaseIdentityProvider()
    if not provider.url:
        logger.warning("Supabase no configurado: registro e inicio de sesión fallarán.")
    return provider


@lru_cache
def get_image_storage() -> SupabaseImageStorage:
    return SupabaseImageStorage()

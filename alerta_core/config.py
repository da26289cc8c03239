# alerta_core/config.py
from dataclasses import dataclass
from functools import lru_cache
import os

from dotenv import load_dotenv

"""
alerta_core.config
==================

Gestión centralizada de configuración de la aplicación.

Este módulo define:
- La estructura de configuración (`Settings`)
- El mecanismo para cargar variables desde entorno (.env)
- Un acceso único y cacheado a la configuración (`get_settings`)

Convenciones
------------
- Las variables de entorno se cargan desde un archivo `.env` si existe.
- Los defaults están pensados para desarrollo local.
- Si una credencial (Google, Twilio, Supabase) no está presente,
  el error se lanza en el cliente que la necesita, no acá.
"""

# Cargar variables de entorno desde .env (si existe)
load_dotenv()


@dataclass
class Settings:
    """
    Contenedor tipado de configuración global de la aplicación.

    Attributes
    ----------
    google_maps_api_key:
        API key de Google Maps usada para geocodificación inversa.
    geocoding_url:
        Endpoint de la API de geocodificación.
    twilio_account_sid / twilio_auth_token:
        Credenciales de la cuenta Twilio para enviar WhatsApp.
    twilio_whatsapp_from:
        Remitente WhatsApp (formato "whatsapp:+<numero>").
    whatsapp_country_code:
        Prefijo de país que se antepone a los celulares guardados sin él.
    supabase_url / supabase_service_role_key / supabase_anon_key:
        Proyecto Supabase usado para autenticación y almacenamiento.
    storage_bucket:
        Bucket de Supabase Storage donde se guardan las imágenes.
    max_image_bytes:
        Tamaño máximo aceptado para imágenes subidas.
    http_timeout_seconds:
        Timeout de las llamadas HTTP a servicios externos.
    """

    # Geocodificación
    google_maps_api_key: str
    geocoding_url: str

    # Mensajería (Twilio WhatsApp)
    twilio_account_sid: str
    twilio_auth_token: str
    twilio_whatsapp_from: str
    whatsapp_country_code: str

    # Supabase (auth + storage)
    supabase_url: str
    supabase_service_role_key: str
    supabase_anon_key: str
    storage_bucket: str = "alerta-images"

    max_image_bytes: int = 5 * 1024 * 1024
    http_timeout_seconds: float = 8.0


@lru_cache
def get_settings() -> Settings:
    """
    Devuelve una instancia única y cacheada de `Settings`.

    Variables de entorno utilizadas
    -------------------------------
    - GOOGLE_MAPS_API_KEY
    - GEOCODING_URL (default: API de Google Geocoding)
    - TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN
    - TWILIO_WHATSAPP_FROM (default: sandbox "whatsapp:+14155238886")
    - WHATSAPP_COUNTRY_CODE (default: "+56")
    - SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY, SUPABASE_ANON_KEY
    - SUPABASE_STORAGE_BUCKET (default: "alerta-images")
    - MAX_IMAGE_BYTES (default: 5 MB)
    - HTTP_TIMEOUT_SECONDS (default: 8)
    """
    return Settings(
        google_maps_api_key=os.getenv("GOOGLE_MAPS_API_KEY", ""),
        geocoding_url=os.getenv(
            "GEOCODING_URL",
            "https://maps.googleapis.com/maps/api/geocode/json"
        ),

        twilio_account_sid=os.getenv("TWILIO_ACCOUNT_SID", ""),
        twilio_auth_token=os.getenv("TWILIO_AUTH_TOKEN", ""),
        twilio_whatsapp_from=os.getenv("TWILIO_WHATSAPP_FROM", "whatsapp:+14155238886"),
        whatsapp_country_code=os.getenv("WHATSAPP_COUNTRY_CODE", "+56"),

        supabase_url=os.getenv("SUPABASE_URL", ""),
        supabase_service_role_key=os.getenv("SUPABASE_SERVICE_ROLE_KEY", ""),
        supabase_anon_key=os.getenv("SUPABASE_ANON_KEY", ""),
        storage_bucket=os.getenv("SUPABASE_STORAGE_BUCKET", "alerta-images"),

        max_image_bytes=int(os.getenv("MAX_IMAGE_BYTES", str(5 * 1024 * 1024))),
        http_timeout_seconds=float(os.getenv("HTTP_TIMEOUT_SECONDS", "8")),
    )

"""
Geocodificación inversa (coordenadas -> comuna + dirección) con Google Geocoding.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from .config import get_settings
from .domain_models import COMUNA_NO_DISPONIBLE, DIRECCION_NO_DISPONIBLE, GeocodeResult

logger = logging.getLogger(__name__)


class GeocodingError(RuntimeError):
    """El servicio de geocodificación no respondió o devolvió un error."""


def parse_geocode_response(payload: Dict[str, Any]) -> GeocodeResult:
    """
    Extrae comuna y dirección del primer resultado de Google.

    La comuna es el componente cuyo `types` incluye "locality".
    Si no hay resultados se usan los textos de "no disponible".
    """
    results = payload.get("results") or []
    if not results:
        return GeocodeResult(comuna=COMUNA_NO_DISPONIBLE, direccion=DIRECCION_NO_DISPONIBLE)

    first = results[0]
    comuna = COMUNA_NO_DISPONIBLE
    for component in first.get("address_components", []):
        if "locality" in component.get("types", []):
            comuna = component.get("long_name") or COMUNA_NO_DISPONIBLE
            break

    direccion = first.get("formatted_address") or DIRECCION_NO_DISPONIBLE
    return GeocodeResult(comuna=comuna, direccion=direccion)


class GoogleGeocoder:
    """Cliente mínimo de la API de Google Geocoding."""

    def __init__(self, api_key: Optional[str] = None, url: Optional[str] = None, timeout: Optional[float] = None):
        settings = get_settings()
        self.api_key = api_key if api_key is not None else settings.google_maps_api_key
        self.url = url or settings.geocoding_url
        self.timeout = timeout or settings.http_timeout_seconds

    def reverse(self, latitud: float, longitud: float) -> GeocodeResult:
        """
        Obtiene comuna y dirección para un par de coordenadas.

        Raises:
            GeocodingError: Si falta la API key o la llamada HTTP falla
        """
        if not self.api_key:
            raise GeocodingError("GOOGLE_MAPS_API_KEY no está configurada en el .env")

        try:
            r = requests.get(
                self.url,
                params={"latlng": f"{latitud},{longitud}", "key": self.api_key},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise GeocodingError(f"Error al consultar geocodificación: {e}") from e

        if not r.ok:
            raise GeocodingError(f"Geocodificación respondió HTTP {r.status_code}")

        payload = r.json()
        status = payload.get("status", "OK")
        if status not in ("OK", "ZERO_RESULTS"):
            raise GeocodingError(f"Geocodificación respondió estado {status}")

        result = parse_geocode_response(payload)
        logger.debug(f"Geocodificado ({latitud}, {longitud}) -> {result.comuna}")
        return result

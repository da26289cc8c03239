"""
Tests de los clientes externos y de los textos de alerta, sin red.
"""

import pytest
import requests

from alerta_core import geocoding
from alerta_core.domain_models import COMUNA_NO_DISPONIBLE, DIRECCION_NO_DISPONIBLE
from alerta_core.geocoding import GeocodingError, GoogleGeocoder, parse_geocode_response
from alerta_core.messages import compose_alert_message, default_help_message, maps_link
from alerta_core.notifications import whatsapp_address
from alerta_core.storage import ImageTooLargeError, build_object_path


GOOGLE_PAYLOAD = {
    "status": "OK",
    "results": [
        {
            "formatted_address": "Av. Brasil 2950, Valparaíso, Chile",
            "address_components": [
                {"long_name": "2950", "types": ["street_number"]},
                {"long_name": "Valparaíso", "types": ["locality", "political"]},
                {"long_name": "Chile", "types": ["country", "political"]},
            ],
        },
        {
            "formatted_address": "Valparaíso, Chile",
            "address_components": [
                {"long_name": "Otra", "types": ["locality"]},
            ],
        },
    ],
}


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code
        self.ok = status_code < 400

    def json(self):
        return self._payload


def test_default_help_message():
    assert default_help_message("Ana", "Rojas") == (
        "¡Ayuda! Ana Rojas está siendo acosada(o) y necesita asistencia inmediata."
    )


def test_compose_alert_message_includes_address_and_map_link():
    texto = compose_alert_message("Necesito ayuda", "Av. Brasil 2950", -33.0458, -71.6197)

    assert texto.startswith("Necesito ayuda. Estimados, mi ubicación actual es Av. Brasil 2950 ")
    assert "(latitud: -33.0458, longitud: -71.6197)" in texto
    assert texto.endswith(maps_link(-33.0458, -71.6197))
    assert maps_link(-33.0458, -71.6197) == (
        "https://www.google.com/maps/search/?api=1&query=-33.0458,-71.6197"
    )


def test_parse_geocode_uses_first_result_locality():
    result = parse_geocode_response(GOOGLE_PAYLOAD)
    assert result.comuna == "Valparaíso"
    assert result.direccion == "Av. Brasil 2950, Valparaíso, Chile"


def test_parse_geocode_fallbacks():
    empty = parse_geocode_response({"status": "ZERO_RESULTS", "results": []})
    assert empty.comuna == COMUNA_NO_DISPONIBLE
    assert empty.direccion == DIRECCION_NO_DISPONIBLE

    no_locality = parse_geocode_response({
        "results": [{"formatted_address": "Ruta 68", "address_components": [{"long_name": "Chile", "types": ["country"]}]}]
    })
    assert no_locality.comuna == COMUNA_NO_DISPONIBLE
    assert no_locality.direccion == "Ruta 68"


def test_google_geocoder_sends_latlng_and_key(monkeypatch):
    captured = {}

    def fake_get(url, params=None, timeout=None):
        captured.update(url=url, params=params, timeout=timeout)
        return FakeResponse(GOOGLE_PAYLOAD)

    monkeypatch.setattr(geocoding.requests, "get", fake_get)
    geocoder = GoogleGeocoder(api_key="k", url="https://geo.test/json", timeout=3)

    result = geocoder.reverse(-33.0458, -71.6197)

    assert result.comuna == "Valparaíso"
    assert captured["url"] == "https://geo.test/json"
    assert captured["params"] == {"latlng": "-33.0458,-71.6197", "key": "k"}
    assert captured["timeout"] == 3


def test_google_geocoder_errors(monkeypatch):
    geocoder = GoogleGeocoder(api_key="k", url="https://geo.test/json")

    monkeypatch.setattr(geocoding.requests, "get", lambda *a, **kw: FakeResponse({}, status_code=500))
    with pytest.raises(GeocodingError, match="HTTP 500"):
        geocoder.reverse(1, 2)

    monkeypatch.setattr(geocoding.requests, "get", lambda *a, **kw: FakeResponse({"status": "REQUEST_DENIED"}))
    with pytest.raises(GeocodingError, match="REQUEST_DENIED"):
        geocoder.reverse(1, 2)

    def boom(*a, **kw):
        raise requests.ConnectionError("sin red")

    monkeypatch.setattr(geocoding.requests, "get", boom)
    with pytest.raises(GeocodingError, match="sin red"):
        geocoder.reverse(1, 2)


def test_google_geocoder_requires_key():
    with pytest.raises(GeocodingError, match="GOOGLE_MAPS_API_KEY"):
        GoogleGeocoder(api_key="").reverse(1, 2)


def test_whatsapp_address_normalization():
    assert whatsapp_address("912345678", "+56") == "whatsapp:+56912345678"
    assert whatsapp_address("9 1234 5678", "+56") == "whatsapp:+56912345678"
    assert whatsapp_address("+54 11 5555 0000", "+56") == "whatsapp:+541155550000"


def test_notify_all_skips_failed_recipients(notifier):
    notifier.failing.add("922222222")

    delivered = notifier.notify_all(["911111111", "922222222", "933333333"], "hola")

    assert delivered == ["911111111", "933333333"]
    assert [c for c, _ in notifier.sent] == ["911111111", "933333333"]


def test_build_object_path():
    assert build_object_path("profile-images", "uid1", "yo.JPG", 42) == "profile-images/uid1_42.jpg"
    assert build_object_path("grupos", "g1", "", 7) == "grupos/g1_7"


def test_image_storage_rejects_large_images(storage):
    with pytest.raises(ImageTooLargeError):
        storage.upload_image("grupos", "g1", "big.png", b"x" * 2048, "image/png")
    assert storage.uploads == {}


def test_image_storage_returns_public_url(storage):
    url = storage.upload_image("grupos", "g1", "logo.png", b"png", "image/png")

    assert url.startswith("https://storage.test/imagenes/grupos/g1_")
    assert url.endswith(".png")
    assert list(storage.uploads.values()) == [b"png"]

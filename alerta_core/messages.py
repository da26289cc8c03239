"""
Textos que la plataforma envía en nombre del usuario.
"""

from __future__ import annotations

MAPS_SEARCH_URL = "https://www.google.com/maps/search/?api=1&query={lat},{lng}"


def default_help_message(nombre: str, apellido: str) -> str:
    """Mensaje de auxilio que se crea al registrar un usuario."""
    return f"¡Ayuda! {nombre} {apellido} está siendo acosada(o) y necesita asistencia inmediata."


def maps_link(latitud: float, longitud: float) -> str:
    return MAPS_SEARCH_URL.format(lat=latitud, lng=longitud)


def compose_alert_message(mensaje: str, direccion: str, latitud: float, longitud: float) -> str:
    """
    Arma el texto final de la alerta: mensaje del usuario + dirección + enlace al mapa.

    Args:
        mensaje: Mensaje elegido por el usuario (sin punto final)
        direccion: Dirección geocodificada
        latitud: Latitud reportada
        longitud: Longitud reportada

    Returns:
        Texto listo para guardar en la alerta y enviar a los contactos
    """
    return (
        f"{mensaje}. Estimados, mi ubicación actual es {direccion} "
        f"(latitud: {latitud}, longitud: {longitud}). "
        "Solicito asistencia urgente o notificación a las autoridades competentes. "
        f"Puedes ver mi ubicación en el siguiente enlace: {maps_link(latitud, longitud)}"
    )

"""
Endpoints de alertas.

- POST /api/guardar-ubicacion: Guarda ubicación + alerta y avisa por WhatsApp a los contactos
- GET /api/obtener-alertas: Lista alertas con su ubicación y gravedad
- GET /api/alertas-usuario: Alertas emitidas por un usuario
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select

from alerta_core.db.database import get_db_session
from alerta_core.db.helpers import to_dict
from alerta_core.db.models import Alert, Contact, Location, Severity
from alerta_core.geocoding import GeocodingError, GoogleGeocoder
from alerta_core.messages import compose_alert_message
from alerta_core.notifications import WhatsAppNotifier

from ..dependencies import get_geocoder, get_notifier
from ..models.requests import AlertRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["alertas"])


@router.post("/guardar-ubicacion")
async def save_alert(
    request: AlertRequest,
    geocoder: GoogleGeocoder = Depends(get_geocoder),
    notifier: WhatsAppNotifier = Depends(get_notifier),
):
    """
    Registra una alerta con la ubicación actual del usuario.

    Flujo:
    1. Geocodifica las coordenadas (comuna + dirección)
    2. Guarda la ubicación y la alerta con el mensaje compuesto
    3. Envía el mensaje por WhatsApp a cada contacto con celular

    Si la geocodificación falla no se guarda nada. Un contacto al que no se
    le puede enviar no invalida la alerta.

    Returns:
        message, id_ubicacion, id_alerta y notificados (envíos exitosos)
    """
    try:
        geo = geocoder.reverse(request.latitud, request.longitud)
    except GeocodingError as e:
        logger.error(f"❌ Geocodificación fallida para {request.id_usuario}: {e}")
        raise HTTPException(status_code=502, detail=f"Error al obtener la dirección: {str(e)}") from e

    texto = compose_alert_message(request.mensaje, geo.direccion, request.latitud, request.longitud)

    with get_db_session() as session:
        try:
            location = Location(
                id_usuario=request.id_usuario,
                latitud=request.latitud,
                longitud=request.longitud,
            )
            session.add(location)
            session.flush()

            alert = Alert(
                comuna=geo.comuna,
                direccion=geo.direccion,
                id_gravedad=request.id_gravedad,
                id_ubicacion=location.id_ubicacion,
                id_usuario=request.id_usuario,
                mensaje=texto,
            )
            session.add(alert)
            session.flush()

            id_ubicacion = location.id_ubicacion
            id_alerta = alert.id_alerta

            stmt = select(Contact.celular).where(Contact.id_usuario == request.id_usuario)
            celulares = [c for c in session.execute(stmt).scalars().all() if c]

        except Exception as e:
            session.rollback()
            raise HTTPException(
                status_code=500,
                detail=f"Error interno: {str(e)}"
            ) from e

    logger.info(f"🚨 Alerta {id_alerta} registrada en {geo.comuna} para {request.id_usuario}")

    delivered = notifier.notify_all(celulares, texto)
    if len(delivered) < len(celulares):
        logger.warning(f"⚠️  Alerta {id_alerta}: {len(delivered)}/{len(celulares)} contactos notificados")

    return {
        "message": "Ubicación y alerta guardadas exitosamente.",
        "id_ubicacion": id_ubicacion,
        "id_alerta": id_alerta,
        "notificados": len(delivered),
    }


@router.get("/obtener-alertas")
async def list_alerts(id_alerta: Optional[str] = Query(None)):
    """
    Lista todas las alertas (o solo `id_alerta`) con ubicación y gravedad.

    Si la ubicación o la gravedad referenciadas no existen se informa con texto.
    """
    with get_db_session() as session:
        stmt = select(Alert).order_by(Alert.fecha.desc())
        if id_alerta:
            stmt = stmt.where(Alert.id_alerta == id_alerta)
        alerts = session.execute(stmt).scalars().all()

        if not alerts:
            return {"message": "No se encontraron alertas.", "alertas": []}

        alertas = []
        for alert in alerts:
            location = session.get(Location, alert.id_ubicacion)
            severity = session.get(Severity, alert.id_gravedad)
            alertas.append({
                "id_alerta": alert.id_alerta,
                "id_usuario": alert.id_usuario,
                "comuna": alert.comuna,
                "direccion": alert.direccion,
                "fecha": alert.fecha.isoformat(),
                "mensaje": alert.mensaje,
                "ubicacion": {
                    "latitud": location.latitud,
                    "longitud": location.longitud,
                } if location else "Ubicación no encontrada",
                "gravedad": {
                    "id_gravedad": severity.id_gravedad,
                    "descripcion": severity.descripcion,
                } if severity else "Gravedad no encontrada",
            })

        return {"message": "Alertas obtenidas exitosamente.", "alertas": alertas}


@router.get("/alertas-usuario")
async def list_user_alerts(id_usuario: str = Query(..., min_length=1)):
    """Alertas de un usuario, de la más reciente a la más antigua."""
    with get_db_session() as session:
        stmt = (
            select(Alert)
            .where(Alert.id_usuario == id_usuario)
            .order_by(Alert.fecha.desc())
        )
        alerts = session.execute(stmt).scalars().all()

        if not alerts:
            return {
                "message": f"No se encontraron alertas para el usuario con id: {id_usuario}",
                "alertasUsuario": [],
            }

        return {
            "message": f"Alertas obtenidas exitosamente para el usuario con id: {id_usuario}",
            "alertasUsuario": [to_dict(a) for a in alerts],
        }

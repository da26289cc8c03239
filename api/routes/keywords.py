"""
Endpoints de palabras clave, mensajes de auxilio y gravedades.

Una clave asocia una palabra con un mensaje del usuario y una gravedad:
al detectarla, la app dispara la alerta con ese mensaje.

Claves:
- GET /api/listar-gravedades
- GET /api/obtener-claves-usuario
- POST /api/guardar-clave
- PUT /api/editar-clave
- DELETE /api/eliminar-clave

Mensajes:
- GET /api/obtener-mensajes
- POST /api/insertar-mensaje
- PUT /api/editar-mensaje
- DELETE /api/eliminar-mensaje
"""

import logging

from fastapi import APIRouter, HTTPException, Query
from sqlalchemy import select

from alerta_core.db.database import get_db_session
from alerta_core.db.helpers import to_dict
from alerta_core.db.models import Keyword, Message, Severity

from ..models.requests import (
    KeywordCreateRequest,
    KeywordDeleteRequest,
    KeywordUpdateRequest,
    MessageCreateRequest,
    MessageDeleteRequest,
    MessageUpdateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["claves"])


def _get_user_message(session, id_mensaje: str, id_usuario: str) -> Message:
    message = session.get(Message, id_mensaje)
    if not message or message.id_persona != id_usuario:
        raise HTTPException(
            status_code=404,
            detail=f"Mensaje {id_mensaje} no encontrado para el usuario {id_usuario}"
        )
    return message


@router.get("/listar-gravedades")
async def list_severities():
    with get_db_session() as session:
        stmt = select(Severity).where(Severity.estado.is_(True)).order_by(Severity.descripcion)
        severities = session.execute(stmt).scalars().all()
        if not severities:
            raise HTTPException(status_code=404, detail="No se encontraron gravedades.")
        return [to_dict(s) for s in severities]


@router.get("/obtener-claves-usuario")
async def list_user_keywords(id_usuario: str = Query(..., min_length=1)):
    """
    Claves del usuario con el texto del mensaje y la descripción de la gravedad.

    Returns:
        Lista de {id_clave, palabra, id_mensaje, mensaje, id_gravedad, gravedad}

    Raises:
        404: Si el usuario no tiene claves
    """
    with get_db_session() as session:
        stmt = select(Keyword).where(Keyword.id_usuario == id_usuario).order_by(Keyword.palabra)
        keywords = session.execute(stmt).scalars().all()
        if not keywords:
            raise HTTPException(status_code=404, detail="No se encontraron claves para el usuario proporcionado.")

        result = []
        for kw in keywords:
            message = session.get(Message, kw.id_mensaje)
            severity = session.get(Severity, kw.id_gravedad)
            result.append({
                "id_clave": kw.id_clave,
                "palabra": kw.palabra,
                "id_mensaje": kw.id_mensaje,
                "mensaje": message.mensaje if message else "Mensaje no encontrado",
                "id_gravedad": kw.id_gravedad,
                "gravedad": severity.descripcion if severity else "Gravedad no encontrada",
            })
        return result


@router.post("/guardar-clave")
async def create_keyword(request: KeywordCreateRequest):
    with get_db_session() as session:
        try:
            _get_user_message(session, request.id_mensaje, request.id_usuario)
            if not session.get(Severity, request.id_gravedad):
                raise HTTPException(status_code=404, detail=f"Gravedad {request.id_gravedad} no encontrada")

            keyword = Keyword(**request.model_dump())
            session.add(keyword)
            session.flush()

            return {"message": "Clave guardada exitosamente.", "id_clave": keyword.id_clave}

        except HTTPException:
            raise
        except Exception as e:
            session.rollback()
            raise HTTPException(
                status_code=500,
                detail=f"Error interno: {str(e)}"
            ) from e


@router.put("/editar-clave")
async def update_keyword(request: KeywordUpdateRequest):
    """Actualiza solo los campos enviados de una clave."""
    with get_db_session() as session:
        keyword = session.get(Keyword, request.id_clave)
        if not keyword:
            raise HTTPException(status_code=404, detail=f"Clave {request.id_clave} no encontrada")

        updates = {k: v for k, v in request.model_dump(exclude={"id_clave"}).items() if v}
        if not updates:
            raise HTTPException(status_code=400, detail="No se proporcionaron datos para actualizar.")

        if "id_mensaje" in updates:
            _get_user_message(session, updates["id_mensaje"], keyword.id_usuario)

        for key, value in updates.items():
            setattr(keyword, key, value)
        session.flush()

        return {"message": "Clave actualizada exitosamente.", "clave": to_dict(keyword)}


@router.delete("/eliminar-clave")
async def delete_keyword(request: KeywordDeleteRequest):
    with get_db_session() as session:
        keyword = session.get(Keyword, request.id_clave)
        if not keyword:
            raise HTTPException(status_code=404, detail=f"Clave {request.id_clave} no encontrada")
        session.delete(keyword)
        return {"message": "Clave eliminada exitosamente."}


# =========================================================
# Mensajes
# =========================================================

@router.get("/obtener-mensajes")
async def list_messages(id_persona: str = Query(..., min_length=1)):
    with get_db_session() as session:
        stmt = (
            select(Message)
            .where(Message.id_persona == id_persona)
            .order_by(Message.created_at)
        )
        messages = session.execute(stmt).scalars().all()
        if not messages:
            raise HTTPException(status_code=404, detail="No se encontraron mensajes para la persona proporcionada.")
        return [to_dict(m) for m in messages]


@router.post("/insertar-mensaje", status_code=201)
async def create_message(request: MessageCreateRequest):
    with get_db_session() as session:
        message = Message(id_persona=request.id_persona, mensaje=request.mensaje)
        session.add(message)
        session.flush()
        return {"message": "Mensaje insertado exitosamente.", "id_mensaje": message.id_mensaje}


@router.put("/editar-mensaje")
async def update_message(request: MessageUpdateRequest):
    with get_db_session() as session:
        message = session.get(Message, request.id_mensaje)
        if not message:
            raise HTTPException(status_code=404, detail=f"Mensaje {request.id_mensaje} no encontrado")
        message.mensaje = request.mensaje
        return {"message": "Mensaje actualizado exitosamente."}


@router.delete("/eliminar-mensaje")
async def delete_message(request: MessageDeleteRequest):
    """
    Elimina un mensaje del usuario.

    Las claves que apuntaban al mensaje pasan al primer mensaje restante
    del mismo usuario. Un usuario siempre conserva al menos un mensaje.

    Raises:
        404: Si el mensaje no existe
        400: Si es el único mensaje del usuario
    """
    with get_db_session() as session:
        message = session.get(Message, request.id_mensaje)
        if not message:
            raise HTTPException(status_code=404, detail=f"Mensaje {request.id_mensaje} no encontrado")

        stmt = (
            select(Message)
            .where(
                Message.id_persona == message.id_persona,
                Message.id_mensaje != message.id_mensaje,
            )
            .order_by(Message.created_at)
        )
        replacement = session.execute(stmt).scalars().first()
        if not replacement:
            raise HTTPException(
                status_code=400,
                detail="El usuario solo tiene este mensaje, no se puede eliminar."
            )

        keywords = session.execute(
            select(Keyword).where(Keyword.id_mensaje == message.id_mensaje)
        ).scalars().all()
        for kw in keywords:
            kw.id_mensaje = replacement.id_mensaje

        session.delete(message)
        logger.info(
            f"Mensaje {message.id_mensaje} eliminado; {len(keywords)} claves reasignadas a {replacement.id_mensaje}"
        )

        return {
            "message": "Mensaje eliminado exitosamente.",
            "claves_reasignadas": len(keywords),
            "id_mensaje_reemplazo": replacement.id_mensaje,
        }

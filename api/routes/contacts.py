"""
Endpoints para gestionar los contactos de confianza de un usuario.

- POST /api/guardar-contacto
- PUT /api/editar-contacto
- DELETE /api/borrar-contacto
- GET /api/ver-contactos
"""

from fastapi import APIRouter, HTTPException, Query
from sqlalchemy import select

from alerta_core.db.database import get_db_session
from alerta_core.db.helpers import to_dict
from alerta_core.db.models import Contact

from ..models.requests import ContactCreateRequest, ContactDeleteRequest, ContactUpdateRequest

router = APIRouter(prefix="/api", tags=["contactos"])


@router.post("/guardar-contacto", status_code=201)
async def create_contact(request: ContactCreateRequest):
    with get_db_session() as session:
        try:
            contact = Contact(**request.model_dump())
            session.add(contact)
            session.flush()

            return {
                "message": "Contacto agregado exitosamente",
                "contacto": to_dict(contact),
            }

        except Exception as e:
            session.rollback()
            raise HTTPException(
                status_code=500,
                detail=f"Error interno: {str(e)}"
            ) from e


@router.put("/editar-contacto")
async def update_contact(request: ContactUpdateRequest):
    """
    Reemplaza los datos de un contacto.

    Raises:
        404: Si el contacto no existe
    """
    with get_db_session() as session:
        contact = session.get(Contact, request.id_contacto)
        if not contact:
            raise HTTPException(
                status_code=404,
                detail=f"No se encontró el contacto con id: {request.id_contacto}"
            )

        contact.nombres = request.nombres
        contact.apellidos = request.apellidos
        contact.celular = request.celular
        contact.email = request.email
        session.flush()

        return {
            "message": "Contacto actualizado exitosamente",
            "contacto": to_dict(contact),
        }


@router.delete("/borrar-contacto")
async def delete_contact(request: ContactDeleteRequest):
    with get_db_session() as session:
        contact = session.get(Contact, request.id_contacto)
        if not contact:
            raise HTTPException(
                status_code=404,
                detail=f"No se encontró el contacto con id: {request.id_contacto}"
            )
        session.delete(contact)
        return {"message": "Contacto eliminado exitosamente"}


@router.get("/ver-contactos")
async def list_contacts(id_usuario: str = Query(..., min_length=1)):
    with get_db_session() as session:
        stmt = (
            select(Contact)
            .where(Contact.id_usuario == id_usuario)
            .order_by(Contact.nombres, Contact.apellidos)
        )
        contacts = session.execute(stmt).scalars().all()

        if not contacts:
            return {
                "message": f"No se encontraron contactos para el usuario con id: {id_usuario}",
                "CONTACTO": [],
            }

        return {
            "message": "Contactos obtenidos exitosamente",
            "CONTACTO": [to_dict(c) for c in contacts],
        }

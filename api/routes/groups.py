"""
Endpoints para gestionar grupos de usuarios.

- POST /api/crear-grupo: Crea un grupo (multipart, imagen opcional) y suma al creador
- PUT /api/editar-grupo: Edita nombre, color, descripción e imagen
- DELETE /api/eliminar-grupo: Baja lógica y limpieza de selecciones de ubicación
- GET /api/ver-grupos-creados: Grupos activos creados por un usuario
- GET /api/ver-grupos-usuario: Grupos activos en los que participa un usuario
- GET /api/grupo-completo: Grupo con sus miembros
- POST /api/grupo/eliminar-usuario: Quita un miembro del grupo
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from sqlalchemy import select

from alerta_core.db.database import get_db_session
from alerta_core.db.helpers import get_group_member_ids, get_person_and_profile, to_dict
from alerta_core.db.models import Group, GroupMembership, LocationSelection
from alerta_core.storage import SupabaseImageStorage

from ..dependencies import get_image_storage
from ..models.requests import GroupDeleteRequest, GroupMemberRemoveRequest
from .profile import upload_image

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["grupos"])

GROUP_IMAGES_FOLDER = "grupos"


def _get_active_group(session, id_grupo: str) -> Group:
    group = session.get(Group, id_grupo)
    if not group or not group.estado:
        raise HTTPException(status_code=404, detail=f"Grupo {id_grupo} no encontrado")
    return group


@router.post("/crear-grupo", status_code=201)
async def create_group(
    nombre_grupo: str = Form(..., min_length=1),
    id_usuario_creador: str = Form(..., min_length=1),
    color_hex: str = Form(..., min_length=1),
    descripcion: Optional[str] = Form(None),
    imagen: Optional[UploadFile] = File(None),
    storage: SupabaseImageStorage = Depends(get_image_storage),
):
    """
    Crea un grupo y registra al creador como primer miembro.

    Returns:
        message y grupo creado
    """
    with get_db_session() as session:
        try:
            group = Group(
                nombre_grupo=nombre_grupo,
                color_hex=color_hex,
                descripcion=descripcion,
                estado=True,
                id_usuario=id_usuario_creador,
            )
            session.add(group)
            session.flush()

            if imagen is not None and imagen.filename:
                group.imagen_url = await upload_image(storage, GROUP_IMAGES_FOLDER, group.id_grupo, imagen)

            session.add(GroupMembership(id_grupo=group.id_grupo, id_usuario=id_usuario_creador))
            session.flush()

            logger.info(f"👥 Grupo creado: {group.id_grupo} por {id_usuario_creador}")
            return {"message": "Grupo creado exitosamente.", "grupo": to_dict(group)}

        except HTTPException:
            raise
        except Exception as e:
            session.rollback()
            raise HTTPException(
                status_code=500,
                detail=f"Error interno: {str(e)}"
            ) from e


@router.put("/editar-grupo")
async def update_group(
    id_grupo: str = Form(..., min_length=1),
    nombre_grupo: str = Form(..., min_length=1),
    color_hex: str = Form(..., min_length=1),
    descripcion: str = Form(..., min_length=1),
    imagen: Optional[UploadFile] = File(None),
    storage: SupabaseImageStorage = Depends(get_image_storage),
):
    with get_db_session() as session:
        group = _get_active_group(session, id_grupo)

        group.nombre_grupo = nombre_grupo
        group.color_hex = color_hex
        group.descripcion = descripcion
        if imagen is not None and imagen.filename:
            group.imagen_url = await upload_image(storage, GROUP_IMAGES_FOLDER, id_grupo, imagen)
        session.flush()

        return {"message": "Grupo actualizado exitosamente.", "grupo": to_dict(group)}


@router.delete("/eliminar-grupo")
async def delete_group(request: GroupDeleteRequest):
    """
    Da de baja un grupo (estado = False).

    Las selecciones de ubicación que apuntaban al grupo quedan sin grupo
    y con grupo_buscar desactivado.
    """
    with get_db_session() as session:
        group = _get_active_group(session, request.id_grupo)
        group.estado = False

        selections = session.execute(
            select(LocationSelection).where(LocationSelection.id_grupo == request.id_grupo)
        ).scalars().all()
        for selection in selections:
            selection.id_grupo = None
            selection.grupo_buscar = False

        logger.info(f"Grupo {request.id_grupo} dado de baja ({len(selections)} selecciones limpiadas)")
        return {
            "message": "Grupo eliminado exitosamente.",
            "selecciones_actualizadas": len(selections),
        }


@router.get("/ver-grupos-creados")
async def list_created_groups(id_usuario: str = Query(..., min_length=1)):
    with get_db_session() as session:
        stmt = (
            select(Group)
            .where(Group.id_usuario == id_usuario, Group.estado.is_(True))
            .order_by(Group.nombre_grupo)
        )
        groups = session.execute(stmt).scalars().all()
        if not groups:
            return {"message": "No se encontraron grupos creados por el usuario.", "grupos": []}
        return {"message": "Grupos obtenidos exitosamente.", "grupos": [to_dict(g) for g in groups]}


@router.get("/ver-grupos-usuario")
async def list_member_groups(id_usuario: str = Query(..., min_length=1)):
    with get_db_session() as session:
        stmt = (
            select(Group)
            .join(GroupMembership, GroupMembership.id_grupo == Group.id_grupo)
            .where(GroupMembership.id_usuario == id_usuario, Group.estado.is_(True))
            .order_by(Group.nombre_grupo)
            .distinct()
        )
        groups = session.execute(stmt).scalars().all()
        if not groups:
            return {"message": "El usuario no pertenece a ningún grupo.", "grupos": []}
        return {"message": "Grupos obtenidos exitosamente.", "grupos": [to_dict(g) for g in groups]}


@router.get("/grupo-completo")
async def get_full_group(id_grupo: str = Query(..., min_length=1)):
    """
    Devuelve el grupo con sus miembros (persona + perfil).

    Los miembros sin persona registrada se omiten.
    """
    with get_db_session() as session:
        group = _get_active_group(session, id_grupo)

        miembros = []
        for id_usuario in get_group_member_ids(session, id_grupo):
            person, profile = get_person_and_profile(session, id_usuario)
            if not person:
                continue
            miembros.append({
                "id_usuario": id_usuario,
                "persona": to_dict(person),
                "perfil": to_dict(profile) if profile else None,
            })

        return {"grupo": to_dict(group), "miembros": miembros}


@router.post("/grupo/eliminar-usuario")
async def remove_group_member(request: GroupMemberRemoveRequest):
    with get_db_session() as session:
        memberships = session.execute(
            select(GroupMembership).where(
                GroupMembership.id_grupo == request.id_grupo,
                GroupMembership.id_usuario == request.id_usuario,
            )
        ).scalars().all()

        if not memberships:
            raise HTTPException(
                status_code=404,
                detail=f"El usuario {request.id_usuario} no pertenece al grupo {request.id_grupo}"
            )

        for membership in memberships:
            session.delete(membership)

        return {"message": "Usuario eliminado del grupo exitosamente."}

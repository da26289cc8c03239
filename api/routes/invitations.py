"""
Endpoints para invitaciones a grupos.

Flujo:
1. Un miembro invita a otra persona por su número de teléfono
2. La persona ve sus invitaciones pendientes
3. Acepta (se crea la membresía) o rechaza; en ambos casos la invitación se cierra
"""

import logging

from fastapi import APIRouter, HTTPException, Query
from sqlalchemy import select

from alerta_core.db.database import get_db_session
from alerta_core.db.helpers import to_dict
from alerta_core.db.models import Group, GroupInvitation, GroupMembership, Person

from ..models.requests import InvitationAnswerRequest, InviteRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["invitaciones"])


def _is_member(session, id_grupo: str, id_usuario: str) -> bool:
    stmt = select(GroupMembership).where(
        GroupMembership.id_grupo == id_grupo,
        GroupMembership.id_usuario == id_usuario,
    )
    return session.execute(stmt).first() is not None


@router.post("/invitar-usuario", status_code=201)
async def invite_user(request: InviteRequest):
    """
    Invita a la persona con ese número de teléfono a un grupo.

    Raises:
        404: Grupo inexistente o ninguna persona con ese teléfono
        409: Ya es miembro o ya tiene una invitación pendiente
    """
    with get_db_session() as session:
        try:
            group = session.get(Group, request.id_grupo)
            if not group or not group.estado:
                raise HTTPException(status_code=404, detail=f"Grupo {request.id_grupo} no encontrado")

            person = session.execute(
                select(Person).where(Person.numero_telefono == request.celular)
            ).scalars().first()
            if not person:
                raise HTTPException(
                    status_code=404,
                    detail="No se encontró ningún usuario con ese número de teléfono"
                )

            if _is_member(session, request.id_grupo, person.id_persona):
                raise HTTPException(status_code=409, detail="El usuario ya pertenece a este grupo")

            pending = session.execute(
                select(GroupInvitation).where(
                    GroupInvitation.id_grupo == request.id_grupo,
                    GroupInvitation.id_usuario == person.id_persona,
                    GroupInvitation.estado.is_(True),
                )
            ).first()
            if pending:
                raise HTTPException(
                    status_code=409,
                    detail="El usuario ya tiene una invitación pendiente para este grupo"
                )

            invitation = GroupInvitation(
                id_grupo=request.id_grupo,
                id_usuario=person.id_persona,
                id_usuario_emisor=request.id_usuario_emisor,
                aceptado=False,
                estado=True,
            )
            session.add(invitation)
            session.flush()

            logger.info(f"✉️  Invitación {invitation.id_invitacion_grupo} al grupo {request.id_grupo}")
            return {"message": "Invitación enviada exitosamente.", "invitacion": to_dict(invitation)}

        except HTTPException:
            raise
        except Exception as e:
            session.rollback()
            raise HTTPException(
                status_code=500,
                detail=f"Error interno: {str(e)}"
            ) from e


@router.get("/ver-invitaciones")
async def list_invitations(id_usuario: str = Query(..., min_length=1)):
    """Invitaciones pendientes del usuario, con datos del emisor y del grupo."""
    with get_db_session() as session:
        stmt = (
            select(GroupInvitation)
            .where(
                GroupInvitation.id_usuario == id_usuario,
                GroupInvitation.estado.is_(True),
            )
            .order_by(GroupInvitation.fecha_invitacion.desc())
        )
        invitations = session.execute(stmt).scalars().all()
        if not invitations:
            return {"message": "No tienes invitaciones pendientes.", "invitaciones": []}

        result = []
        for inv in invitations:
            emisor = session.get(Person, inv.id_usuario_emisor)
            group = session.get(Group, inv.id_grupo)
            item = to_dict(inv)
            item["emisor"] = {
                "nombre": emisor.nombre if emisor else "Desconocido",
                "apellido": emisor.apellido if emisor else "",
            }
            item["grupo"] = {
                "nombre_grupo": group.nombre_grupo if group else "",
                "descripcion": group.descripcion if group else "",
            }
            result.append(item)

        return {"message": "Invitaciones obtenidas exitosamente.", "invitaciones": result}


@router.post("/responder-invitacion")
async def answer_invitation(request: InvitationAnswerRequest):
    """
    Acepta o rechaza una invitación pendiente.

    Raises:
        404: Invitación inexistente
        400: Invitación ya respondida, o el usuario ya es miembro al aceptar
    """
    with get_db_session() as session:
        invitation = session.get(GroupInvitation, request.id_invitacion_grupo)
        if not invitation:
            raise HTTPException(
                status_code=404,
                detail=f"Invitación {request.id_invitacion_grupo} no encontrada"
            )
        if not invitation.estado:
            raise HTTPException(status_code=400, detail="La invitación ya fue respondida.")

        if request.aceptar:
            if _is_member(session, invitation.id_grupo, invitation.id_usuario):
                raise HTTPException(status_code=400, detail="El usuario ya pertenece a este grupo")
            session.add(GroupMembership(id_grupo=invitation.id_grupo, id_usuario=invitation.id_usuario))
            invitation.aceptado = True
            message = "Invitación aceptada. Ahora eres miembro del grupo."
        else:
            invitation.aceptado = False
            message = "Invitación rechazada."

        invitation.estado = False
        return {"message": message, "invitacion": to_dict(invitation)}

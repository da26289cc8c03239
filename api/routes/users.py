"""
Endpoints de administración de usuarios.

Este módulo maneja:
- GET /api/listar-personas-perfil: Personas con su perfil
- PUT /api/desactivar-perfil / PUT /api/activar-perfil: Habilita o bloquea el acceso
- PUT /api/editar-perfil: Edición de datos personales por un administrador
- POST /api/login-admin: Inicio de sesión para administradores y funcionarios
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from sqlalchemy import select

from alerta_core.db.database import get_db_session
from alerta_core.db.helpers import to_dict
from alerta_core.db.models import Person, Profile, UserType
from alerta_core.domain_models import UserKind
from alerta_core.identity import IdentityError, InvalidCredentialsError, SupabaseIdentityProvider
from alerta_core.storage import SupabaseImageStorage

from ..dependencies import get_identity_provider, get_image_storage
from ..models.requests import LoginRequest, ProfileStateRequest
from .profile import update_person_profile

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["admin_usuario"])

# descripcion en tipo_usuario -> rol con acceso al panel
PANEL_ROLES = {
    UserKind.ADMIN.description: "Administrador",
    UserKind.FUNCIONARIO.description: "Funcionario",
}


@router.get("/listar-personas-perfil")
async def list_people_with_profile():
    """
    Lista todas las personas con su perfil.

    Raises:
        404: Si no hay personas registradas
    """
    with get_db_session() as session:
        people = session.execute(select(Person).order_by(Person.apellido, Person.nombre)).scalars().all()
        if not people:
            raise HTTPException(status_code=404, detail="No se encontraron personas con perfil.")

        personas = []
        for person in people:
            profile = session.get(Profile, person.id_persona)
            personas.append({
                "id_persona": person.id_persona,
                "nombre": person.nombre,
                "apellido": person.apellido,
                "correo": person.correo,
                "perfil": to_dict(profile) if profile else {},
            })

        return {"message": "Personas y perfiles obtenidos exitosamente.", "personas": personas}


def _set_profile_state(id_persona: str, estado: bool) -> None:
    with get_db_session() as session:
        profile = session.get(Profile, id_persona)
        if not profile:
            raise HTTPException(status_code=404, detail=f"Perfil {id_persona} no encontrado")
        profile.estado = estado
        logger.info(f"Perfil {id_persona} {'activado' if estado else 'desactivado'}")


@router.put("/desactivar-perfil")
async def deactivate_profile(request: ProfileStateRequest):
    _set_profile_state(request.id_persona, False)
    return {"message": "Perfil desactivado exitosamente."}


@router.put("/activar-perfil")
async def activate_profile(request: ProfileStateRequest):
    _set_profile_state(request.id_persona, True)
    return {"message": "Perfil activado exitosamente."}


@router.put("/editar-perfil")
async def admin_update_profile(
    id_persona: str = Form(..., min_length=1),
    nombre: Optional[str] = Form(None),
    apellido: Optional[str] = Form(None),
    numero_telefono: Optional[str] = Form(None),
    direccion: Optional[str] = Form(None),
    correo: Optional[str] = Form(None),
    fecha_nacimiento: Optional[str] = Form(None),
    imagen_usuario: Optional[UploadFile] = File(None),
    storage: SupabaseImageStorage = Depends(get_image_storage),
):
    """Edita los datos de cualquier persona (multipart/form-data)."""
    return await update_person_profile(
        id_persona,
        {
            "nombre": nombre,
            "apellido": apellido,
            "numero_telefono": numero_telefono,
            "direccion": direccion,
            "correo": correo,
            "fecha_nacimiento": fecha_nacimiento,
        },
        imagen_usuario,
        storage,
    )


@router.post("/login-admin")
async def login_admin(
    request: LoginRequest,
    identity: SupabaseIdentityProvider = Depends(get_identity_provider),
):
    """
    Inicio de sesión del panel web.

    Solo pueden ingresar perfiles activos de tipo admin o funcionario.

    Raises:
        401: Credenciales inválidas
        403: Perfil deshabilitado o sin rol de panel
        404: Perfil o tipo de usuario inexistentes
    """
    try:
        uid = identity.sign_in(request.correo, request.password)
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=401, detail="Correo o contraseña incorrectos.") from e
    except IdentityError as e:
        raise HTTPException(status_code=502, detail=f"Error al iniciar sesión: {str(e)}") from e

    with get_db_session() as session:
        profile = session.get(Profile, uid)
        if not profile:
            raise HTTPException(status_code=404, detail="No se encontró el perfil del usuario.")
        if not profile.estado:
            raise HTTPException(
                status_code=403,
                detail="El usuario tiene restringido el acceso a la plataforma."
            )

        user_type = session.get(UserType, profile.tipo_usuario)
        if not user_type:
            raise HTTPException(status_code=404, detail="No se encontró el tipo de usuario asociado.")

        role = PANEL_ROLES.get(user_type.descripcion)
        if not role:
            raise HTTPException(
                status_code=403,
                detail="El usuario no tiene un rol válido para iniciar sesión."
            )

        return {
            "message": f"Sesión iniciada exitosamente como {role}.",
            "perfil": to_dict(profile),
        }

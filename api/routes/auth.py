"""
Endpoints de registro e inicio de sesión.

- POST /api/register: Crea la cuenta, la persona, el perfil y el mensaje por defecto
- POST /api/login: Inicia sesión y devuelve persona + perfil
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from alerta_core.db.database import get_db_session
from alerta_core.db.helpers import get_person_and_profile, to_dict
from alerta_core.db.models import Message, Person, Profile
from alerta_core.identity import (
    DuplicateAccountError,
    IdentityError,
    InvalidCredentialsError,
    SupabaseIdentityProvider,
)
from alerta_core.messages import default_help_message

from ..dependencies import get_identity_provider
from ..models.requests import LoginRequest, RegisterRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["login"])


@router.post("/register", status_code=201)
async def register(
    request: RegisterRequest,
    identity: SupabaseIdentityProvider = Depends(get_identity_provider),
):
    """
    Registra un usuario nuevo.

    Crea la cuenta en el proveedor de identidad y, con el uid obtenido,
    las filas de persona y perfil, más el mensaje de auxilio por defecto.
    La contraseña solo se guarda en el proveedor de identidad.

    Returns:
        message, uid, persona y perfil creados

    Raises:
        409: Si el correo ya está registrado
        502: Si el proveedor de identidad falla
    """
    try:
        uid = identity.create_account(request.correo, request.password)
    except DuplicateAccountError as e:
        raise HTTPException(status_code=409, detail="Error al registrar : Correo duplicado") from e
    except IdentityError as e:
        raise HTTPException(status_code=502, detail=f"Error al registrar: {str(e)}") from e

    with get_db_session() as session:
        try:
            person = Person(
                id_persona=uid,
                nombre=request.nombre,
                apellido=request.apellido,
                correo=request.correo,
                numero_telefono=request.numero_telefono,
                rut=request.rut,
                fecha_nacimiento=request.fecha_nacimiento,
                direccion=request.direccion,
                id_comuna=request.id_comuna,
                id_genero=request.id_genero,
                id_municipalidad=request.id_municipalidad,
            )
            profile = Profile(
                id_persona=uid,
                correo=request.correo,
                imagen_usuario=None,
                tipo_usuario=request.tipo_usuario.type_id,
                nombre_usuario=None,
                estado=True,
            )
            session.add_all([
                person,
                profile,
                Message(id_persona=uid, mensaje=default_help_message(request.nombre, request.apellido)),
            ])
            session.flush()

            logger.info(f"✅ Usuario registrado: {uid} ({request.tipo_usuario.name})")
            return {
                "message": "Usuario registrado exitosamente.",
                "uid": uid,
                "persona": to_dict(person),
                "perfil": to_dict(profile),
            }

        except Exception as e:
            session.rollback()
            raise HTTPException(
                status_code=500,
                detail=f"Error interno: {str(e)}"
            ) from e


@router.post("/login")
async def login(
    request: LoginRequest,
    identity: SupabaseIdentityProvider = Depends(get_identity_provider),
):
    """
    Inicia sesión con correo y contraseña.

    Raises:
        401: Credenciales inválidas
        403: Perfil deshabilitado
        404: Persona o perfil inexistentes
    """
    try:
        uid = identity.sign_in(request.correo, request.password)
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=401, detail="Correo o contraseña incorrectos.") from e
    except IdentityError as e:
        raise HTTPException(status_code=502, detail=f"Error al iniciar sesión: {str(e)}") from e

    with get_db_session() as session:
        person, profile = get_person_and_profile(session, uid)
        if not person:
            raise HTTPException(status_code=404, detail="No se encontró la persona asociada al usuario.")
        if not profile:
            raise HTTPException(status_code=404, detail="No se encontró el perfil del usuario.")
        if not profile.estado:
            raise HTTPException(
                status_code=403,
                detail="El usuario tiene restringido el acceso a la plataforma."
            )

        return {
            "message": "Sesión iniciada exitosamente.",
            "persona": to_dict(person),
            "perfil": to_dict(profile),
        }

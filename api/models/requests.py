"""
Modelos de request para la API.

Estos modelos definen la estructura esperada de los bodies JSON.
Un campo obligatorio ausente responde 400 (ver api/error_handlers.py).
Los endpoints con imagen usan multipart/form-data y no tienen modelo acá.
"""

from typing import Annotated, Optional

from pydantic import BaseModel, EmailStr, Field, StringConstraints

from alerta_core.domain_models import UserKind

# Texto obligatorio: "" cuenta como campo faltante
NonEmptyStr = Annotated[str, StringConstraints(min_length=1)]


# =========================================================
# Registro e inicio de sesión
# =========================================================

class RegisterRequest(BaseModel):
    nombre: str = Field(..., min_length=1)
    apellido: str = Field(..., min_length=1)
    correo: EmailStr
    password: str = Field(..., min_length=6, description="Mínimo 6 caracteres (Supabase Auth)")
    fecha_nacimiento: NonEmptyStr = Field(..., description="Formato YYYY-MM-DD")
    direccion: NonEmptyStr
    id_comuna: NonEmptyStr
    id_genero: NonEmptyStr

    numero_telefono: Optional[str] = None
    rut: Optional[str] = None
    tipo_usuario: UserKind = Field(
        default=UserKind.USUARIO,
        description="1 = usuario, 2 = admin, 3 = funcionario",
    )
    id_municipalidad: Optional[str] = None


class LoginRequest(BaseModel):
    correo: EmailStr
    password: NonEmptyStr


# =========================================================
# Alertas y contactos
# =========================================================

class AlertRequest(BaseModel):
    """Alerta disparada desde la app con la ubicación actual."""

    id_usuario: NonEmptyStr
    latitud: float = Field(..., ge=-90, le=90)
    longitud: float = Field(..., ge=-180, le=180)
    id_gravedad: NonEmptyStr
    mensaje: str = Field(..., min_length=1)


class ContactCreateRequest(BaseModel):
    nombres: NonEmptyStr
    apellidos: NonEmptyStr
    celular: NonEmptyStr
    email: NonEmptyStr
    id_usuario: NonEmptyStr


class ContactUpdateRequest(BaseModel):
    id_contacto: NonEmptyStr
    nombres: NonEmptyStr
    apellidos: NonEmptyStr
    celular: NonEmptyStr
    email: NonEmptyStr


class ContactDeleteRequest(BaseModel):
    id_contacto: NonEmptyStr


# =========================================================
# Claves y mensajes
# =========================================================

class KeywordCreateRequest(BaseModel):
    id_gravedad: NonEmptyStr
    id_usuario: NonEmptyStr
    palabra: str = Field(..., min_length=1)
    id_mensaje: NonEmptyStr


class KeywordUpdateRequest(BaseModel):
    id_clave: NonEmptyStr
    id_gravedad: Optional[str] = None
    palabra: Optional[str] = None
    id_mensaje: Optional[str] = None


class KeywordDeleteRequest(BaseModel):
    id_clave: NonEmptyStr


class MessageCreateRequest(BaseModel):
    id_persona: NonEmptyStr
    mensaje: str = Field(..., min_length=1)


class MessageUpdateRequest(BaseModel):
    id_mensaje: NonEmptyStr
    mensaje: str = Field(..., min_length=1)


class MessageDeleteRequest(BaseModel):
    id_mensaje: NonEmptyStr


# =========================================================
# Grupos e invitaciones
# =========================================================

class GroupDeleteRequest(BaseModel):
    id_grupo: NonEmptyStr


class InviteRequest(BaseModel):
    id_grupo: NonEmptyStr
    celular: NonEmptyStr = Field(..., description="numero_telefono de la persona invitada")
    id_usuario_emisor: NonEmptyStr


class InvitationAnswerRequest(BaseModel):
    id_invitacion_grupo: NonEmptyStr
    aceptar: bool


class GroupMemberRemoveRequest(BaseModel):
    id_grupo: NonEmptyStr
    id_usuario: NonEmptyStr


# =========================================================
# Ubicación compartida
# =========================================================

class CurrentLocationRequest(BaseModel):
    id_usuario: NonEmptyStr
    latitud: float = Field(..., ge=-90, le=90)
    longitud: float = Field(..., ge=-180, le=180)


class LocationSelectionRequest(BaseModel):
    id_persona: NonEmptyStr
    tipo: int = Field(..., description="1 = persona, 2 = grupo, 3 = todos")
    id_grupo: Optional[str] = None
    id_persona_buscar: Optional[str] = None


# =========================================================
# Funcionarios
# =========================================================

class DeriveAlertRequest(BaseModel):
    id_alerta: NonEmptyStr
    id_departamento: NonEmptyStr
    id_funcionario: NonEmptyStr


# =========================================================
# Administración
# =========================================================

class ProfileStateRequest(BaseModel):
    id_persona: NonEmptyStr


class CommuneCreateRequest(BaseModel):
    nombre: str = Field(..., min_length=1)


class CommuneUpdateRequest(BaseModel):
    id_comuna: NonEmptyStr
    nombre: str = Field(..., min_length=1)


class CommuneStateRequest(BaseModel):
    id_comuna: NonEmptyStr
    estado: bool


class DescriptionRequest(BaseModel):
    """Body de alta/edición para catálogos con solo descripción (género, gravedad)."""

    descripcion: str = Field(..., min_length=1)


class StateRequest(BaseModel):
    estado: bool


class SeverityUpdateRequest(BaseModel):
    id_gravedad: NonEmptyStr
    descripcion: str = Field(..., min_length=1)


class SeverityStateRequest(BaseModel):
    id_gravedad: NonEmptyStr
    estado: bool


class DepartmentCreateRequest(BaseModel):
    nombre_departamento: str = Field(..., min_length=1)
    numero_telefono: NonEmptyStr


class DepartmentUpdateRequest(BaseModel):
    id_departamento: NonEmptyStr
    nombre_departamento: Optional[str] = None
    numero_telefono: Optional[str] = None


class DepartmentStateRequest(BaseModel):
    id_departamento: NonEmptyStr
    estado: bool


class MunicipalityCreateRequest(BaseModel):
    nombre_municipalidad: str = Field(..., min_length=1)
    direccion_municipalidad: NonEmptyStr
    id_comuna: NonEmptyStr


class MunicipalityUpdateRequest(BaseModel):
    id_municipalidad: NonEmptyStr
    nombre_municipalidad: Optional[str] = None
    direccion_municipalidad: Optional[str] = None
    id_comuna: Optional[str] = None


class MunicipalityStateRequest(BaseModel):
    id_municipalidad: NonEmptyStr
    estado: bool

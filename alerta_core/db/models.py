"""
Modelos ORM de la plataforma de alertas.

Los nombres de columnas coinciden con los campos JSON que expone la API
(nombre, apellido, id_comuna, ...). Las referencias entre tablas son ids
en texto sin ForeignKey: la consistencia se verifica en las rutas.
Las bajas lógicas se hacen con la columna `estado`.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Optional

from sqlalchemy import String, DateTime, Text, Boolean, Float
from sqlalchemy.orm import Mapped, mapped_column

from .database import Base


def _uuid() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """Fecha actual en UTC, sin zona horaria (así se guardan las fechas)."""
    return datetime.now(UTC).replace(tzinfo=None)


# =========================================================
# Usuarios
# =========================================================

class Person(Base):
    """
    Datos personales del usuario.

    `id_persona` es el uid que entrega el proveedor de identidad al registrar.
    """
    __tablename__ = "persona"

    id_persona: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    nombre: Mapped[str] = mapped_column(String(120))
    apellido: Mapped[str] = mapped_column(String(120))
    correo: Mapped[str] = mapped_column(String(255), index=True)
    numero_telefono: Mapped[Optional[str]] = mapped_column(String(30), nullable=True, index=True)
    rut: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    fecha_nacimiento: Mapped[str] = mapped_column(String(20))  # "YYYY-MM-DD"
    direccion: Mapped[str] = mapped_column(String(255))
    id_comuna: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)
    id_genero: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    id_municipalidad: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    imagen_usuario: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)


class Profile(Base):
    """Perfil de acceso: tipo de usuario y habilitación (`estado`)."""
    __tablename__ = "perfil"

    id_persona: Mapped[str] = mapped_column(String(36), primary_key=True)
    correo: Mapped[str] = mapped_column(String(255))
    imagen_usuario: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    tipo_usuario: Mapped[str] = mapped_column(String(36))  # id en tipo_usuario
    nombre_usuario: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    estado: Mapped[bool] = mapped_column(Boolean, default=True)


class UserType(Base):
    __tablename__ = "tipo_usuario"

    id_tipo_usuario: Mapped[str] = mapped_column(String(36), primary_key=True)
    descripcion: Mapped[str] = mapped_column(String(60))  # "Usuario" | "admin" | "Funcionario"


# =========================================================
# Mensajes, claves y alertas
# =========================================================

class Message(Base):
    """Mensaje de auxilio predefinido de un usuario."""
    __tablename__ = "mensaje"

    id_mensaje: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    id_persona: Mapped[str] = mapped_column(String(36), index=True)
    mensaje: Mapped[str] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)


class Severity(Base):
    __tablename__ = "gravedad"

    id_gravedad: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    descripcion: Mapped[str] = mapped_column(String(120))
    estado: Mapped[bool] = mapped_column(Boolean, default=True)


class Keyword(Base):
    """Palabra clave que dispara un mensaje con cierta gravedad."""
    __tablename__ = "clave"

    id_clave: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    id_gravedad: Mapped[str] = mapped_column(String(36))
    id_usuario: Mapped[str] = mapped_column(String(36), index=True)
    palabra: Mapped[str] = mapped_column(String(120))
    id_mensaje: Mapped[str] = mapped_column(String(36), index=True)


class Location(Base):
    """Punto geográfico reportado junto a una alerta."""
    __tablename__ = "ubicacion"

    id_ubicacion: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    id_usuario: Mapped[str] = mapped_column(String(36), index=True)
    latitud: Mapped[float] = mapped_column(Float)
    longitud: Mapped[float] = mapped_column(Float)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)


class Alert(Base):
    __tablename__ = "alerta"

    id_alerta: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    comuna: Mapped[str] = mapped_column(String(120))  # nombre geocodificado, no id
    direccion: Mapped[str] = mapped_column(String(255))
    fecha: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)
    id_gravedad: Mapped[str] = mapped_column(String(36))
    id_ubicacion: Mapped[str] = mapped_column(String(36))
    id_usuario: Mapped[str] = mapped_column(String(36), index=True)
    mensaje: Mapped[str] = mapped_column(Text)


class DerivedAlert(Base):
    """Alerta derivada por un funcionario a un departamento."""
    __tablename__ = "alerta_derivada"

    id_alerta_derivada: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    id_alerta: Mapped[str] = mapped_column(String(36), unique=True, index=True)
    id_departamento: Mapped[str] = mapped_column(String(36), index=True)
    id_funcionario: Mapped[str] = mapped_column(String(36))
    fecha_derivacion: Mapped[datetime] = mapped_column(DateTime, default=utcnow)


class Contact(Base):
    """Contacto de confianza que recibe las alertas por WhatsApp."""
    __tablename__ = "contacto"

    id_contacto: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    nombres: Mapped[str] = mapped_column(String(120))
    apellidos: Mapped[str] = mapped_column(String(120))
    celular: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    email: Mapped[str] = mapped_column(String(255))
    id_usuario: Mapped[str] = mapped_column(String(36), index=True)


# =========================================================
# Grupos
# =========================================================

class Group(Base):
    __tablename__ = "grupo"

    id_grupo: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    nombre_grupo: Mapped[str] = mapped_column(String(120))
    color_hex: Mapped[str] = mapped_column(String(9))
    descripcion: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    imagen_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    estado: Mapped[bool] = mapped_column(Boolean, default=True)
    id_usuario: Mapped[str] = mapped_column(String(36), index=True)  # creador

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)


class GroupMembership(Base):
    __tablename__ = "grupo_persona"

    id_grupo_persona: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    id_grupo: Mapped[str] = mapped_column(String(36), index=True)
    id_usuario: Mapped[str] = mapped_column(String(36), index=True)


class GroupInvitation(Base):
    """
    Invitación a un grupo.

    Pendiente mientras `estado` es True; al responder se cierra
    (`estado` False) y `aceptado` guarda la respuesta.
    """
    __tablename__ = "invitacion_grupo"

    id_invitacion_grupo: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    id_grupo: Mapped[str] = mapped_column(String(36), index=True)
    id_usuario: Mapped[str] = mapped_column(String(36), index=True)  # invitado
    id_usuario_emisor: Mapped[str] = mapped_column(String(36))
    aceptado: Mapped[bool] = mapped_column(Boolean, default=False)
    estado: Mapped[bool] = mapped_column(Boolean, default=True)
    fecha_invitacion: Mapped[datetime] = mapped_column(DateTime, default=utcnow)


# =========================================================
# Ubicación compartida
# =========================================================

class CurrentLocation(Base):
    """Última ubicación conocida de cada usuario (una fila por usuario)."""
    __tablename__ = "ubicacion_actual"

    id_usuario: Mapped[str] = mapped_column(String(36), primary_key=True)
    latitud: Mapped[float] = mapped_column(Float)
    longitud: Mapped[float] = mapped_column(Float)
    timestamp: Mapped[datetime] = mapped_column(DateTime, default=utcnow)


class LocationSelection(Base):
    """
    A quién quiere seguir un usuario en el mapa.

    Solo una de las banderas está activa: persona_buscar, grupo_buscar o todos.
    """
    __tablename__ = "ubicacion_seleccion"

    id_persona: Mapped[str] = mapped_column(String(36), primary_key=True)
    persona_buscar: Mapped[bool] = mapped_column(Boolean, default=False)
    grupo_buscar: Mapped[bool] = mapped_column(Boolean, default=False)
    todos: Mapped[bool] = mapped_column(Boolean, default=False)
    id_grupo: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)
    id_persona_buscar: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)


# =========================================================
# Catálogos administrables
# =========================================================

class Department(Base):
    __tablename__ = "departamento"

    id_departamento: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    nombre_departamento: Mapped[str] = mapped_column(String(160))
    numero_telefono: Mapped[str] = mapped_column(String(30))
    estado: Mapped[bool] = mapped_column(Boolean, default=True)


class Municipality(Base):
    __tablename__ = "municipalidad"

    id_municipalidad: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    nombre_municipalidad: Mapped[str] = mapped_column(String(160))
    direccion_municipalidad: Mapped[str] = mapped_column(String(255))
    id_comuna: Mapped[str] = mapped_column(String(36))
    estado: Mapped[bool] = mapped_column(Boolean, default=True)


class Commune(Base):
    __tablename__ = "comuna"

    id_comuna: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    nombre: Mapped[str] = mapped_column(String(120))
    estado: Mapped[bool] = mapped_column(Boolean, default=True)


class Gender(Base):
    __tablename__ = "genero"

    id_genero: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    descripcion: Mapped[str] = mapped_column(String(60))
    estado: Mapped[bool] = mapped_column(Boolean, default=True)

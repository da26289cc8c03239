"""
Funciones helper sobre los modelos ORM.

Estas funciones concentran:
- La serialización de filas a dict (mismos nombres de campo que la API)
- Las consultas "join en aplicación" que usan varias rutas
  (miembros de grupos, persona + perfil)
- La resolución de la ubicación seleccionada (persona / grupo / todos)
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import inspect, select
from sqlalchemy.orm import Session

from ..domain_models import SelectionKind
from .models import (
    Group,
    GroupMembership,
    LocationSelection,
    Person,
    Profile,
)


def to_dict(obj: Any, exclude: Tuple[str, ...] = ()) -> Dict[str, Any]:
    """
    Serializa una fila ORM a dict con sus columnas.

    Las fechas se devuelven en ISO 8601.
    """
    data: Dict[str, Any] = {}
    for attr in inspect(obj).mapper.column_attrs:
        if attr.key in exclude:
            continue
        value = getattr(obj, attr.key)
        if isinstance(value, datetime):
            value = value.isoformat()
        data[attr.key] = value
    return data


def get_person_and_profile(session: Session, id_persona: str) -> Tuple[Optional[Person], Optional[Profile]]:
    person = session.get(Person, id_persona)
    profile = session.get(Profile, id_persona)
    return person, profile


def get_group_member_ids(session: Session, id_grupo: str) -> List[str]:
    """Ids de usuario miembros de un grupo, en orden de alta y sin repetidos."""
    stmt = select(GroupMembership.id_usuario).where(GroupMembership.id_grupo == id_grupo)
    return list(dict.fromkeys(session.execute(stmt).scalars().all()))


def get_user_group_ids(session: Session, id_usuario: str) -> List[str]:
    """Ids de los grupos activos a los que pertenece un usuario."""
    stmt = (
        select(GroupMembership.id_grupo)
        .join(Group, Group.id_grupo == GroupMembership.id_grupo)
        .where(
            GroupMembership.id_usuario == id_usuario,
            Group.estado.is_(True),
        )
    )
    return list(dict.fromkeys(session.execute(stmt).scalars().all()))


def get_circle_member_ids(session: Session, id_usuario: str) -> List[str]:
    """
    Miembros únicos de todos los grupos del usuario.

    Args:
        session: Sesión de base de datos
        id_usuario: Usuario cuyo "círculo" se consulta

    Returns:
        Lista de ids sin repetidos (incluye al propio usuario si es miembro)
    """
    members: List[str] = []
    for id_grupo in get_user_group_ids(session, id_usuario):
        members.extend(get_group_member_ids(session, id_grupo))
    return list(dict.fromkeys(members))


def selection_kind(selection: LocationSelection) -> Optional[SelectionKind]:
    """Traduce las banderas guardadas al modo de selección activo."""
    if selection.persona_buscar:
        return SelectionKind.PERSONA
    if selection.grupo_buscar:
        return SelectionKind.GRUPO
    if selection.todos:
        return SelectionKind.TODOS
    return None


def apply_selection(
    selection: LocationSelection,
    kind: SelectionKind,
    id_grupo: Optional[str] = None,
    id_persona_buscar: Optional[str] = None,
) -> None:
    """
    Activa un modo de selección y limpia los demás.

    En modo PERSONA, si no se indica a quién buscar se usa al propio usuario.
    """
    selection.persona_buscar = kind == SelectionKind.PERSONA
    selection.grupo_buscar = kind == SelectionKind.GRUPO
    selection.todos = kind == SelectionKind.TODOS

    if kind == SelectionKind.PERSONA:
        selection.id_persona_buscar = id_persona_buscar or selection.id_persona
        selection.id_grupo = None
    elif kind == SelectionKind.GRUPO:
        selection.id_grupo = id_grupo
        selection.id_persona_buscar = None
    else:
        selection.id_grupo = None
        selection.id_persona_buscar = None


def resolve_selection_members(session: Session, selection: LocationSelection) -> List[str]:
    """
    Devuelve los ids a mostrar según la selección guardada.

    - PERSONA: la persona buscada (puede ser el propio usuario)
    - GRUPO: miembros del grupo seleccionado, sin el solicitante
    - TODOS: miembros de todos los grupos del usuario, sin el solicitante
    """
    kind = selection_kind(selection)
    if kind == SelectionKind.PERSONA:
        return [selection.id_persona_buscar] if selection.id_persona_buscar else []
    if kind == SelectionKind.GRUPO:
        ids = get_group_member_ids(session, selection.id_grupo) if selection.id_grupo else []
    elif kind == SelectionKind.TODOS:
        ids = get_circle_member_ids(session, selection.id_persona)
    else:
        ids = []

    return [i for i in ids if i != selection.id_persona]

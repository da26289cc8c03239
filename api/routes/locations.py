"""
Endpoints de ubicación compartida entre miembros de grupos.

- POST /api/actualizar-ubicacion: Guarda la ubicación actual del usuario
- GET /api/listar-ubicacion-actual: Ubicación actual de una persona, un grupo o todo el círculo
- POST /api/actualizar-ubicacion-seleccion: Guarda a quién quiere seguir el usuario
- GET /api/obtener-ubicacion-seleccion: Miembros según la selección guardada
"""


from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from alerta_core.db.database import get_db_session
from alerta_core.db.helpers import (
    apply_selection,
    get_circle_member_ids,
    get_group_member_ids,
    get_person_and_profile,
    resolve_selection_members,
    selection_kind,
)
from alerta_core.db.models import CurrentLocation, LocationSelection, utcnow
from alerta_core.domain_models import SelectionKind

from ..models.requests import CurrentLocationRequest, LocationSelectionRequest

router = APIRouter(prefix="/api", tags=["ubicacion_actual"])


@router.post("/actualizar-ubicacion")
async def update_current_location(request: CurrentLocationRequest):
    """Crea o actualiza la ubicación actual del usuario (una fila por usuario)."""
    with get_db_session() as session:
        current = session.get(CurrentLocation, request.id_usuario)
        created = current is None
        if created:
            current = CurrentLocation(id_usuario=request.id_usuario)
            session.add(current)

        current.latitud = request.latitud
        current.longitud = request.longitud
        current.timestamp = utcnow()

        return {
            "message": "Ubicación creada exitosamente." if created else "Ubicación actualizada exitosamente.",
            "id_usuario": current.id_usuario,
            "latitud": current.latitud,
            "longitud": current.longitud,
            "timestamp": current.timestamp.isoformat(),
        }


@router.get("/listar-ubicacion-actual")
async def list_current_locations(
    id_persona: str = Query(..., min_length=1),
    id_grupo: Optional[str] = Query(None),
    id_persona_buscar: Optional[str] = Query(None),
):
    """
    Lista la ubicación actual de los usuarios solicitados.

    Prioridad de filtros:
    1. id_persona_buscar: solo esa persona
    2. id_grupo: miembros del grupo
    3. sin filtros: miembros únicos de todos los grupos de id_persona

    Los miembros sin persona registrada se omiten; los que no tienen
    ubicación registrada aparecen con `ubicacion: null`.
    """
    with get_db_session() as session:
        if id_persona_buscar:
            ids = [id_persona_buscar]
        elif id_grupo:
            ids = get_group_member_ids(session, id_grupo)
        else:
            ids = get_circle_member_ids(session, id_persona)

        miembros = []
        for id_usuario in ids:
            person, profile = get_person_and_profile(session, id_usuario)
            if not person:
                continue
            current = session.get(CurrentLocation, id_usuario)
            miembros.append({
                "id_usuario": id_usuario,
                "persona": {
                    "nombre": person.nombre,
                    "apellido": person.apellido,
                    "correo": person.correo,
                    "numero_telefono": person.numero_telefono,
                },
                "perfil": {
                    "correo": profile.correo,
                    "tipo_usuario": profile.tipo_usuario,
                    "imagen": profile.imagen_usuario,
                } if profile else None,
                "ubicacion": {
                    "latitud": current.latitud,
                    "longitud": current.longitud,
                    "timestamp": current.timestamp.isoformat(),
                } if current else None,
            })

        return {"message": "Ubicaciones obtenidas exitosamente.", "miembros": miembros}


@router.post("/actualizar-ubicacion-seleccion")
async def update_location_selection(request: LocationSelectionRequest):
    """
    Guarda el modo de seguimiento del usuario.

    tipo:
        1 = una persona (por defecto, el propio usuario)
        2 = un grupo (requiere id_grupo)
        3 = todos los miembros de sus grupos
    """
    try:
        kind = SelectionKind(request.tipo)
    except ValueError:
        raise HTTPException(status_code=400, detail="El tipo debe ser 1 (persona), 2 (grupo) o 3 (todos).")

    if kind == SelectionKind.GRUPO and not request.id_grupo:
        raise HTTPException(status_code=400, detail="El campo 'id_grupo' es obligatorio cuando tipo es 2.")

    with get_db_session() as session:
        selection = session.get(LocationSelection, request.id_persona)
        created = selection is None
        if created:
            selection = LocationSelection(id_persona=request.id_persona)
            session.add(selection)

        apply_selection(selection, kind, request.id_grupo, request.id_persona_buscar)

        return {
            "message": (
                "Ubicación seleccionada creada exitosamente."
                if created else "Ubicación seleccionada actualizada exitosamente."
            ),
            "seleccion": {
                "id_persona": selection.id_persona,
                "persona_buscar": selection.persona_buscar,
                "grupo_buscar": selection.grupo_buscar,
                "todos": selection.todos,
                "id_grupo": selection.id_grupo,
                "id_persona_buscar": selection.id_persona_buscar,
            },
        }


@router.get("/obtener-ubicacion-seleccion")
async def get_location_selection(id_persona: str = Query(..., min_length=1)):
    """
    Devuelve los miembros según la selección guardada del usuario.

    Raises:
        404: Si el usuario nunca guardó una selección
    """
    with get_db_session() as session:
        selection = session.get(LocationSelection, id_persona)
        if not selection:
            raise HTTPException(status_code=404, detail="No se encontró registro para la persona proporcionada.")

        kind = selection_kind(selection)
        miembros = []
        for id_usuario in resolve_selection_members(session, selection):
            person, profile = get_person_and_profile(session, id_usuario)
            if not person:
                continue
            miembros.append({
                "id_persona": person.id_persona,
                "nombre": person.nombre,
                "apellido": person.apellido,
                "rut": person.rut,
                "imagen": person.imagen_usuario or (profile.imagen_usuario if profile else None),
            })

        return {
            "message": "Miembros obtenidos exitosamente.",
            "tipo_actual": int(kind) if kind else None,
            "miembros": miembros,
        }

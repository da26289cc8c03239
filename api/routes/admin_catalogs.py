"""
Administración de catálogos: comunas, géneros, gravedades, departamentos y municipalidades.

Cada catálogo expone:
- ver-*: lista todos los registros (activos e inactivos)
- agregar-*: crea un registro activo
- editar-*: modifica un registro
- cambiar-estado-*: activa o desactiva un registro (baja lógica)
"""

import logging

from fastapi import APIRouter, HTTPException
from sqlalchemy import select

from alerta_core.db.database import get_db_session
from alerta_core.db.helpers import to_dict
from alerta_core.db.models import Commune, Department, Gender, Municipality, Severity

from ..models.requests import (
    CommuneCreateRequest,
    CommuneStateRequest,
    CommuneUpdateRequest,
    DepartmentCreateRequest,
    DepartmentStateRequest,
    DepartmentUpdateRequest,
    DescriptionRequest,
    MunicipalityCreateRequest,
    MunicipalityStateRequest,
    MunicipalityUpdateRequest,
    SeverityStateRequest,
    SeverityUpdateRequest,
    StateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["admin_catalogos"])


def _list_all(model, order_by, not_found: str) -> list:
    with get_db_session() as session:
        rows = session.execute(select(model).order_by(order_by)).scalars().all()
        if not rows:
            raise HTTPException(status_code=404, detail=not_found)
        return [to_dict(r) for r in rows]


def _get_or_404(session, model, pk: str, label: str):
    obj = session.get(model, pk)
    if not obj:
        raise HTTPException(status_code=404, detail=f"{label} {pk} no encontrada(o)")
    return obj


def _create(model, key: str, label: str, **fields) -> dict:
    with get_db_session() as session:
        obj = model(estado=True, **fields)
        session.add(obj)
        session.flush()
        logger.info(f"{label} creada(o): {fields}")
        return {"message": f"{label} agregada(o) exitosamente.", key: to_dict(obj)}


def _update(model, pk: str, key: str, label: str, **fields) -> dict:
    updates = {k: v for k, v in fields.items() if v}
    with get_db_session() as session:
        obj = _get_or_404(session, model, pk, label)
        if not updates:
            raise HTTPException(status_code=400, detail="No se proporcionaron datos para actualizar.")
        for k, v in updates.items():
            setattr(obj, k, v)
        session.flush()
        return {"message": f"{label} actualizada(o) exitosamente.", key: to_dict(obj)}


def _set_state(model, pk: str, estado: bool, label: str) -> dict:
    with get_db_session() as session:
        obj = _get_or_404(session, model, pk, label)
        obj.estado = estado
        return {"message": f"Estado de {label.lower()} actualizado a {estado}."}


# =========================================================
# Comunas
# =========================================================

@router.get("/ver-comunas")
async def admin_list_communes():
    return _list_all(Commune, Commune.nombre, "No se encontraron comunas.")


@router.post("/agregar-comuna", status_code=201)
async def add_commune(request: CommuneCreateRequest):
    return _create(Commune, "comuna", "Comuna", nombre=request.nombre)


@router.put("/editar-comuna")
async def edit_commune(request: CommuneUpdateRequest):
    return _update(Commune, request.id_comuna, "comuna", "Comuna", nombre=request.nombre)


@router.patch("/cambiar-estado-comuna")
async def change_commune_state(request: CommuneStateRequest):
    return _set_state(Commune, request.id_comuna, request.estado, "Comuna")


# =========================================================
# Géneros (id en la ruta)
# =========================================================

@router.get("/ver-generos")
async def admin_list_genders():
    return _list_all(Gender, Gender.descripcion, "No se encontraron géneros.")


@router.post("/agregar-genero", status_code=201)
async def add_gender(request: DescriptionRequest):
    return _create(Gender, "genero", "Género", descripcion=request.descripcion)


@router.put("/editar-genero/{id_genero}")
async def edit_gender(id_genero: str, request: DescriptionRequest):
    return _update(Gender, id_genero, "genero", "Género", descripcion=request.descripcion)


@router.put("/cambiar-estado-genero/{id_genero}")
async def change_gender_state(id_genero: str, request: StateRequest):
    return _set_state(Gender, id_genero, request.estado, "Género")


# =========================================================
# Gravedades
# =========================================================

@router.get("/ver-gravedades")
async def admin_list_severities():
    return _list_all(Severity, Severity.descripcion, "No se encontraron gravedades.")


@router.post("/agregar-gravedad", status_code=201)
async def add_severity(request: DescriptionRequest):
    return _create(Severity, "gravedad", "Gravedad", descripcion=request.descripcion)


@router.put("/editar-gravedad")
async def edit_severity(request: SeverityUpdateRequest):
    return _update(Severity, request.id_gravedad, "gravedad", "Gravedad", descripcion=request.descripcion)


@router.put("/cambiar-estado-gravedad")
async def change_severity_state(request: SeverityStateRequest):
    return _set_state(Severity, request.id_gravedad, request.estado, "Gravedad")


# =========================================================
# Departamentos
# =========================================================

@router.get("/ver-departamentos")
async def admin_list_departments():
    return _list_all(Department, Department.nombre_departamento, "No se encontraron departamentos.")


@router.post("/agregar-departamento", status_code=201)
async def add_department(request: DepartmentCreateRequest):
    return _create(
        Department, "departamento", "Departamento",
        nombre_departamento=request.nombre_departamento,
        numero_telefono=request.numero_telefono,
    )


@router.put("/editar-departamento")
async def edit_department(request: DepartmentUpdateRequest):
    return _update(
        Department, request.id_departamento, "departamento", "Departamento",
        nombre_departamento=request.nombre_departamento,
        numero_telefono=request.numero_telefono,
    )


@router.put("/cambiar-estado-departamento")
async def change_department_state(request: DepartmentStateRequest):
    return _set_state(Department, request.id_departamento, request.estado, "Departamento")


# =========================================================
# Municipalidades
# =========================================================

def _check_commune(id_comuna: str) -> None:
    with get_db_session() as session:
        _get_or_404(session, Commune, id_comuna, "Comuna")


@router.get("/ver-municipalidades")
async def admin_list_municipalities():
    return _list_all(Municipality, Municipality.nombre_municipalidad, "No se encontraron municipalidades.")


@router.post("/agregar-municipalidad", status_code=201)
async def add_municipality(request: MunicipalityCreateRequest):
    _check_commune(request.id_comuna)
    return _create(
        Municipality, "municipalidad", "Municipalidad",
        nombre_municipalidad=request.nombre_municipalidad,
        direccion_municipalidad=request.direccion_municipalidad,
        id_comuna=request.id_comuna,
    )


@router.put("/editar-municipalidad")
async def edit_municipality(request: MunicipalityUpdateRequest):
    if request.id_comuna:
        _check_commune(request.id_comuna)
    return _update(
        Municipality, request.id_municipalidad, "municipalidad", "Municipalidad",
        nombre_municipalidad=request.nombre_municipalidad,
        direccion_municipalidad=request.direccion_municipalidad,
        id_comuna=request.id_comuna,
    )


@router.put("/cambiar-estado-municipalidad")
async def change_municipality_state(request: MunicipalityStateRequest):
    return _set_state(Municipality, request.id_municipalidad, request.estado, "Municipalidad")

"""
Catálogos públicos usados por el formulario de registro.

Solo devuelven registros activos (estado = True).
"""

from fastapi import APIRouter, HTTPException
from sqlalchemy import select

from alerta_core.db.database import get_db_session
from alerta_core.db.helpers import to_dict
from alerta_core.db.models import Commune, Gender, Municipality

router = APIRouter(prefix="/api", tags=["catalog"])


def _list_active(model, order_by, not_found: str):
    with get_db_session() as session:
        stmt = select(model).where(model.estado.is_(True)).order_by(order_by)
        rows = session.execute(stmt).scalars().all()
        if not rows:
            raise HTTPException(status_code=404, detail=not_found)
        return [to_dict(r) for r in rows]


@router.get("/comunas")
async def list_communes():
    """Comunas activas, ordenadas por nombre."""
    return _list_active(Commune, Commune.nombre, "No se encontraron comunas.")


@router.get("/generos")
async def list_genders():
    return _list_active(Gender, Gender.descripcion, "No se encontraron géneros.")


@router.get("/municipalidades")
async def list_municipalities():
    municipalidades = _list_active(
        Municipality,
        Municipality.nombre_municipalidad,
        "No se encontraron municipalidades.",
    )
    return {"municipalidades": municipalidades}

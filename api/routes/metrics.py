"""
Métricas para el panel de funcionarios.

Las agregaciones por mes se calculan en Python para no depender de
funciones de fecha específicas del motor de base de datos.
"""

from collections import Counter

from fastapi import APIRouter
from sqlalchemy import func, select

from alerta_core.db.database import get_db_session
from alerta_core.db.models import Alert, Commune, Department, DerivedAlert, Person, utcnow

router = APIRouter(prefix="/api", tags=["funcionario_metricas"])

SIN_COMUNA = "Sin Comuna"


@router.get("/alertas-derivadas")
async def derived_alert_totals():
    """Totales de alertas, derivadas y no derivadas."""
    with get_db_session() as session:
        total = session.execute(select(func.count(Alert.id_alerta))).scalar_one()
        derivadas = session.execute(
            select(func.count(func.distinct(DerivedAlert.id_alerta)))
            .join(Alert, Alert.id_alerta == DerivedAlert.id_alerta)
        ).scalar_one()

        return {
            "total_alertas": total,
            "total_alertas_derivadas": derivadas,
            "total_alertas_no_derivadas": total - derivadas,
        }


@router.get("/usuarios-por-comuna")
async def users_by_commune():
    """
    Usuarios registrados agrupados por comuna.

    Los usuarios sin comuna (o con una comuna inexistente) se agrupan como "Sin Comuna".
    """
    with get_db_session() as session:
        rows = session.execute(
            select(Person.id_comuna, Commune.nombre, func.count(Person.id_persona))
            .outerjoin(Commune, Commune.id_comuna == Person.id_comuna)
            .group_by(Person.id_comuna, Commune.nombre)
        ).all()

        usuarios_por_comuna = [
            {
                "id_comuna": id_comuna or SIN_COMUNA,
                "nombre_comuna": nombre or SIN_COMUNA,
                "total_usuarios": count,
            }
            for id_comuna, nombre, count in rows
        ]
        usuarios_por_comuna.sort(key=lambda r: (-r["total_usuarios"], r["nombre_comuna"]))

        return {
            "total_usuarios": sum(r["total_usuarios"] for r in usuarios_por_comuna),
            "usuarios_por_comuna": usuarios_por_comuna,
        }


@router.get("/alertas-por-comuna")
async def alerts_by_commune():
    """Alertas agrupadas por la comuna geocodificada."""
    with get_db_session() as session:
        rows = session.execute(
            select(Alert.comuna, func.count(Alert.id_alerta)).group_by(Alert.comuna)
        ).all()

        counts = Counter()
        for comuna, count in rows:
            counts[comuna or SIN_COMUNA] += count

        return {
            "total_alertas": sum(counts.values()),
            "alertas_por_comuna": [
                {"nombre_comuna": comuna, "total_alertas": count}
                for comuna, count in counts.most_common()
            ],
        }


@router.get("/alertas-derivadas-por-departamento")
async def derived_alerts_by_department():
    with get_db_session() as session:
        rows = session.execute(
            select(DerivedAlert.id_departamento, Department.nombre_departamento, func.count(DerivedAlert.id_alerta))
            .outerjoin(Department, Department.id_departamento == DerivedAlert.id_departamento)
            .group_by(DerivedAlert.id_departamento, Department.nombre_departamento)
        ).all()

        departamentos = [
            {
                "id_departamento": id_departamento,
                "nombre_departamento": nombre or "Nombre no disponible",
                "total_alertas_derivadas": count,
            }
            for id_departamento, nombre, count in rows
        ]
        departamentos.sort(key=lambda r: -r["total_alertas_derivadas"])

        return {"departamentos": departamentos}


@router.get("/alertas-mes-actual-por-comuna")
async def current_month_alerts_by_commune():
    """Alertas del mes en curso (UTC) agrupadas por comuna."""
    now = utcnow()
    start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    if start.month == 12:
        end = start.replace(year=start.year + 1, month=1)
    else:
        end = start.replace(month=start.month + 1)

    with get_db_session() as session:
        comunas = session.execute(
            select(Alert.comuna).where(Alert.fecha >= start, Alert.fecha < end)
        ).scalars().all()

        counts = Counter(c or SIN_COMUNA for c in comunas)
        return {
            "totalAlertas": len(comunas),
            "alertasPorComuna": dict(counts),
        }


@router.get("/alertas-por-mes")
async def alerts_by_month():
    """Cantidad de alertas por mes, con claves "YYYY-MM" en orden cronológico."""
    with get_db_session() as session:
        fechas = session.execute(select(Alert.fecha)).scalars().all()

        counts = Counter(f.strftime("%Y-%m") for f in fechas if f)
        return {"alertasPorMes": dict(sorted(counts.items()))}

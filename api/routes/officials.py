"""
Endpoints para funcionarios: triage diario y derivación de alertas a departamentos.
"""

import logging
from datetime import timedelta

from fastapi import APIRouter, HTTPException
from sqlalchemy import select

from alerta_core.db.database import get_db_session
from alerta_core.db.helpers import to_dict
from alerta_core.db.models import Alert, Department, DerivedAlert, utcnow

from ..models.requests import DeriveAlertRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["funcionario_derivar_alerta"])


@router.get("/listar-alertas-hoy")
async def list_today_alerts():
    """
    Alertas del día (UTC) separadas en derivadas y no derivadas.

    Raises:
        404: Si no hubo alertas hoy
    """
    start = utcnow().replace(hour=0, minute=0, second=0, microsecond=0)
    end = start + timedelta(days=1)

    with get_db_session() as session:
        alerts = session.execute(
            select(Alert)
            .where(Alert.fecha >= start, Alert.fecha < end)
            .order_by(Alert.fecha.desc())
        ).scalars().all()

        if not alerts:
            raise HTTPException(status_code=404, detail="No se encontraron alertas para el día de hoy.")

        derived = {
            d.id_alerta: d
            for d in session.execute(
                select(DerivedAlert).where(DerivedAlert.id_alerta.in_([a.id_alerta for a in alerts]))
            ).scalars().all()
        }

        alertas_derivadas = []
        alertas_no_derivadas = []
        for alert in alerts:
            item = to_dict(alert)
            if alert.id_alerta in derived:
                item["derivacion"] = to_dict(derived[alert.id_alerta])
                alertas_derivadas.append(item)
            else:
                alertas_no_derivadas.append(item)

        return {
            "message": "Alertas del día de hoy obtenidas exitosamente.",
            "alertasDerivadas": alertas_derivadas,
            "alertasNoDerivadas": alertas_no_derivadas,
        }


@router.post("/derivar-alerta", status_code=201)
async def derive_alert(request: DeriveAlertRequest):
    """
    Deriva una alerta a un departamento.

    Raises:
        404: Alerta o departamento inexistentes
        409: La alerta ya fue derivada
    """
    with get_db_session() as session:
        try:
            if not session.get(Alert, request.id_alerta):
                raise HTTPException(status_code=404, detail=f"Alerta {request.id_alerta} no encontrada")

            department = session.get(Department, request.id_departamento)
            if not department or not department.estado:
                raise HTTPException(status_code=404, detail=f"Departamento {request.id_departamento} no encontrado")

            existing = session.execute(
                select(DerivedAlert).where(DerivedAlert.id_alerta == request.id_alerta)
            ).first()
            if existing:
                raise HTTPException(status_code=409, detail="La alerta ya fue derivada.")

            derived = DerivedAlert(
                id_alerta=request.id_alerta,
                id_departamento=request.id_departamento,
                id_funcionario=request.id_funcionario,
            )
            session.add(derived)
            session.flush()

            logger.info(
                f"📤 Alerta {request.id_alerta} derivada a {department.nombre_departamento} "
                f"por {request.id_funcionario}"
            )
            return {
                "message": "Alerta derivada exitosamente.",
                "alertaDerivada": {
                    "id_alerta_derivada": derived.id_alerta_derivada,
                    "id_alerta": derived.id_alerta,
                    "id_departamento": derived.id_departamento,
                    "id_funcionario": derived.id_funcionario,
                },
            }

        except HTTPException:
            raise
        except Exception as e:
            session.rollback()
            raise HTTPException(
                status_code=500,
                detail=f"Error interno: {str(e)}"
            ) from e

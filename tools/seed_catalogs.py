"""
Script para cargar los catálogos base en la base de datos.

Este script crea o reactiva:
- Tipos de usuario (usuario, admin, funcionario)
- Gravedades, géneros y comunas

Es idempotente: se puede ejecutar en cada despliegue.
"""

import sys
from pathlib import Path

# Agregar el directorio raíz al path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select  # noqa: E402

from alerta_core.db.database import get_db_session, init_db  # noqa: E402
from alerta_core.db.models import Commune, Gender, Severity, UserType  # noqa: E402
from alerta_core.domain_models import UserKind  # noqa: E402


SEVERITIES = ["Baja", "Media", "Alta", "Crítica"]

GENDERS = ["Femenino", "Masculino", "No binario", "Prefiero no decirlo"]

# Comunas del Gran Valparaíso (extender según despliegue)
COMMUNES = [
    "Valparaíso",
    "Viña del Mar",
    "Quilpué",
    "Villa Alemana",
    "Concón",
]


def upsert_user_types(session) -> None:
    for kind in UserKind:
        existing = session.get(UserType, kind.type_id)
        if existing:
            existing.descripcion = kind.description
        else:
            session.add(UserType(id_tipo_usuario=kind.type_id, descripcion=kind.description))


def upsert_by_label(session, model, column, labels) -> None:
    """Crea los registros que falten (comparando por etiqueta) y reactiva los existentes."""
    for label in labels:
        existing = session.execute(select(model).where(column == label)).scalars().first()
        if existing:
            existing.estado = True
        else:
            session.add(model(**{column.key: label, "estado": True}))


def main():
    init_db()
    with get_db_session() as session:
        upsert_user_types(session)
        upsert_by_label(session, Severity, Severity.descripcion, SEVERITIES)
        upsert_by_label(session, Gender, Gender.descripcion, GENDERS)
        upsert_by_label(session, Commune, Commune.nombre, COMMUNES)

    print("✅ Catálogos seed cargados/actualizados.")


if __name__ == "__main__":
    main()

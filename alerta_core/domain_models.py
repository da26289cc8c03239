from __future__ import annotations

"""
alerta_core.domain_models
=========================

Tipos de dominio neutros (sin DB ni IO) usados por rutas y helpers.

- `UserKind`: código numérico que envía la app al registrar (1, 2, 3) y su
  fila correspondiente en `tipo_usuario`.
- `SelectionKind`: modo de "ubicación seleccionada" (persona, grupo, todos).
- `GeocodeResult`: resultado de la geocodificación inversa.
"""

from dataclasses import dataclass
from enum import IntEnum


class UserKind(IntEnum):
    USUARIO = 1
    ADMIN = 2
    FUNCIONARIO = 3

    @property
    def type_id(self) -> str:
        """Id de la fila en tipo_usuario."""
        return self.name.lower()

    @property
    def description(self) -> str:
        return USER_TYPE_DESCRIPTIONS[self]


# Descripciones tal como se guardan en tipo_usuario
USER_TYPE_DESCRIPTIONS = {
    UserKind.USUARIO: "Usuario",
    UserKind.ADMIN: "admin",
    UserKind.FUNCIONARIO: "Funcionario",
}


class SelectionKind(IntEnum):
    PERSONA = 1
    GRUPO = 2
    TODOS = 3


@dataclass
class GeocodeResult:
    comuna: str
    direccion: str


COMUNA_NO_DISPONIBLE = "Comuna no disponible"
DIRECCION_NO_DISPONIBLE = "Dirección no disponible"

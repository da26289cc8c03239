"""
Handlers globales de errores.

- RequestValidationError -> 400 con el detalle de los campos faltantes o inválidos
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Registra los handlers globales en la app."""
    _register_validation_error_handler(app)


def _field_name(error: dict) -> str:
    # loc = ("body", "campo") | ("query", "campo") | ("body",)
    loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path", "form")]
    return ".".join(loc) or "body"


def _is_missing(error: dict) -> bool:
    # un texto vacío cuenta como campo faltante
    return error.get("type") == "missing" or error.get("input") == ""


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        logger.warning(f"Validación fallida en {request.url.path}: {errors}")

        missing = [_field_name(e) for e in errors if _is_missing(e)]
        if missing:
            detail = f"Los campos {', '.join(missing)} son obligatorios."
        else:
            detail = "Datos inválidos: " + ", ".join(_field_name(e) for e in errors)

        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "detail": detail,
                "errors": [
                    {"campo": _field_name(e), "mensaje": e.get("msg", "")}
                    for e in errors
                ],
            },
        )

"""
API HTTP principal de alerta-api.

Expone los endpoints REST de la app de seguridad personal: registro,
contactos, grupos, alertas geolocalizadas y panel de funcionarios.

Uso:
    uvicorn api.main:app --reload --port 8000
"""

import logging
import os
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

from .error_handlers import register_error_handlers
from .routes import (
    admin_catalogs,
    alerts,
    auth,
    catalog,
    contacts,
    groups,
    invitations,
    keywords,
    locations,
    metrics,
    officials,
    profile,
    users,
)

# Cargar variables de entorno
load_dotenv()

# Determinar ambiente
ENVIRONMENT = os.getenv("ENVIRONMENT", "local")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Configurar logging según ambiente
log_level = getattr(logging, LOG_LEVEL, logging.INFO)
logging.basicConfig(
    level=log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)
logger.info(f"🚀 Iniciando API en ambiente: {ENVIRONMENT}")

app = FastAPI(
    title="Alerta API",
    description="API de la app de seguridad personal: alertas, contactos, grupos y derivación a funcionarios",
    version="1.0.0",
)

# CORS: configurar según ambiente
cors_origins_str = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:8081")
cors_origins = [origin.strip() for origin in cors_origins_str.split(",") if origin.strip()]

logger.info(f"🌐 CORS origins configurados: {cors_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Registrar rutas
app.include_router(auth.router)
app.include_router(catalog.router)
app.include_router(profile.router)
app.include_router(alerts.router)
app.include_router(contacts.router)
app.include_router(keywords.router)
app.include_router(groups.router)
app.include_router(invitations.router)
app.include_router(locations.router)
app.include_router(officials.router)
app.include_router(metrics.router)
app.include_router(admin_catalogs.router)
app.include_router(users.router)


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "alerta-api"}


@app.get("/health")
async def health():
    """Health check detallado."""
    return {
        "status": "ok",
        "service": "alerta-api",
        "version": "1.0.0",
        "environment": ENVIRONMENT,
    }

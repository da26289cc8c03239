#!/usr/bin/env python3
"""
Script helper para ejecutar la API.

Crea las tablas si no existen y levanta uvicorn. El puerto se toma de
PORT (default 3000) y el host de HOST (default 0.0.0.0).
"""

import os
import sys

from dotenv import load_dotenv

if __name__ == "__main__":
    load_dotenv()
    port = int(os.getenv("PORT", "3000"))
    host = os.getenv("HOST", "0.0.0.0")
    reload = os.getenv("ENVIRONMENT", "local") == "local"

    try:
        import uvicorn

        from alerta_core.db.database import init_db

        init_db()
        print(f"🚀 Iniciando API en http://localhost:{port}")
        print(f"📖 Documentación disponible en http://localhost:{port}/docs")
        uvicorn.run("api.main:app", host=host, port=port, reload=reload)
    except ImportError as e:
        print("❌ Error: faltan dependencias. Ejecuta: pip install -e .")
        print(f"   Error: {e}")
        sys.exit(1)
    except Exception as e:
        print(f"❌ Error al iniciar el servidor: {e}")
        sys.exit(1)

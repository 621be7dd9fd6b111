"""
DEAL TRACKER API - Ponto de Entrada
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from deal_tracker import __version__
from deal_tracker.config import get_settings
from deal_tracker.infrastructure.database import create_storage_adapter
from deal_tracker.infrastructure.logging_config import setup_logging
from deal_tracker.infrastructure.services import CredentialStore, LocalFileStorage

# Routers
from deal_tracker.api.routes import (
    auth_router,
    opportunities_router,
    documents_router,
    health_router,
)

logger = logging.getLogger(__name__)


# ============================================================
# 🔁 LIFESPAN
# ============================================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging(logging.DEBUG if settings.debug else logging.INFO)
    logger.info("🚀 Iniciando Deal Tracker API...")

    storage = create_storage_adapter(settings.database_url, ssl=settings.use_database_ssl)
    try:
        await storage.connect()
        await storage.ensure_schema()
    except Exception:
        # Sem schema não há como atender nada: derruba o processo
        logger.critical("Falha ao inicializar o banco", exc_info=True)
        await storage.close()
        raise
    logger.info(f"✅ Banco pronto ({storage.name})")

    app.state.storage = storage
    app.state.blob_store = LocalFileStorage(settings.storage_local_path)
    app.state.credential_store = CredentialStore.from_config(settings.app_users)

    yield

    await storage.close()
    logger.info("👋 Encerrando Deal Tracker API...")


# ============================================================
# FASTAPI APP
# ============================================================
app = FastAPI(
    title="Deal Tracker API",
    description="Rastreamento de ofertas de fornecedores, demandas de clientes e negócios casados",
    version=__version__,
    lifespan=lifespan,
)

# ============================================================
# ⭐ CORS
# ============================================================
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ============================================================
# ROTAS
# ============================================================
app.include_router(auth_router, prefix="/api")
app.include_router(opportunities_router, prefix="/api")
app.include_router(documents_router, prefix="/api")
app.include_router(health_router)


@app.get("/")
async def root():
    return {"name": "Deal Tracker API", "status": "running"}


def run():
    """Sobe o servidor com uvicorn (HOST/PORT das configurações)."""
    import uvicorn

    settings = get_settings()
    uvicorn.run("deal_tracker.api.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()

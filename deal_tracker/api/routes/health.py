"""Health check (inclui ping no banco)."""

import logging
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from deal_tracker.api.dependencies import get_storage
from deal_tracker.infrastructure.database import StorageAdapter

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health(storage: StorageAdapter = Depends(get_storage)):
    try:
        await storage.query_one("SELECT 1 AS ok")
    except Exception as e:
        logger.error(f"Health check falhou: {e}")
        return JSONResponse(status_code=503, content={"status": "unhealthy", "database": storage.name})
    return {"status": "healthy", "database": storage.name}

"""Tradução de falhas inesperadas para HTTP 500 (mensagem genérica + detalhe)."""

import logging

from fastapi import HTTPException

from deal_tracker.domain.errors import StorageError

logger = logging.getLogger(__name__)


def internal_error(message: str, exc: Exception) -> HTTPException:
    logger.error(f"{message}: {exc}", exc_info=True)
    detail = exc.detail if isinstance(exc, StorageError) else str(exc)
    return HTTPException(status_code=500, detail={"error": message, "detail": detail})

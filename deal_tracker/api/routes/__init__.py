"""Rotas da API."""

from .auth import router as auth_router
from .opportunities import router as opportunities_router
from .documents import router as documents_router
from .health import router as health_router

__all__ = [
    "auth_router",
    "opportunities_router",
    "documents_router",
    "health_router",
]

"""
ERROS DO DOMÍNIO
================

- ValidationError: entrada inválida (campo obrigatório faltando). Vira 400.
- NotFoundError: id não existe. Vira 404.
- StorageError: falha de I/O ou constraint no banco. Vira 500, com detalhe.

Nenhum deles é repetido automaticamente.
"""

from typing import Optional


class DealTrackerError(Exception):
    """Base para todos os erros do sistema."""


class ValidationError(DealTrackerError):
    """Dados inválidos enviados pelo cliente."""


class NotFoundError(DealTrackerError):
    """Registro não encontrado."""


class StorageError(DealTrackerError):
    """Falha no banco de dados."""

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.detail = detail or message


class ConfigurationError(DealTrackerError):
    """Configuração inválida (ex: DATABASE_URL desconhecida)."""

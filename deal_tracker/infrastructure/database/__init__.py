"""
Gerencia conexão com o banco (Postgres ou SQLite).

A escolha vem do esquema da DATABASE_URL:
- postgres:// ou postgresql:// -> PostgresAdapter
- sqlite:///caminho/arquivo.db -> SQLiteAdapter
"""

from typing import Optional

from deal_tracker.domain.errors import ConfigurationError
from deal_tracker.infrastructure.database.adapter import ExecuteResult, StorageAdapter
from deal_tracker.infrastructure.database.postgres import PostgresAdapter
from deal_tracker.infrastructure.database.sqlite import SQLiteAdapter


def create_storage_adapter(database_url: str, ssl: Optional[bool] = None) -> StorageAdapter:
    """Cria o adapter certo para a URL (sem conectar)."""
    url = (database_url or "").strip()

    if url.startswith("postgresql+asyncpg://"):
        # URL no formato do SQLAlchemy; asyncpg quer postgresql://
        url = url.replace("postgresql+asyncpg://", "postgresql://", 1)

    if url.startswith(("postgres://", "postgresql://")):
        if ssl is None:
            ssl = "supabase.co" in url
        return PostgresAdapter(url, ssl=ssl)

    if url.startswith("sqlite:///"):
        path = url[len("sqlite:///"):]
        if not path:
            raise ConfigurationError("DATABASE_URL do SQLite sem caminho de arquivo")
        return SQLiteAdapter(path)

    raise ConfigurationError(f"DATABASE_URL não suportada: {url.split(':', 1)[0] or '(vazia)'}")


__all__ = [
    "ExecuteResult",
    "StorageAdapter",
    "PostgresAdapter",
    "SQLiteAdapter",
    "create_storage_adapter",
]

"""
POSTGRES ADAPTER (asyncpg)
==========================

Backend em rede. Placeholders numerados ($1, $2, ...) e id inserido
devolvido pelo próprio INSERT via RETURNING.
"""

import logging
import re
from typing import Any, Dict, List, Optional, Sequence

import asyncpg
from sqlalchemy import Column, Table
from sqlalchemy.dialects import postgresql

from deal_tracker.domain.errors import StorageError
from deal_tracker.infrastructure.database.adapter import (
    PLACEHOLDER,
    ExecuteResult,
    StorageAdapter,
    is_insert,
    normalize_row,
)

logger = logging.getLogger(__name__)

RETURNING_PATTERN = re.compile(r"\bRETURNING\b", re.IGNORECASE)


def to_numbered_placeholders(sql: str) -> str:
    """Troca cada "?" por $1, $2, ... na ordem em que aparecem."""
    parts = sql.split(PLACEHOLDER)
    compiled = [parts[0]]
    for index, part in enumerate(parts[1:], start=1):
        compiled.append(f"${index}{part}")
    return "".join(compiled)


def affected_from_status(status: str) -> int:
    """
    Extrai o número de linhas do status do asyncpg.

    Exemplos: "UPDATE 3" -> 3, "INSERT 0 1" -> 1, "CREATE TABLE" -> 0
    """
    last = (status or "").rsplit(" ", 1)[-1]
    return int(last) if last.isdigit() else 0


class PostgresAdapter(StorageAdapter):
    """Adapter para Postgres/Supabase."""

    name = "postgres"

    def __init__(self, dsn: str, ssl: bool = False, min_size: int = 1, max_size: int = 10):
        self.dsn = dsn
        self.ssl = ssl
        self.min_size = min_size
        self.max_size = max_size
        self.dialect = postgresql.dialect()
        self._pool: Optional[asyncpg.Pool] = None

    async def connect(self) -> None:
        if self._pool is not None:
            return
        try:
            # ssl="require" criptografa sem validar o certificado (padrão Supabase)
            self._pool = await asyncpg.create_pool(
                self.dsn,
                ssl="require" if self.ssl else None,
                min_size=self.min_size,
                max_size=self.max_size,
            )
        except (asyncpg.PostgresError, OSError) as e:
            raise StorageError("Não foi possível conectar ao Postgres", detail=str(e)) from e
        logger.info(f"[postgres] Pool aberto (ssl={self.ssl})")

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
            self._pool = None

    @property
    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise StorageError("Adapter Postgres não conectado")
        return self._pool

    def compile(self, sql: str) -> str:
        return to_numbered_placeholders(sql)

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> ExecuteResult:
        compiled = self.compile(sql)
        try:
            if is_insert(sql):
                if not RETURNING_PATTERN.search(compiled):
                    compiled = f"{compiled.rstrip().rstrip(';')} RETURNING id"
                row = await self.pool.fetchrow(compiled, *params)
                inserted_id = row["id"] if row is not None else None
                return ExecuteResult(inserted_id=inserted_id, affected_count=1 if row is not None else 0)

            status = await self.pool.execute(compiled, *params)
            return ExecuteResult(affected_count=affected_from_status(status))
        except asyncpg.PostgresError as e:
            logger.error(f"[postgres] Erro executando SQL: {e}")
            raise StorageError("Erro no banco de dados", detail=str(e)) from e

    async def query_all(self, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        try:
            rows = await self.pool.fetch(self.compile(sql), *params)
        except asyncpg.PostgresError as e:
            logger.error(f"[postgres] Erro na consulta: {e}")
            raise StorageError("Erro no banco de dados", detail=str(e)) from e
        return [normalize_row(row) for row in rows]

    async def column_exists(self, table: str, column: str) -> bool:
        row = await self.query_one(
            """
            SELECT 1 AS found FROM information_schema.columns
            WHERE table_schema = current_schema() AND table_name = ? AND column_name = ?
            """,
            [table, column],
        )
        return row is not None

    def add_column_sql(self, table: Table, column: Column) -> str:
        # IF NOT EXISTS cobre a corrida entre dois processos subindo juntos
        return super().add_column_sql(table, column).replace("ADD COLUMN", "ADD COLUMN IF NOT EXISTS", 1)

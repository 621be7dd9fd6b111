"""
SQLITE ADAPTER (aiosqlite)
==========================

Backend embarcado em arquivo. O "?" já é o placeholder nativo; o id
inserido vem do lastrowid do cursor.

Roda em autocommit (cada comando é atômico sozinho) e com
foreign_keys=ON para o CASCADE dos documentos funcionar. LOWER() é
substituído pela versão Unicode do Python, igual ao Postgres na busca.
"""

import logging
import sqlite3
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

import aiosqlite
from sqlalchemy.dialects import sqlite as sqlite_dialect

from deal_tracker.domain.errors import StorageError
from deal_tracker.infrastructure.database.adapter import (
    ExecuteResult,
    StorageAdapter,
    is_insert,
    normalize_row,
    serialize_timestamp,
)

logger = logging.getLogger(__name__)


def _unicode_lower(value: Any) -> Any:
    # LOWER nativo do SQLite só converte ASCII: "École" continuaria com "É"
    return value.lower() if isinstance(value, str) else value


def _bind(value: Any) -> Any:
    # Adapters de datetime do sqlite3 estão deprecados: grava ISO em texto
    if isinstance(value, datetime):
        return serialize_timestamp(value)
    return value


class SQLiteAdapter(StorageAdapter):
    """Adapter para arquivo SQLite local."""

    name = "sqlite"

    def __init__(self, path: str):
        self.path = path
        self.dialect = sqlite_dialect.dialect()
        self._conn: Optional[aiosqlite.Connection] = None

    async def connect(self) -> None:
        if self._conn is not None:
            return
        try:
            self._conn = await aiosqlite.connect(self.path, isolation_level=None)
            self._conn.row_factory = aiosqlite.Row
            await self._conn.execute("PRAGMA foreign_keys = ON")
            await self._conn.create_function("LOWER", 1, _unicode_lower, deterministic=True)
        except sqlite3.Error as e:
            raise StorageError("Não foi possível abrir o SQLite", detail=str(e)) from e
        logger.info(f"[sqlite] Banco aberto em {self.path}")

    async def close(self) -> None:
        if self._conn is not None:
            await self._conn.close()
            self._conn = None

    @property
    def conn(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise StorageError("Adapter SQLite não conectado")
        return self._conn

    def compile(self, sql: str) -> str:
        return sql

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> ExecuteResult:
        try:
            cursor = await self.conn.execute(self.compile(sql), [_bind(p) for p in params])
            try:
                inserted_id = cursor.lastrowid if is_insert(sql) else None
                return ExecuteResult(inserted_id=inserted_id, affected_count=max(cursor.rowcount, 0))
            finally:
                await cursor.close()
        except sqlite3.Error as e:
            logger.error(f"[sqlite] Erro executando SQL: {e}")
            raise StorageError("Erro no banco de dados", detail=str(e)) from e

    async def query_all(self, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        try:
            async with self.conn.execute(self.compile(sql), [_bind(p) for p in params]) as cursor:
                rows = await cursor.fetchall()
        except sqlite3.Error as e:
            logger.error(f"[sqlite] Erro na consulta: {e}")
            raise StorageError("Erro no banco de dados", detail=str(e)) from e
        return [normalize_row(row) for row in rows]

    async def column_exists(self, table: str, column: str) -> bool:
        rows = await self.query_all(f"PRAGMA table_info({table})")
        return any(row["name"] == column for row in rows)

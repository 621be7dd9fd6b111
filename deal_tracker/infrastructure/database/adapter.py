"""
STORAGE ADAPTER
===============

Interface única de persistência. Todo SQL do sistema é escrito com "?"
como placeholder posicional; cada backend traduz para a sua sintaxe:

- PostgresAdapter: "?" -> $1, $2, ... (asyncpg)
- SQLiteAdapter:   "?" nativo (aiosqlite)

Operações:
- execute(sql, params)   -> ExecuteResult(inserted_id, affected_count)
- query_all(sql, params) -> lista de dicts
- query_one(sql, params) -> dict ou None

O id inserido é normalizado em ExecuteResult.inserted_id, venha ele de
RETURNING (Postgres) ou do lastrowid (SQLite).
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence

from sqlalchemy import Column, Table
from sqlalchemy.engine import Dialect
from sqlalchemy.schema import CreateColumn, CreateIndex, CreateTable

from deal_tracker.infrastructure.database.schema import metadata, EVOLVED_COLUMNS

logger = logging.getLogger(__name__)

PLACEHOLDER = "?"


@dataclass
class ExecuteResult:
    """Resultado de um comando que altera dados."""
    inserted_id: Optional[int] = None
    affected_count: int = 0


def is_insert(sql: str) -> bool:
    return sql.lstrip().upper().startswith("INSERT")


def serialize_timestamp(value: datetime) -> str:
    """ISO-8601 com microssegundos (ordena igual em texto e em timestamp)."""
    return value.isoformat(timespec="microseconds")


def normalize_row(row: Mapping[str, Any]) -> Dict[str, Any]:
    """Converte linha do driver em dict plano com timestamps em ISO."""
    data = dict(row)
    for key, value in data.items():
        if isinstance(value, datetime):
            data[key] = serialize_timestamp(value)
    return data


class StorageAdapter(ABC):
    """Contrato comum aos dois backends."""

    name: str = "storage"
    dialect: Dialect

    # ============================================
    # CICLO DE VIDA
    # ============================================

    @abstractmethod
    async def connect(self) -> None:
        """Abre conexão/pool."""

    @abstractmethod
    async def close(self) -> None:
        """Fecha conexão/pool."""

    async def __aenter__(self) -> "StorageAdapter":
        await self.connect()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    # ============================================
    # SQL
    # ============================================

    @abstractmethod
    def compile(self, sql: str) -> str:
        """Traduz placeholders "?" para a sintaxe nativa."""

    @abstractmethod
    async def execute(self, sql: str, params: Sequence[Any] = ()) -> ExecuteResult:
        ...

    @abstractmethod
    async def query_all(self, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        ...

    async def query_one(self, sql: str, params: Sequence[Any] = ()) -> Optional[Dict[str, Any]]:
        rows = await self.query_all(sql, params)
        return rows[0] if rows else None

    # ============================================
    # SCHEMA (idempotente, roda em todo startup)
    # ============================================

    @abstractmethod
    async def column_exists(self, table: str, column: str) -> bool:
        ...

    def create_table_sql(self, table: Table) -> str:
        return str(CreateTable(table, if_not_exists=True).compile(dialect=self.dialect))

    def add_column_sql(self, table: Table, column: Column) -> str:
        column_ddl = str(CreateColumn(column).compile(dialect=self.dialect)).strip()
        return f"ALTER TABLE {table.name} ADD COLUMN {column_ddl}"

    async def add_column_if_missing(self, table: Table, column_name: str) -> bool:
        """Adiciona a coluna só se ela não existe. Retorna True se adicionou."""
        if await self.column_exists(table.name, column_name):
            return False
        await self.execute(self.add_column_sql(table, table.c[column_name]))
        logger.info(f"[{self.name}] Coluna '{table.name}.{column_name}' adicionada")
        return True

    async def ensure_schema(self) -> None:
        """Cria tabelas/índices ausentes e adiciona colunas novas."""
        for table in metadata.sorted_tables:
            await self.execute(self.create_table_sql(table))

            for column_name in EVOLVED_COLUMNS.get(table.name, ()):
                await self.add_column_if_missing(table, column_name)

            for index in sorted(table.indexes, key=lambda idx: idx.name):
                await self.execute(str(CreateIndex(index, if_not_exists=True).compile(dialect=self.dialect)))

        logger.info(f"[{self.name}] Schema verificado")

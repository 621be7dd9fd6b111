"""
SCHEMA DO BANCO
===============

Definição única das tabelas (SQLAlchemy Core). O DDL é compilado pelo
dialeto de cada backend, então Postgres e SQLite saem da mesma fonte:

- Postgres: id BIGSERIAL, TIMESTAMP WITH TIME ZONE
- SQLite:   id INTEGER (alias do rowid), DATETIME

Evolução é só aditiva: colunas criadas depois do deploy inicial ficam em
EVOLVED_COLUMNS e são adicionadas se não existirem.
"""

from typing import Dict, Tuple

from sqlalchemy import (
    BigInteger,
    Column,
    DateTime,
    Double,
    ForeignKey,
    Index,
    Integer,
    LargeBinary,
    MetaData,
    Table,
    Text,
)

metadata = MetaData()

# BIGSERIAL no Postgres; INTEGER PRIMARY KEY (rowid) no SQLite
IdType = BigInteger().with_variant(Integer(), "sqlite")

opportunities = Table(
    "opportunities",
    metadata,
    Column("id", IdType, primary_key=True, autoincrement=True),
    Column("deal_type", Text, nullable=False, server_default="supplier_offer"),
    Column("supplier", Text, nullable=False),
    Column("product", Text, nullable=False),
    Column("customer", Text, server_default=""),
    Column("qty_needed", Double),
    Column("supplier_price", Double),
    Column("target_sell_price", Double),
    Column("incoterms", Text),
    Column("country_of_origin", Text),
    Column("intermediary", Text),
    Column("deal_contacts", Text),
    Column("stage", Text, nullable=False, server_default="sourcing"),
    Column("status", Text, nullable=False, server_default="open"),
    Column("confidence", Integer, nullable=False, server_default="50"),
    Column("owner", Text),
    Column("notes", Text),
    Column("euc_text", Text),
    Column("next_action", Text),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
    Index("ix_opportunities_status", "status"),
    Index("ix_opportunities_updated", "updated_at", "id"),
)

opportunity_documents = Table(
    "opportunity_documents",
    metadata,
    Column("id", IdType, primary_key=True, autoincrement=True),
    Column(
        "opportunity_id",
        BigInteger,
        ForeignKey("opportunities.id", ondelete="CASCADE", name="fk_opportunity"),
        nullable=False,
    ),
    Column("original_name", Text, nullable=False),
    Column("mime_type", Text),
    Column("size_bytes", BigInteger),
    Column("storage_key", Text),
    # Primeira versão guardava os bytes aqui (NOT NULL); hoje ficam no blob store
    Column("file_data", LargeBinary),
    Column("uploaded_by", Text),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Index("ix_opportunity_documents_opportunity", "opportunity_id"),
)

# Colunas adicionadas depois da primeira versão (ADD COLUMN se faltar)
EVOLVED_COLUMNS: Dict[str, Tuple[str, ...]] = {
    "opportunities": (
        "deal_type",
        "incoterms",
        "country_of_origin",
        "intermediary",
        "deal_contacts",
        "euc_text",
    ),
    "opportunity_documents": (
        "storage_key",
        "file_data",
    ),
}

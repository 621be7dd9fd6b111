"""
SERVIÇO DE OPORTUNIDADES
========================

Orquestra criação, atualização, remoção, listagem e resumo usando
sanitizer + query builder + storage adapter. É dono do ciclo de vida
de id e timestamps.

Não há controle de concorrência: dois updates simultâneos no mesmo id
fazem read-modify-write e o último a gravar vence.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional

from deal_tracker.domain.entities import OPPORTUNITY_FIELDS, OpportunityStatus
from deal_tracker.domain.errors import NotFoundError, ValidationError
from deal_tracker.domain.services import query_builder
from deal_tracker.domain.services.query_builder import SearchCriteria
from deal_tracker.domain.services.record_sanitizer import sanitize, missing_required
from deal_tracker.infrastructure.database import StorageAdapter

logger = logging.getLogger(__name__)

REQUIRED_FIELDS_MESSAGE = "supplier e product são obrigatórios"

INSERT_SQL = (
    f"INSERT INTO opportunities ({', '.join(OPPORTUNITY_FIELDS)}, created_at, updated_at) "
    f"VALUES ({', '.join('?' for _ in range(len(OPPORTUNITY_FIELDS) + 2))})"
)

UPDATE_SQL = (
    "UPDATE opportunities SET "
    + ", ".join(f"{field} = ?" for field in OPPORTUNITY_FIELDS)
    + ", updated_at = ? WHERE id = ?"
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class OpportunityService:
    """Casos de uso de oportunidades."""

    def __init__(
        self,
        storage: StorageAdapter,
        blob_store=None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.storage = storage
        self.blob_store = blob_store
        self.clock = clock

    # =============================================
    # LEITURA
    # =============================================

    async def get(self, opportunity_id: int) -> Dict[str, Any]:
        row = await self.storage.query_one("SELECT * FROM opportunities WHERE id = ?", [opportunity_id])
        if row is None:
            raise NotFoundError("Oportunidade não encontrada")
        return row

    async def list(self, criteria: Optional[SearchCriteria] = None) -> List[Dict[str, Any]]:
        """Lista com filtros, mais recentes primeiro (id desempata)."""
        filters = query_builder.build(criteria)
        return await self.storage.query_all(
            f"SELECT * FROM opportunities {filters.where_clause} ORDER BY updated_at DESC, id DESC",
            filters.params,
        )

    async def summarize(self) -> Dict[str, Any]:
        """Contagem por status + pipeline aberto (preço alvo x quantidade)."""
        counts = await self.storage.query_all(
            "SELECT status, COUNT(*) AS count FROM opportunities GROUP BY status"
        )
        pipeline = await self.storage.query_one(
            "SELECT SUM(COALESCE(target_sell_price, 0) * COALESCE(qty_needed, 0)) AS total_pipeline "
            "FROM opportunities WHERE status = ?",
            [OpportunityStatus.OPEN.value],
        )

        summary: Dict[str, Any] = {status.value: 0 for status in OpportunityStatus}
        for entry in counts:
            if entry["status"] in summary:
                summary[entry["status"]] = int(entry["count"])

        total = (pipeline or {}).get("total_pipeline") or 0
        summary["total_pipeline"] = round(float(total), 2)
        return summary

    # =============================================
    # ESCRITA
    # =============================================

    async def create(self, payload: Mapping[str, Any], acting_user: str) -> Dict[str, Any]:
        record = sanitize(payload)
        if missing_required(record):
            raise ValidationError(REQUIRED_FIELDS_MESSAGE)

        if not record["owner"]:
            record["owner"] = acting_user

        timestamp = self.clock()
        result = await self.storage.execute(
            INSERT_SQL,
            [record[field] for field in OPPORTUNITY_FIELDS] + [timestamp, timestamp],
        )
        logger.info(f"Oportunidade criada: {result.inserted_id} ({record['supplier']} / {record['product']})")
        return await self.get(result.inserted_id)

    async def update(self, opportunity_id: int, changes: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Atualiza por merge: alterações por cima do registro salvo e o
        resultado inteiro passa de novo pelo sanitizer.
        """
        existing = await self.get(opportunity_id)

        merged = {**existing, **dict(changes or {})}
        record = sanitize(merged)
        if missing_required(record):
            raise ValidationError(REQUIRED_FIELDS_MESSAGE)

        await self.storage.execute(
            UPDATE_SQL,
            [record[field] for field in OPPORTUNITY_FIELDS] + [self.clock(), opportunity_id],
        )
        return await self.get(opportunity_id)

    async def remove(self, opportunity_id: int) -> None:
        """Remove a oportunidade; documentos caem junto (CASCADE)."""
        documents = await self.storage.query_all(
            "SELECT id, storage_key FROM opportunity_documents WHERE opportunity_id = ?",
            [opportunity_id],
        )

        result = await self.storage.execute("DELETE FROM opportunities WHERE id = ?", [opportunity_id])
        if not result.affected_count:
            raise NotFoundError("Oportunidade não encontrada")

        if self.blob_store is not None:
            for document in documents:
                if document.get("storage_key"):
                    await self.blob_store.delete(document["storage_key"])

        logger.info(f"Oportunidade removida: {opportunity_id} ({len(documents)} documentos)")

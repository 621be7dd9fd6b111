"""
SERVIÇO DE DOCUMENTOS
=====================

Anexos de uma oportunidade. O banco guarda só os metadados; os bytes
ficam com o blob store (ex: LocalFileStorage).
"""

import logging
from typing import Any, Dict, List, Tuple

from deal_tracker.domain.entities import DOCUMENT_FIELDS
from deal_tracker.domain.errors import NotFoundError, StorageError, ValidationError
from deal_tracker.infrastructure.database import StorageAdapter
from deal_tracker.application.services.opportunity_service import utc_now

logger = logging.getLogger(__name__)

DEFAULT_MAX_BYTES = 25 * 1024 * 1024  # 25MB
SELECT_COLUMNS = ", ".join(DOCUMENT_FIELDS)


class DocumentService:
    """Casos de uso de documentos anexados."""

    def __init__(self, storage: StorageAdapter, blob_store, max_bytes: int = DEFAULT_MAX_BYTES, clock=utc_now):
        self.storage = storage
        self.blob_store = blob_store
        self.max_bytes = max_bytes
        self.clock = clock

    async def _get_row(self, document_id: int) -> Dict[str, Any]:
        row = await self.storage.query_one(
            f"SELECT {SELECT_COLUMNS}, storage_key FROM opportunity_documents WHERE id = ?",
            [document_id],
        )
        if row is None:
            raise NotFoundError("Documento não encontrado")
        return row

    async def list_documents(self, opportunity_id: int) -> List[Dict[str, Any]]:
        return await self.storage.query_all(
            f"SELECT {SELECT_COLUMNS} FROM opportunity_documents "
            "WHERE opportunity_id = ? ORDER BY created_at DESC, id DESC",
            [opportunity_id],
        )

    async def attach(
        self,
        opportunity_id: int,
        filename: str,
        mime_type: str,
        data: bytes,
        uploaded_by: str,
    ) -> Dict[str, Any]:
        """Anexa um arquivo a uma oportunidade existente."""
        opportunity = await self.storage.query_one("SELECT id FROM opportunities WHERE id = ?", [opportunity_id])
        if opportunity is None:
            raise NotFoundError("Oportunidade não encontrada")

        if not data:
            raise ValidationError("Envie um documento no campo \"file\"")
        if len(data) > self.max_bytes:
            raise ValidationError(f"Arquivo muito grande. Máximo: {self.max_bytes // (1024 * 1024)}MB")

        original_name = (filename or "").strip() or "documento"
        storage_key = await self.blob_store.save(data, original_name)

        try:
            # file_data vazio: tabelas antigas ainda têm a coluna como NOT NULL
            result = await self.storage.execute(
                "INSERT INTO opportunity_documents "
                "(opportunity_id, original_name, mime_type, size_bytes, storage_key, file_data, uploaded_by, created_at) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                [
                    opportunity_id,
                    original_name,
                    mime_type or "application/octet-stream",
                    len(data),
                    storage_key,
                    b"",
                    uploaded_by,
                    self.clock(),
                ],
            )
        except StorageError:
            await self.blob_store.delete(storage_key)
            raise

        logger.info(f"Documento {result.inserted_id} anexado à oportunidade {opportunity_id}")
        row = await self._get_row(result.inserted_id)
        row.pop("storage_key", None)
        return row

    async def download(self, document_id: int) -> Tuple[Dict[str, Any], bytes]:
        """
        Metadados + bytes do documento.

        Documentos da primeira versão não têm storage_key: os bytes vêm da
        coluna file_data.
        """
        row = await self.storage.query_one(
            f"SELECT {SELECT_COLUMNS}, storage_key, file_data FROM opportunity_documents WHERE id = ?",
            [document_id],
        )
        if row is None:
            raise NotFoundError("Documento não encontrado")

        storage_key = row.pop("storage_key")
        legacy_data = row.pop("file_data")
        if storage_key:
            return row, await self.blob_store.load(storage_key)
        if legacy_data:
            return row, bytes(legacy_data)
        raise NotFoundError("Arquivo não encontrado")

    async def delete(self, document_id: int) -> None:
        row = await self._get_row(document_id)

        result = await self.storage.execute("DELETE FROM opportunity_documents WHERE id = ?", [document_id])
        if not result.affected_count:
            raise NotFoundError("Documento não encontrado")

        if row.get("storage_key"):
            await self.blob_store.delete(row["storage_key"])

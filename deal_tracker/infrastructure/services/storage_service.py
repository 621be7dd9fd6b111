"""
Storage Service - Armazenamento dos anexos
==========================================

Guarda os bytes dos documentos fora do banco. O banco só conhece a
chave (storage_key) devolvida por save().

Suporta:
- Local: arquivos em STORAGE_LOCAL_PATH (padrão ./storage)
"""

import logging
import re
import uuid
from pathlib import Path

import aiofiles
import aiofiles.os

from deal_tracker.domain.errors import NotFoundError

logger = logging.getLogger(__name__)

SAFE_CHARS_PATTERN = re.compile(r"[^A-Za-z0-9._-]+")


def sanitize_filename(filename: str) -> str:
    """Nome seguro para disco (sem barras, espaços viram _)."""
    name = Path(filename or "").name
    name = SAFE_CHARS_PATTERN.sub("_", name).strip("._")
    return name[:100] or "arquivo"


class LocalFileStorage:
    """Armazena arquivos em disco local."""

    def __init__(self, base_path: str):
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)
        logger.info(f"[Storage] Modo LOCAL: {self.base_path}")

    def _path_for(self, storage_key: str) -> Path:
        # Chave nunca pode escapar do diretório base
        path = (self.base_path / storage_key).resolve()
        if self.base_path.resolve() not in path.parents:
            raise NotFoundError("Arquivo não encontrado")
        return path

    async def save(self, data: bytes, filename: str) -> str:
        """Salva os bytes e retorna a chave para recuperar depois."""
        storage_key = f"{uuid.uuid4().hex}_{sanitize_filename(filename)}"
        async with aiofiles.open(self._path_for(storage_key), "wb") as f:
            await f.write(data)
        logger.info(f"[Storage] Arquivo salvo: {storage_key} ({len(data)} bytes)")
        return storage_key

    async def load(self, storage_key: str) -> bytes:
        path = self._path_for(storage_key)
        if not await aiofiles.os.path.exists(path):
            raise NotFoundError("Arquivo não encontrado")
        async with aiofiles.open(path, "rb") as f:
            return await f.read()

    async def delete(self, storage_key: str) -> bool:
        """Remove o arquivo. Retorna False se ele já não existia."""
        path = self._path_for(storage_key)
        if not await aiofiles.os.path.exists(path):
            logger.warning(f"[Storage] Arquivo já removido: {storage_key}")
            return False
        await aiofiles.os.remove(path)
        return True

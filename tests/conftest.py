import os

# Configuração mínima antes de importar a aplicação
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("APP_USERS", "owner:change-me,partner:change-me-too")

import pytest
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator

from deal_tracker.application.services import DocumentService, OpportunityService
from deal_tracker.infrastructure.database import SQLiteAdapter
from deal_tracker.infrastructure.services import LocalFileStorage


class FakeClock:
    """Relógio que anda 1 segundo a cada leitura (ordem previsível)."""

    def __init__(self, start: datetime = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)):
        self.current = start

    def __call__(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


@pytest.fixture
async def storage(tmp_path) -> AsyncGenerator[SQLiteAdapter, None]:
    """
    Banco SQLite novo em arquivo temporário para cada teste, já com schema.
    """
    adapter = SQLiteAdapter(str(tmp_path / "deals.db"))
    await adapter.connect()
    await adapter.ensure_schema()
    yield adapter
    await adapter.close()


@pytest.fixture
def blob_store(tmp_path) -> LocalFileStorage:
    return LocalFileStorage(str(tmp_path / "files"))


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def service(storage, blob_store, clock) -> OpportunityService:
    return OpportunityService(storage, blob_store=blob_store, clock=clock)


@pytest.fixture
def document_service(storage, blob_store, clock) -> DocumentService:
    return DocumentService(storage, blob_store, max_bytes=1024, clock=clock)

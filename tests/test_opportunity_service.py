"""
TESTES - SERVIÇO DE OPORTUNIDADES
=================================

Ciclo de vida completo sobre SQLite temporário.
"""

import asyncio
from datetime import datetime, timezone

import pytest

from deal_tracker.application.services import OpportunityService
from deal_tracker.domain.errors import NotFoundError, ValidationError
from deal_tracker.domain.services.query_builder import SearchCriteria

FROZEN_TIME = datetime(2026, 5, 5, 10, 0, tzinfo=timezone.utc)


# =============================================================================
# CREATE
# =============================================================================

@pytest.mark.asyncio
async def test_create_applies_defaults(service):
    created = await service.create({"supplier": "Acme", "product": "Widget"}, acting_user="owner")
    stored = await service.get(created["id"])

    assert stored["status"] == "open"
    assert stored["stage"] == "sourcing"
    assert stored["confidence"] == 50
    assert stored["deal_type"] == "supplier_offer"
    assert stored["owner"] == "owner"
    assert stored["created_at"] == stored["updated_at"]


@pytest.mark.asyncio
async def test_create_keeps_explicit_owner(service):
    created = await service.create({"supplier": "Acme", "product": "Widget", "owner": "ana"}, acting_user="owner")
    assert created["owner"] == "ana"


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [
    {"supplier": "", "product": "Widget"},
    {"supplier": "   ", "product": "Widget"},
    {"supplier": "Acme"},
    {},
])
async def test_create_without_required_fields_persists_nothing(service, storage, payload):
    with pytest.raises(ValidationError):
        await service.create(payload, acting_user="owner")

    assert await storage.query_all("SELECT * FROM opportunities") == []


@pytest.mark.asyncio
async def test_create_normalizes_input(service):
    created = await service.create(
        {
            "supplier": " Acme ",
            "product": "Widget",
            "deal_type": "CUSTOMER_NEED",
            "stage": "invalid",
            "status": "Won",
            "confidence": "250",
            "qty_needed": "10",
            "supplier_price": "$1,000.50",
        },
        acting_user="owner",
    )

    assert created["supplier"] == "Acme"
    assert created["deal_type"] == "customer_need"
    assert created["stage"] == "sourcing"
    assert created["status"] == "won"
    assert created["confidence"] == 100
    assert created["qty_needed"] == 10.0
    assert created["supplier_price"] == 1000.5


# =============================================================================
# UPDATE
# =============================================================================

@pytest.mark.asyncio
async def test_update_merges_and_resanitizes(service, storage):
    created = await service.create(
        {"supplier": "Acme", "product": "Widget", "notes": "primeira"},
        acting_user="owner",
    )

    # Valor salvo fora do padrão (ex: gravado por versão antiga)
    await storage.execute("UPDATE opportunities SET stage = ? WHERE id = ?", ["LEGACY", created["id"]])

    updated = await service.update(created["id"], {"status": "LOST", "confidence": "-3"})

    assert updated["status"] == "lost"
    assert updated["confidence"] == 0
    assert updated["notes"] == "primeira"
    assert updated["supplier"] == "Acme"
    assert updated["stage"] == "sourcing"
    assert updated["created_at"] == created["created_at"]
    assert updated["updated_at"] > created["updated_at"]


@pytest.mark.asyncio
async def test_update_unknown_id_raises_not_found(service):
    with pytest.raises(NotFoundError):
        await service.update(12345, {"notes": "x"})


@pytest.mark.asyncio
async def test_update_clearing_product_is_rejected(service):
    created = await service.create({"supplier": "Acme", "product": "Widget"}, acting_user="owner")

    with pytest.raises(ValidationError):
        await service.update(created["id"], {"product": "  "})

    assert (await service.get(created["id"]))["product"] == "Widget"


class InterleavingStorage:
    """
    Segura as leituras até que os dois updates tenham lido, forçando o
    read-modify-write concorrente.
    """

    def __init__(self, inner, readers: int = 2):
        self.inner = inner
        self.readers = readers
        self.arrived = 0
        self.all_read = asyncio.Event()

    async def query_one(self, sql, params=()):
        row = await self.inner.query_one(sql, params)
        if not self.all_read.is_set():
            self.arrived += 1
            if self.arrived >= self.readers:
                self.all_read.set()
            await self.all_read.wait()
        return row

    def __getattr__(self, name):
        return getattr(self.inner, name)


@pytest.mark.asyncio
async def test_concurrent_updates_last_writer_wins(storage, clock):
    setup = OpportunityService(storage, clock=clock)
    created = await setup.create({"supplier": "Acme", "product": "Widget"}, acting_user="owner")

    racing = OpportunityService(InterleavingStorage(storage), clock=clock)
    await asyncio.gather(
        racing.update(created["id"], {"notes": "alteracao A"}),
        racing.update(created["id"], {"next_action": "alteracao B"}),
    )

    final = await setup.get(created["id"])

    # Sem versionamento: quem gravou por último apagou a alteração do outro
    assert (final["notes"], final["next_action"]) in [("alteracao A", ""), ("", "alteracao B")]


# =============================================================================
# REMOVE
# =============================================================================

@pytest.mark.asyncio
async def test_remove_deletes_record(service):
    created = await service.create({"supplier": "Acme", "product": "Widget"}, acting_user="owner")

    await service.remove(created["id"])

    with pytest.raises(NotFoundError):
        await service.get(created["id"])


@pytest.mark.asyncio
async def test_remove_unknown_id_raises_not_found(service):
    with pytest.raises(NotFoundError):
        await service.remove(999)


@pytest.mark.asyncio
async def test_remove_cascades_to_documents(service, document_service, storage, blob_store):
    created = await service.create({"supplier": "Acme", "product": "Widget"}, acting_user="owner")
    first = await document_service.attach(created["id"], "a.pdf", "application/pdf", b"%PDF-a", "owner")
    await document_service.attach(created["id"], "b.pdf", "application/pdf", b"%PDF-b", "owner")
    keys = [row["storage_key"] for row in await storage.query_all("SELECT storage_key FROM opportunity_documents")]

    await service.remove(created["id"])

    assert await document_service.list_documents(created["id"]) == []
    with pytest.raises(NotFoundError):
        await document_service.download(first["id"])
    for key in keys:
        with pytest.raises(NotFoundError):
            await blob_store.load(key)


# =============================================================================
# LIST
# =============================================================================

@pytest.mark.asyncio
async def test_list_orders_by_updated_at_desc(service):
    first = await service.create({"supplier": "A", "product": "P"}, acting_user="owner")
    second = await service.create({"supplier": "B", "product": "P"}, acting_user="owner")
    third = await service.create({"supplier": "C", "product": "P"}, acting_user="owner")

    await service.update(first["id"], {"notes": "mexido por último"})

    ids = [row["id"] for row in await service.list()]
    assert ids == [first["id"], third["id"], second["id"]]


@pytest.mark.asyncio
async def test_list_ties_break_by_id_desc(storage):
    frozen = OpportunityService(storage, clock=lambda: FROZEN_TIME)
    ids = [
        (await frozen.create({"supplier": f"S{i}", "product": "P"}, acting_user="owner"))["id"]
        for i in range(3)
    ]

    listed = [row["id"] for row in await frozen.list()]
    assert listed == sorted(ids, reverse=True)


@pytest.mark.asyncio
async def test_list_filters(service):
    await service.create(
        {"supplier": "Steel Corp", "product": "Rebar", "status": "won", "owner": "Bob Smith"},
        acting_user="owner",
    )
    await service.create(
        {"supplier": "Acme", "product": "Widget", "notes": "needs STEEL frame", "owner": "ana"},
        acting_user="owner",
    )
    await service.create(
        {"supplier": "Other", "product": "Thing", "deal_type": "customer_need"},
        acting_user="owner",
    )

    assert len(await service.list(SearchCriteria(q="steel"))) == 2
    assert len(await service.list(SearchCriteria(q="steel", status="won"))) == 1
    assert [r["supplier"] for r in await service.list(SearchCriteria(owner="BOB"))] == ["Steel Corp"]
    assert [r["supplier"] for r in await service.list(SearchCriteria(deal_type="customer_need"))] == ["Other"]
    assert len(await service.list(SearchCriteria(stage="not-a-real-stage"))) == 3
    assert await service.list(SearchCriteria(q="100%")) == []


@pytest.mark.asyncio
async def test_search_folds_accented_letters(service):
    await service.create({"supplier": "École Supplies", "product": "Cadernos"}, acting_user="owner")
    await service.create({"supplier": "Acme", "product": "Widget", "owner": "JOSÉ"}, acting_user="owner")

    assert [r["supplier"] for r in await service.list(SearchCriteria(q="école"))] == ["École Supplies"]
    assert [r["supplier"] for r in await service.list(SearchCriteria(q="ÉCOLE"))] == ["École Supplies"]
    assert [r["supplier"] for r in await service.list(SearchCriteria(owner="josé"))] == ["Acme"]


@pytest.mark.asyncio
async def test_create_with_huge_numerals_is_clamped(service):
    created = await service.create(
        {"supplier": "Acme", "product": "Widget", "confidence": "1" * 5000, "supplier_price": "9" * 400},
        acting_user="owner",
    )

    assert created["confidence"] == 100
    assert created["supplier_price"] is None


# =============================================================================
# SUMMARY
# =============================================================================

@pytest.mark.asyncio
async def test_summary_on_empty_store(service):
    assert await service.summarize() == {"open": 0, "won": 0, "lost": 0, "total_pipeline": 0}


@pytest.mark.asyncio
async def test_summary_counts_and_open_pipeline(service):
    await service.create(
        {"supplier": "A", "product": "P", "target_sell_price": "33.333", "qty_needed": 3},
        acting_user="owner",
    )
    await service.create(
        {"supplier": "B", "product": "P", "target_sell_price": "2.5", "qty_needed": None},
        acting_user="owner",
    )
    await service.create(
        {"supplier": "C", "product": "P", "target_sell_price": 100, "qty_needed": 100, "status": "won"},
        acting_user="owner",
    )
    await service.create({"supplier": "D", "product": "P", "status": "lost"}, acting_user="owner")

    summary = await service.summarize()

    assert summary["open"] == 2
    assert summary["won"] == 1
    assert summary["lost"] == 1
    assert summary["total_pipeline"] == 100.0

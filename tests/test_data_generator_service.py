"""
Tests for the test data generation workflows
"""

import asyncio
import random

import pytest

from app.core.exceptions import (
    InsufficientGuestsError,
    NoUniqueRelationshipsError,
    NotAuthenticatedError,
    StoreError,
)
from app.schemas.devmode import GenerateRequest
from app.services.data_generator_service import DataGeneratorService
from app.services.dev_state import DevStateStore, MemoryStorage
from app.services.entity_generator import EntityGenerator
from app.services.pair_allocator import pair_key
from app.services.record_store import MemoryRecordStore, StoreResult

class RecordingStore(MemoryRecordStore):
    """Remembers insert order and can reject inserts into one table"""

    def __init__(self, fail_table=None):
        super().__init__()
        self.fail_table = fail_table
        self.inserted_tables = []

    def insert(self, table, rows):
        self.inserted_tables.append(table)
        if table == self.fail_table:
            return StoreResult(error=f"{table} insert failed")
        return super().insert(table, rows)

def make_service(store=None, **options):
    store = store if store is not None else MemoryRecordStore()
    service = DataGeneratorService(
        store,
        DevStateStore(MemoryStorage()),
        options=GenerateRequest(**options),
        generator=EntityGenerator(rng=random.Random(11)),
    )
    return service, store

def seed_guests(store, count, user_id="user-1"):
    store.insert("guests", [{"name": f"Guest {i}", "user_id": user_id} for i in range(count)])

def test_generate_guests_in_batches():
    service, store = make_service(guest_count=30, batch_size=25)

    result = asyncio.run(service.generate_guests("user-1"))

    assert result.generated == 30
    assert len(store.select("guests", {"user_id": "user-1"})) == 30
    assert result.progress == ["Generated 25/30 guests...", "Generated 30/30 guests..."]
    assert service.state.success is True
    assert service.state.loading is False

def test_single_batch_reports_no_progress():
    service, _ = make_service(guest_count=10, batch_size=25)
    result = asyncio.run(service.generate_guests("user-1"))
    assert result.progress == []

def test_unauthenticated_user_is_rejected_before_any_write():
    service, store = make_service()

    with pytest.raises(NotAuthenticatedError):
        asyncio.run(service.generate_guests(None))

    assert service.state.error == "User not authenticated"
    assert store.select("guests") == []

def test_generate_tables():
    service, store = make_service(table_count=5)

    result = asyncio.run(service.generate_tables("user-1"))

    assert result.generated == 5
    tables = store.select("tables", {"user_id": "user-1"})
    assert {(t["position_x"], t["position_y"]) for t in tables} == {
        (0, 0), (150, 0), (300, 0), (0, 150), (150, 150),
    }

def test_relationships_require_two_guests():
    service, store = make_service()
    seed_guests(store, 1)

    with pytest.raises(InsufficientGuestsError):
        asyncio.run(service.generate_relationships("user-1"))
    assert "at least 2 guests" in service.state.error

def test_relationships_partial_result_is_success():
    service, store = make_service(relationship_count=10)
    seed_guests(store, 3)

    result = asyncio.run(service.generate_relationships("user-1"))

    assert 1 <= result.generated <= 3
    assert result.message.startswith(f"Created {result.generated} relationships (requested 10)")
    assert service.state.success is True

    rows = store.select("guest_relationships", {"user_id": "user-1"})
    keys = [pair_key(r["guest_id"], r["related_guest_id"]) for r in rows]
    assert len(keys) == len(set(keys))

def test_relationships_only_use_own_guests():
    service, store = make_service(relationship_count=5)
    seed_guests(store, 4, user_id="user-1")
    seed_guests(store, 4, user_id="user-2")
    own_ids = {g["id"] for g in store.select("guests", {"user_id": "user-1"})}

    asyncio.run(service.generate_relationships("user-1"))

    for rel in store.select("guest_relationships"):
        assert rel["guest_id"] in own_ids
        assert rel["related_guest_id"] in own_ids

def test_zero_relationships_is_an_error():
    service, store = make_service()
    seed_guests(store, 2)
    service.generator.generate_relationships = lambda count, user_id, guest_ids: []

    with pytest.raises(NoUniqueRelationshipsError):
        asyncio.run(service.generate_relationships("user-1"))

def test_clear_existing_removes_only_own_rows():
    service, store = make_service(guest_count=4, clear_existing=True)
    seed_guests(store, 5, user_id="user-1")
    seed_guests(store, 2, user_id="user-2")

    asyncio.run(service.generate_guests("user-1"))

    assert len(store.select("guests", {"user_id": "user-1"})) == 4
    assert len(store.select("guests", {"user_id": "user-2"})) == 2

def test_generate_all_runs_in_fixed_order():
    store = RecordingStore()
    service, _ = make_service(store, guest_count=30, batch_size=25, table_count=2, relationship_count=3)

    result = asyncio.run(service.generate_all("user-1"))

    assert store.inserted_tables == ["guests", "guests", "tables", "guest_relationships"]
    assert result.kind == "all"
    assert result.generated == 35
    assert service.state.success is True

def test_generate_all_stops_at_first_failure():
    store = RecordingStore(fail_table="tables")
    service, _ = make_service(store, guest_count=5)

    with pytest.raises(StoreError):
        asyncio.run(service.generate_all("user-1"))

    assert len(store.select("guests")) == 5
    assert "guest_relationships" not in store.inserted_tables
    assert service.state.error == "tables insert failed"

def test_state_reset():
    service, _ = make_service()
    asyncio.run(service.generate_tables("user-1"))
    service.state.reset()
    assert (service.state.loading, service.state.success, service.state.error) == (False, False, None)

class BrokenStore(MemoryRecordStore):
    def insert(self, table, rows):
        raise RuntimeError("disk full")

@pytest.mark.parametrize("operation", ["generate_guests", "generate_all"])
def test_unexpected_errors_clear_loading(operation):
    service, _ = make_service(BrokenStore())

    with pytest.raises(RuntimeError):
        asyncio.run(getattr(service, operation)("user-1"))

    assert service.state.loading is False
    assert service.state.success is False
    assert service.state.error == "Unexpected error generating test data"

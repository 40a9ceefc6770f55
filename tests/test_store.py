"""Snapshot stores and the load-operate-save session."""

import pytest

from venueledger.core.database import make_engine, make_session_factory
from venueledger.core.errors import NotFoundError, StaleSnapshotError
from venueledger.models import PaymentStatus, Snapshot
from venueledger.services import audit
from venueledger.services.audit import AuditTrail
from venueledger.services.bookings import create_booking
from venueledger.services.context import LedgerContext
from venueledger.services.payments import capture_payment
from venueledger.services.session import LedgerSession
from venueledger.services.store import InMemorySnapshotStore, SqlSnapshotStore, create_tables

from tests.conftest import TODAY, FixedClock, SequentialIds, make_snapshot


@pytest.fixture
async def sql_store():
    engine = make_engine("sqlite+aiosqlite:///:memory:")
    await create_tables(engine)
    yield SqlSnapshotStore(make_session_factory(engine), key="test")
    await engine.dispose()


@pytest.fixture(params=["memory", "sql"])
async def store(request, sql_store):
    if request.param == "memory":
        return InMemorySnapshotStore()
    return sql_store


@pytest.mark.asyncio
async def test_empty_store_loads_empty_snapshot(store):
    snapshot = await store.load()
    assert snapshot == Snapshot()
    assert snapshot.version == 0


@pytest.mark.asyncio
async def test_save_bumps_version_and_round_trips(store, ctx):
    seeded = make_snapshot()
    seeded, booking = create_booking(seeded, ctx, "CL-000001", "V1", TODAY, "08:00")
    seeded, booking, _, _ = capture_payment(seeded, ctx, booking.id, 1200)

    saved = await store.save(seeded)
    assert saved.version == 1

    loaded = await store.load()
    assert loaded.version == 1
    assert loaded.get_booking(booking.id) == booking
    assert loaded.get_booking(booking.id).payment_status == PaymentStatus.PARTIAL
    assert loaded.payments == seeded.payments
    assert loaded.transactions == seeded.transactions

    await store.save(loaded)
    assert (await store.load()).version == 2


@pytest.mark.asyncio
async def test_expected_version_mismatch_is_stale(store):
    first = await store.load()
    await store.save(first, expected_version=0)

    with pytest.raises(StaleSnapshotError) as exc_info:
        await store.save(first, expected_version=0)
    assert exc_info.value.actual_version == 1
    assert (await store.load()).version == 1


@pytest.mark.asyncio
async def test_last_write_wins_without_expected_version(store):
    first = await store.load()
    await store.save(first.model_copy(update={"venues": make_snapshot().venues}))

    # a writer still holding v0 overwrites silently
    saved = await store.save(first)
    assert saved.version == 2
    assert (await store.load()).venues == []


class TestLedgerSession:
    @pytest.mark.asyncio
    async def test_saves_once_with_audit(self, ctx):
        store = InMemorySnapshotStore(make_snapshot())

        async with LedgerSession(store, ctx) as ledger:
            booking = ledger.apply(create_booking, "CL-000001", "V1", TODAY, "08:00")
            booking, payment, txn = ledger.apply(capture_payment, booking.id, 2000)

        stored = await store.load()
        assert stored.version == 1
        assert stored.get_booking(booking.id).payment_status == PaymentStatus.PAID
        assert [e.action for e in stored.audit_logs] == [audit.CREATE_BOOKING, audit.CAPTURE_PAYMENT]
        assert ctx.audit.pending == []

    @pytest.mark.asyncio
    async def test_failure_saves_nothing(self, ctx):
        store = InMemorySnapshotStore(make_snapshot())

        with pytest.raises(NotFoundError):
            async with LedgerSession(store, ctx) as ledger:
                ledger.apply(create_booking, "CL-000001", "V1", TODAY, "08:00")
                ledger.apply(capture_payment, "BK-404", 100)

        stored = await store.load()
        assert stored.version == 0
        assert stored.bookings == []
        assert stored.audit_logs == []
        assert ctx.audit.pending == []

    @pytest.mark.asyncio
    async def test_read_only_session_does_not_save(self, ctx):
        store = InMemorySnapshotStore(make_snapshot())
        async with LedgerSession(store, ctx) as ledger:
            assert len(ledger.snapshot.venues) == 2
        assert (await store.load()).version == 0

    @pytest.mark.asyncio
    async def test_enforced_version_rejects_concurrent_writer(self, ctx):
        store = InMemorySnapshotStore(make_snapshot())

        with pytest.raises(StaleSnapshotError):
            async with LedgerSession(store, ctx, enforce_version=True) as ledger:
                ledger.apply(create_booking, "CL-000001", "V1", TODAY, "08:00")
                # another writer gets in first
                await store.save(await store.load())

        assert (await store.load()).bookings == []

    @pytest.mark.asyncio
    async def test_buffering_recorder_is_folded_in(self):
        class ListRecorder:
            def __init__(self):
                self.trail = AuditTrail(FixedClock(), SequentialIds())

            def record(self, action, details, actor_id):
                return self.trail.record(action, details, actor_id)

            def drain(self):
                return self.trail.drain()

        ctx = LedgerContext(actor_id="desk", clock=FixedClock(), ids=SequentialIds(), audit=ListRecorder())
        store = InMemorySnapshotStore(make_snapshot())
        async with LedgerSession(store, ctx) as ledger:
            ledger.apply(create_booking, "CL-000001", "V1", TODAY, "08:00")

        stored = await store.load()
        assert [(e.action, e.user_id) for e in stored.audit_logs] == [(audit.CREATE_BOOKING, "desk")]

    @pytest.mark.asyncio
    async def test_sink_recorder_keeps_its_own_entries(self):
        class SinkRecorder:
            def __init__(self):
                self.trail = AuditTrail(FixedClock(), SequentialIds())
                self.sent = []

            def record(self, action, details, actor_id):
                entry = self.trail.record(action, details, actor_id)
                self.sent.append(entry)
                return entry

        sink = SinkRecorder()
        ctx = LedgerContext(actor_id="desk", clock=FixedClock(), ids=SequentialIds(), audit=sink)
        store = InMemorySnapshotStore(make_snapshot())
        async with LedgerSession(store, ctx) as ledger:
            ledger.apply(create_booking, "CL-000001", "V1", TODAY, "08:00")

        stored = await store.load()
        assert stored.version == 1
        assert stored.audit_logs == []
        assert [e.action for e in sink.sent] == [audit.CREATE_BOOKING]

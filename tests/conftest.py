"""Shared test fixtures."""

from datetime import UTC, date, datetime

import pytest

from venueledger.core.clock import Clock, IdGenerator
from venueledger.models import AppSettings, Client, Snapshot, Venue
from venueledger.services.context import LedgerContext

TODAY = date(2026, 3, 14)
NOW = datetime(2026, 3, 14, 9, 30, tzinfo=UTC)


class FixedClock(Clock):
    def __init__(self, now: datetime = NOW):
        self.current = now

    def now(self) -> datetime:
        return self.current


class SequentialIds(IdGenerator):
    """Predictable ids: TX-000000001, TX-000000002, ..."""

    def __init__(self):
        self.counter = 0

    def new_id(self, prefix: str) -> str:
        self.counter += 1
        return f"{prefix}-{self.counter:09d}"


def make_snapshot() -> Snapshot:
    return Snapshot(
        venues=[
            Venue(
                id="V1",
                name="Main Cricket Turf",
                opening_time="08:00",
                closing_time="23:00",
                slot_duration=90,
                base_price=2000,
            ),
            Venue(
                id="V2",
                name="Football Arena",
                opening_time="06:00",
                closing_time="22:00",
                slot_duration=60,
                base_price=1500,
            ),
        ],
        clients=[
            Client(id="CL-000001", name="Zayed Ahmed", phone="01700000001", created_at=NOW),
            Client(id="CL-000002", name="Rohan Kabir", phone="01800000002", created_at=NOW),
        ],
        settings=AppSettings(),
    )


@pytest.fixture
def snapshot() -> Snapshot:
    return make_snapshot()


@pytest.fixture
def ctx() -> LedgerContext:
    return LedgerContext(actor_id="admin-1", clock=FixedClock(), ids=SequentialIds())

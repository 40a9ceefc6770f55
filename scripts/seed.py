"""Seed the snapshot store with the two demo venues and clients.

Run with: python -m scripts.seed
Does nothing if the configured snapshot key already holds data.
"""

import asyncio
from datetime import UTC, datetime

from venueledger.core.config import settings
from venueledger.core.database import async_session_factory, engine
from venueledger.models import AppSettings, Client, Snapshot, Venue
from venueledger.services.store import SqlSnapshotStore, create_tables

VENUES = [
    {
        "id": "V1",
        "name": "Main Cricket Turf",
        "address": "Dhaka, Bangladesh",
        "notes": "Best for 6v6",
        "opening_time": "08:00",
        "closing_time": "23:00",
        "slot_duration": 90,
        "base_price": 2000,
    },
    {
        "id": "V2",
        "name": "Football Arena",
        "address": "Uttara, Sector 4",
        "notes": "Synthetic grass",
        "opening_time": "06:00",
        "closing_time": "22:00",
        "slot_duration": 60,
        "base_price": 1500,
    },
]

CLIENTS = [
    {
        "id": "CL-000001",
        "name": "Zayed Ahmed",
        "phone": "01700000001",
        "email": "zayed@example.com",
        "address": "Banani",
    },
    {
        "id": "CL-000002",
        "name": "Rohan Kabir",
        "phone": "01800000002",
        "email": "rohan@example.com",
        "address": "Gulshan",
    },
]


def build_seed_snapshot(now: datetime) -> Snapshot:
    return Snapshot(
        venues=[Venue(**v) for v in VENUES],
        clients=[Client(created_at=now, **c) for c in CLIENTS],
        settings=AppSettings(),
    )


async def seed():
    # Create tables (in dev; the snapshot table is the only one)
    await create_tables(engine)

    store = SqlSnapshotStore(async_session_factory, key=settings.snapshot_key)
    current = await store.load()
    if current.version > 0:
        print(f"Snapshot '{settings.snapshot_key}' already at v{current.version} - skipping.")
        return

    saved = await store.save(build_seed_snapshot(datetime.now(UTC)), expected_version=0)
    print(f"Seeded {len(saved.venues)} venues and {len(saved.clients)} clients into '{settings.snapshot_key}'.")


if __name__ == "__main__":
    asyncio.run(seed())

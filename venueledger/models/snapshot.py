"""Ledger snapshot.

Snapshot = the whole state of the system as one value: every collection plus a
version counter. Operations take a snapshot and return a new one; the store
persists it in a single write.
SnapshotRecord = the table row a database-backed store keeps per snapshot key.
"""

from typing import TypeVar

from pydantic import BaseModel, Field
from sqlalchemy import JSON, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from venueledger.models.audit import AuditLog
from venueledger.models.base import Base, TimestampMixin
from venueledger.models.booking import Booking
from venueledger.models.ledger import Payment, Transaction
from venueledger.models.venue import Client, Venue

RecordT = TypeVar("RecordT", Venue, Client, Booking, Payment, Transaction)


def replace_by_id(records: list[RecordT], updated: RecordT) -> list[RecordT]:
    """Return a new list with the record sharing updated.id swapped in place."""
    return [updated if r.id == updated.id else r for r in records]


class AppSettings(BaseModel):
    """Operator-editable defaults, stored inside the snapshot."""

    global_slot_duration: int = 90
    global_base_price: int = 2000
    weekend_multiplier: float = 1.2
    peak_pricing_hours: list[str] = Field(default_factory=lambda: ["18:00", "19:30", "21:00"])


class Snapshot(BaseModel):
    version: int = 0
    venues: list[Venue] = Field(default_factory=list)
    clients: list[Client] = Field(default_factory=list)
    bookings: list[Booking] = Field(default_factory=list)
    payments: list[Payment] = Field(default_factory=list)
    transactions: list[Transaction] = Field(default_factory=list)
    audit_logs: list[AuditLog] = Field(default_factory=list)
    settings: AppSettings = Field(default_factory=AppSettings)

    def get_venue(self, venue_id: str) -> Venue | None:
        return next((v for v in self.venues if v.id == venue_id), None)

    def get_client(self, client_id: str) -> Client | None:
        return next((c for c in self.clients if c.id == client_id), None)

    def get_booking(self, booking_id: str) -> Booking | None:
        return next((b for b in self.bookings if b.id == booking_id), None)

    def get_transaction(self, transaction_id: str) -> Transaction | None:
        return next((t for t in self.transactions if t.id == transaction_id), None)

    def payments_for(self, booking_id: str) -> list[Payment]:
        return [p for p in self.payments if p.booking_id == booking_id]

    def with_audit(self, entries: list[AuditLog]) -> "Snapshot":
        """Return a copy with the given audit entries appended."""
        if not entries:
            return self
        return self.model_copy(update={"audit_logs": [*self.audit_logs, *entries]})

    def __repr__(self) -> str:
        return (
            f"<Snapshot v{self.version} bookings={len(self.bookings)} "
            f"payments={len(self.payments)} transactions={len(self.transactions)}>"
        )


class SnapshotRecord(TimestampMixin, Base):
    __tablename__ = "snapshots"

    key: Mapped[str] = mapped_column(String(100), primary_key=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    payload: Mapped[dict] = mapped_column(JSON, nullable=False)

    def __repr__(self) -> str:
        return f"<SnapshotRecord {self.key} v{self.version}>"

"""All models imported here for metadata discovery and convenient imports."""

from venueledger.models.audit import AuditLog
from venueledger.models.base import Base
from venueledger.models.booking import Booking, BookingStatus, PaymentStatus, Slot
from venueledger.models.ledger import Payment, PaymentMethod, Transaction, TransactionType
from venueledger.models.snapshot import AppSettings, Snapshot, SnapshotRecord
from venueledger.models.venue import Client, Venue

__all__ = [
    "Base",
    "Venue",
    "Client",
    "Booking",
    "BookingStatus",
    "PaymentStatus",
    "Slot",
    "Payment",
    "PaymentMethod",
    "Transaction",
    "TransactionType",
    "AuditLog",
    "AppSettings",
    "Snapshot",
    "SnapshotRecord",
]

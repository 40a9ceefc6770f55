"""Booking model.

A booking reserves one slot of a venue for a client on a given date.
total_amount and payment_status are cached derived fields: every write path
recomputes them, nothing derives them lazily on read.
"""

import datetime as dt
import enum

from pydantic import BaseModel, Field

from venueledger.models.venue import HHMM_PATTERN


class BookingStatus(enum.StrEnum):
    ACTIVE = "ACTIVE"
    CANCELLED = "CANCELLED"


class PaymentStatus(enum.StrEnum):
    UNPAID = "UNPAID"
    PARTIAL = "PARTIAL"
    PAID = "PAID"


class Booking(BaseModel):
    id: str
    client_id: str
    venue_id: str

    # When
    date: dt.date
    start_time: str = Field(pattern=HHMM_PATTERN)
    end_time: str = Field(pattern=HHMM_PATTERN)
    duration: int

    # Money (smallest currency unit, negativity deliberately not validated)
    base_price: int
    discount: int = 0
    total_amount: int
    amount_paid: int = 0
    payment_status: PaymentStatus = PaymentStatus.UNPAID

    # Status
    status: BookingStatus = BookingStatus.ACTIVE
    cancellation_reason: str | None = None

    created_at: dt.datetime
    updated_at: dt.datetime

    @property
    def outstanding(self) -> int:
        return self.total_amount - self.amount_paid

    @property
    def is_active(self) -> bool:
        return self.status == BookingStatus.ACTIVE

    def __repr__(self) -> str:
        return f"<Booking {self.id} {self.date} {self.start_time}-{self.end_time} venue={self.venue_id}>"


class Slot(BaseModel):
    """A fixed-length window of a venue on one day. Never persisted."""

    start: str
    end: str
    venue_id: str
    date: dt.date
    booking: Booking | None = None

    @property
    def is_available(self) -> bool:
        return self.booking is None

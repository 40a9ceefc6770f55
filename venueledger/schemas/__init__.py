"""Pydantic schemas for API serialisation.

Entities are returned as their domain models; only request bodies and
composite responses live here.
"""

import datetime as dt

from pydantic import BaseModel, EmailStr, Field

from venueledger.models import Booking, Payment, PaymentMethod, Transaction, TransactionType
from venueledger.models.venue import HHMM_PATTERN

# --- Directory ---


class ClientCreate(BaseModel):
    name: str
    phone: str
    email: EmailStr | None = None
    address: str = ""


class ClientUpdate(BaseModel):
    name: str | None = None
    phone: str | None = None
    email: EmailStr | None = None
    address: str | None = None
    active: bool | None = None


class VenueCreate(BaseModel):
    name: str
    opening_time: str = Field(pattern=HHMM_PATTERN)
    closing_time: str = Field(pattern=HHMM_PATTERN)
    slot_duration: int | None = None
    base_price: int | None = None
    address: str = ""
    notes: str = ""


class VenueUpdate(BaseModel):
    name: str | None = None
    opening_time: str | None = Field(default=None, pattern=HHMM_PATTERN)
    closing_time: str | None = Field(default=None, pattern=HHMM_PATTERN)
    slot_duration: int | None = None
    base_price: int | None = None
    address: str | None = None
    notes: str | None = None


class SettingsUpdate(BaseModel):
    global_slot_duration: int | None = None
    global_base_price: int | None = None
    weekend_multiplier: float | None = None
    peak_pricing_hours: list[str] | None = None


# --- Availability ---


class SlotOut(BaseModel):
    start_time: str  # "HH:MM"
    end_time: str  # "HH:MM"
    is_available: bool
    booking_id: str | None = None


class AvailabilityOut(BaseModel):
    venue_id: str
    venue_name: str
    date: dt.date
    slots: list[SlotOut]


# --- Booking ---


class BookingCreate(BaseModel):
    client_id: str
    venue_id: str
    date: dt.date
    start_time: str = Field(pattern=HHMM_PATTERN)
    discount: int = 0


class BookingUpdate(BaseModel):
    client_id: str | None = None
    venue_id: str | None = None
    date: dt.date | None = None
    start_time: str | None = Field(default=None, pattern=HHMM_PATTERN)
    end_time: str | None = Field(default=None, pattern=HHMM_PATTERN)
    duration: int | None = None
    base_price: int | None = None
    discount: int | None = None


class BookingCancel(BaseModel):
    reason: str = ""


class BookingDetailOut(BaseModel):
    booking: Booking
    payments: list[Payment]


# --- Payments & ledger ---


class PaymentCreate(BaseModel):
    # Zero or negative amounts pass through; a zero capture can settle via extra_discount.
    amount: int
    method: PaymentMethod = PaymentMethod.CASH
    reference: str = ""
    date: dt.date | None = None
    extra_discount: int = 0


class PaymentCaptureOut(BaseModel):
    booking: Booking
    payment: Payment
    transaction: Transaction


class TransactionCreate(BaseModel):
    category: str
    amount: int
    venue_id: str
    type: TransactionType = TransactionType.EXPENSE
    payment_method: PaymentMethod = PaymentMethod.CASH
    date: dt.date | None = None
    notes: str = ""


class TransactionUpdate(BaseModel):
    date: dt.date | None = None
    type: TransactionType | None = None
    category: str | None = None
    amount: int | None = None
    payment_method: PaymentMethod | None = None
    venue_id: str | None = None
    notes: str | None = None


class BookingDeleteOut(BaseModel):
    booking_id: str
    reversal: Transaction | None

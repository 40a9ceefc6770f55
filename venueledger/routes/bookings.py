"""Availability, booking lifecycle and payment capture routes."""

import datetime as dt
import enum

from fastapi import APIRouter, Depends, Query, status

from venueledger.core.dependencies import get_ledger
from venueledger.core.errors import NotFoundError
from venueledger.models import Booking, BookingStatus
from venueledger.schemas import (
    AvailabilityOut,
    BookingCancel,
    BookingCreate,
    BookingDeleteOut,
    BookingDetailOut,
    BookingUpdate,
    PaymentCaptureOut,
    PaymentCreate,
    SlotOut,
)
from venueledger.services import audit, bookings, payments
from venueledger.services.availability import generate_slots
from venueledger.services.session import LedgerSession

router = APIRouter(tags=["bookings"])


class DeleteSource(enum.StrEnum):
    LIST = "list"
    CALENDAR = "calendar"


_DELETE_ACTIONS = {
    DeleteSource.LIST: audit.DELETE_BOOKING_STRICT,
    DeleteSource.CALENDAR: audit.DELETE_BOOKING_CALENDAR,
}


@router.get("/venues/{venue_id}/slots", response_model=AvailabilityOut)
async def get_slots(venue_id: str, date: dt.date = Query(...), ledger: LedgerSession = Depends(get_ledger)):
    """Every slot of the venue's day, with the booking holding it if any."""
    async with ledger:
        venue = ledger.snapshot.get_venue(venue_id)
        if venue is None:
            raise NotFoundError("Venue", venue_id)
        slots = generate_slots(venue, date, ledger.snapshot.bookings)

    return AvailabilityOut(
        venue_id=venue.id,
        venue_name=venue.name,
        date=date,
        slots=[
            SlotOut(
                start_time=s.start,
                end_time=s.end,
                is_available=s.is_available,
                booking_id=s.booking.id if s.booking else None,
            )
            for s in slots
        ],
    )


@router.get("/bookings", response_model=list[Booking])
async def list_bookings(
    date: dt.date | None = None,
    venue_id: str | None = None,
    client_id: str | None = None,
    status: BookingStatus | None = None,
    ledger: LedgerSession = Depends(get_ledger),
):
    async with ledger:
        result = ledger.snapshot.bookings

    if date is not None:
        result = [b for b in result if b.date == date]
    if venue_id is not None:
        result = [b for b in result if b.venue_id == venue_id]
    if client_id is not None:
        result = [b for b in result if b.client_id == client_id]
    if status is not None:
        result = [b for b in result if b.status == status]
    return sorted(result, key=lambda b: (b.date, b.start_time))


@router.get("/bookings/{booking_id}", response_model=BookingDetailOut)
async def get_booking(booking_id: str, ledger: LedgerSession = Depends(get_ledger)):
    async with ledger:
        booking = ledger.snapshot.get_booking(booking_id)
        if booking is None:
            raise NotFoundError("Booking", booking_id)
        return BookingDetailOut(booking=booking, payments=ledger.snapshot.payments_for(booking_id))


@router.post("/bookings", response_model=Booking, status_code=status.HTTP_201_CREATED)
async def create_booking(body: BookingCreate, ledger: LedgerSession = Depends(get_ledger)):
    async with ledger:
        return ledger.apply(
            bookings.create_booking,
            client_id=body.client_id,
            venue_id=body.venue_id,
            booking_date=body.date,
            start_time=body.start_time,
            discount=body.discount,
        )


@router.patch("/bookings/{booking_id}", response_model=Booking)
async def edit_booking(booking_id: str, body: BookingUpdate, ledger: LedgerSession = Depends(get_ledger)):
    async with ledger:
        return ledger.apply(bookings.edit_booking, booking_id, body.model_dump(exclude_unset=True))


@router.post("/bookings/{booking_id}/cancel", response_model=Booking)
async def cancel_booking(booking_id: str, body: BookingCancel, ledger: LedgerSession = Depends(get_ledger)):
    async with ledger:
        return ledger.apply(bookings.cancel_booking, booking_id, body.reason)


@router.delete("/bookings/{booking_id}", response_model=BookingDeleteOut)
async def delete_booking(
    booking_id: str,
    source: DeleteSource = DeleteSource.LIST,
    ledger: LedgerSession = Depends(get_ledger),
):
    """Hard delete a booking; collected money is reversed by a new EXPENSE row."""
    async with ledger:
        booking, reversal = ledger.apply(bookings.delete_booking, booking_id, action=_DELETE_ACTIONS[source])
    return BookingDeleteOut(booking_id=booking.id, reversal=reversal)


@router.post(
    "/bookings/{booking_id}/payments",
    response_model=PaymentCaptureOut,
    status_code=status.HTTP_201_CREATED,
)
async def capture_payment(booking_id: str, body: PaymentCreate, ledger: LedgerSession = Depends(get_ledger)):
    async with ledger:
        booking, payment, txn = ledger.apply(
            payments.capture_payment,
            booking_id,
            amount=body.amount,
            method=body.method,
            reference=body.reference,
            payment_date=body.date,
            extra_discount=body.extra_discount,
        )
    return PaymentCaptureOut(booking=booking, payment=payment, transaction=txn)

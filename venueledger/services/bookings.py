"""Booking lifecycle: create, edit, cancel, delete.

Each operation takes the current snapshot and returns a new one together with
the affected booking. Slot conflicts raise ConflictError; by default only an
ACTIVE booking with the exact same (venue, date, start time) counts as a
conflict, so an edit that partially overlaps another booking is accepted.
"""

import re
from datetime import date
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from venueledger.core.errors import ConflictError, NotFoundError, ValidationError
from venueledger.models.booking import Booking, BookingStatus, PaymentStatus
from venueledger.models.ledger import Transaction
from venueledger.models.snapshot import Snapshot, replace_by_id
from venueledger.models.venue import HHMM_PATTERN
from venueledger.services import audit
from venueledger.services.availability import generate_slots, to_hhmm, to_minutes
from venueledger.services.context import ConflictMode, LedgerContext
from venueledger.services.payment_status import booking_edit_status
from venueledger.services.payments import build_deletion_reversal

EDITABLE_FIELDS = frozenset(
    {"client_id", "venue_id", "date", "start_time", "end_time", "duration", "base_price", "discount"}
)
MINUTES_PER_DAY = 24 * 60


def find_conflict(
    snapshot: Snapshot,
    venue_id: str,
    booking_date: date,
    start_time: str,
    end_time: str,
    mode: ConflictMode = ConflictMode.EXACT_START,
    exclude_id: str | None = None,
) -> Booking | None:
    """Return the first ACTIVE booking that collides with the given window."""
    for b in snapshot.bookings:
        if b.id == exclude_id or b.status != BookingStatus.ACTIVE:
            continue
        if b.venue_id != venue_id or b.date != booking_date:
            continue
        if mode == ConflictMode.OVERLAP:
            # Half-open intervals: [start, end)
            if to_minutes(b.start_time) < to_minutes(end_time) and to_minutes(b.end_time) > to_minutes(start_time):
                return b
        elif b.start_time == start_time:
            return b
    return None


def _conflict_message(conflict: Booking) -> str:
    return (
        f"Slot already booked: {conflict.id} holds {conflict.start_time}-{conflict.end_time} "
        f"on {conflict.date.isoformat()}"
    )


def _get_booking(snapshot: Snapshot, booking_id: str) -> Booking:
    booking = snapshot.get_booking(booking_id)
    if booking is None:
        raise NotFoundError("Booking", booking_id)
    return booking


def create_booking(
    snapshot: Snapshot,
    ctx: LedgerContext,
    client_id: str,
    venue_id: str,
    booking_date: date,
    start_time: str,
    discount: int = 0,
) -> tuple[Snapshot, Booking]:
    """Book the venue slot starting at start_time.

    Price and duration come from the venue; the booking starts UNPAID and ACTIVE.
    """
    if not client_id:
        raise ValidationError("A client is required to create a booking")
    if snapshot.get_client(client_id) is None:
        raise NotFoundError("Client", client_id)
    venue = snapshot.get_venue(venue_id)
    if venue is None:
        raise NotFoundError("Venue", venue_id)

    slot = next((s for s in generate_slots(venue, booking_date, snapshot.bookings) if s.start == start_time), None)
    if slot is None:
        raise ValidationError(f"{start_time} is not a slot start for venue {venue.name}")

    conflict = slot.booking or find_conflict(
        snapshot, venue.id, booking_date, slot.start, slot.end, mode=ctx.conflict_mode
    )
    if conflict is not None:
        raise ConflictError(_conflict_message(conflict))

    now = ctx.clock.now()
    booking = Booking(
        id=ctx.ids.new_id(f"BK-{booking_date.strftime('%Y%m%d')}"),
        client_id=client_id,
        venue_id=venue.id,
        date=booking_date,
        start_time=slot.start,
        end_time=slot.end,
        duration=venue.slot_duration,
        base_price=venue.base_price,
        discount=discount,
        total_amount=venue.base_price - discount,
        amount_paid=0,
        payment_status=PaymentStatus.UNPAID,
        status=BookingStatus.ACTIVE,
        created_at=now,
        updated_at=now,
    )

    ctx.record(audit.CREATE_BOOKING, f"Created booking {booking.id} for venue {venue.name}")
    return snapshot.model_copy(update={"bookings": [*snapshot.bookings, booking]}), booking


def edit_booking(
    snapshot: Snapshot, ctx: LedgerContext, booking_id: str, changes: dict[str, Any]
) -> tuple[Snapshot, Booking]:
    """Apply field changes to a booking and refresh its cached totals.

    amount_paid is never touched here; payment_status is re-derived with the
    booking-edit rule against the new total.
    """
    booking = _get_booking(snapshot, booking_id)

    unknown = set(changes) - EDITABLE_FIELDS
    if unknown:
        raise ValidationError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")

    merged = {**booking.model_dump(), **changes}
    for required in ("venue_id", "date", "start_time"):
        if not merged.get(required):
            raise ValidationError(f"{required} is required")

    if snapshot.get_venue(merged["venue_id"]) is None:
        raise NotFoundError("Venue", merged["venue_id"])
    if snapshot.get_client(merged["client_id"]) is None:
        raise NotFoundError("Client", merged["client_id"])

    start_ok = re.fullmatch(HHMM_PATTERN, str(merged["start_time"])) and isinstance(merged["duration"], int)
    if start_ok and "start_time" in changes and "end_time" not in changes:
        end = to_minutes(merged["start_time"]) + merged["duration"]
        # A move that would run past midnight keeps the stored end time.
        if end < MINUTES_PER_DAY:
            merged["end_time"] = to_hhmm(end)

    base = merged["base_price"] or 0
    disc = merged["discount"] or 0
    total = base - disc
    merged.update(
        base_price=base,
        discount=disc,
        total_amount=total,
        payment_status=booking_edit_status(booking.amount_paid, total),
        updated_at=ctx.clock.now(),
    )
    try:
        updated = Booking.model_validate(merged)
    except PydanticValidationError as exc:
        raise ValidationError(f"Invalid booking fields: {exc.errors()[0]['msg']}") from exc

    conflict = find_conflict(
        snapshot,
        updated.venue_id,
        updated.date,
        updated.start_time,
        updated.end_time,
        mode=ctx.conflict_mode,
        exclude_id=booking.id,
    )
    if conflict is not None:
        raise ConflictError(_conflict_message(conflict))

    ctx.record(
        audit.EDIT_BOOKING,
        f"Edited booking {booking.id}: {updated.date.isoformat()} {updated.start_time}-{updated.end_time}, "
        f"total {updated.total_amount}, status {updated.payment_status.value}",
    )
    return snapshot.model_copy(update={"bookings": replace_by_id(snapshot.bookings, updated)}), updated


def cancel_booking(
    snapshot: Snapshot, ctx: LedgerContext, booking_id: str, reason: str = ""
) -> tuple[Snapshot, Booking]:
    """ACTIVE -> CANCELLED. Terminal; frees the slot, leaves money untouched."""
    booking = _get_booking(snapshot, booking_id)
    if booking.status != BookingStatus.ACTIVE:
        raise ValidationError(f"Booking {booking.id} is already {booking.status.value} and cannot be cancelled")

    updated = booking.model_copy(
        update={
            "status": BookingStatus.CANCELLED,
            "cancellation_reason": reason or None,
            "updated_at": ctx.clock.now(),
        }
    )
    ctx.record(audit.CANCEL_BOOKING, f"Cancelled booking {booking.id}. Reason: {reason or 'none given'}")
    return snapshot.model_copy(update={"bookings": replace_by_id(snapshot.bookings, updated)}), updated


def delete_booking(
    snapshot: Snapshot,
    ctx: LedgerContext,
    booking_id: str,
    action: str = audit.DELETE_BOOKING_STRICT,
) -> tuple[Snapshot, Booking, Transaction | None]:
    """Permanently remove a booking.

    Collected money is compensated by one new EXPENSE reversal row; the
    booking's payments are hard deleted. Transactions already linked to the
    booking stay as they are and keep pointing at the removed id.
    `action` is the audit label of the calling view. Returns the removed
    booking and the reversal row, if one was needed.
    """
    if action not in audit.DELETE_BOOKING_ACTIONS:
        raise ValidationError(f"Unknown deletion label {action}")
    booking = _get_booking(snapshot, booking_id)

    reversal = build_deletion_reversal(ctx, booking)
    transactions = list(snapshot.transactions)
    if reversal is not None:
        transactions.append(reversal)

    new_snapshot = snapshot.model_copy(
        update={
            "bookings": [b for b in snapshot.bookings if b.id != booking.id],
            "payments": [p for p in snapshot.payments if p.booking_id != booking.id],
            "transactions": transactions,
        }
    )

    if reversal is not None:
        details = f"Permanently removed booking {booking.id}. Reversed {reversal.amount} via {reversal.id}."
    else:
        details = f"Permanently removed booking {booking.id}. No payments found."
    ctx.record(action, details)
    return new_snapshot, booking, reversal

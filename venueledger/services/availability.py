"""Slot generation for venue availability.

Pure calculation module: no storage, no async, no FastAPI dependencies.
Times are "HH:MM" strings handled as integer minutes since midnight; there is
no timezone handling.
"""

from datetime import date

from venueledger.models.booking import Booking, BookingStatus, Slot
from venueledger.models.venue import Venue


def to_minutes(hhmm: str) -> int:
    """Convert "HH:MM" to minutes since midnight."""
    h, m = map(int, hhmm.split(":"))
    return h * 60 + m


def to_hhmm(minutes: int) -> str:
    """Convert minutes since midnight to "HH:MM". 1440 renders as "24:00"."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def daily_capacity(venue: Venue) -> int:
    """Number of whole slots between opening and closing time (0 if misconfigured)."""
    if venue.slot_duration <= 0:
        return 0
    span = to_minutes(venue.closing_time) - to_minutes(venue.opening_time)
    return max(0, span // venue.slot_duration)


def find_slot_booking(bookings: list[Booking], venue_id: str, query_date: date, start: str) -> Booking | None:
    """First ACTIVE booking holding the slot that starts at `start`."""
    return next(
        (
            b
            for b in bookings
            if b.venue_id == venue_id
            and b.date == query_date
            and b.start_time == start
            and b.status == BookingStatus.ACTIVE
        ),
        None,
    )


def generate_slots(venue: Venue, query_date: date, bookings: list[Booking]) -> list[Slot]:
    """Generate every slot of the venue's day, in order.

    Slots step from opening time by slot_duration while the whole slot still
    fits before closing time. Each slot carries the ACTIVE booking that starts
    exactly at the slot start, if any. Closing at or before opening yields no
    slots, as does a non-positive slot duration.
    """
    slots: list[Slot] = []
    if venue.slot_duration <= 0:
        return slots

    current = to_minutes(venue.opening_time)
    end_of_day = to_minutes(venue.closing_time)

    while current + venue.slot_duration <= end_of_day:
        start = to_hhmm(current)
        slots.append(
            Slot(
                start=start,
                end=to_hhmm(current + venue.slot_duration),
                venue_id=venue.id,
                date=query_date,
                booking=find_slot_booking(bookings, venue.id, query_date, start),
            )
        )
        current += venue.slot_duration

    return slots

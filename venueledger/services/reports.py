"""Read-only aggregate queries over a snapshot.

Date ranges are inclusive on both ends. Only ACTIVE bookings count towards
booking figures; transaction figures use every row in range.
"""

from collections import defaultdict
from datetime import date

from pydantic import BaseModel

from venueledger.core.errors import NotFoundError, ValidationError
from venueledger.models.booking import Booking, BookingStatus
from venueledger.models.ledger import TransactionType
from venueledger.models.snapshot import Snapshot
from venueledger.services.availability import daily_capacity

UPCOMING_LIMIT = 5


class ClientStats(BaseModel):
    client_id: str
    booking_count: int
    total_paid: int
    total_due: int


class VenueUtilization(BaseModel):
    venue_id: str
    start: date
    end: date
    days: int
    booked_slots: int
    capacity: int
    utilization_pct: float
    revenue: int
    outstanding: int


class VenueRevenue(BaseModel):
    venue_id: str
    name: str
    booking_count: int
    revenue: int


class FinancialSummary(BaseModel):
    start: date
    end: date
    income: int
    expenses: int
    profit: int
    income_by_method: dict[str, int]
    booking_count: int
    avg_booking_income: float
    utilization_pct: float
    venues: list[VenueRevenue]


class Dashboard(BaseModel):
    today: date
    today_booking_count: int
    today_revenue: int
    unpaid_total: int
    payment_split: dict[str, int]
    upcoming: list[Booking]


def _day_count(start: date, end: date) -> int:
    if end < start:
        raise ValidationError("Range end must not be before its start")
    return (end - start).days + 1


def _active_in_range(snapshot: Snapshot, start: date, end: date) -> list[Booking]:
    return [b for b in snapshot.bookings if b.is_active and start <= b.date <= end]


def _pct(part: int, whole: int) -> float:
    return round(part / whole * 100, 2) if whole > 0 else 0.0


def get_client_stats(snapshot: Snapshot, client_id: str) -> ClientStats:
    if snapshot.get_client(client_id) is None:
        raise NotFoundError("Client", client_id)

    bookings = [b for b in snapshot.bookings if b.client_id == client_id and b.is_active]
    return ClientStats(
        client_id=client_id,
        booking_count=len(bookings),
        total_paid=sum(b.amount_paid for b in bookings),
        total_due=sum(b.outstanding for b in bookings),
    )


def get_venue_utilization(snapshot: Snapshot, venue_id: str, start: date, end: date) -> VenueUtilization:
    """Share of the venue's slots booked over the range.

    Capacity counts whole slots per day times the number of days.
    """
    venue = snapshot.get_venue(venue_id)
    if venue is None:
        raise NotFoundError("Venue", venue_id)

    days = _day_count(start, end)
    bookings = [b for b in _active_in_range(snapshot, start, end) if b.venue_id == venue_id]
    capacity = daily_capacity(venue) * days

    return VenueUtilization(
        venue_id=venue_id,
        start=start,
        end=end,
        days=days,
        booked_slots=len(bookings),
        capacity=capacity,
        utilization_pct=_pct(len(bookings), capacity),
        revenue=sum(b.amount_paid for b in bookings),
        outstanding=sum(b.outstanding for b in bookings),
    )


def get_financial_summary(snapshot: Snapshot, start: date, end: date) -> FinancialSummary:
    days = _day_count(start, end)
    txns = [t for t in snapshot.transactions if start <= t.date <= end]
    bookings = _active_in_range(snapshot, start, end)

    income = 0
    expenses = 0
    by_method: dict[str, int] = defaultdict(int)
    for t in txns:
        if t.type == TransactionType.INCOME:
            income += t.amount
            by_method[t.payment_method.value] += t.amount
        else:
            expenses += t.amount

    venues = []
    for v in snapshot.venues:
        held = [b for b in bookings if b.venue_id == v.id]
        venues.append(
            VenueRevenue(venue_id=v.id, name=v.name, booking_count=len(held), revenue=sum(b.amount_paid for b in held))
        )

    capacity = sum(daily_capacity(v) for v in snapshot.venues) * days
    return FinancialSummary(
        start=start,
        end=end,
        income=income,
        expenses=expenses,
        profit=income - expenses,
        income_by_method=dict(by_method),
        booking_count=len(bookings),
        avg_booking_income=round(income / len(bookings), 2) if bookings else 0.0,
        utilization_pct=_pct(len(bookings), capacity),
        venues=venues,
    )


def get_dashboard(snapshot: Snapshot, today: date) -> Dashboard:
    today_bookings = [b for b in snapshot.bookings if b.is_active and b.date == today]

    split: dict[str, int] = defaultdict(int)
    for p in snapshot.payments:
        if not p.is_reversed:
            split[p.method.value] += p.amount

    upcoming = sorted(
        (b for b in snapshot.bookings if b.is_active and b.date >= today),
        key=lambda b: (b.date, b.start_time),
    )[:UPCOMING_LIMIT]

    return Dashboard(
        today=today,
        today_booking_count=len(today_bookings),
        today_revenue=sum(b.amount_paid for b in today_bookings),
        unpaid_total=sum(b.outstanding for b in snapshot.bookings if b.status == BookingStatus.ACTIVE),
        payment_split=dict(split),
        upcoming=upcoming,
    )

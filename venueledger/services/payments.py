"""Payment capture and booking-deletion reversal.

A captured payment touches three collections at once: the booking's cached
totals, a new Payment row and a new linked INCOME transaction. All three are
computed into one new snapshot; nothing is persisted in between.
"""

from datetime import date

from venueledger.core.errors import NotFoundError
from venueledger.models.booking import Booking
from venueledger.models.ledger import (
    CATEGORY_BOOKING_PAYMENT,
    CATEGORY_DELETION_REVERSAL,
    Payment,
    PaymentMethod,
    Transaction,
    TransactionType,
)
from venueledger.models.snapshot import Snapshot, replace_by_id
from venueledger.services import audit
from venueledger.services.context import LedgerContext
from venueledger.services.payment_status import payment_capture_status


def _payment_notes(booking_id: str, reference: str, extra_discount: int) -> str:
    notes = f"Payment for {booking_id}"
    if reference:
        notes += f" - {reference}"
    if extra_discount > 0:
        notes += f" (includes additional discount: {extra_discount})"
    return notes


def capture_payment(
    snapshot: Snapshot,
    ctx: LedgerContext,
    booking_id: str,
    amount: int,
    method: PaymentMethod = PaymentMethod.CASH,
    reference: str = "",
    payment_date: date | None = None,
    extra_discount: int = 0,
) -> tuple[Snapshot, Booking, Payment, Transaction]:
    """Record a payment against a booking.

    The extra discount is folded into the booking before the new total is
    computed. The amount is not checked against the remaining balance:
    overpaying simply drives the status to PAID.
    """
    booking = snapshot.get_booking(booking_id)
    if booking is None:
        raise NotFoundError("Booking", booking_id)

    payment_date = payment_date or ctx.clock.today()

    new_discount = booking.discount + extra_discount
    new_total = booking.base_price - new_discount
    new_paid = booking.amount_paid + amount

    updated = booking.model_copy(
        update={
            "discount": new_discount,
            "total_amount": new_total,
            "amount_paid": new_paid,
            "payment_status": payment_capture_status(new_paid, new_total),
            "updated_at": ctx.clock.now(),
        }
    )

    payment = Payment(
        id=ctx.ids.new_id("PAY"),
        booking_id=booking.id,
        date=payment_date,
        amount=amount,
        method=method,
        reference=reference,
        created_by=ctx.actor_id,
        is_reversed=False,
    )

    txn = Transaction(
        id=ctx.ids.new_id("TX"),
        date=payment_date,
        type=TransactionType.INCOME,
        category=CATEGORY_BOOKING_PAYMENT,
        amount=amount,
        payment_method=method,
        venue_id=booking.venue_id,
        notes=_payment_notes(booking.id, reference, extra_discount),
        booking_id=booking.id,
        payment_id=payment.id,
    )

    new_snapshot = snapshot.model_copy(
        update={
            "bookings": replace_by_id(snapshot.bookings, updated),
            "payments": [*snapshot.payments, payment],
            "transactions": [*snapshot.transactions, txn],
        }
    )

    ctx.record(
        audit.CAPTURE_PAYMENT,
        f"Captured {amount} ({method.value}) for booking {booking.id}; "
        f"paid {new_paid} of {new_total}, status {updated.payment_status.value}",
    )
    return new_snapshot, updated, payment, txn


def build_deletion_reversal(ctx: LedgerContext, booking: Booking) -> Transaction | None:
    """Compensating EXPENSE row for a deleted booking's collected money.

    Returns None when nothing was collected; a zero reversal is not an error.
    """
    if booking.amount_paid <= 0:
        return None

    return Transaction(
        id=ctx.ids.new_id("TX"),
        date=ctx.clock.today(),
        type=TransactionType.EXPENSE,
        category=CATEGORY_DELETION_REVERSAL,
        amount=booking.amount_paid,
        payment_method=PaymentMethod.CASH,
        venue_id=booking.venue_id,
        notes=f"System-generated reversal for deleted booking {booking.id}.",
        booking_id=booking.id,
    )

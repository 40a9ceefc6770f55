"""Ledger reconciliation for transaction-side mutations.

Booking.amount_paid is a cache over the booking's payments. Editing or
deleting a linked transaction (one with a booking_id) must move that cache and
the matching Payment row along with it:

- edit: amount_paid shifts by the amount difference (floored at 0) and the
  matching payment takes the new amount;
- delete: amount_paid drops by the transaction amount (floored at 0) and the
  matching payment is flagged is_reversed, never removed, while the
  transaction row itself is hard deleted.

If the linked booking no longer exists the transaction is changed on its own.
"""

import logging
from datetime import date
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from venueledger.core.errors import InvariantViolation, NotFoundError, ValidationError
from venueledger.models.ledger import Payment, PaymentMethod, Transaction, TransactionType
from venueledger.models.snapshot import Snapshot, replace_by_id
from venueledger.services import audit
from venueledger.services.context import LedgerContext
from venueledger.services.payment_status import ledger_adjust_status

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset({"date", "type", "category", "amount", "payment_method", "venue_id", "notes"})


def _validate_entry(category: str, amount: int, venue_id: str) -> None:
    if not category or amount <= 0 or not venue_id:
        raise ValidationError("Category, a positive amount and a venue are required")


def _get_transaction(snapshot: Snapshot, transaction_id: str) -> Transaction:
    txn = snapshot.get_transaction(transaction_id)
    if txn is None:
        raise NotFoundError("Transaction", transaction_id)
    return txn


def find_matching_payment(snapshot: Snapshot, txn: Transaction, strict: bool = False) -> Payment | None:
    """Find the payment a linked transaction stands for.

    Rows emitted by a payment capture carry payment_id and resolve directly.
    Older rows fall back to matching on booking id and amount among
    non-reversed payments, taking the first candidate. More than one candidate
    is logged, or raised as InvariantViolation when strict.
    """
    if txn.booking_id is None:
        return None

    if txn.payment_id is not None:
        linked = next((p for p in snapshot.payments if p.id == txn.payment_id), None)
        if linked is not None and not linked.is_reversed:
            return linked

    candidates = [
        p for p in snapshot.payments if p.booking_id == txn.booking_id and p.amount == txn.amount and not p.is_reversed
    ]
    if len(candidates) > 1:
        ids = ", ".join(p.id for p in candidates)
        if strict:
            raise InvariantViolation(f"Transaction {txn.id} matches several payments: {ids}")
        logger.warning("Transaction %s matches several payments (%s); using %s", txn.id, ids, candidates[0].id)
    return candidates[0] if candidates else None


def create_transaction(
    snapshot: Snapshot,
    ctx: LedgerContext,
    category: str,
    amount: int,
    venue_id: str,
    type: TransactionType = TransactionType.EXPENSE,
    payment_method: PaymentMethod = PaymentMethod.CASH,
    txn_date: date | None = None,
    notes: str = "",
) -> tuple[Snapshot, Transaction]:
    """Record a free-standing (manual) ledger entry. Carries no booking link."""
    _validate_entry(category, amount, venue_id)

    txn = Transaction(
        id=ctx.ids.new_id("TX"),
        date=txn_date or ctx.clock.today(),
        type=type,
        category=category,
        amount=amount,
        payment_method=payment_method,
        venue_id=venue_id,
        notes=notes,
    )
    ctx.record(audit.MANUAL_TRANSACTION, f"Created {txn.type.value} entry: {txn.category} of {txn.amount}")
    return snapshot.model_copy(update={"transactions": [*snapshot.transactions, txn]}), txn


def edit_transaction(
    snapshot: Snapshot, ctx: LedgerContext, transaction_id: str, changes: dict[str, Any]
) -> tuple[Snapshot, Transaction]:
    """Replace a transaction's fields in place, reconciling its booking when the amount moves."""
    old = _get_transaction(snapshot, transaction_id)

    unknown = set(changes) - EDITABLE_FIELDS
    if unknown:
        raise ValidationError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")

    # id and booking/payment links are preserved
    try:
        updated = Transaction.model_validate({**old.model_dump(), **changes})
    except PydanticValidationError as exc:
        raise ValidationError(f"Invalid transaction fields: {exc.errors()[0]['msg']}") from exc
    _validate_entry(updated.category, updated.amount, updated.venue_id)

    bookings = snapshot.bookings
    payments = snapshot.payments

    booking = snapshot.get_booking(old.booking_id) if old.booking_id else None
    if booking is not None and updated.amount != old.amount:
        diff = updated.amount - old.amount
        new_paid = max(0, booking.amount_paid + diff)
        bookings = replace_by_id(
            bookings,
            booking.model_copy(
                update={
                    "amount_paid": new_paid,
                    "payment_status": ledger_adjust_status(new_paid, booking.total_amount),
                    "updated_at": ctx.clock.now(),
                }
            ),
        )

        payment = find_matching_payment(snapshot, old, strict=ctx.strict_payment_matching)
        if payment is not None:
            payments = replace_by_id(payments, payment.model_copy(update={"amount": updated.amount}))
        else:
            logger.info("No payment matches transaction %s; only the booking was adjusted", old.id)

    new_snapshot = snapshot.model_copy(
        update={
            "bookings": bookings,
            "payments": payments,
            "transactions": replace_by_id(snapshot.transactions, updated),
        }
    )
    ctx.record(audit.EDIT_TRANSACTION, f"Updated transaction {old.id}: {updated.category}")
    return new_snapshot, updated


def delete_transaction(snapshot: Snapshot, ctx: LedgerContext, transaction_id: str, reason: str) -> Snapshot:
    """Hard delete a transaction, reversing its effect on a linked booking.

    A non-empty reason is mandatory and ends up in the audit log.
    """
    if not reason or not reason.strip():
        raise ValidationError("A reason is required to delete a transaction")

    txn = _get_transaction(snapshot, transaction_id)

    bookings = snapshot.bookings
    payments = snapshot.payments

    booking = snapshot.get_booking(txn.booking_id) if txn.booking_id else None
    if booking is not None:
        new_paid = max(0, booking.amount_paid - txn.amount)
        bookings = replace_by_id(
            bookings,
            booking.model_copy(
                update={
                    "amount_paid": new_paid,
                    "payment_status": ledger_adjust_status(new_paid, booking.total_amount),
                    "updated_at": ctx.clock.now(),
                }
            ),
        )

        payment = find_matching_payment(snapshot, txn, strict=ctx.strict_payment_matching)
        if payment is not None:
            payments = replace_by_id(payments, payment.model_copy(update={"is_reversed": True}))

    new_snapshot = snapshot.model_copy(
        update={
            "bookings": bookings,
            "payments": payments,
            "transactions": [t for t in snapshot.transactions if t.id != txn.id],
        }
    )
    ctx.record(audit.DELETE_TRANSACTION, f"Deleted transaction {txn.id}. Reason: {reason.strip()}")
    return new_snapshot

"""Payment status derivation rules.

Three write paths derive the cached Booking.payment_status from
(amount_paid, total_amount), and each treats total_amount <= 0 differently:

    rule                       paid=0,total=0   paid=5,total=0
    booking_edit_status (A)    UNPAID           UNPAID
    payment_capture_status (B) PAID             PAID
    ledger_adjust_status (C)   PAID             PAID

B and C agree on every input but are reached from different write paths and
check their branches in a different order. Keep all three separate; folding A
into the others changes what operators see on zero-priced bookings.
"""

from venueledger.models.booking import PaymentStatus


def booking_edit_status(amount_paid: int, total_amount: int) -> PaymentStatus:
    """Rule A, used when a booking is edited.

    PAID requires a positive total, so a free booking stays UNPAID.
    """
    if 0 < amount_paid < total_amount:
        return PaymentStatus.PARTIAL
    if amount_paid >= total_amount and total_amount > 0:
        return PaymentStatus.PAID
    return PaymentStatus.UNPAID


def payment_capture_status(amount_paid: int, total_amount: int) -> PaymentStatus:
    """Rule B, used when a payment is captured. Settling the total wins over everything."""
    if amount_paid >= total_amount:
        return PaymentStatus.PAID
    if amount_paid <= 0:
        return PaymentStatus.UNPAID
    return PaymentStatus.PARTIAL


def ledger_adjust_status(amount_paid: int, total_amount: int) -> PaymentStatus:
    """Rule C, used when a linked transaction is edited or deleted."""
    if 0 < amount_paid < total_amount:
        return PaymentStatus.PARTIAL
    if amount_paid >= total_amount:
        return PaymentStatus.PAID
    return PaymentStatus.UNPAID

"""Payment and transaction models.

Payment = one capture event against a booking. Only flagged on reversal; hard
deleted only together with its booking.
Transaction = a general ledger row. Rows with a booking_id are "linked" and
must stay consistent with that booking's amount_paid.
"""

import datetime as dt
import enum

from pydantic import BaseModel


class PaymentMethod(enum.StrEnum):
    CASH = "CASH"
    BKASH = "BKASH"
    BANK = "BANK"


class TransactionType(enum.StrEnum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


# Categories written by the engine itself
CATEGORY_BOOKING_PAYMENT = "Booking Payment"
CATEGORY_DELETION_REVERSAL = "Booking Deletion Reversal"


class Payment(BaseModel):
    id: str
    booking_id: str
    date: dt.date
    amount: int
    method: PaymentMethod
    reference: str = ""
    created_by: str
    is_reversed: bool = False

    def __repr__(self) -> str:
        return f"<Payment {self.id} {self.amount} booking={self.booking_id}>"


class Transaction(BaseModel):
    id: str
    date: dt.date
    type: TransactionType
    category: str
    amount: int
    payment_method: PaymentMethod
    venue_id: str
    notes: str = ""
    booking_id: str | None = None
    payment_id: str | None = None  # set when the row was emitted by a payment capture

    @property
    def is_linked(self) -> bool:
        return self.booking_id is not None

    def __repr__(self) -> str:
        return f"<Transaction {self.id} {self.type.value} {self.amount} booking={self.booking_id}>"

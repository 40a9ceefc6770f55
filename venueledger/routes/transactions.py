"""Ledger transaction routes: manual entries, edits and deletions."""

import datetime as dt

from fastapi import APIRouter, Depends, status

from venueledger.core.dependencies import get_ledger
from venueledger.models import Transaction, TransactionType
from venueledger.schemas import TransactionCreate, TransactionUpdate
from venueledger.services import ledger as ledger_service
from venueledger.services.session import LedgerSession

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.get("", response_model=list[Transaction])
async def list_transactions(
    start: dt.date | None = None,
    end: dt.date | None = None,
    type: TransactionType | None = None,
    venue_id: str | None = None,
    booking_id: str | None = None,
    ledger: LedgerSession = Depends(get_ledger),
):
    async with ledger:
        result = ledger.snapshot.transactions

    if start is not None:
        result = [t for t in result if t.date >= start]
    if end is not None:
        result = [t for t in result if t.date <= end]
    if type is not None:
        result = [t for t in result if t.type == type]
    if venue_id is not None:
        result = [t for t in result if t.venue_id == venue_id]
    if booking_id is not None:
        result = [t for t in result if t.booking_id == booking_id]
    return result


@router.post("", response_model=Transaction, status_code=status.HTTP_201_CREATED)
async def create_transaction(body: TransactionCreate, ledger: LedgerSession = Depends(get_ledger)):
    async with ledger:
        return ledger.apply(
            ledger_service.create_transaction,
            category=body.category,
            amount=body.amount,
            venue_id=body.venue_id,
            type=body.type,
            payment_method=body.payment_method,
            txn_date=body.date,
            notes=body.notes,
        )


@router.patch("/{transaction_id}", response_model=Transaction)
async def edit_transaction(transaction_id: str, body: TransactionUpdate, ledger: LedgerSession = Depends(get_ledger)):
    async with ledger:
        return ledger.apply(ledger_service.edit_transaction, transaction_id, body.model_dump(exclude_unset=True))


@router.delete("/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_transaction(transaction_id: str, reason: str = "", ledger: LedgerSession = Depends(get_ledger)):
    """Hard delete; `reason` is mandatory and lands in the audit log."""
    async with ledger:
        ledger.apply(ledger_service.delete_transaction, transaction_id, reason)

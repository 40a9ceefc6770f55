"""Ledger error taxonomy and the FastAPI handlers that translate it to HTTP."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class LedgerError(Exception):
    """Base class for every error raised by the booking and ledger engine."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundError(LedgerError):
    """Unknown client, venue, booking or transaction id."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class ConflictError(LedgerError):
    """Slot collision on booking create or edit."""

    status_code = status.HTTP_409_CONFLICT


class StaleSnapshotError(ConflictError):
    """The stored snapshot moved on since it was loaded."""

    def __init__(self, expected_version: int, actual_version: int):
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            f"Snapshot changed since it was loaded (expected version {expected_version}, found {actual_version})"
        )


class ValidationError(LedgerError):
    """Missing or invalid input, e.g. an empty deletion reason."""

    status_code = 422


class InvariantViolation(LedgerError):
    """A defensive check found the ledger in a state it cannot resolve safely."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(LedgerError)
    async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
        if isinstance(exc, InvariantViolation):
            logger.error("Invariant violation on %s %s: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

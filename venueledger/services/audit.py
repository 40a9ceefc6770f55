"""Audit recording.

Every mutating operation records one entry through an AuditRecorder. The
default recorder, AuditTrail, collects entries while an operation runs; the
ledger session folds them into the snapshot before the single save, so the
audit log and the data it describes are persisted together.
"""

import logging
from typing import Protocol

from venueledger.core.clock import Clock, IdGenerator
from venueledger.models.audit import AuditLog

logger = logging.getLogger(__name__)

# Action labels
CREATE_BOOKING = "CREATE_BOOKING"
EDIT_BOOKING = "EDIT_BOOKING"
CANCEL_BOOKING = "CANCEL_BOOKING"
DELETE_BOOKING_STRICT = "DELETE_BOOKING_STRICT"  # booking list view
DELETE_BOOKING_CALENDAR = "DELETE_BOOKING_CALENDAR"  # calendar view
CAPTURE_PAYMENT = "CAPTURE_PAYMENT"
MANUAL_TRANSACTION = "MANUAL_TRANSACTION"
EDIT_TRANSACTION = "EDIT_TRANSACTION"
DELETE_TRANSACTION = "DELETE_TRANSACTION"
ADD_CLIENT = "ADD_CLIENT"
EDIT_CLIENT = "EDIT_CLIENT"
ADD_VENUE = "ADD_VENUE"
EDIT_VENUE = "EDIT_VENUE"
TOGGLE_VENUE_STATUS = "TOGGLE_VENUE_STATUS"
UPDATE_SETTINGS = "UPDATE_SETTINGS"

DELETE_BOOKING_ACTIONS = (DELETE_BOOKING_STRICT, DELETE_BOOKING_CALENDAR)


class AuditRecorder(Protocol):
    def record(self, action: str, details: str, actor_id: str) -> AuditLog: ...


class AuditTrail:
    """Collects audit entries for one load-operate-save cycle."""

    def __init__(self, clock: Clock, ids: IdGenerator):
        self._clock = clock
        self._ids = ids
        self.pending: list[AuditLog] = []

    def record(self, action: str, details: str, actor_id: str) -> AuditLog:
        entry = AuditLog(
            id=self._ids.new_id("LOG"),
            timestamp=self._clock.now(),
            user_id=actor_id,
            action=action,
            details=details,
        )
        self.pending.append(entry)
        logger.info("audit %s by %s: %s", action, actor_id, details)
        return entry

    def drain(self) -> list[AuditLog]:
        """Hand over the collected entries and start afresh."""
        entries, self.pending = self.pending, []
        return entries

"""Collaborators handed to every ledger operation."""

import enum
from dataclasses import dataclass, field

from venueledger.core.clock import Clock, IdGenerator
from venueledger.models.audit import AuditLog
from venueledger.services.audit import AuditRecorder, AuditTrail


class ConflictMode(enum.StrEnum):
    EXACT_START = "exact_start"  # same venue, date and start time
    OVERLAP = "overlap"  # half-open interval overlap


@dataclass
class LedgerContext:
    actor_id: str
    clock: Clock = field(default_factory=Clock)
    ids: IdGenerator = field(default_factory=IdGenerator)
    audit: AuditRecorder | None = None
    conflict_mode: ConflictMode = ConflictMode.EXACT_START
    strict_payment_matching: bool = False

    def __post_init__(self) -> None:
        if self.audit is None:
            self.audit = AuditTrail(self.clock, self.ids)

    def record(self, action: str, details: str) -> AuditLog:
        return self.audit.record(action, details, self.actor_id)

"""Audit log entry. Append-only: never mutated, never deleted."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class AuditLog(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    timestamp: datetime
    user_id: str
    action: str
    details: str

    def __repr__(self) -> str:
        return f"<AuditLog {self.action} by {self.user_id}>"

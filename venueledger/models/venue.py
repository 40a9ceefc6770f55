"""Venue and client records.

Venue = a rentable space with fixed opening hours cut into equal slots.
Client = a person or team who books venues.
Neither is ever hard-deleted; venues are deactivated instead.
"""

from datetime import datetime

from pydantic import BaseModel, Field

HHMM_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class Venue(BaseModel):
    id: str
    name: str
    address: str = ""
    notes: str = ""
    active: bool = True
    opening_time: str = Field(pattern=HHMM_PATTERN)
    closing_time: str = Field(pattern=HHMM_PATTERN)
    slot_duration: int  # minutes
    base_price: int

    def __repr__(self) -> str:
        return f"<Venue {self.id} {self.name}>"


class Client(BaseModel):
    id: str
    name: str
    phone: str
    email: str = ""
    address: str = ""
    active: bool = True
    created_at: datetime

    def __repr__(self) -> str:
        return f"<Client {self.id} {self.name}>"

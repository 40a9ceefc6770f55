"""Clock and identifier generator collaborators.

Both are injected into every ledger operation so tests can pin time and ids.
"""

import secrets
import string
from datetime import UTC, date, datetime

_ID_ALPHABET = string.digits + string.ascii_uppercase
ID_SUFFIX_LENGTH = 9


class Clock:
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(UTC)

    def today(self) -> date:
        return self.now().date()


class IdGenerator:
    """Produces ids shaped PREFIX-<opaque suffix>, e.g. TX-3K9Q0ZP1M."""

    def new_id(self, prefix: str) -> str:
        suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(ID_SUFFIX_LENGTH))
        return f"{prefix}-{suffix}"

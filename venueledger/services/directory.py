"""Venue and client registry, and operator settings.

Venues and clients are never deleted; venues are switched inactive instead.
"""

from typing import Any

from pydantic import ValidationError as PydanticValidationError

from venueledger.core.errors import NotFoundError, ValidationError
from venueledger.models.snapshot import AppSettings, Snapshot, replace_by_id
from venueledger.models.venue import Client, Venue
from venueledger.services import audit
from venueledger.services.context import LedgerContext

VENUE_FIELDS = frozenset(
    {"name", "address", "notes", "active", "opening_time", "closing_time", "slot_duration", "base_price"}
)
CLIENT_FIELDS = frozenset({"name", "phone", "email", "address", "active"})


def _check_fields(changes: dict[str, Any], allowed: frozenset[str]) -> None:
    unknown = set(changes) - allowed
    if unknown:
        raise ValidationError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")


def _validated(model: type, data: dict[str, Any]):
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        err = exc.errors()[0]
        field = ".".join(str(part) for part in err["loc"])
        raise ValidationError(f"Invalid {field}: {err['msg']}") from exc


def create_client(
    snapshot: Snapshot,
    ctx: LedgerContext,
    name: str,
    phone: str,
    email: str = "",
    address: str = "",
) -> tuple[Snapshot, Client]:
    if not name or not phone:
        raise ValidationError("Name and phone are required")

    client = Client(
        id=ctx.ids.new_id("CL"),
        name=name,
        phone=phone,
        email=email,
        address=address,
        active=True,
        created_at=ctx.clock.now(),
    )
    ctx.record(audit.ADD_CLIENT, f"Registered new client: {client.name} ({client.phone})")
    return snapshot.model_copy(update={"clients": [*snapshot.clients, client]}), client


def update_client(
    snapshot: Snapshot, ctx: LedgerContext, client_id: str, changes: dict[str, Any]
) -> tuple[Snapshot, Client]:
    client = snapshot.get_client(client_id)
    if client is None:
        raise NotFoundError("Client", client_id)
    _check_fields(changes, CLIENT_FIELDS)

    updated = _validated(Client, {**client.model_dump(), **changes})
    if not updated.name or not updated.phone:
        raise ValidationError("Name and phone are required")

    ctx.record(audit.EDIT_CLIENT, f"Updated profile for client {client.id}: {updated.name}")
    return snapshot.model_copy(update={"clients": replace_by_id(snapshot.clients, updated)}), updated


def create_venue(
    snapshot: Snapshot,
    ctx: LedgerContext,
    name: str,
    opening_time: str,
    closing_time: str,
    slot_duration: int | None = None,
    base_price: int | None = None,
    address: str = "",
    notes: str = "",
) -> tuple[Snapshot, Venue]:
    """Register a venue. Slot duration and base price default from the settings."""
    if not name:
        raise ValidationError("Venue name is required")

    venue = _validated(
        Venue,
        {
            "id": ctx.ids.new_id("V"),
            "name": name,
            "address": address,
            "notes": notes,
            "active": True,
            "opening_time": opening_time,
            "closing_time": closing_time,
            "slot_duration": slot_duration if slot_duration is not None else snapshot.settings.global_slot_duration,
            "base_price": base_price if base_price is not None else snapshot.settings.global_base_price,
        },
    )
    ctx.record(audit.ADD_VENUE, f"Venue {venue.name} was created.")
    return snapshot.model_copy(update={"venues": [*snapshot.venues, venue]}), venue


def update_venue(
    snapshot: Snapshot, ctx: LedgerContext, venue_id: str, changes: dict[str, Any]
) -> tuple[Snapshot, Venue]:
    venue = snapshot.get_venue(venue_id)
    if venue is None:
        raise NotFoundError("Venue", venue_id)
    _check_fields(changes, VENUE_FIELDS)

    updated = _validated(Venue, {**venue.model_dump(), **changes})
    if not updated.name:
        raise ValidationError("Venue name is required")

    ctx.record(audit.EDIT_VENUE, f"Venue {updated.name} was updated.")
    return snapshot.model_copy(update={"venues": replace_by_id(snapshot.venues, updated)}), updated


def toggle_venue_status(snapshot: Snapshot, ctx: LedgerContext, venue_id: str) -> tuple[Snapshot, Venue]:
    venue = snapshot.get_venue(venue_id)
    if venue is None:
        raise NotFoundError("Venue", venue_id)

    updated = venue.model_copy(update={"active": not venue.active})
    ctx.record(
        audit.TOGGLE_VENUE_STATUS,
        f"Venue {venue.name} status changed to {'Active' if updated.active else 'Inactive'}",
    )
    return snapshot.model_copy(update={"venues": replace_by_id(snapshot.venues, updated)}), updated


def update_settings(snapshot: Snapshot, ctx: LedgerContext, changes: dict[str, Any]) -> tuple[Snapshot, AppSettings]:
    _check_fields(changes, frozenset(AppSettings.model_fields))
    updated = _validated(AppSettings, {**snapshot.settings.model_dump(), **changes})

    ctx.record(audit.UPDATE_SETTINGS, "System settings updated")
    return snapshot.model_copy(update={"settings": updated}), updated

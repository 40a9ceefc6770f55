"""Venue, client and settings routes."""

from fastapi import APIRouter, Depends, status

from venueledger.core.dependencies import get_ledger
from venueledger.models import AppSettings, Client, Venue
from venueledger.schemas import ClientCreate, ClientUpdate, SettingsUpdate, VenueCreate, VenueUpdate
from venueledger.services import directory, reports
from venueledger.services.reports import ClientStats
from venueledger.services.session import LedgerSession

router = APIRouter(tags=["directory"])


# ---------------------------------------------------------------------------
# Venues
# ---------------------------------------------------------------------------


@router.get("/venues", response_model=list[Venue])
async def list_venues(active_only: bool = False, ledger: LedgerSession = Depends(get_ledger)):
    async with ledger:
        venues = ledger.snapshot.venues
    if active_only:
        venues = [v for v in venues if v.active]
    return venues


@router.post("/venues", response_model=Venue, status_code=status.HTTP_201_CREATED)
async def create_venue(body: VenueCreate, ledger: LedgerSession = Depends(get_ledger)):
    async with ledger:
        return ledger.apply(directory.create_venue, **body.model_dump())


@router.patch("/venues/{venue_id}", response_model=Venue)
async def update_venue(venue_id: str, body: VenueUpdate, ledger: LedgerSession = Depends(get_ledger)):
    async with ledger:
        return ledger.apply(directory.update_venue, venue_id, body.model_dump(exclude_unset=True))


@router.post("/venues/{venue_id}/toggle", response_model=Venue)
async def toggle_venue(venue_id: str, ledger: LedgerSession = Depends(get_ledger)):
    async with ledger:
        return ledger.apply(directory.toggle_venue_status, venue_id)


# ---------------------------------------------------------------------------
# Clients
# ---------------------------------------------------------------------------


@router.get("/clients", response_model=list[Client])
async def list_clients(q: str = "", ledger: LedgerSession = Depends(get_ledger)):
    """List clients, optionally filtered by a name or phone fragment."""
    async with ledger:
        clients = ledger.snapshot.clients
    if q:
        needle = q.lower()
        clients = [c for c in clients if needle in c.name.lower() or q in c.phone]
    return clients


@router.post("/clients", response_model=Client, status_code=status.HTTP_201_CREATED)
async def create_client(body: ClientCreate, ledger: LedgerSession = Depends(get_ledger)):
    async with ledger:
        return ledger.apply(
            directory.create_client,
            name=body.name,
            phone=body.phone,
            email=body.email or "",
            address=body.address,
        )


@router.patch("/clients/{client_id}", response_model=Client)
async def update_client(client_id: str, body: ClientUpdate, ledger: LedgerSession = Depends(get_ledger)):
    changes = body.model_dump(exclude_unset=True)
    if "email" in changes and changes["email"] is None:
        changes["email"] = ""
    async with ledger:
        return ledger.apply(directory.update_client, client_id, changes)


@router.get("/clients/{client_id}/stats", response_model=ClientStats)
async def client_stats(client_id: str, ledger: LedgerSession = Depends(get_ledger)):
    async with ledger:
        return reports.get_client_stats(ledger.snapshot, client_id)


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@router.get("/settings", response_model=AppSettings)
async def get_settings(ledger: LedgerSession = Depends(get_ledger)):
    async with ledger:
        return ledger.snapshot.settings


@router.patch("/settings", response_model=AppSettings)
async def update_settings(body: SettingsUpdate, ledger: LedgerSession = Depends(get_ledger)):
    async with ledger:
        return ledger.apply(directory.update_settings, body.model_dump(exclude_unset=True))

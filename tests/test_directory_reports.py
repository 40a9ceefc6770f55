"""Directory operations, reports and the audit trail."""

from datetime import timedelta

import pytest
from pydantic import ValidationError as PydanticValidationError

from venueledger.core.errors import NotFoundError, ValidationError
from venueledger.models import PaymentMethod
from venueledger.services import audit
from venueledger.services.audit import AuditTrail
from venueledger.services.bookings import cancel_booking, create_booking
from venueledger.services.directory import (
    create_client,
    create_venue,
    toggle_venue_status,
    update_client,
    update_settings,
    update_venue,
)
from venueledger.services.ledger import create_transaction
from venueledger.services.payments import capture_payment
from venueledger.services.reports import (
    get_client_stats,
    get_dashboard,
    get_financial_summary,
    get_venue_utilization,
)

from tests.conftest import NOW, TODAY, FixedClock, SequentialIds


class TestClients:
    def test_create_client(self, snapshot, ctx):
        snapshot, client = create_client(snapshot, ctx, "Tanvir Hasan", "01900000003", email="t@example.com")
        assert client.id == "CL-000000001"
        assert client.created_at == NOW
        assert snapshot.get_client(client.id) == client
        assert ctx.audit.pending[-1].action == audit.ADD_CLIENT

    @pytest.mark.parametrize("name,phone", [("", "0190"), ("Tanvir", "")])
    def test_name_and_phone_required(self, snapshot, ctx, name, phone):
        with pytest.raises(ValidationError):
            create_client(snapshot, ctx, name, phone)

    def test_update_client(self, snapshot, ctx):
        snapshot, client = update_client(snapshot, ctx, "CL-000001", {"address": "Banani Road 11"})
        assert client.address == "Banani Road 11"
        assert client.name == "Zayed Ahmed"
        assert ctx.audit.pending[-1].details.startswith("Updated profile for client CL-000001")

    def test_update_client_cannot_blank_phone(self, snapshot, ctx):
        with pytest.raises(ValidationError):
            update_client(snapshot, ctx, "CL-000001", {"phone": ""})

    def test_update_unknown_client(self, snapshot, ctx):
        with pytest.raises(NotFoundError):
            update_client(snapshot, ctx, "CL-404", {"name": "x"})


class TestVenues:
    def test_create_venue_uses_settings_defaults(self, snapshot, ctx):
        snapshot, _ = update_settings(snapshot, ctx, {"global_slot_duration": 120, "global_base_price": 3000})
        snapshot, venue = create_venue(snapshot, ctx, "Rooftop Court", "10:00", "22:00")
        assert venue.slot_duration == 120
        assert venue.base_price == 3000
        assert venue.active is True
        assert [e.action for e in ctx.audit.pending] == [audit.UPDATE_SETTINGS, audit.ADD_VENUE]

    def test_create_venue_requires_name(self, snapshot, ctx):
        with pytest.raises(ValidationError):
            create_venue(snapshot, ctx, "", "10:00", "22:00")

    def test_create_venue_rejects_bad_time(self, snapshot, ctx):
        with pytest.raises(ValidationError):
            create_venue(snapshot, ctx, "Rooftop", "10am", "22:00")

    def test_update_and_toggle(self, snapshot, ctx):
        snapshot, venue = update_venue(snapshot, ctx, "V2", {"base_price": 1800})
        assert venue.base_price == 1800
        snapshot, venue = toggle_venue_status(snapshot, ctx, "V2")
        assert venue.active is False
        assert "Inactive" in ctx.audit.pending[-1].details
        snapshot, venue = toggle_venue_status(snapshot, ctx, "V2")
        assert venue.active is True

    def test_update_venue_rejects_unknown_field(self, snapshot, ctx):
        with pytest.raises(ValidationError):
            update_venue(snapshot, ctx, "V1", {"id": "V99"})

    def test_unknown_settings_field(self, snapshot, ctx):
        with pytest.raises(ValidationError):
            update_settings(snapshot, ctx, {"currency": "BDT"})


class TestReports:
    @pytest.fixture
    def busy(self, snapshot, ctx):
        """V1 today: 08:00 paid 1200 of 2000, 09:30 paid in full, 11:00 cancelled; V2 tomorrow unpaid."""
        snapshot, b1 = create_booking(snapshot, ctx, "CL-000001", "V1", TODAY, "08:00")
        snapshot, _, _, _ = capture_payment(snapshot, ctx, b1.id, 1200)
        snapshot, b2 = create_booking(snapshot, ctx, "CL-000001", "V1", TODAY, "09:30")
        snapshot, _, _, _ = capture_payment(snapshot, ctx, b2.id, 2000, method=PaymentMethod.BKASH)
        snapshot, b3 = create_booking(snapshot, ctx, "CL-000002", "V1", TODAY, "11:00")
        snapshot, _ = cancel_booking(snapshot, ctx, b3.id)
        snapshot, _ = create_booking(snapshot, ctx, "CL-000002", "V2", TODAY + timedelta(days=1), "18:00")
        snapshot, _ = create_transaction(snapshot, ctx, "Electricity", 700, "V1")
        return snapshot

    def test_client_stats(self, busy):
        stats = get_client_stats(busy, "CL-000001")
        assert (stats.booking_count, stats.total_paid, stats.total_due) == (2, 3200, 800)

        stats = get_client_stats(busy, "CL-000002")
        assert (stats.booking_count, stats.total_paid, stats.total_due) == (1, 0, 1500)

    def test_client_stats_unknown(self, busy):
        with pytest.raises(NotFoundError):
            get_client_stats(busy, "CL-404")

    def test_venue_utilization(self, busy):
        report = get_venue_utilization(busy, "V1", TODAY, TODAY + timedelta(days=1))
        assert report.days == 2
        assert report.capacity == 20
        assert report.booked_slots == 2
        assert report.utilization_pct == 10.0
        assert report.revenue == 3200
        assert report.outstanding == 800

    def test_utilization_rejects_reversed_range(self, busy):
        with pytest.raises(ValidationError):
            get_venue_utilization(busy, "V1", TODAY, TODAY - timedelta(days=1))

    def test_financial_summary(self, busy):
        summary = get_financial_summary(busy, TODAY, TODAY)
        assert summary.income == 3200
        assert summary.expenses == 700
        assert summary.profit == 2500
        assert summary.income_by_method == {"CASH": 1200, "BKASH": 2000}
        assert summary.booking_count == 2
        assert summary.avg_booking_income == 1600.0
        # V1 has 10 slots a day, V2 has 16
        assert summary.utilization_pct == round(2 / 26 * 100, 2)
        by_venue = {v.venue_id: v for v in summary.venues}
        assert by_venue["V1"].revenue == 3200
        assert by_venue["V2"].booking_count == 0

    def test_dashboard(self, busy):
        dash = get_dashboard(busy, TODAY)
        assert dash.today_booking_count == 2
        assert dash.today_revenue == 3200
        assert dash.unpaid_total == 800 + 1500
        assert dash.payment_split == {"CASH": 1200, "BKASH": 2000}
        upcoming = [(b.venue_id, b.start_time) for b in dash.upcoming]
        assert upcoming == [("V1", "08:00"), ("V1", "09:30"), ("V2", "18:00")]

    def test_empty_snapshot_reports(self, snapshot):
        summary = get_financial_summary(snapshot, TODAY, TODAY)
        assert summary.income == 0
        assert summary.avg_booking_income == 0.0
        assert get_dashboard(snapshot, TODAY).upcoming == []


class TestAuditTrail:
    def test_records_and_drains(self):
        trail = AuditTrail(FixedClock(), SequentialIds())
        entry = trail.record(audit.UPDATE_SETTINGS, "System settings updated", "admin-1")
        assert entry.id == "LOG-000000001"
        assert entry.timestamp == NOW
        assert entry.user_id == "admin-1"
        assert trail.drain() == [entry]
        assert trail.pending == []

    def test_entries_are_immutable(self):
        entry = AuditTrail(FixedClock(), SequentialIds()).record(audit.ADD_VENUE, "x", "admin-1")
        with pytest.raises(PydanticValidationError):
            entry.details = "changed"

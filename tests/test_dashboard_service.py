"""Tests for host and admin panel statistics."""

from datetime import date

import pytest

from havenly.domain.enums import UserRole, VerificationStatus
from havenly.domain.errors import AuthorizationError
from havenly.domain.models import Booking
from havenly.services.dashboard_service import get_dashboard_stats


@pytest.fixture
async def panel(db_session, make_user, make_property, make_verification):
    host = await make_user(UserRole.HOST)
    other_host = await make_user(UserRole.HOST)
    guest = await make_user(UserRole.GUEST)
    prop = await make_property(host)
    other_prop = await make_property(other_host)

    for property_id, total, status in [
        (prop.id, 1000.0, "paid"),
        (prop.id, 500.0, "pending"),
        (prop.id, 300.0, "cancelled"),
        (prop.id, 200.0, "approved"),
        (other_prop.id, 720.0, "paid"),
    ]:
        db_session.add(Booking(
            property_id=property_id,
            guest_id=guest.id,
            check_in=date(2024, 6, 1),
            check_out=date(2024, 6, 5),
            guests_count=1,
            total_price=total,
            tax_amount=round(total * 0.1, 2),
            commission_amount=round(total * 0.05, 2),
            status=status,
        ))
    await make_verification(guest, host, VerificationStatus.PENDING)
    await make_verification(guest, other_host, VerificationStatus.PENDING)
    await db_session.flush()
    return host, guest


async def test_host_stats_are_scoped(db_session, panel):
    host, _ = panel
    stats = await get_dashboard_stats(db_session, host)
    assert stats == {
        "total_revenue": 1700.0,
        "property_count": 1,
        "active_bookings": 2,
        "pending_bookings": 1,
        "pending_verifications": 1,
    }


async def test_admin_sees_everything(db_session, panel, make_user):
    admin = await make_user(UserRole.SUPERADMIN)
    stats = await get_dashboard_stats(db_session, admin)
    assert stats["total_revenue"] == 2420.0
    assert stats["property_count"] == 2
    assert stats["active_bookings"] == 3
    assert stats["pending_verifications"] == 2


async def test_guest_has_no_dashboard(db_session, panel):
    _, guest = panel
    with pytest.raises(AuthorizationError):
        await get_dashboard_stats(db_session, guest)

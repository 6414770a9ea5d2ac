"""Unit tests for role and ownership predicates."""

from datetime import date
from types import SimpleNamespace

import pytest
from sqlalchemy import select

from havenly.domain.enums import BookingActor, UserRole, VerificationStatus
from havenly.domain.errors import AuthorizationError
from havenly.domain.models import Booking, Property, VerificationRequest
from havenly.services import access_policy

ADMIN = SimpleNamespace(id="a1", role="SUPERADMIN")
HOST = SimpleNamespace(id="h1", role="HOST")
OTHER_HOST = SimpleNamespace(id="h2", role="HOST")
GUEST = SimpleNamespace(id="g1", role="GUEST")
STRANGER = SimpleNamespace(id="g2", role="GUEST")

PROP = Property(id="p1", host_id="h1")
BOOKING = Booking(id="b1", property_id="p1", guest_id="g1")
REQUEST = VerificationRequest(id="v1", user_id="g1", host_id="h1")


@pytest.mark.parametrize(
    "user,actor",
    [(ADMIN, BookingActor.ADMIN), (HOST, BookingActor.HOST), (GUEST, BookingActor.GUEST)],
)
def test_actor_for(user, actor):
    assert access_policy.actor_for(user) == actor


class TestProperties:
    def test_create(self):
        assert access_policy.can_create_property(HOST)
        assert access_policy.can_create_property(ADMIN)
        assert not access_policy.can_create_property(GUEST)

    def test_manage(self):
        assert access_policy.can_manage_property(HOST, PROP)
        assert access_policy.can_manage_property(ADMIN, PROP)
        assert not access_policy.can_manage_property(OTHER_HOST, PROP)
        assert not access_policy.can_manage_property(GUEST, PROP)


class TestBookings:
    @pytest.mark.parametrize("user,allowed", [
        (ADMIN, True), (HOST, True), (GUEST, True), (OTHER_HOST, False), (STRANGER, False),
    ])
    def test_view(self, user, allowed):
        assert access_policy.can_view_booking(user, BOOKING, PROP) is allowed

    def test_view_after_property_deleted(self):
        assert access_policy.can_view_booking(GUEST, BOOKING, None)
        assert not access_policy.can_view_booking(HOST, BOOKING, None)

    @pytest.mark.parametrize("user,allowed", [
        (ADMIN, True), (HOST, True), (GUEST, False), (OTHER_HOST, False),
    ])
    def test_decide(self, user, allowed):
        assert access_policy.can_decide_booking(user, PROP) is allowed

    def test_only_admin_decides_without_property(self):
        assert access_policy.can_decide_booking(ADMIN, None)
        assert not access_policy.can_decide_booking(HOST, None)


class TestVerifications:
    def test_view(self):
        assert access_policy.can_view_verification(GUEST, REQUEST)
        assert access_policy.can_view_verification(HOST, REQUEST)
        assert access_policy.can_view_verification(ADMIN, REQUEST)
        assert not access_policy.can_view_verification(OTHER_HOST, REQUEST)

    def test_decide(self):
        assert access_policy.can_decide_verification(HOST, REQUEST)
        assert access_policy.can_decide_verification(ADMIN, REQUEST)
        assert not access_policy.can_decide_verification(GUEST, REQUEST)
        assert not access_policy.can_decide_verification(OTHER_HOST, REQUEST)


def test_require_raises():
    access_policy.require(True, "fine")
    with pytest.raises(AuthorizationError, match="nope"):
        access_policy.require(False, "nope")


# ---------------------------------------------------------------------------
# SQL scopes agree with the per-record predicates
# ---------------------------------------------------------------------------


@pytest.fixture
async def world(db_session, make_user, make_property, make_verification):
    people = SimpleNamespace(
        admin=await make_user(UserRole.SUPERADMIN),
        host=await make_user(UserRole.HOST),
        other_host=await make_user(UserRole.HOST),
        guest=await make_user(UserRole.GUEST),
        stranger=await make_user(UserRole.GUEST),
    )
    villa = await make_property(people.host)
    flat = await make_property(people.other_host, title="Apartamento Céntrico")
    for prop, guest in [(villa, people.guest), (flat, people.guest), (flat, people.host)]:
        db_session.add(Booking(
            property_id=prop.id,
            guest_id=guest.id,
            check_in=date(2024, 6, 1),
            check_out=date(2024, 6, 5),
            guests_count=1,
            total_price=1000.0,
            tax_amount=100.0,
            commission_amount=50.0,
            status="pending",
        ))
    await make_verification(people.guest, people.host, VerificationStatus.PENDING)
    await make_verification(people.host, people.other_host, VerificationStatus.APPROVED)
    await db_session.flush()
    return people


ROLES = ["admin", "host", "other_host", "guest", "stranger"]


class TestScopes:
    @pytest.mark.parametrize("who", ROLES)
    async def test_booking_scope_matches_can_view_booking(self, db_session, world, who):
        actor = getattr(world, who)
        every = (await db_session.execute(select(Booking))).scalars().all()
        scoped = (
            await db_session.execute(select(Booking).where(access_policy.booking_scope(actor)))
        ).scalars().all()

        expected = {
            b.id for b in every
            if access_policy.can_view_booking(actor, b, await db_session.get(Property, b.property_id))
        }
        assert {b.id for b in scoped} == expected

    @pytest.mark.parametrize("who", ROLES)
    async def test_verification_scope_matches_can_view_verification(self, db_session, world, who):
        actor = getattr(world, who)
        every = (await db_session.execute(select(VerificationRequest))).scalars().all()
        scoped = (
            await db_session.execute(
                select(VerificationRequest).where(access_policy.verification_scope(actor))
            )
        ).scalars().all()

        assert {r.id for r in scoped} == {
            r.id for r in every if access_policy.can_view_verification(actor, r)
        }

    async def test_hosted_scopes_leave_out_own_stays_and_requests(self, db_session, world):
        host = world.host
        hosted = (
            await db_session.execute(select(Booking).where(access_policy.hosted_booking_scope(host)))
        ).scalars().all()
        assert {b.guest_id for b in hosted} == {world.guest.id}

        decided = (
            await db_session.execute(
                select(VerificationRequest).where(access_policy.hosted_verification_scope(host))
            )
        ).scalars().all()
        assert [r.user_id for r in decided] == [world.guest.id]

    async def test_owned_property_scope(self, db_session, world):
        def titles(actor):
            return select(Property.title).where(access_policy.owned_property_scope(actor))

        assert (await db_session.execute(titles(world.other_host))).scalars().all() == [
            "Apartamento Céntrico"
        ]
        assert len((await db_session.execute(titles(world.admin))).scalars().all()) == 2
        assert (await db_session.execute(titles(world.guest))).scalars().all() == []

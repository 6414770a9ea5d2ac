"""Booking Engine: stay pricing and the booking lifecycle.

A booking is only written after the payment gateway approves the charge, so
a declined, timed-out or cancelled payment never leaves a booking behind.
"""

import asyncio
import logging
import math
from datetime import date, datetime, time
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from havenly.app.config import Settings, get_settings
from havenly.domain.enums import BookingActor, BookingDecision, BookingStatus, Eligibility, PropertyStatus
from havenly.domain.errors import NotFoundError, PaymentError, PaymentInProgressError, ValidationError
from havenly.domain.models import Booking, BookingEvent, Property, User
from havenly.domain.schemas import CardDetails
from havenly.services import access_policy
from havenly.services.booking_state_machine import INITIAL_STATE, BookingStateMachine
from havenly.services.payment_simulator import PaymentGateway
from havenly.services.verification_gate import get_eligibility

logger = logging.getLogger(__name__)

state_machine = BookingStateMachine()

_SECONDS_PER_DAY = 24 * 60 * 60


# ---------------------------------------------------------------------------
# Pricing
# ---------------------------------------------------------------------------


def _as_datetime(value: date) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def count_nights(check_in: date, check_out: date) -> int:
    """Whole nights between two dates; partial days round up."""
    delta = _as_datetime(check_out) - _as_datetime(check_in)
    return math.ceil(delta.total_seconds() / _SECONDS_PER_DAY)


def quote(prop: Property, check_in: date, check_out: date) -> float:
    """Total price of a stay, or 0 when the date range is not bookable."""
    nights = count_nights(check_in, check_out)
    if nights <= 0:
        return 0
    return round(nights * prop.price_per_night, 2)


def booking_fees(total: float, settings: Optional[Settings] = None) -> tuple[float, float]:
    """Return (tax_amount, commission_amount) under the fixed fee policy."""
    settings = settings or get_settings()
    return (
        round(total * settings.booking_tax_rate, 2),
        round(total * settings.booking_commission_rate, 2),
    )


# ---------------------------------------------------------------------------
# In-flight payments
# ---------------------------------------------------------------------------


class InFlightPayments:
    """Tracks users with a payment currently awaiting the gateway."""

    def __init__(self):
        self._users: set[str] = set()

    def __contains__(self, user_id: str) -> bool:
        return user_id in self._users

    def acquire(self, user_id: str) -> None:
        if user_id in self._users:
            raise PaymentInProgressError("A payment is already in progress for this user")
        self._users.add(user_id)

    def release(self, user_id: str) -> None:
        self._users.discard(user_id)


in_flight_payments = InFlightPayments()


# ---------------------------------------------------------------------------
# Booking creation
# ---------------------------------------------------------------------------


async def validate_booking_request(
    db: AsyncSession,
    user: User,
    prop: Property,
    check_in: date,
    check_out: date,
    guests_count: int,
) -> float:
    """Check every precondition for booking and return the quoted total.

    Raises:
        ValidationError: Invalid dates, guest count out of range, listing
            under maintenance, or the user is not verified for the host.
    """
    total = quote(prop, check_in, check_out)
    if total <= 0:
        raise ValidationError("Check-out must be after check-in")

    if not 1 <= guests_count <= prop.max_guests:
        raise ValidationError(
            f"Guest count must be between 1 and {prop.max_guests}"
        )

    if prop.status != PropertyStatus.AVAILABLE.value:
        raise ValidationError("Property is not available for booking")

    eligibility = await get_eligibility(db, user, prop)
    if eligibility == Eligibility.PENDING:
        raise ValidationError("Identity verification for this host is still pending")
    if eligibility != Eligibility.VERIFIED:
        raise ValidationError("Identity verification for this host is required")

    return total


async def request_booking(
    db: AsyncSession,
    user: User,
    prop: Property,
    check_in: date,
    check_out: date,
    guests_count: int,
    gateway: PaymentGateway,
    card: Optional[CardDetails] = None,
    settings: Optional[Settings] = None,
    in_flight: InFlightPayments = in_flight_payments,
) -> Booking:
    """Charge the quoted total and create a pending booking.

    Raises:
        ValidationError: A precondition is not met (nothing is charged).
        PaymentInProgressError: The user already has a payment in flight.
        PaymentError: The gateway declined or timed out (no booking created).
    """
    settings = settings or get_settings()
    total = await validate_booking_request(db, user, prop, check_in, check_out, guests_count)

    in_flight.acquire(user.id)
    try:
        try:
            result = await asyncio.wait_for(
                gateway.charge(total, card or CardDetails()),
                timeout=settings.payment_timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.error(
                "Payment timed out after %.1fs: user=%s property=%s",
                settings.payment_timeout_seconds,
                user.id,
                prop.id,
            )
            raise PaymentError("Payment gateway timed out")
    finally:
        in_flight.release(user.id)

    if not result.success:
        logger.warning(
            "Payment declined: user=%s property=%s error=%s", user.id, prop.id, result.error
        )
        raise PaymentError(result.error or "Payment declined")

    tax_amount, commission_amount = booking_fees(total, settings)
    booking = Booking(
        property_id=prop.id,
        guest_id=user.id,
        check_in=check_in,
        check_out=check_out,
        guests_count=guests_count,
        total_price=total,
        tax_amount=tax_amount,
        commission_amount=commission_amount,
        status=INITIAL_STATE.value,
        payment_reference=result.reference,
    )
    db.add(booking)
    await db.flush()

    db.add(BookingEvent(
        booking_id=booking.id,
        actor=BookingActor.GUEST.value,
        actor_id=user.id,
        from_status=None,
        to_status=INITIAL_STATE.value,
        data={"payment_reference": result.reference},
    ))
    await db.flush()

    logger.info(
        "Booking %s created: property=%s guest=%s total=%.2f",
        booking.id,
        prop.id,
        user.id,
        total,
    )
    return booking


# ---------------------------------------------------------------------------
# Status transitions
# ---------------------------------------------------------------------------


async def _get_booking_or_raise(db: AsyncSession, booking_id: str) -> Booking:
    booking = await db.get(Booking, booking_id)
    if booking is None:
        raise NotFoundError("Booking not found")
    return booking


async def decide_booking(
    db: AsyncSession,
    booking_id: str,
    decision: BookingDecision,
    acting_user: User,
    reason: Optional[str] = None,
) -> Booking:
    """Apply a host/admin decision to a booking and record an audit event."""
    booking = await _get_booking_or_raise(db, booking_id)
    prop = await db.get(Property, booking.property_id)

    access_policy.require(
        access_policy.can_decide_booking(acting_user, prop),
        "Only the property's host or an admin can decide this booking",
    )

    current = BookingStatus(booking.status)
    target = state_machine.target_for(decision)
    actor = access_policy.actor_for(acting_user)
    state_machine.validate_transition(current, target, actor)

    booking.status = target.value
    db.add(BookingEvent(
        booking_id=booking.id,
        actor=actor.value,
        actor_id=acting_user.id,
        from_status=current.value,
        to_status=target.value,
        data={"reason": reason} if reason else None,
    ))
    await db.flush()

    logger.info(
        "Booking %s: %s → %s (actor=%s, user=%s)",
        booking.id,
        current.value,
        target.value,
        actor.value,
        acting_user.id,
    )
    return booking


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


async def get_booking(db: AsyncSession, booking_id: str, acting_user: User) -> Booking:
    booking = await _get_booking_or_raise(db, booking_id)
    prop = await db.get(Property, booking.property_id)
    access_policy.require(
        access_policy.can_view_booking(acting_user, booking, prop),
        "Access denied",
    )
    return booking


async def list_bookings(
    db: AsyncSession,
    acting_user: User,
    status: Optional[str] = None,
) -> list[Booking]:
    """Bookings visible to ``acting_user``, newest first."""
    query = select(Booking).where(access_policy.booking_scope(acting_user))
    if status:
        query = query.where(Booking.status == status)
    query = query.order_by(Booking.created_at.desc())

    result = await db.execute(query)
    return list(result.scalars().all())

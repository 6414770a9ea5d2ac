"""Booking routes: quotes, paid booking requests and host decisions."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from havenly.app.errors import to_http
from havenly.app.routes.auth import get_current_user_dep
from havenly.domain.enums import BookingStatus
from havenly.domain.errors import HavenlyError
from havenly.domain.models import Booking, Property, User
from havenly.domain.schemas import (
    BookingCreate,
    BookingDecisionRequest,
    BookingResponse,
    QuoteRequest,
    QuoteResponse,
)
from havenly.infra.database import get_db
from havenly.services import access_policy, booking_engine
from havenly.services.catalog_service import get_property_or_raise
from havenly.services.payment_simulator import PaymentGateway, get_payment_gateway

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/bookings", tags=["bookings"])
quote_router = APIRouter(prefix="/api/properties", tags=["bookings"])


def serialize_booking(booking: Booking, user: User, prop: Optional[Property]) -> dict:
    """Booking payload plus the decisions the caller may take next."""
    data = BookingResponse.model_validate(booking).model_dump()
    data["allowed_decisions"] = []
    if access_policy.can_decide_booking(user, prop):
        actor = access_policy.actor_for(user)
        data["allowed_decisions"] = [
            d.value
            for d in booking_engine.state_machine.get_allowed_decisions(
                BookingStatus(booking.status), actor
            )
        ]
    return data


@quote_router.post("/{property_id}/quote", response_model=QuoteResponse)
async def quote_stay(
    property_id: str,
    body: QuoteRequest,
    db: AsyncSession = Depends(get_db),
):
    """Price a candidate stay. ``valid`` is False when the dates are not bookable."""
    try:
        prop = await get_property_or_raise(db, property_id)
    except HavenlyError as e:
        raise to_http(e)
    total = booking_engine.quote(prop, body.check_in, body.check_out)
    return QuoteResponse(
        property_id=prop.id,
        check_in=body.check_in,
        check_out=body.check_out,
        nights=max(booking_engine.count_nights(body.check_in, body.check_out), 0),
        total=total,
        valid=total > 0,
    )


@router.post("", status_code=201)
async def create_booking(
    body: BookingCreate,
    user: User = Depends(get_current_user_dep),
    db: AsyncSession = Depends(get_db),
    gateway: PaymentGateway = Depends(get_payment_gateway),
):
    """Charge the stay through the payment gateway and file a pending booking."""
    try:
        prop = await get_property_or_raise(db, body.property_id)
        booking = await booking_engine.request_booking(
            db,
            user,
            prop,
            body.check_in,
            body.check_out,
            body.guests_count,
            gateway=gateway,
            card=body.card,
        )
    except HavenlyError as e:
        raise to_http(e)
    await db.commit()
    return serialize_booking(booking, user, prop)


@router.get("")
async def list_bookings(
    status: Optional[str] = Query(None, description="Filter by status"),
    user: User = Depends(get_current_user_dep),
    db: AsyncSession = Depends(get_db),
):
    """Bookings visible to the caller, role-filtered."""
    bookings = await booking_engine.list_bookings(db, user, status=status)
    properties = {b.property_id: await db.get(Property, b.property_id) for b in bookings}
    return [serialize_booking(b, user, properties[b.property_id]) for b in bookings]


@router.get("/{booking_id}")
async def get_booking(
    booking_id: str,
    user: User = Depends(get_current_user_dep),
    db: AsyncSession = Depends(get_db),
):
    try:
        booking = await booking_engine.get_booking(db, booking_id, user)
    except HavenlyError as e:
        raise to_http(e)
    prop = await db.get(Property, booking.property_id)
    return serialize_booking(booking, user, prop)


@router.post("/{booking_id}/decision")
async def decide_booking(
    booking_id: str,
    body: BookingDecisionRequest,
    user: User = Depends(get_current_user_dep),
    db: AsyncSession = Depends(get_db),
):
    """Host or admin approves, confirms payment for, or cancels a booking."""
    try:
        booking = await booking_engine.decide_booking(
            db, booking_id, body.decision, user, reason=body.reason
        )
    except HavenlyError as e:
        raise to_http(e)
    await db.commit()
    prop = await db.get(Property, booking.property_id)
    return serialize_booking(booking, user, prop)

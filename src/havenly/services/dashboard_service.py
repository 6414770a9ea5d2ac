"""Host and admin panel statistics."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from havenly.domain.enums import BookingStatus, VerificationStatus
from havenly.domain.models import Booking, Property, User, VerificationRequest
from havenly.services import access_policy

ACTIVE_BOOKING_STATUSES = (BookingStatus.PAID.value, BookingStatus.APPROVED.value)


async def get_dashboard_stats(db: AsyncSession, acting_user: User) -> dict:
    """Revenue and workload figures, scoped to the host's own listings.

    Cancelled bookings do not count towards revenue.
    """
    access_policy.require(
        access_policy.is_admin(acting_user) or access_policy.is_host(acting_user),
        "Only hosts and admins have a dashboard",
    )

    property_query = select(func.count(Property.id)).where(
        access_policy.owned_property_scope(acting_user)
    )
    booking_query = select(Booking.status, Booking.total_price).where(
        access_policy.hosted_booking_scope(acting_user)
    )
    verification_query = select(func.count(VerificationRequest.id)).where(
        access_policy.hosted_verification_scope(acting_user),
        VerificationRequest.status == VerificationStatus.PENDING.value,
    )

    property_count = (await db.execute(property_query)).scalar_one()
    pending_verifications = (await db.execute(verification_query)).scalar_one()
    rows = (await db.execute(booking_query)).all()

    total_revenue = sum(
        price for status, price in rows if status != BookingStatus.CANCELLED.value
    )
    return {
        "total_revenue": round(total_revenue, 2),
        "property_count": property_count,
        "active_bookings": sum(1 for status, _ in rows if status in ACTIVE_BOOKING_STATUSES),
        "pending_bookings": sum(1 for status, _ in rows if status == BookingStatus.PENDING.value),
        "pending_verifications": pending_verifications,
    }

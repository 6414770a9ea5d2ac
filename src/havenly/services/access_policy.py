"""Role and ownership rules for every marketplace resource.

Admins see and manage everything. Hosts manage their own listings and act on
bookings and verification requests scoped to them. Guests see only their own
bookings and verification requests. Services check the predicates before
reading or changing a single record; listing and dashboard queries filter rows with
the matching ``*_scope`` clauses, which express the same rules in SQL.
"""

from typing import Optional

from sqlalchemy import ColumnElement, select, true

from havenly.domain.enums import BookingActor, UserRole
from havenly.domain.errors import AuthorizationError
from havenly.domain.models import Booking, Property, User, VerificationRequest


def is_admin(user: User) -> bool:
    return user.role == UserRole.SUPERADMIN.value


def is_host(user: User) -> bool:
    return user.role == UserRole.HOST.value


def actor_for(user: User) -> BookingActor:
    """Map a user's role to the actor used by the booking state machine."""
    if is_admin(user):
        return BookingActor.ADMIN
    if is_host(user):
        return BookingActor.HOST
    return BookingActor.GUEST


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------


def can_create_property(actor: User) -> bool:
    return is_admin(actor) or is_host(actor)


def can_manage_property(actor: User, prop: Property) -> bool:
    """Edit or delete a listing: the owning host or an admin."""
    return is_admin(actor) or (is_host(actor) and prop.host_id == actor.id)


def owned_property_scope(actor: User) -> ColumnElement[bool]:
    """Listings counted as the actor's own: every listing for an admin."""
    if is_admin(actor):
        return true()
    return Property.host_id == actor.id


# ---------------------------------------------------------------------------
# Verification requests
# ---------------------------------------------------------------------------


def can_view_verification(actor: User, request: VerificationRequest) -> bool:
    if is_admin(actor):
        return True
    return request.host_id == actor.id or request.user_id == actor.id


def can_decide_verification(actor: User, request: VerificationRequest) -> bool:
    return is_admin(actor) or request.host_id == actor.id


def verification_scope(actor: User) -> ColumnElement[bool]:
    """SQL form of ``can_view_verification``."""
    if is_admin(actor):
        return true()
    return (VerificationRequest.host_id == actor.id) | (VerificationRequest.user_id == actor.id)


def hosted_verification_scope(actor: User) -> ColumnElement[bool]:
    """Requests the actor decides on, as opposed to ones they submitted."""
    if is_admin(actor):
        return true()
    return VerificationRequest.host_id == actor.id


# ---------------------------------------------------------------------------
# Bookings
# ---------------------------------------------------------------------------


def can_view_booking(actor: User, booking: Booking, prop: Optional[Property]) -> bool:
    """Guests see their own stays, hosts see stays at their listings."""
    if is_admin(actor):
        return True
    if booking.guest_id == actor.id:
        return True
    return prop is not None and prop.host_id == actor.id


def can_decide_booking(actor: User, prop: Optional[Property]) -> bool:
    """Approve or cancel a booking: the listing's host or an admin.

    Once a property is deleted only an admin can act on its bookings.
    """
    if is_admin(actor):
        return True
    return prop is not None and is_host(actor) and prop.host_id == actor.id


def booking_scope(actor: User) -> ColumnElement[bool]:
    """SQL form of ``can_view_booking``."""
    if is_admin(actor):
        return true()
    return hosted_booking_scope(actor) | (Booking.guest_id == actor.id)


def hosted_booking_scope(actor: User) -> ColumnElement[bool]:
    """Bookings at the actor's listings, excluding stays they made as a guest."""
    if is_admin(actor):
        return true()
    owned = select(Property.id).where(Property.host_id == actor.id)
    return Booking.property_id.in_(owned)


def require(allowed: bool, message: str) -> None:
    """Raise AuthorizationError unless ``allowed``."""
    if not allowed:
        raise AuthorizationError(message)

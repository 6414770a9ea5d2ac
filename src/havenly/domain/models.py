"""SQLAlchemy ORM models for the Havenly marketplace.

All models use SQLite-compatible types:
- String(36) for UUID primary keys
- JSON for list-valued fields (images, amenities)
- Date for stay dates, DateTime for timestamps
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    JSON,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from havenly.infra.database import Base


def _uuid() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------


class User(Base):
    """Platform user: guest, host or super-admin."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_uuid)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)  # stored lower-cased
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="GUEST")  # GUEST, HOST, SUPERADMIN
    avatar_url = Column(String(500), nullable=True)
    is_online = Column(Boolean, default=False)
    id_verified = Column(Boolean, default=False)  # global override for all hosts
    created_at = Column(DateTime, default=_now)

    properties = relationship("Property", back_populates="host")


class VerificationRequest(Base):
    """Identity verification scoped to one (guest, host) pair."""

    __tablename__ = "verification_requests"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    host_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default="pending")  # pending, approved, rejected
    document_url = Column(Text, nullable=False)
    submitted_at = Column(DateTime, default=_now)
    decided_at = Column(DateTime, nullable=True)
    decided_by = Column(String(36), nullable=True)


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


class Property(Base):
    """A rentable listing owned by exactly one host."""

    __tablename__ = "properties"

    id = Column(String(36), primary_key=True, default=_uuid)
    host_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, default="")
    price_per_night = Column(Float, nullable=False)
    location = Column(String(255), nullable=False)
    category = Column(String(50), nullable=False, default="Villa")
    images = Column(JSON, default=list)
    rating = Column(Float, default=0.0)
    reviews_count = Column(Integer, default=0)
    amenities = Column(JSON, default=list)
    max_guests = Column(Integer, nullable=False, default=1)
    status = Column(String(20), nullable=False, default="available")  # available, maintenance
    tax_rate = Column(Float, default=0.0)  # informational; booking fees use the fixed policy
    created_at = Column(DateTime, default=_now)
    updated_at = Column(DateTime, default=_now, onupdate=_now)

    host = relationship("User", back_populates="properties")


class WatchlistEntry(Base):
    """A property a user has saved to their watchlist."""

    __tablename__ = "watchlist_entries"
    __table_args__ = (UniqueConstraint("user_id", "property_id", name="uq_watchlist_user_property"),)

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    property_id = Column(String(36), nullable=False, index=True)
    created_at = Column(DateTime, default=_now)


# ---------------------------------------------------------------------------
# Bookings
# ---------------------------------------------------------------------------


class Booking(Base):
    """A guest's paid request to stay at a property.

    ``property_id`` is not a foreign key; bookings outlive a deleted property.
    """

    __tablename__ = "bookings"

    id = Column(String(36), primary_key=True, default=_uuid)
    property_id = Column(String(36), nullable=False, index=True)
    guest_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    check_in = Column(Date, nullable=False)
    check_out = Column(Date, nullable=False)
    guests_count = Column(Integer, nullable=False, default=1)
    total_price = Column(Float, nullable=False)
    tax_amount = Column(Float, nullable=False, default=0.0)
    commission_amount = Column(Float, nullable=False, default=0.0)
    status = Column(String(20), nullable=False, default="pending")  # pending, approved, paid, cancelled
    payment_reference = Column(String(64), nullable=True)
    created_at = Column(DateTime, default=_now)
    updated_at = Column(DateTime, default=_now, onupdate=_now)

    events = relationship("BookingEvent", back_populates="booking", order_by="BookingEvent.created_at")


class BookingEvent(Base):
    """Audit record for every booking status change."""

    __tablename__ = "booking_events"

    id = Column(String(36), primary_key=True, default=_uuid)
    booking_id = Column(String(36), ForeignKey("bookings.id"), nullable=False, index=True)
    actor = Column(String(20), nullable=False)  # guest, host, admin, system
    actor_id = Column(String(36), nullable=True)
    from_status = Column(String(20), nullable=True)
    to_status = Column(String(20), nullable=False)
    data = Column(JSON, nullable=True)
    created_at = Column(DateTime, default=_now)

    booking = relationship("Booking", back_populates="events")

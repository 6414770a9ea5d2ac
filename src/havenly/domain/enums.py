"""Domain enumerations for the Havenly marketplace.

All enums use the (str, Enum) pattern to ensure JSON serialization compatibility.
"""

from enum import Enum


class UserRole(str, Enum):
    """Role a user plays on the platform."""

    GUEST = "GUEST"
    HOST = "HOST"
    SUPERADMIN = "SUPERADMIN"


class PropertyStatus(str, Enum):
    """Whether a listing can currently be booked."""

    AVAILABLE = "available"
    MAINTENANCE = "maintenance"


class PropertyCategory(str, Enum):
    """Listing categories shown in the catalog filter."""

    VILLA = "Villa"
    APARTMENT = "Apartamento"
    HOUSE = "Casa"
    CABIN = "Cabaña"


class VerificationStatus(str, Enum):
    """Status of a per-host identity verification request."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class VerificationDecision(str, Enum):
    """Decision a host or admin records on a verification request."""

    APPROVE = "approve"
    REJECT = "reject"


class Eligibility(str, Enum):
    """Whether a guest may book a given host's property."""

    VERIFIED = "verified"
    PENDING = "pending"
    UNVERIFIED = "unverified"


class BookingStatus(str, Enum):
    """Status of a booking through its lifecycle."""

    PENDING = "pending"
    APPROVED = "approved"
    PAID = "paid"
    CANCELLED = "cancelled"


class BookingDecision(str, Enum):
    """Action a host or admin takes on a booking."""

    APPROVE = "approve"
    APPROVE_PAYMENT = "approvePayment"
    CANCEL = "cancel"


class BookingActor(str, Enum):
    """Who is driving a booking state transition."""

    GUEST = "guest"
    HOST = "host"
    ADMIN = "admin"
    SYSTEM = "system"

"""Pydantic v2 schemas for API request/response validation."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from havenly.domain.enums import (
    BookingDecision,
    BookingStatus,
    Eligibility,
    PropertyStatus,
    UserRole,
    VerificationDecision,
)


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


class UserCreate(BaseModel):
    """Schema for registering a new user."""

    email: EmailStr
    password: str = Field(min_length=1)
    name: str = Field(min_length=1)
    role: UserRole = UserRole.GUEST
    avatar_url: str | None = None


class UserLogin(BaseModel):
    """Schema for user login."""

    email: str
    password: str


class UserResponse(BaseModel):
    """Schema for user API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    role: UserRole
    avatar_url: str | None = None
    is_online: bool = False
    id_verified: bool = False


class UserUpdate(BaseModel):
    """Schema for updating the caller's profile."""

    name: str | None = None
    avatar_url: str | None = None


class TokenResponse(BaseModel):
    """Schema for JWT token responses."""

    access_token: str
    token_type: str = "bearer"
    user: UserResponse


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


class PropertyCreate(BaseModel):
    """Schema for a host listing a new property."""

    title: str = Field(min_length=1)
    description: str = ""
    price_per_night: float = Field(gt=0)
    location: str = Field(min_length=1)
    category: str = "Villa"
    images: list[str] = Field(default_factory=list)
    amenities: list[str] = Field(default_factory=list)
    max_guests: int = Field(default=4, ge=1)
    status: PropertyStatus = PropertyStatus.AVAILABLE
    tax_rate: float = Field(default=0.0, ge=0)
    host_id: str | None = None  # admins may list on behalf of a host


class PropertyUpdate(BaseModel):
    """Partial update of a property; omitted fields are left unchanged."""

    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    price_per_night: float | None = Field(default=None, gt=0)
    location: str | None = Field(default=None, min_length=1)
    category: str | None = None
    images: list[str] | None = None
    amenities: list[str] | None = None
    max_guests: int | None = Field(default=None, ge=1)
    status: PropertyStatus | None = None
    tax_rate: float | None = Field(default=None, ge=0)


class PropertyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    host_id: str
    title: str
    description: str | None = ""
    price_per_night: float
    location: str
    category: str
    images: list[str] = Field(default_factory=list)
    rating: float = 0.0
    reviews_count: int = 0
    amenities: list[str] = Field(default_factory=list)
    max_guests: int
    status: PropertyStatus
    tax_rate: float = 0.0
    is_watchlisted: bool = False


class DescriptionRequest(BaseModel):
    details: str = Field(min_length=1)


class AdviceRequest(BaseModel):
    user_context: str = "Busco una estancia relajante con buenas vistas y céntrica."


class TextResponse(BaseModel):
    text: str


# ---------------------------------------------------------------------------
# Verification
# ---------------------------------------------------------------------------


class VerificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    host_id: str
    status: str
    document_url: str
    submitted_at: datetime | None = None
    decided_at: datetime | None = None
    decided_by: str | None = None


class VerificationDecisionRequest(BaseModel):
    decision: VerificationDecision


class EligibilityResponse(BaseModel):
    property_id: str
    host_id: str
    eligibility: Eligibility


# ---------------------------------------------------------------------------
# Booking
# ---------------------------------------------------------------------------


class QuoteRequest(BaseModel):
    check_in: date
    check_out: date


class QuoteResponse(BaseModel):
    property_id: str
    check_in: date
    check_out: date
    nights: int
    total: float
    valid: bool


class CardDetails(BaseModel):
    """Card data passed straight to the payment simulator. Never validated."""

    number: str = ""
    holder_name: str = ""
    expiry: str = ""
    cvc: str = ""


class BookingCreate(BaseModel):
    property_id: str
    check_in: date
    check_out: date
    guests_count: int = 1
    card: CardDetails = Field(default_factory=CardDetails)


class BookingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    property_id: str
    guest_id: str
    check_in: date
    check_out: date
    guests_count: int
    total_price: float
    tax_amount: float
    commission_amount: float
    status: BookingStatus
    payment_reference: str | None = None
    created_at: datetime | None = None


class BookingDecisionRequest(BaseModel):
    decision: BookingDecision
    reason: str | None = None


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------


class DashboardResponse(BaseModel):
    total_revenue: float
    property_count: int
    active_bookings: int
    pending_bookings: int
    pending_verifications: int

"""Demo data loaded into the marketplace store at startup."""

import logging
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from havenly.domain.enums import BookingActor, BookingStatus, UserRole
from havenly.domain.models import Booking, BookingEvent, Property, User
from havenly.services.auth_service import create_user

logger = logging.getLogger(__name__)

SEED_USERS = [
    {
        "user_id": "u-admin",
        "name": "Master Admin",
        "email": "admin@vacationrentals.com",
        "password": "A-Strong-P@ss123!",
        "role": UserRole.SUPERADMIN.value,
        "avatar_url": "https://i.pravatar.cc/150?u=admin",
        "id_verified": True,
    },
    {
        "user_id": "u-host",
        "name": "Host Manager",
        "email": "hostmanager@vacationrentals.com",
        "password": "H-Manager-P@ss123!",
        "role": UserRole.HOST.value,
        "avatar_url": "https://i.pravatar.cc/150?u=host",
        "id_verified": True,
    },
    {
        "user_id": "u-guest",
        "name": "Test Guest",
        "email": "testuser@vacationrentals.com",
        "password": "T-User-P@ss123!",
        "role": UserRole.GUEST.value,
        "avatar_url": "https://i.pravatar.cc/150?u=guest",
        "id_verified": False,
    },
]

SEED_PROPERTIES = [
    {
        "id": "p1",
        "host_id": "u-host",
        "title": "Villa Moderna con Vista al Mar",
        "description": (
            "Hermosa villa con impresionantes vistas al océano, piscina privada "
            "y todas las comodidades modernas."
        ),
        "price_per_night": 250.0,
        "location": "Marbella, España",
        "category": "Villa",
        "images": [
            "https://images.unsplash.com/photo-1613490493576-7fde63acd811?q=80&w=1000&auto=format&fit=crop",
            "https://images.unsplash.com/photo-1512917774080-9991f1c4c750?q=80&w=1000&auto=format&fit=crop",
            "https://images.unsplash.com/photo-1613977257363-707ba9348227?q=80&w=1000&auto=format&fit=crop",
        ],
        "rating": 4.8,
        "reviews_count": 127,
        "amenities": ["WiFi", "Piscina", "Aire Acondicionado", "Cocina", "TV", "Parking"],
        "max_guests": 4,
        "status": "available",
        "tax_rate": 0.0625,
    },
    {
        "id": "p2",
        "host_id": "u-host",
        "title": "Apartamento Céntrico de Lujo",
        "description": (
            "Elegante apartamento en el corazón de la ciudad, cerca de los "
            "mejores restaurantes y museos."
        ),
        "price_per_night": 180.0,
        "location": "Madrid, España",
        "category": "Apartamento",
        "images": [
            "https://images.unsplash.com/photo-1502672260266-1c1ef2d93688?q=80&w=1000&auto=format&fit=crop",
        ],
        "rating": 4.6,
        "reviews_count": 89,
        "amenities": ["WiFi", "Aire Acondicionado", "Cocina"],
        "max_guests": 2,
        "status": "available",
        "tax_rate": 0.0625,
    },
]

SEED_BOOKINGS = [
    {
        "id": "b1",
        "property_id": "p1",
        "guest_id": "u-guest",
        "check_in": date(2024, 6, 1),
        "check_out": date(2024, 6, 5),
        "guests_count": 2,
        "total_price": 1000.0,
        "tax_amount": 100.0,
        "commission_amount": 50.0,
        "status": BookingStatus.PAID.value,
    },
]


async def seed_marketplace(db: AsyncSession) -> dict[str, int]:
    """Insert any demo rows that are missing. Caller commits.

    Returns:
        Count of rows created per entity type.
    """
    stats = {"users": 0, "properties": 0, "bookings": 0}

    for row in SEED_USERS:
        if await db.get(User, row["user_id"]) is None:
            await create_user(db, **row)
            stats["users"] += 1

    for row in SEED_PROPERTIES:
        if await db.get(Property, row["id"]) is None:
            db.add(Property(**row))
            stats["properties"] += 1
    await db.flush()

    for row in SEED_BOOKINGS:
        if await db.get(Booking, row["id"]) is None:
            db.add(Booking(**row))
            db.add(BookingEvent(
                booking_id=row["id"],
                actor=BookingActor.SYSTEM.value,
                from_status=None,
                to_status=row["status"],
                data={"seed": True},
            ))
            stats["bookings"] += 1
    await db.flush()

    return stats

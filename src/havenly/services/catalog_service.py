"""Property catalog: listing CRUD, search and per-user watchlists."""

import logging
from typing import Optional

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from havenly.domain.errors import NotFoundError, ValidationError
from havenly.domain.models import Property, User, WatchlistEntry
from havenly.domain.schemas import PropertyCreate, PropertyUpdate
from havenly.services import access_policy

logger = logging.getLogger(__name__)

ALL_CATEGORIES = "Todos"
DEFAULT_PROPERTY_IMAGE = "https://images.unsplash.com/photo-1613490493576-7fde63acd811?q=80&w=1000"


async def get_property_or_raise(db: AsyncSession, property_id: str) -> Property:
    prop = await db.get(Property, property_id)
    if prop is None:
        raise NotFoundError("Property not found")
    return prop


async def search_properties(
    db: AsyncSession,
    search: Optional[str] = None,
    category: Optional[str] = None,
    host_id: Optional[str] = None,
) -> list[Property]:
    """Filter listings by free-text title/location match, category and host."""
    query = select(Property)
    if search:
        pattern = f"%{search.lower()}%"
        query = query.where(
            or_(
                func.lower(Property.title).like(pattern),
                func.lower(Property.location).like(pattern),
            )
        )
    if category and category != ALL_CATEGORIES:
        query = query.where(Property.category == category)
    if host_id:
        query = query.where(Property.host_id == host_id)
    query = query.order_by(Property.created_at.desc())

    result = await db.execute(query)
    return list(result.scalars().all())


async def list_managed_properties(
    db: AsyncSession, acting_user: User, search: Optional[str] = None
) -> list[Property]:
    """Listings the user can manage: all for admins, owned ones for hosts."""
    if access_policy.is_admin(acting_user):
        return await search_properties(db, search=search)
    access_policy.require(access_policy.is_host(acting_user), "Only hosts manage listings")
    return await search_properties(db, search=search, host_id=acting_user.id)


async def create_property(
    db: AsyncSession, acting_user: User, data: PropertyCreate
) -> Property:
    access_policy.require(
        access_policy.can_create_property(acting_user),
        "Only hosts and admins can create listings",
    )

    host_id = acting_user.id
    if data.host_id and data.host_id != acting_user.id:
        access_policy.require(
            access_policy.is_admin(acting_user),
            "Only admins can list on behalf of another host",
        )
        host = await db.get(User, data.host_id)
        if host is None or not access_policy.is_host(host):
            raise ValidationError("host_id must reference an existing host")
        host_id = host.id

    prop = Property(
        host_id=host_id,
        title=data.title,
        description=data.description,
        price_per_night=data.price_per_night,
        location=data.location,
        category=data.category,
        images=list(data.images) or [DEFAULT_PROPERTY_IMAGE],
        amenities=list(data.amenities),
        max_guests=data.max_guests,
        status=data.status.value,
        tax_rate=data.tax_rate,
    )
    db.add(prop)
    await db.flush()
    logger.info("Property %s created by %s for host %s", prop.id, acting_user.id, host_id)
    return prop


async def update_property(
    db: AsyncSession, acting_user: User, property_id: str, data: PropertyUpdate
) -> Property:
    prop = await get_property_or_raise(db, property_id)
    access_policy.require(
        access_policy.can_manage_property(acting_user, prop),
        "Only the owning host or an admin can edit this listing",
    )

    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    if "status" in changes:
        changes["status"] = data.status.value
    if "images" in changes and not changes["images"]:
        changes["images"] = [DEFAULT_PROPERTY_IMAGE]
    for field, value in changes.items():
        setattr(prop, field, value)
    await db.flush()

    logger.info("Property %s updated by %s: %s", prop.id, acting_user.id, sorted(changes))
    return prop


async def delete_property(db: AsyncSession, acting_user: User, property_id: str) -> None:
    """Remove a listing immediately. Existing bookings are left untouched."""
    prop = await get_property_or_raise(db, property_id)
    access_policy.require(
        access_policy.can_manage_property(acting_user, prop),
        "Only the owning host or an admin can delete this listing",
    )
    await db.execute(delete(WatchlistEntry).where(WatchlistEntry.property_id == prop.id))
    await db.delete(prop)
    await db.flush()
    logger.info("Property %s deleted by %s", property_id, acting_user.id)


# ---------------------------------------------------------------------------
# Watchlist
# ---------------------------------------------------------------------------


async def watchlisted_ids(db: AsyncSession, user: Optional[User]) -> set[str]:
    if user is None:
        return set()
    result = await db.execute(
        select(WatchlistEntry.property_id).where(WatchlistEntry.user_id == user.id)
    )
    return set(result.scalars().all())


async def add_to_watchlist(db: AsyncSession, user: User, property_id: str) -> None:
    await get_property_or_raise(db, property_id)
    if property_id in await watchlisted_ids(db, user):
        return
    db.add(WatchlistEntry(user_id=user.id, property_id=property_id))
    await db.flush()


async def remove_from_watchlist(db: AsyncSession, user: User, property_id: str) -> None:
    await db.execute(
        delete(WatchlistEntry).where(
            WatchlistEntry.user_id == user.id,
            WatchlistEntry.property_id == property_id,
        )
    )
    await db.flush()


async def list_watchlist(db: AsyncSession, user: User) -> list[Property]:
    result = await db.execute(
        select(Property)
        .join(WatchlistEntry, WatchlistEntry.property_id == Property.id)
        .where(WatchlistEntry.user_id == user.id)
        .order_by(WatchlistEntry.created_at.desc())
    )
    return list(result.scalars().all())

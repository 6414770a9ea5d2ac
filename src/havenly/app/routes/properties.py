"""Property catalog routes: browsing, listing management and the watchlist."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from havenly.app.errors import to_http
from havenly.app.routes.auth import get_current_user_dep, get_optional_user_dep, require_role
from havenly.domain.enums import UserRole
from havenly.domain.errors import HavenlyError
from havenly.domain.models import Property, User
from havenly.domain.schemas import (
    AdviceRequest,
    DescriptionRequest,
    PropertyCreate,
    PropertyResponse,
    PropertyUpdate,
    TextResponse,
)
from havenly.infra.database import get_db
from havenly.services import advice_service, catalog_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/properties", tags=["properties"])
watchlist_router = APIRouter(prefix="/api/watchlist", tags=["watchlist"])


def serialize_property(prop: Property, watchlisted: set[str] | None = None) -> dict:
    data = PropertyResponse.model_validate(prop).model_dump()
    data["is_watchlisted"] = prop.id in (watchlisted or set())
    return data


@router.get("")
async def list_properties(
    search: Optional[str] = Query(None, description="Match on title or location"),
    category: Optional[str] = Query(None, description="Category, or 'Todos' for all"),
    user: Optional[User] = Depends(get_optional_user_dep),
    db: AsyncSession = Depends(get_db),
):
    """Public catalog with search and category filter."""
    properties = await catalog_service.search_properties(db, search=search, category=category)
    watchlisted = await catalog_service.watchlisted_ids(db, user)
    return [serialize_property(p, watchlisted) for p in properties]


@router.get("/mine")
async def list_my_properties(
    search: Optional[str] = Query(None),
    user: User = Depends(require_role(UserRole.HOST, UserRole.SUPERADMIN)),
    db: AsyncSession = Depends(get_db),
):
    """Listings the caller manages (all of them for admins)."""
    try:
        properties = await catalog_service.list_managed_properties(db, user, search=search)
    except HavenlyError as e:
        raise to_http(e)
    return [serialize_property(p) for p in properties]


@router.post("/describe", response_model=TextResponse)
async def describe_property(
    body: DescriptionRequest,
    user: User = Depends(require_role(UserRole.HOST, UserRole.SUPERADMIN)),
):
    """Draft listing copy from the host's notes."""
    text = await advice_service.generate_smart_description(body.details)
    return TextResponse(text=text)


@router.get("/{property_id}")
async def get_property(
    property_id: str,
    user: Optional[User] = Depends(get_optional_user_dep),
    db: AsyncSession = Depends(get_db),
):
    try:
        prop = await catalog_service.get_property_or_raise(db, property_id)
    except HavenlyError as e:
        raise to_http(e)
    watchlisted = await catalog_service.watchlisted_ids(db, user)
    return serialize_property(prop, watchlisted)


@router.post("", status_code=201)
async def create_property(
    body: PropertyCreate,
    user: User = Depends(get_current_user_dep),
    db: AsyncSession = Depends(get_db),
):
    try:
        prop = await catalog_service.create_property(db, user, body)
    except HavenlyError as e:
        raise to_http(e)
    await db.commit()
    return serialize_property(prop)


@router.patch("/{property_id}")
async def update_property(
    property_id: str,
    body: PropertyUpdate,
    user: User = Depends(get_current_user_dep),
    db: AsyncSession = Depends(get_db),
):
    try:
        prop = await catalog_service.update_property(db, user, property_id, body)
    except HavenlyError as e:
        raise to_http(e)
    await db.commit()
    return serialize_property(prop)


@router.delete("/{property_id}", status_code=204)
async def delete_property(
    property_id: str,
    user: User = Depends(get_current_user_dep),
    db: AsyncSession = Depends(get_db),
):
    try:
        await catalog_service.delete_property(db, user, property_id)
    except HavenlyError as e:
        raise to_http(e)
    await db.commit()


@router.post("/{property_id}/advice", response_model=TextResponse)
async def property_advice(
    property_id: str,
    body: AdviceRequest,
    db: AsyncSession = Depends(get_db),
):
    """Concierge advice for a listing. Degrades to a fallback message."""
    try:
        prop = await catalog_service.get_property_or_raise(db, property_id)
    except HavenlyError as e:
        raise to_http(e)
    text = await advice_service.get_advice(prop.title, body.user_context)
    return TextResponse(text=text)


# ---------------------------------------------------------------------------
# Watchlist
# ---------------------------------------------------------------------------


@router.post("/{property_id}/watchlist", status_code=204)
async def add_to_watchlist(
    property_id: str,
    user: User = Depends(get_current_user_dep),
    db: AsyncSession = Depends(get_db),
):
    try:
        await catalog_service.add_to_watchlist(db, user, property_id)
    except HavenlyError as e:
        raise to_http(e)
    await db.commit()


@router.delete("/{property_id}/watchlist", status_code=204)
async def remove_from_watchlist(
    property_id: str,
    user: User = Depends(get_current_user_dep),
    db: AsyncSession = Depends(get_db),
):
    await catalog_service.remove_from_watchlist(db, user, property_id)
    await db.commit()


@watchlist_router.get("")
async def list_watchlist(
    user: User = Depends(get_current_user_dep),
    db: AsyncSession = Depends(get_db),
):
    properties = await catalog_service.list_watchlist(db, user)
    watchlisted = {p.id for p in properties}
    return [serialize_property(p, watchlisted) for p in properties]

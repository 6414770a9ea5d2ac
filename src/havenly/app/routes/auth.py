"""Authentication routes and the current-user dependencies."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from havenly.domain.enums import UserRole
from havenly.domain.errors import ValidationError
from havenly.domain.models import User
from havenly.domain.schemas import (
    TokenResponse,
    UserCreate,
    UserLogin,
    UserResponse,
    UserUpdate,
)
from havenly.infra.database import get_db
from havenly.services.auth_service import (
    authenticate,
    create_access_token,
    create_user,
    decode_token,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

SELF_SERVICE_ROLES = {UserRole.GUEST, UserRole.HOST}


async def _user_from_request(request: Request, db: AsyncSession) -> Optional[User]:
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith("Bearer "):
        return None
    payload = decode_token(auth_header.removeprefix("Bearer "))
    if not payload or "sub" not in payload:
        return None
    return await db.get(User, payload["sub"])


async def get_current_user_dep(
    request: Request, db: AsyncSession = Depends(get_db)
) -> User:
    """Dependency: extract current user from Bearer token."""
    user = await _user_from_request(request, db)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing, invalid or expired token",
        )
    return user


async def get_optional_user_dep(
    request: Request, db: AsyncSession = Depends(get_db)
) -> Optional[User]:
    """Optional auth: returns User if valid token present, else None."""
    return await _user_from_request(request, db)


def require_role(*roles: UserRole):
    """Factory: dependency that checks user has one of the required roles."""
    allowed = {role.value for role in roles}

    async def checker(user: User = Depends(get_current_user_dep)):
        if user.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return user

    return checker


@router.post("/register", response_model=TokenResponse)
async def register(data: UserCreate, db: AsyncSession = Depends(get_db)):
    if data.role not in SELF_SERVICE_ROLES:
        raise HTTPException(status_code=400, detail="Role not available for self-registration")
    try:
        user = await create_user(
            db, data.email, data.password, data.name, data.role.value, data.avatar_url
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    await db.commit()

    token = create_access_token(user.id, user.role)
    return TokenResponse(access_token=token, user=UserResponse.model_validate(user))


@router.post("/login", response_model=TokenResponse)
async def login(data: UserLogin, db: AsyncSession = Depends(get_db)):
    user = await authenticate(db, data.email, data.password)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid email or password")
    user.is_online = True
    await db.commit()
    logger.info("User %s logged in", user.id)
    token = create_access_token(user.id, user.role)
    return TokenResponse(access_token=token, user=UserResponse.model_validate(user))


@router.get("/me", response_model=UserResponse)
async def me(user: User = Depends(get_current_user_dep)):
    return UserResponse.model_validate(user)


@router.patch("/profile", response_model=UserResponse)
async def update_profile(
    data: UserUpdate,
    user: User = Depends(get_current_user_dep),
    db: AsyncSession = Depends(get_db),
):
    if data.name is not None:
        user.name = data.name
    if data.avatar_url is not None:
        user.avatar_url = data.avatar_url
    await db.commit()
    await db.refresh(user)
    return UserResponse.model_validate(user)

"""Authentication service: password hashing and JWT tokens."""

import logging
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from havenly.app.config import get_settings
from havenly.domain.enums import UserRole
from havenly.domain.errors import ValidationError
from havenly.domain.models import User

logger = logging.getLogger(__name__)

settings = get_settings()
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def normalize_email(email: str) -> str:
    return email.strip().lower()


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def create_access_token(user_id: str, role: str) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.jwt_expiration_minutes)
    payload = {"sub": user_id, "role": role, "exp": expire}
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict | None:
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == normalize_email(email)))
    return result.scalar_one_or_none()


async def authenticate(db: AsyncSession, email: str, password: str) -> User | None:
    """Return the user for valid credentials, or None.

    The configured demo password unlocks any account.
    """
    user = await get_user_by_email(db, email)
    if user is None:
        return None
    if settings.demo_password and password == settings.demo_password:
        logger.info("Demo login for %s", user.email)
        return user
    if not verify_password(password, user.password_hash):
        return None
    return user


async def create_user(
    db: AsyncSession,
    email: str,
    password: str,
    name: str,
    role: str = UserRole.GUEST.value,
    avatar_url: str | None = None,
    id_verified: bool = False,
    user_id: str | None = None,
) -> User:
    """Register a user. Emails are unique regardless of case.

    Raises:
        ValidationError: The email is already registered.
    """
    if await get_user_by_email(db, email):
        raise ValidationError("Email already registered")

    user = User(
        name=name,
        email=normalize_email(email),
        password_hash=hash_password(password),
        role=role,
        avatar_url=avatar_url or f"https://i.pravatar.cc/150?u={normalize_email(email)}",
        is_online=True,
        id_verified=id_verified,
    )
    if user_id:
        user.id = user_id
    db.add(user)
    await db.flush()
    logger.info("User %s registered with role %s", user.id, role)
    return user

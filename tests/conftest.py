"""Shared test infrastructure for the Havenly test suite.

Provides:
- session_factory: sessions on a per-test SQLite file, one connection each
- db_session: async session with all tables created
- make_user / make_property / make_verification: factories for domain rows
- payment_gateway: zero-latency PaymentSimulator
- api_client: httpx AsyncClient bound to the FastAPI app and session_factory
- auth_headers: bearer header factory for a given user
"""

from datetime import datetime, timezone

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

# Import Base first, then models to register all tables
from havenly.infra.database import Base, get_db

import havenly.domain.models  # noqa: F401

from havenly.domain.enums import UserRole, VerificationStatus
from havenly.domain.models import Property, User, VerificationRequest
from havenly.services.auth_service import create_access_token, hash_password
from havenly.services.payment_simulator import PaymentSimulator, get_payment_gateway

TEST_PASSWORD = "correct-horse"
_TEST_PASSWORD_HASH = hash_password(TEST_PASSWORD)


# ---------------------------------------------------------------------------
# Database session fixture
# ---------------------------------------------------------------------------

@pytest.fixture
async def session_factory(tmp_path):
    """Fresh SQLite file with all tables; each session gets its own connection."""
    db_file = tmp_path / "havenly-test.db"
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{db_file}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with engine.begin() as conn:
        await conn.execute(text("PRAGMA journal_mode=WAL"))

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session
        await session.rollback()


# ---------------------------------------------------------------------------
# Domain factories
# ---------------------------------------------------------------------------

@pytest.fixture
def make_user(db_session):
    """Factory that creates a User row.

    Usage:
        host = await make_user(role=UserRole.HOST, name="Host H")
    """
    counter = {"n": 0}

    async def _factory(
        role: UserRole = UserRole.GUEST,
        name: str | None = None,
        email: str | None = None,
        id_verified: bool = False,
    ) -> User:
        counter["n"] += 1
        n = counter["n"]
        user = User(
            name=name or f"{role.value.title()} {n}",
            email=email or f"{role.value.lower()}{n}@test.com",
            password_hash=_TEST_PASSWORD_HASH,
            role=role.value,
            id_verified=id_verified,
        )
        db_session.add(user)
        await db_session.flush()
        return user

    return _factory


@pytest.fixture
def make_property(db_session):
    """Factory that creates a Property owned by ``host``.

    Usage:
        prop = await make_property(host, price_per_night=250)
    """
    async def _factory(
        host: User,
        title: str = "Villa Moderna con Vista al Mar",
        price_per_night: float = 250.0,
        max_guests: int = 4,
        location: str = "Marbella, España",
        category: str = "Villa",
        status: str = "available",
    ) -> Property:
        prop = Property(
            host_id=host.id,
            title=title,
            description="Test listing",
            price_per_night=price_per_night,
            location=location,
            category=category,
            images=["https://example.com/p.jpg"],
            amenities=["WiFi"],
            max_guests=max_guests,
            status=status,
            tax_rate=0.0625,
        )
        db_session.add(prop)
        await db_session.flush()
        return prop

    return _factory


@pytest.fixture
def make_verification(db_session):
    """Factory that creates a VerificationRequest for a (guest, host) pair."""
    async def _factory(
        guest: User,
        host: User,
        status: VerificationStatus = VerificationStatus.PENDING,
    ) -> VerificationRequest:
        request = VerificationRequest(
            user_id=guest.id,
            host_id=host.id,
            status=status.value,
            document_url="data:image/png;base64,AAAA",
            submitted_at=datetime.now(timezone.utc),
        )
        db_session.add(request)
        await db_session.flush()
        return request

    return _factory


# ---------------------------------------------------------------------------
# Payment + API fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def payment_gateway():
    return PaymentSimulator(delay_seconds=0)


@pytest.fixture
async def api_client(session_factory, payment_gateway):
    """AsyncClient against the app, with db and payment dependencies overridden."""
    from havenly.app.main import app

    async def _get_test_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_test_db
    app.dependency_overrides[get_payment_gateway] = lambda: payment_gateway

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _factory(user: User) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}

    return _factory

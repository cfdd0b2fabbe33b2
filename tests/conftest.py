"""Test fixtures — async test client, test database, factories."""
import os
import uuid
from datetime import date, datetime, timedelta, timezone
from typing import AsyncGenerator

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.database import Base
from app.api.deps import get_db
from app.core.metrics import QueryMetrics
from app.main import app
from app.models import Property, PropertyAmenity, PropertyPhoto


TEST_DATABASE_URL = "sqlite+aiosqlite:///./test.db"

# NullPool: each test runs on its own event loop
test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)
test_session_factory = async_sessionmaker(
    test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

OWNER = {"X-User-Id": "owner-1"}
OTHER_USER = {"X-User-Id": "someone-else"}
ADMIN = {"X-User-Id": "admin-1", "X-User-Role": "admin"}


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create tables and yield a test database session."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with test_session_factory() as session:
        yield session

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture(scope="function")
async def metrics() -> QueryMetrics:
    collector = QueryMetrics(slow_threshold_ms=10_000)
    app.state.metrics = collector
    return collector


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession, metrics: QueryMetrics) -> AsyncGenerator[AsyncClient, None]:
    """Yield an HTTP test client with the test DB injected."""

    async def override_get_db():
        try:
            yield db_session
            await db_session.commit()
        except Exception:
            await db_session.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


def make_property_payload(**overrides) -> dict:
    """Create a valid rent listing creation payload (camelCase, as clients send it)."""
    defaults = {
        "listingType": "rent",
        "category": "flat",
        "title": "Spacious 2BHK near Koregaon Park",
        "propertyType": "2BHK",
        "description": "Bright flat with a balcony and covered parking.",
        "furnishing": "semi",
        "availableFrom": "2026-11-01",
        "city": "Pune",
        "address": "Lane 5, Koregaon Park",
        "monthlyRent": 25000,
        "securityDeposit": 50000,
        "preferredTenants": "family",
        "bedrooms": 2,
        "bathrooms": 2,
        "amenities": ["wifi", "parking"],
        "photos": ["https://cdn.example.com/p/1.jpg", "https://cdn.example.com/p/2.jpg"],
        "ownerName": "Asha Rao",
        "ownerPhone": "+91 90000 00000",
        "ownerEmail": "asha@example.com",
    }
    defaults.update(overrides)
    return {k: v for k, v in defaults.items() if v is not None}


def make_buy_payload(**overrides) -> dict:
    """Create a valid buy listing creation payload."""
    payload = make_property_payload(
        listingType="buy",
        category="house",
        title="Independent villa with garden",
        propertyType="Villa",
        monthlyRent=None,
        securityDeposit=None,
        preferredTenants=None,
        sellingPrice=15_000_000,
        possessionStatus="ready",
        loanAvailable=True,
    )
    payload.update(overrides)
    return {k: v for k, v in payload.items() if v is not None}


_BASE_TIME = datetime(2026, 1, 1, tzinfo=timezone.utc)


async def insert_property(db: AsyncSession, minutes: int = 0, **overrides) -> Property:
    """Insert a Property row directly, bypassing the create rules.

    `minutes` offsets created_at from a fixed base so ordering is deterministic.
    Pass `listing_type=None` for a legacy row.
    """
    token = uuid.uuid4().hex[:8]
    amenities = overrides.pop("amenities", [])
    photos = overrides.pop("photos", [])
    fields = {
        "listing_number": f"LIST-TEST-{token}",
        "slug": f"test-property-{token}",
        "category": "flat",
        "title": "Test flat",
        "property_type": "2BHK",
        "listing_type": "rent",
        "description": "",
        "furnishing": "semi",
        "available_from": date(2026, 11, 1),
        "city": "Pune",
        "address": "Baner Road",
        "monthly_rent": 20000,
        "bedrooms": 2,
        "owner_id": "owner-1",
        "owner_name": "Test Owner",
        "owner_phone": "123",
        "created_at": _BASE_TIME + timedelta(minutes=minutes),
        "updated_at": _BASE_TIME + timedelta(minutes=minutes),
    }
    fields.update(overrides)
    prop = Property(
        **fields,
        amenities=[PropertyAmenity(name=a) for a in amenities],
        photos=[PropertyPhoto(url=u, position=i) for i, u in enumerate(photos)],
    )
    db.add(prop)
    await db.commit()
    return prop

"""
Pytest fixtures for the booking-mode services, the API client and the
SQL repositories.

Services run against in-memory repositories and a fixed clock. SQL tests use
an in-memory SQLite database unless TEST_DATABASE_URL points elsewhere.
"""

import os
from datetime import datetime, timezone
from decimal import Decimal
from typing import AsyncGenerator
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from eventlane.api.deps import get_clock, get_commerce_repository, get_event_repository, get_lock
from eventlane.core.config import Settings
from eventlane.db.base import Base
from eventlane.domain import Money, Product, Storefront, Variation
from eventlane.infrastructure.memory import InMemoryCommerceRepository, InMemoryEventRepository
from eventlane.main import app
from eventlane.services.availability_service import CapacityAvailabilityOracle
from eventlane.services.event_mode_manager import EventModeManager
from eventlane.services.event_product_manager import EventProductManager
from eventlane.services.event_type_service import EventTypeService
from eventlane.services.interfaces import Clock, LocalSyncLock
from eventlane.services.ticket_config_service import TicketConfigService
from eventlane.services.ticket_type_manager import TicketTypeManager

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)

TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")


class FixedClock(Clock):
    """Clock frozen at a given instant; counts how often it is read."""

    def __init__(self, now: datetime = NOW):
        self.current = now
        self.reads = 0

    def now(self) -> datetime:
        self.reads += 1
        return self.current


def make_product(*prices: str, published: bool = True, currency: str = "AUD") -> Product:
    """Ticket product with one variation per price."""
    return Product(
        title="Test Product",
        published=published,
        variations=[
            Variation(
                handle=uuid4(),
                sku=f"sku-{index}",
                title=f"Test Product – Tier {index}",
                price=Money(Decimal(price), currency),
            )
            for index, price in enumerate(prices)
        ],
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(DEFAULT_CURRENCY="AUD")


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def storefront() -> Storefront:
    return Storefront(id=1, name="EventLane", default_currency="AUD", is_default=True)


@pytest.fixture
def event_repo() -> InMemoryEventRepository:
    return InMemoryEventRepository()


@pytest.fixture
def commerce_repo(storefront: Storefront) -> InMemoryCommerceRepository:
    return InMemoryCommerceRepository([storefront])


@pytest.fixture
def sync_lock() -> LocalSyncLock:
    return LocalSyncLock(timeout=0.5)


@pytest.fixture
def mode_manager(event_repo, clock, settings) -> EventModeManager:
    return EventModeManager(CapacityAvailabilityOracle(event_repo), clock, settings)


@pytest.fixture
def type_service(mode_manager) -> EventTypeService:
    return EventTypeService(mode_manager)


@pytest.fixture
def product_manager(event_repo, commerce_repo, sync_lock, settings) -> EventProductManager:
    return EventProductManager(event_repo, commerce_repo, sync_lock, settings)


@pytest.fixture
def ticket_manager(event_repo, commerce_repo, sync_lock, settings) -> TicketTypeManager:
    return TicketTypeManager(event_repo, commerce_repo, sync_lock, settings)


@pytest.fixture
def ticket_configs(event_repo, ticket_manager) -> TicketConfigService:
    return TicketConfigService(event_repo, ticket_manager)


@pytest_asyncio.fixture(scope="function")
async def client(event_repo, commerce_repo, clock, sync_lock) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client wired to the in-memory repositories and the fixed clock."""
    app.dependency_overrides[get_event_repository] = lambda: event_repo
    app.dependency_overrides[get_commerce_repository] = lambda: commerce_repo
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_lock] = lambda: sync_lock

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create tables, yield session, then drop tables for isolation."""
    if TEST_DATABASE_URL.startswith("sqlite"):
        engine = create_async_engine(
            TEST_DATABASE_URL,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_async_engine(TEST_DATABASE_URL)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()

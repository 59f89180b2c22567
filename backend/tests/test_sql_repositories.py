"""
Tests for the SQLAlchemy repositories, including a full ticket sync against
a real database.
"""

import asyncio
from datetime import datetime, timezone
from decimal import Decimal

import pytest
import pytest_asyncio
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from eventlane.db.base import Base
from eventlane.domain import Event, EventType, LabelMode, TicketTypeConfig
from eventlane.infrastructure.sql_repositories import SqlCommerceRepository, SqlEventRepository
from eventlane.models import (
    AttendeeModel,
    ProductModel,
    StorefrontModel,
    TicketTypeConfigModel,
    VariationModel,
)
from eventlane.services.event_product_manager import EventProductManager
from eventlane.services.interfaces import LocalSyncLock
from eventlane.services.ticket_type_manager import TicketTypeManager


@pytest_asyncio.fixture
async def repos(db_session):
    db_session.add(StorefrontModel(name="Fallback", default_currency="USD", is_default=False))
    db_session.add(StorefrontModel(name="EventLane", default_currency="AUD", is_default=True))
    await db_session.flush()
    return SqlEventRepository(db_session), SqlCommerceRepository(db_session)


@pytest.mark.asyncio
async def test_default_storefront_prefers_flagged_store(repos):
    _, commerce = repos
    storefront = await commerce.get_default_storefront()
    assert storefront.name == "EventLane"
    assert storefront.default_currency == "AUD"


@pytest.mark.asyncio
async def test_event_round_trip(repos, db_session):
    events, _ = repos
    event = Event(
        title="Spring Gala",
        event_type=EventType.PAID,
        start_at=datetime(2026, 5, 1, 19, 0, tzinfo=timezone.utc),
        rsvp_capacity=50,
        ticket_types=[
            TicketTypeConfig(preset_key="vip", price=Decimal("150.00"), capacity=20),
            TicketTypeConfig(label_mode=LabelMode.CUSTOM, custom_label="Early Bird", price=Decimal("75.00")),
        ],
    )
    await events.save_event(event)
    assert event.id is not None
    assert all(config.id is not None for config in event.ticket_types)

    db_session.expunge_all()
    loaded = await events.get_event(event.id)

    assert loaded.title == "Spring Gala"
    assert loaded.event_type == EventType.PAID
    assert loaded.rsvp_capacity == 50
    assert [(c.label_mode, c.preset_key, c.custom_label, c.price) for c in loaded.ticket_types] == [
        (LabelMode.PRESET, "vip", None, Decimal("150.00")),
        (LabelMode.CUSTOM, None, "Early Bird", Decimal("75.00")),
    ]
    assert loaded.product is None


@pytest.mark.asyncio
async def test_missing_event_is_none(repos):
    events, _ = repos
    assert await events.get_event(404) is None


@pytest.mark.asyncio
async def test_removed_config_rows_are_deleted(repos, db_session):
    events, _ = repos
    event = Event(
        title="Gala",
        event_type=EventType.PAID,
        ticket_types=[TicketTypeConfig(preset_key="vip"), TicketTypeConfig(preset_key="child")],
    )
    await events.save_event(event)

    event.ticket_types.pop(0)
    await events.save_event(event)

    rows = (await db_session.execute(select(TicketTypeConfigModel))).scalars().all()
    assert [row.preset_key for row in rows] == ["child"]


@pytest.mark.asyncio
async def test_spring_gala_sync_persists(repos, db_session, sync_lock, settings):
    events, commerce = repos
    manager = TicketTypeManager(events, commerce, sync_lock, settings)
    event = Event(
        title="Spring Gala",
        event_type=EventType.PAID,
        ticket_types=[
            TicketTypeConfig(preset_key="vip", price=Decimal("150.00")),
            TicketTypeConfig(label_mode=LabelMode.CUSTOM, custom_label="Early Bird", price=Decimal("75.00")),
        ],
    )
    await events.save_event(event)

    assert await manager.sync_ticket_types_to_variations(event) is True

    db_session.expunge_all()
    loaded = await events.get_event(event.id)
    product = loaded.product
    assert product.title == "Spring Gala"
    assert product.event_id == event.id
    assert product.storefront.name == "EventLane"
    assert [(v.title, v.price.amount, v.price.currency) for v in product.variations] == [
        ("Spring Gala – VIP", Decimal("150.00"), "AUD"),
        ("Spring Gala – Early Bird", Decimal("75.00"), "AUD"),
    ]
    assert [c.variation_handle for c in loaded.ticket_types] == [v.handle for v in product.variations]


@pytest.mark.asyncio
async def test_removed_ticket_type_variation_survives_as_unpublished(repos, db_session, sync_lock, settings):
    events, commerce = repos
    manager = TicketTypeManager(events, commerce, sync_lock, settings)
    event = Event(
        title="Gala",
        event_type=EventType.PAID,
        ticket_types=[TicketTypeConfig(preset_key="vip", price=Decimal("100")), TicketTypeConfig(preset_key="child")],
    )
    await events.save_event(event)
    await manager.sync_ticket_types_to_variations(event)
    removed = event.ticket_types.pop()
    await events.save_event(event)

    await manager.sync_ticket_types_to_variations(event)

    db_session.expunge_all()
    variation = await commerce.get_variation(removed.variation_handle)
    assert variation is not None
    assert variation.published is False
    assert variation.product_id == event.product.id
    count = len((await db_session.execute(select(VariationModel))).scalars().all())
    assert count == 2


@pytest.mark.asyncio
async def test_rsvp_product_round_trip(repos, db_session, sync_lock, settings):
    events, commerce = repos
    products = EventProductManager(events, commerce, sync_lock, settings)
    event = Event(title="Picnic", event_type=EventType.RSVP)
    await events.save_event(event)

    product = await products.ensure_rsvp_product(event)

    db_session.expunge_all()
    loaded = await events.get_event(event.id)
    assert loaded.product.id == product.id
    assert loaded.product.title == "Picnic – RSVP"
    assert products.is_auto_generated_rsvp_product(loaded.product) is True


@pytest.mark.asyncio
async def test_count_rsvp_attendees(repos, db_session):
    events, _ = repos
    event = Event(title="Picnic", event_type=EventType.RSVP, rsvp_capacity=10)
    await events.save_event(event)
    db_session.add_all([
        AttendeeModel(event_id=event.id, name="Ada", email="ada@example.com"),
        AttendeeModel(event_id=event.id, name="Grace", email="grace@example.com"),
        AttendeeModel(event_id=event.id, name="Linus", email="linus@example.com", status="cancelled"),
        AttendeeModel(event_id=event.id, name="Ken", email="ken@example.com", source="ticket"),
    ])
    await db_session.flush()

    assert await events.count_rsvp_attendees(event.id) == 2


@pytest.mark.asyncio
async def test_concurrent_syncs_from_separate_sessions_share_one_product(tmp_path, settings):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'sync.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    sessions = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    try:
        async with sessions() as session:
            session.add(StorefrontModel(name="EventLane", default_currency="AUD", is_default=True))
            event = Event(
                title="Gala",
                event_type=EventType.PAID,
                ticket_types=[TicketTypeConfig(preset_key="vip", price=Decimal("150.00"), capacity=20)],
            )
            await SqlEventRepository(session).save_event(event)
            await session.commit()

        lock = LocalSyncLock(timeout=5.0)
        async with sessions() as first, sessions() as second:
            # Both requests load the event before either one syncs
            syncs = []
            for session in (first, second):
                events = SqlEventRepository(session)
                manager = TicketTypeManager(events, SqlCommerceRepository(session), lock, settings)
                syncs.append(manager.sync_ticket_types_to_variations(await events.get_event(event.id)))

            results = await asyncio.gather(*syncs)

        assert results == [True, True]
        async with sessions() as session:
            products = (await session.execute(select(ProductModel))).scalars().all()
            variations = (await session.execute(select(VariationModel))).scalars().all()
            configs = (await session.execute(select(TicketTypeConfigModel))).scalars().all()
        assert len(products) == 1
        assert [(v.title, v.published) for v in variations] == [("Gala – VIP", True)]
        assert configs[0].variation_handle == variations[0].handle
    finally:
        await engine.dispose()

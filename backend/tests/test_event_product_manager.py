"""
Tests for the auto-generated RSVP product lifecycle and product sync.
"""

from decimal import Decimal

import pytest

from conftest import make_product
from eventlane.domain import Event, EventType, Money, TicketTypeConfig
from eventlane.infrastructure.memory import InMemoryCommerceRepository
from eventlane.services.event_product_manager import EventProductManager


@pytest.mark.asyncio
async def test_ensure_rsvp_product_creates_and_links(product_manager, event_repo):
    event = Event(title="Community Picnic", event_type=EventType.RSVP)
    await event_repo.save_event(event)

    product = await product_manager.ensure_rsvp_product(event)

    assert product is not None
    assert event.product is product
    assert product.title == "Community Picnic – RSVP"
    assert product.event_id == event.id
    assert len(product.variations) == 1
    variation = product.variations[0]
    assert variation.title == "Free RSVP"
    assert variation.price == Money(Decimal("0.00"), "AUD")
    assert variation.sku.startswith(f"rsvp-{event.id}-rsvp-")
    assert (await event_repo.get_event(event.id)).product is product


@pytest.mark.asyncio
async def test_ensure_rsvp_product_is_idempotent(product_manager, event_repo, commerce_repo):
    event = Event(title="Community Picnic", event_type=EventType.RSVP)
    await event_repo.save_event(event)

    first = await product_manager.ensure_rsvp_product(event)
    second = await product_manager.ensure_rsvp_product(event)

    assert first is second
    assert len(commerce_repo.products) == 1


@pytest.mark.asyncio
async def test_ensure_rsvp_product_replaces_unpublished_product(product_manager, event_repo):
    stale = make_product("0", published=False)
    event = Event(title="Community Picnic", event_type=EventType.RSVP, product=stale)
    await event_repo.save_event(event)

    product = await product_manager.ensure_rsvp_product(event)

    assert product is not stale
    assert event.product is product


@pytest.mark.asyncio
@pytest.mark.parametrize("event_type", [EventType.BOTH, EventType.PAID, EventType.EXTERNAL, None])
async def test_ensure_rsvp_product_only_for_rsvp_events(product_manager, commerce_repo, event_type):
    event = Event(title="Gala", event_type=event_type, id=5)
    assert await product_manager.ensure_rsvp_product(event) is None
    assert commerce_repo.products == []


@pytest.mark.asyncio
async def test_no_storefront_means_no_rsvp_product(event_repo, sync_lock, settings):
    manager = EventProductManager(event_repo, InMemoryCommerceRepository(), sync_lock, settings)
    event = Event(title="Community Picnic", event_type=EventType.RSVP)
    await event_repo.save_event(event)

    assert await manager.ensure_rsvp_product(event) is None
    assert event.product is None


@pytest.mark.asyncio
async def test_draft_product_for_unsaved_event(product_manager):
    product = await product_manager.create_rsvp_product_for_new_event()
    assert product.title == "Untitled Event – RSVP"
    assert product.event_id is None
    assert product.variations[0].event_id is None

    named = await product_manager.create_rsvp_product_for_new_event("Book Club")
    assert named.title == "Book Club – RSVP"


@pytest.mark.asyncio
async def test_sync_repairs_back_reference_and_title(product_manager, event_repo):
    draft = await product_manager.create_rsvp_product_for_new_event()
    event = Event(title="Book Club", event_type=EventType.RSVP, product=draft)
    await event_repo.save_event(event)

    report = await product_manager.sync_product_to_event(event)

    assert report.synced is True
    assert report.warnings == []
    assert draft.event_id == event.id
    assert draft.variations[0].event_id == event.id
    assert draft.title == "Book Club – RSVP"


@pytest.mark.asyncio
async def test_sync_rsvp_event_without_product_creates_one(product_manager, event_repo):
    event = Event(title="Book Club", event_type=EventType.RSVP)
    await event_repo.save_event(event)

    report = await product_manager.sync_product_to_event(event)

    assert report.synced is True
    assert report.product is event.product
    assert product_manager.is_auto_generated_rsvp_product(event.product)


@pytest.mark.asyncio
async def test_sync_keeps_vendor_title_on_hybrid_rsvp_product(product_manager, event_repo):
    product = make_product("0", "25.00")
    event = Event(title="Book Club", event_type=EventType.RSVP, product=product)
    await event_repo.save_event(event)

    await product_manager.sync_product_to_event(event)

    assert product.title == "Test Product"
    assert product.event_id == event.id
    assert [v.title for v in product.variations] == ["Book Club – Tier 1", "Book Club – Tier 2"]


@pytest.mark.asyncio
async def test_renaming_rsvp_event_with_hybrid_product_retitles_variations(product_manager, event_repo, commerce_repo):
    product = make_product("0", "150.00")
    product.variations[0].title = "Free RSVP"
    product.variations[1].title = "Book Club – VIP"
    await commerce_repo.save_product(product)
    event = Event(title="Book Club", event_type=EventType.RSVP, product=product)
    await event_repo.save_event(event)

    event.title = "Reading Circle"
    await event_repo.save_event(event)
    report = await product_manager.sync_product_to_event(event)

    assert report.synced is True
    assert [v.title for v in product.variations] == ["Free RSVP", "Reading Circle – VIP"]
    stored = await commerce_repo.get_variation(product.variations[1].handle)
    assert stored.title == "Reading Circle – VIP"


@pytest.mark.asyncio
@pytest.mark.parametrize("event_type,kind", [(EventType.PAID, "paid"), (EventType.BOTH, "hybrid")])
async def test_ticketed_event_without_product_gets_advisory_warning(product_manager, event_repo, event_type, kind):
    event = Event(title="Gala", event_type=event_type)
    await event_repo.save_event(event)

    report = await product_manager.sync_product_to_event(event)

    assert report.synced is True
    assert report.warnings == [
        f"Please link a ticket product for this {kind} event, or define ticket types below."
    ]


@pytest.mark.asyncio
async def test_ticket_types_silence_the_warning(product_manager, event_repo):
    event = Event(title="Gala", event_type=EventType.PAID, ticket_types=[TicketTypeConfig(price=Decimal("10"))])
    await event_repo.save_event(event)

    report = await product_manager.sync_product_to_event(event)
    assert report.warnings == []


@pytest.mark.asyncio
async def test_sync_retitles_ticket_product_after_rename(product_manager, ticket_manager, event_repo):
    event = Event(
        title="Spring Gala",
        event_type=EventType.PAID,
        ticket_types=[TicketTypeConfig(preset_key="vip", price=Decimal("150"))],
    )
    await event_repo.save_event(event)
    await ticket_manager.sync_ticket_types_to_variations(event)

    event.title = "Summer Gala"
    report = await product_manager.sync_product_to_event(event)

    assert report.synced is True
    assert event.product.title == "Summer Gala"
    assert [v.title for v in event.product.variations] == ["Summer Gala – VIP"]


@pytest.mark.asyncio
async def test_sync_products_rejects_invalid_intent(product_manager):
    report = await product_manager.sync_products(Event(title="Gala", id=3), "delete")
    assert report.synced is False
    assert report.warnings == ['Invalid sync intent "delete". Allowed: publish, sync.']


@pytest.mark.asyncio
async def test_sync_products_rejects_unsaved_event(product_manager):
    report = await product_manager.sync_products(Event(title="Gala", event_type=EventType.RSVP), "sync")
    assert report.synced is False


@pytest.mark.asyncio
async def test_publish_requires_published_event(product_manager, event_repo):
    event = Event(title="Draft", event_type=EventType.RSVP, published=False)
    await event_repo.save_event(event)

    assert (await product_manager.sync_products(event, "publish")).synced is False
    assert (await product_manager.sync_products(event, "sync")).synced is True


@pytest.mark.asyncio
async def test_sync_products_skips_duplicate_concurrent_request(product_manager, event_repo, sync_lock):
    event = Event(title="Gala", event_type=EventType.RSVP)
    await event_repo.save_event(event)

    async with sync_lock.hold(f"sync_products:{event.id}") as acquired:
        assert acquired is True
        report = await product_manager.sync_products(event, "sync")

    assert report.synced is False
    assert report.warnings == ["A product sync is already in progress for this event."]
    assert event.product is None


def test_product_definitions(product_manager):
    rsvp = product_manager.calculate_product_definitions(Event(title="Picnic", event_type=EventType.RSVP))
    assert rsvp["rsvp"]["title"] == "Picnic – RSVP"
    assert rsvp["rsvp"]["variations"] == [{"title": "Free RSVP", "price": Money(Decimal("0"), "AUD")}]

    paid = Event(
        title="Gala",
        event_type=EventType.BOTH,
        ticket_types=[TicketTypeConfig(preset_key="vip", price=Decimal("99"))],
    )
    definitions = product_manager.calculate_product_definitions(paid)
    assert list(definitions) == ["ticket"]
    assert definitions["ticket"]["variations"][0]["title"] == "Gala – VIP"

    assert product_manager.calculate_product_definitions(Event(title="Link", event_type=EventType.EXTERNAL)) == {}


def test_auto_generated_rsvp_product_detection(product_manager):
    assert product_manager.is_auto_generated_rsvp_product(make_product("0")) is True
    assert product_manager.is_auto_generated_rsvp_product(make_product("0.00")) is True
    assert product_manager.is_auto_generated_rsvp_product(make_product("5.00")) is False
    assert product_manager.is_auto_generated_rsvp_product(make_product("0", "0")) is False
    assert product_manager.is_auto_generated_rsvp_product(make_product()) is False

    with_retired_tier = make_product("0", "150.00")
    with_retired_tier.variations[1].retire()
    assert product_manager.is_auto_generated_rsvp_product(with_retired_tier) is False

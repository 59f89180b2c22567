"""
Tests for ticket type to variation reconciliation.
"""

import asyncio
from decimal import Decimal
from uuid import uuid4

import pytest

from eventlane.domain import Event, EventType, LabelMode, Money, Product, TicketTypeConfig, Variation
from eventlane.infrastructure.memory import InMemoryCommerceRepository
from eventlane.services.naming import generate_sku, resolve_ticket_label, slugify
from eventlane.services.ticket_type_manager import TicketTypeManager


def spring_gala() -> Event:
    return Event(
        title="Spring Gala",
        event_type=EventType.PAID,
        ticket_types=[
            TicketTypeConfig(preset_key="vip", price=Decimal("150.00"), capacity=20),
            TicketTypeConfig(label_mode=LabelMode.CUSTOM, custom_label="Early Bird", price=Decimal("75.00")),
        ],
    )


@pytest.mark.asyncio
async def test_spring_gala_variations(ticket_manager, event_repo, commerce_repo):
    event = spring_gala()
    await event_repo.save_event(event)

    assert await ticket_manager.sync_ticket_types_to_variations(event) is True

    product = event.product
    assert product.title == "Spring Gala"
    assert [(v.title, v.price) for v in product.active_variations] == [
        ("Spring Gala – VIP", Money(Decimal("150.00"), "AUD")),
        ("Spring Gala – Early Bird", Money(Decimal("75.00"), "AUD")),
    ]
    assert product.event_id == event.id
    assert all(config.variation_handle is not None for config in event.ticket_types)
    assert (await event_repo.get_event(event.id)).product is product


@pytest.mark.asyncio
async def test_skipped_for_rsvp_and_external_events(ticket_manager):
    for event_type in (EventType.RSVP, EventType.EXTERNAL, None):
        event = Event(title="Picnic", event_type=event_type, ticket_types=[TicketTypeConfig(price=Decimal("5"))])
        assert await ticket_manager.sync_ticket_types_to_variations(event) is False
        assert event.product is None


@pytest.mark.asyncio
async def test_sync_is_idempotent(ticket_manager, event_repo, commerce_repo):
    event = spring_gala()
    await event_repo.save_event(event)
    await ticket_manager.sync_ticket_types_to_variations(event)
    handles = [config.variation_handle for config in event.ticket_types]
    skus = sorted(v.sku for v in commerce_repo.variations)

    await ticket_manager.sync_ticket_types_to_variations(event)

    assert len(event.product.variations) == 2
    assert len(commerce_repo.variations) == 2
    assert [config.variation_handle for config in event.ticket_types] == handles
    assert sorted(v.sku for v in commerce_repo.variations) == skus


@pytest.mark.asyncio
async def test_price_and_label_edits_update_in_place(ticket_manager, event_repo):
    event = spring_gala()
    await event_repo.save_event(event)
    await ticket_manager.sync_ticket_types_to_variations(event)
    vip_handle = event.ticket_types[0].variation_handle

    event.ticket_types[0].price = Decimal("175.00")
    event.ticket_types[0].preset_key = "member"
    await ticket_manager.sync_ticket_types_to_variations(event)

    variation = event.product.find_variation(vip_handle)
    assert variation.title == "Spring Gala – Member"
    assert variation.price.amount == Decimal("175.00")
    assert len(event.product.variations) == 2


@pytest.mark.asyncio
async def test_removed_ticket_type_is_retired_not_deleted(ticket_manager, event_repo, commerce_repo):
    event = spring_gala()
    await event_repo.save_event(event)
    await ticket_manager.sync_ticket_types_to_variations(event)
    early_bird = event.ticket_types.pop()

    await ticket_manager.sync_ticket_types_to_variations(event)

    retired = await commerce_repo.get_variation(early_bird.variation_handle)
    assert retired is not None
    assert retired.published is False
    assert retired in event.product.variations
    assert [v.title for v in event.product.active_variations] == ["Spring Gala – VIP"]


@pytest.mark.asyncio
async def test_rename_carries_label_suffix_onto_every_variation(ticket_manager, event_repo):
    event = spring_gala()
    event.ticket_types.append(TicketTypeConfig(label_mode=LabelMode.CUSTOM, custom_label="Table – Front Row"))
    await event_repo.save_event(event)
    await ticket_manager.sync_ticket_types_to_variations(event)
    retired_config = event.ticket_types.pop(1)
    await ticket_manager.sync_ticket_types_to_variations(event)

    event.title = "Autumn Ball"
    await ticket_manager.sync_ticket_types_to_variations(event)

    titles = {v.handle: v.title for v in event.product.variations}
    assert event.product.title == "Autumn Ball"
    assert titles[event.ticket_types[0].variation_handle] == "Autumn Ball – VIP"
    assert titles[event.ticket_types[1].variation_handle] == "Autumn Ball – Table – Front Row"
    # Retired variations follow the rename too
    assert titles[retired_config.variation_handle] == "Autumn Ball – Early Bird"


@pytest.mark.asyncio
async def test_reuses_linked_ticket_product_and_retires_rsvp_variation(ticket_manager, event_repo, commerce_repo):
    rsvp_variation = Variation(handle=uuid4(), sku="rsvp-1", title="Free RSVP", price=Money(Decimal("0"), "AUD"))
    product = await commerce_repo.save_product(Product(title="Picnic – RSVP", variations=[rsvp_variation]))
    event = Event(
        title="Picnic",
        event_type=EventType.BOTH,
        product=product,
        ticket_types=[TicketTypeConfig(preset_key="full_price", price=Decimal("12.50"))],
    )
    await event_repo.save_event(event)

    await ticket_manager.sync_ticket_types_to_variations(event)

    assert event.product is product
    assert len(commerce_repo.products) == 1
    assert rsvp_variation.published is False
    assert [v.title for v in product.active_variations] == ["Picnic – Full Price"]


@pytest.mark.asyncio
async def test_stale_cross_product_handle_is_replaced(ticket_manager, event_repo, commerce_repo):
    foreign = Variation(handle=uuid4(), sku="other-1", title="Other – VIP", price=Money(Decimal("10"), "AUD"))
    await commerce_repo.save_product(Product(title="Other", variations=[foreign]))
    event = Event(
        title="Spring Gala",
        event_type=EventType.PAID,
        ticket_types=[TicketTypeConfig(preset_key="vip", price=Decimal("150"), variation_handle=foreign.handle)],
    )
    await event_repo.save_event(event)

    await ticket_manager.sync_ticket_types_to_variations(event)

    new_handle = event.ticket_types[0].variation_handle
    assert new_handle != foreign.handle
    assert event.product.find_variation(new_handle).title == "Spring Gala – VIP"
    assert foreign.title == "Other – VIP"
    assert foreign.published is True


@pytest.mark.asyncio
async def test_no_storefront_aborts(event_repo, sync_lock, settings):
    manager = TicketTypeManager(event_repo, InMemoryCommerceRepository(), sync_lock, settings)
    event = spring_gala()
    await event_repo.save_event(event)

    assert await manager.sync_ticket_types_to_variations(event) is False
    assert event.product is None


class FlakyCommerceRepository(InMemoryCommerceRepository):
    """Fails to save variations whose title mentions a given label."""

    def __init__(self, storefronts, failing_label):
        super().__init__(storefronts)
        self.failing_label = failing_label

    async def save_variation(self, variation):
        if self.failing_label in variation.title:
            raise RuntimeError("commerce store timeout")
        return await super().save_variation(variation)


@pytest.mark.asyncio
async def test_one_failing_ticket_type_does_not_abort_the_others(event_repo, sync_lock, settings, storefront):
    commerce = FlakyCommerceRepository([storefront], failing_label="Early Bird")
    manager = TicketTypeManager(event_repo, commerce, sync_lock, settings)
    event = spring_gala()
    event.ticket_types.append(TicketTypeConfig(preset_key="student", price=Decimal("40")))
    await event_repo.save_event(event)

    assert await manager.sync_ticket_types_to_variations(event) is True

    titles = [v.title for v in event.product.active_variations]
    assert titles == ["Spring Gala – VIP", "Spring Gala – Student"]
    assert event.ticket_types[1].variation_handle is None


@pytest.mark.asyncio
async def test_failed_update_keeps_existing_variation_live(event_repo, sync_lock, settings, storefront):
    commerce = FlakyCommerceRepository([storefront], failing_label="never")
    manager = TicketTypeManager(event_repo, commerce, sync_lock, settings)
    event = spring_gala()
    await event_repo.save_event(event)
    await manager.sync_ticket_types_to_variations(event)

    commerce.failing_label = "Early Bird"
    assert await manager.sync_ticket_types_to_variations(event) is True

    early_bird = event.product.find_variation(event.ticket_types[1].variation_handle)
    assert early_bird.published is True


@pytest.mark.asyncio
async def test_concurrent_syncs_do_not_duplicate_variations(ticket_manager, event_repo, commerce_repo):
    event = spring_gala()
    await event_repo.save_event(event)

    results = await asyncio.gather(
        ticket_manager.sync_ticket_types_to_variations(event),
        ticket_manager.sync_ticket_types_to_variations(event),
    )

    assert results == [True, True]
    assert len(commerce_repo.products) == 1
    assert len(event.product.variations) == 2


@pytest.mark.asyncio
async def test_currency_follows_the_storefront(event_repo, sync_lock, settings):
    from eventlane.domain import Storefront

    commerce = InMemoryCommerceRepository([Storefront(id=7, name="NZ", default_currency="nzd", is_default=True)])
    manager = TicketTypeManager(event_repo, commerce, sync_lock, settings)
    event = spring_gala()
    await event_repo.save_event(event)

    await manager.sync_ticket_types_to_variations(event)

    assert {v.price.currency for v in event.product.variations} == {"NZD"}


def test_resolve_ticket_label():
    assert resolve_ticket_label(TicketTypeConfig(label_mode=LabelMode.CUSTOM, custom_label=" Family Pass ")) == "Family Pass"
    assert resolve_ticket_label(TicketTypeConfig(label_mode=LabelMode.CUSTOM, custom_label="  ", preset_key="vip")) == "VIP"
    assert resolve_ticket_label(TicketTypeConfig(preset_key="early_bird")) == "Early Bird"
    assert resolve_ticket_label(TicketTypeConfig(preset_key="general_admission")) == "General Admission"
    assert resolve_ticket_label(TicketTypeConfig()) == "Ticket"


def test_sku_generation():
    assert slugify("Early Bird -- Special!") == "early-bird-special"
    sku = generate_sku("ticket", 42, "Early Bird")
    assert sku.startswith("ticket-42-early-bird-")
    assert len(sku.rsplit("-", 1)[1]) == 12
    assert generate_sku("ticket", None, "!!!").startswith("ticket-new-ticket-")
    assert generate_sku("ticket", 42, "VIP") != generate_sku("ticket", 42, "VIP")


def test_negative_values_are_rejected():
    with pytest.raises(ValueError):
        TicketTypeConfig(price=Decimal("-1"))
    with pytest.raises(ValueError):
        TicketTypeConfig(capacity=-5)
    with pytest.raises(ValueError):
        Money(Decimal("-0.01"), "AUD")

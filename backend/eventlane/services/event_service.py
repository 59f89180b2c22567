"""
Event lifecycle: create, update and fetch events, keeping their commerce
products reconciled on every save.
"""

from fastapi import HTTPException, status

from eventlane.core.logging import get_logger
from eventlane.domain import Event, EventType, SyncReport
from eventlane.schemas.event import EventCreate, EventUpdate
from eventlane.services.event_product_manager import EventProductManager
from eventlane.services.interfaces.repositories import CommerceRepository, EventRepository
from eventlane.services.ticket_type_manager import TICKET_EVENT_TYPES, TicketTypeManager

logger = get_logger(__name__)

# Explicit nulls are ignored for these
REQUIRED_FIELDS = ("title", "rsvp_capacity", "published")


async def get_event_or_404(events: EventRepository, event_id: int) -> Event:
    """Get a single event by ID."""
    event = await events.get_event(event_id)
    if not event:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Event {event_id} not found",
        )
    return event


async def _linked_product(commerce: CommerceRepository, product_id: int):
    product = await commerce.get_product(product_id)
    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Product {product_id} not found",
        )
    return product


async def create_event(
    events: EventRepository,
    commerce: CommerceRepository,
    products: EventProductManager,
    event_data: EventCreate,
) -> tuple[Event, SyncReport]:
    """
    Create an event.

    RSVP events get their product before the event is first saved; the
    product's back-reference is filled in by the sync that follows.
    """
    event = Event(
        title=event_data.title,
        event_type=event_data.event_type,
        external_url=event_data.external_url,
        start_at=event_data.start_at,
        end_at=event_data.end_at,
        rsvp_capacity=event_data.rsvp_capacity,
        owner_id=event_data.owner_id,
        published=event_data.published,
    )

    if event_data.product_id is not None:
        event.product = await _linked_product(commerce, event_data.product_id)
    elif event.event_type == EventType.RSVP:
        event.product = await products.create_rsvp_product_for_new_event(event.title, event.owner_id)

    await events.save_event(event)
    report = await products.sync_product_to_event(event)

    logger.info(
        "event_created",
        event_id=event.id,
        title=event.title,
        event_type=event.event_type.value if event.event_type else None,
        product_id=event.product.id if event.product else None,
    )
    return event, report


async def update_event(
    events: EventRepository,
    commerce: CommerceRepository,
    products: EventProductManager,
    tickets: TicketTypeManager,
    event: Event,
    changes: EventUpdate,
) -> tuple[Event, SyncReport]:
    """Apply vendor edits, save, then reconcile the linked product."""
    data = changes.model_dump(exclude_unset=True)
    product_id = data.pop("product_id", None)

    for field, value in data.items():
        if value is None and field in REQUIRED_FIELDS:
            continue
        setattr(event, field, value)

    if product_id is not None:
        event.product = await _linked_product(commerce, product_id)

    await events.save_event(event)
    report = await products.sync_product_to_event(event)

    # Renames must reach the variation titles too
    if event.event_type in TICKET_EVENT_TYPES and event.ticket_types:
        if not await tickets.sync_ticket_types_to_variations(event):
            report.warnings.append("Ticket types could not be synced. Please save the tickets again.")
        report.product = event.product

    logger.info("event_updated", event_id=event.id, fields=sorted(data))
    return event, report

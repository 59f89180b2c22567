"""
Vendor event endpoints. Every save reconciles the event's commerce product.
"""

from fastapi import APIRouter, Depends, status

from eventlane.api.deps import (
    get_commerce_repository,
    get_event_repository,
    get_mode_manager,
    get_product_manager,
    get_ticket_type_manager,
)
from eventlane.schemas.event import EventCreate, EventResponse, EventSaveResponse, EventUpdate
from eventlane.services.event_mode_manager import EventModeManager
from eventlane.services.event_product_manager import EventProductManager
from eventlane.services.event_service import create_event, get_event_or_404, update_event
from eventlane.services.interfaces import CommerceRepository, EventRepository
from eventlane.services.ticket_type_manager import TicketTypeManager

router = APIRouter(prefix="/vendor/events", tags=["Vendor Events"])


@router.post("", response_model=EventSaveResponse, status_code=status.HTTP_201_CREATED)
async def create_event_endpoint(
    event_data: EventCreate,
    events: EventRepository = Depends(get_event_repository),
    commerce: CommerceRepository = Depends(get_commerce_repository),
    products: EventProductManager = Depends(get_product_manager),
    modes: EventModeManager = Depends(get_mode_manager),
):
    """Create an event. RSVP events get their free RSVP product straight away."""
    event, report = await create_event(events, commerce, products, event_data)
    return EventSaveResponse(
        event=EventResponse.model_validate(event),
        mode=modes.get_effective_mode(event),
        warnings=report.warnings,
    )


@router.get("/{event_id}", response_model=EventResponse)
async def get_event_endpoint(
    event_id: int,
    events: EventRepository = Depends(get_event_repository),
):
    return EventResponse.model_validate(await get_event_or_404(events, event_id))


@router.patch("/{event_id}", response_model=EventSaveResponse)
async def update_event_endpoint(
    event_id: int,
    changes: EventUpdate,
    events: EventRepository = Depends(get_event_repository),
    commerce: CommerceRepository = Depends(get_commerce_repository),
    products: EventProductManager = Depends(get_product_manager),
    tickets: TicketTypeManager = Depends(get_ticket_type_manager),
    modes: EventModeManager = Depends(get_mode_manager),
):
    event = await get_event_or_404(events, event_id)
    event, report = await update_event(events, commerce, products, tickets, event, changes)
    return EventSaveResponse(
        event=EventResponse.model_validate(event),
        mode=modes.get_effective_mode(event),
        warnings=report.warnings,
    )

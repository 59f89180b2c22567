"""
Vendor ticket type endpoints.
"""

from fastapi import APIRouter, Depends, Response, status

from eventlane.api.deps import get_event_repository, get_ticket_config_service
from eventlane.domain import Event
from eventlane.schemas.ticket import (
    TicketSyncResponse,
    TicketTypeCreate,
    TicketTypeListResponse,
    TicketTypeResponse,
    TicketTypeRowResponse,
    TicketTypeUpdate,
)
from eventlane.services.event_service import get_event_or_404
from eventlane.services.interfaces import EventRepository
from eventlane.services.ticket_config_service import TicketConfigService, get_ticket_type_or_404

router = APIRouter(prefix="/vendor/events/{event_id}/tickets", tags=["Vendor Tickets"])


def _listing(service: TicketConfigService, event: Event) -> TicketTypeListResponse:
    listing = service.list_ticket_types(event)
    return TicketTypeListResponse(
        event_id=event.id,
        ticket_types=[TicketTypeRowResponse.model_validate(row) for row in listing.rows],
        total_capacity=listing.total_capacity,
    )


@router.get("", response_model=TicketTypeListResponse)
async def list_ticket_types_endpoint(
    event_id: int,
    events: EventRepository = Depends(get_event_repository),
    service: TicketConfigService = Depends(get_ticket_config_service),
):
    event = await get_event_or_404(events, event_id)
    return _listing(service, event)


@router.post("", response_model=TicketTypeResponse, status_code=status.HTTP_201_CREATED)
async def add_ticket_type_endpoint(
    event_id: int,
    ticket_data: TicketTypeCreate,
    events: EventRepository = Depends(get_event_repository),
    service: TicketConfigService = Depends(get_ticket_config_service),
):
    event = await get_event_or_404(events, event_id)
    config = await service.add_ticket_type(event, **ticket_data.model_dump())
    return TicketTypeResponse.model_validate(config)


@router.post("/paid", response_model=TicketTypeResponse, status_code=status.HTTP_201_CREATED)
async def add_paid_ticket_endpoint(
    event_id: int,
    events: EventRepository = Depends(get_event_repository),
    service: TicketConfigService = Depends(get_ticket_config_service),
):
    """General admission at 50.00 with 100 places."""
    event = await get_event_or_404(events, event_id)
    return TicketTypeResponse.model_validate(await service.add_paid_ticket(event))


@router.post("/free", response_model=TicketTypeResponse, status_code=status.HTTP_201_CREATED)
async def add_free_ticket_endpoint(
    event_id: int,
    events: EventRepository = Depends(get_event_repository),
    service: TicketConfigService = Depends(get_ticket_config_service),
):
    event = await get_event_or_404(events, event_id)
    return TicketTypeResponse.model_validate(await service.add_free_ticket(event))


@router.post("/sync", response_model=TicketSyncResponse)
async def save_ticket_types_endpoint(
    event_id: int,
    events: EventRepository = Depends(get_event_repository),
    service: TicketConfigService = Depends(get_ticket_config_service),
):
    """Save tickets: reconcile the configs into product variations."""
    event = await get_event_or_404(events, event_id)
    synced = await service.save_ticket_types(event)
    return TicketSyncResponse(
        event_id=event.id,
        synced=synced,
        ticket_types=_listing(service, event).ticket_types,
    )


@router.put("/{config_id}", response_model=TicketTypeResponse)
async def update_ticket_type_endpoint(
    event_id: int,
    config_id: int,
    changes: TicketTypeUpdate,
    events: EventRepository = Depends(get_event_repository),
    service: TicketConfigService = Depends(get_ticket_config_service),
):
    event = await get_event_or_404(events, event_id)
    config = get_ticket_type_or_404(event, config_id)
    updated = await service.update_ticket_type(event, config, **changes.model_dump(exclude_unset=True))
    return TicketTypeResponse.model_validate(updated)


@router.delete("/{config_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_ticket_type_endpoint(
    event_id: int,
    config_id: int,
    events: EventRepository = Depends(get_event_repository),
    service: TicketConfigService = Depends(get_ticket_config_service),
):
    """Remove a ticket type. Its variation is retired, never deleted."""
    event = await get_event_or_404(events, event_id)
    config = get_ticket_type_or_404(event, config_id)
    await service.delete_ticket_type(event, config)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""
Read-only booking-mode endpoints used by every page that renders an event.
Mode is recomputed on each request; nothing here is cached.
"""

from typing import Any

from fastapi import APIRouter, Depends

from eventlane.api.deps import get_event_repository, get_event_type_service, get_mode_manager
from eventlane.schemas.event import (
    AvailabilityResponse,
    ConfigurationStatusResponse,
    CtaResponse,
    ModeResponse,
    RsvpAvailabilityResponse,
    TicketAvailabilityResponse,
)
from eventlane.services.event_mode_manager import EventModeManager
from eventlane.services.event_service import get_event_or_404
from eventlane.services.event_type_service import EventTypeService
from eventlane.services.interfaces import EventRepository

router = APIRouter(prefix="/events", tags=["Events"])


@router.get("/{event_id}/mode", response_model=ModeResponse)
async def get_mode_endpoint(
    event_id: int,
    events: EventRepository = Depends(get_event_repository),
    modes: EventModeManager = Depends(get_mode_manager),
):
    event = await get_event_or_404(events, event_id)
    return ModeResponse(
        event_id=event.id,
        mode=modes.get_effective_mode(event),
        rsvp_enabled=modes.is_rsvp_enabled(event),
        tickets_enabled=modes.is_tickets_enabled(event),
        external_link=modes.is_external_link(event),
        is_past=modes.is_event_past(event),
        is_bookable=await modes.is_bookable(event),
    )


@router.get("/{event_id}/cta", response_model=CtaResponse)
async def get_primary_cta_endpoint(
    event_id: int,
    events: EventRepository = Depends(get_event_repository),
    modes: EventModeManager = Depends(get_mode_manager),
):
    """The single call to action to show for this event."""
    event = await get_event_or_404(events, event_id)
    return CtaResponse.model_validate(await modes.get_primary_cta(event))


@router.get("/{event_id}/ctas", response_model=dict[str, CtaResponse])
async def get_all_ctas_endpoint(
    event_id: int,
    events: EventRepository = Depends(get_event_repository),
    modes: EventModeManager = Depends(get_mode_manager),
):
    """Every active booking path, for layouts that show several buttons."""
    event = await get_event_or_404(events, event_id)
    ctas = await modes.get_all_ctas(event)
    return {key: CtaResponse.model_validate(cta) for key, cta in ctas.items()}


@router.get("/{event_id}/availability", response_model=AvailabilityResponse)
async def get_availability_endpoint(
    event_id: int,
    events: EventRepository = Depends(get_event_repository),
    modes: EventModeManager = Depends(get_mode_manager),
):
    event = await get_event_or_404(events, event_id)
    rsvp = await modes.get_rsvp_availability(event)
    tickets = modes.get_ticket_availability(event)
    return AvailabilityResponse(
        event_id=event.id,
        rsvp=RsvpAvailabilityResponse.model_validate(rsvp),
        tickets=TicketAvailabilityResponse(
            available=tickets.available,
            reason=tickets.reason,
            product_id=tickets.product.id if tickets.product else None,
        ),
    )


@router.get("/{event_id}/template-variables")
async def get_template_variables_endpoint(
    event_id: int,
    events: EventRepository = Depends(get_event_repository),
    types: EventTypeService = Depends(get_event_type_service),
) -> dict[str, Any]:
    event = await get_event_or_404(events, event_id)
    return await types.get_template_variables(event)


@router.get("/{event_id}/configuration", response_model=ConfigurationStatusResponse)
async def get_configuration_endpoint(
    event_id: int,
    events: EventRepository = Depends(get_event_repository),
    modes: EventModeManager = Depends(get_mode_manager),
):
    """Vendor-facing diagnostic of which booking paths are set up."""
    event = await get_event_or_404(events, event_id)
    return ConfigurationStatusResponse.model_validate(await modes.get_configuration_status(event))

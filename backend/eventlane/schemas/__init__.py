from eventlane.schemas.event import (
    EventCreate,
    EventUpdate,
    EventResponse,
    EventSaveResponse,
    ModeResponse,
    CtaResponse,
    AvailabilityResponse,
    ConfigurationStatusResponse,
)
from eventlane.schemas.product import (
    RsvpDraftCreate,
    SyncReportResponse,
    ProductDefinitionsResponse,
)
from eventlane.schemas.ticket import (
    TicketTypeCreate,
    TicketTypeUpdate,
    TicketTypeResponse,
    TicketTypeListResponse,
    TicketSyncResponse,
)

__all__ = [
    "EventCreate", "EventUpdate", "EventResponse", "EventSaveResponse",
    "ModeResponse", "CtaResponse", "AvailabilityResponse", "ConfigurationStatusResponse",
    "RsvpDraftCreate", "SyncReportResponse", "ProductDefinitionsResponse",
    "TicketTypeCreate", "TicketTypeUpdate", "TicketTypeResponse",
    "TicketTypeListResponse", "TicketSyncResponse",
]

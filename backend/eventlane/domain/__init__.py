from eventlane.domain.decisions import (
    Availability,
    ConfigurationStatus,
    CtaDecision,
    PathStatus,
    RsvpAvailability,
    SyncReport,
    TicketAvailability,
)
from eventlane.domain.enums import CtaKind, EventType, LabelMode, Mode, SyncIntent
from eventlane.domain.models import (
    EVENT_BUNDLE,
    TICKET_BUNDLE,
    TITLE_DELIMITER,
    Event,
    Money,
    Product,
    Storefront,
    TicketTypeConfig,
    Variation,
)

__all__ = [
    "Availability",
    "ConfigurationStatus",
    "CtaDecision",
    "PathStatus",
    "RsvpAvailability",
    "SyncReport",
    "TicketAvailability",
    "CtaKind",
    "EventType",
    "LabelMode",
    "Mode",
    "SyncIntent",
    "EVENT_BUNDLE",
    "TICKET_BUNDLE",
    "TITLE_DELIMITER",
    "Event",
    "Money",
    "Product",
    "Storefront",
    "TicketTypeConfig",
    "Variation",
]

"""
Display labels and template flags derived from the effective booking mode.
"""

from typing import Any

from eventlane.domain import Event, Mode
from eventlane.domain.enums import RSVP_MODES, TICKET_MODES
from eventlane.services.event_mode_manager import EventModeManager

EVENT_TYPE_LABELS = {
    Mode.RSVP: "RSVP",
    Mode.PAID: "Tickets",
    Mode.BOTH: "RSVP & Tickets",
    Mode.EXTERNAL: "External",
    Mode.NONE: "Unavailable",
}

CTA_LABELS = {
    Mode.RSVP: "RSVP Now",
    Mode.PAID: "Buy Tickets",
    Mode.BOTH: "Buy Tickets",
    Mode.EXTERNAL: "Get Tickets",
}

SHORT_CTA_LABELS = {
    Mode.RSVP: "RSVP",
    Mode.PAID: "Tickets",
    Mode.BOTH: "Tickets",
    Mode.EXTERNAL: "Tickets",
}


class EventTypeService:
    """Read-only façade over EventModeManager for rendering layers."""

    def __init__(self, mode_manager: EventModeManager):
        self._modes = mode_manager

    def get_event_type(self, event: Event) -> Mode:
        return self._modes.get_effective_mode(event)

    def get_event_type_label(self, event: Event) -> str:
        return EVENT_TYPE_LABELS.get(self.get_event_type(event), "Unavailable")

    def get_cta_label(self, event: Event) -> str:
        return CTA_LABELS.get(self.get_event_type(event), "View Event")

    def get_short_cta_label(self, event: Event) -> str:
        return SHORT_CTA_LABELS.get(self.get_event_type(event), "View")

    def is_free(self, event: Event) -> bool:
        return self.get_event_type(event) == Mode.RSVP

    def has_paid_tickets(self, event: Event) -> bool:
        return self.get_event_type(event) in TICKET_MODES

    async def is_bookable(self, event: Event) -> bool:
        return await self._modes.is_bookable(event)

    async def get_template_variables(self, event: Event) -> dict[str, Any]:
        mode = self.get_event_type(event)
        return {
            "event_type": mode.value,
            "event_type_label": EVENT_TYPE_LABELS.get(mode, "Unavailable"),
            "event_cta_label": CTA_LABELS.get(mode, "View Event"),
            "event_cta_short": SHORT_CTA_LABELS.get(mode, "View"),
            "event_is_free": mode == Mode.RSVP,
            "event_has_paid_tickets": mode in TICKET_MODES,
            "event_is_bookable": await self._modes.is_bookable(event),
            "event_is_rsvp": mode in RSVP_MODES,
            "event_is_paid": mode in TICKET_MODES,
            "event_is_external": mode == Mode.EXTERNAL,
        }

"""Enums for event booking modes and calls to action."""

from enum import StrEnum


class EventType(StrEnum):
    """Booking type flag set by the vendor on an event."""

    RSVP = "rsvp"
    PAID = "paid"
    BOTH = "both"
    EXTERNAL = "external"

    @classmethod
    def parse(cls, value: str | None) -> "EventType | None":
        """Return the matching flag, or None for unset or unknown values."""
        if not value:
            return None
        try:
            return cls(value)
        except ValueError:
            return None


class Mode(StrEnum):
    """Effective booking mode. Derived on every query, never stored."""

    RSVP = "rsvp"
    PAID = "paid"
    BOTH = "both"
    EXTERNAL = "external"
    NONE = "none"


class LabelMode(StrEnum):
    PRESET = "preset"
    CUSTOM = "custom"


class CtaKind(StrEnum):
    TICKETS = "tickets"
    RSVP = "rsvp"
    WAITLIST = "waitlist"
    EXTERNAL = "external"
    COMING_SOON = "coming_soon"
    EVENT_ENDED = "event_ended"


class SyncIntent(StrEnum):
    """Explicit intents accepted by product sync."""

    PUBLISH = "publish"
    SYNC = "sync"


RSVP_MODES = frozenset({Mode.RSVP, Mode.BOTH})
TICKET_MODES = frozenset({Mode.PAID, Mode.BOTH})

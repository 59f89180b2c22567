"""
Event booking-mode resolution and call-to-action decisions.

MODE RESOLUTION
===============

The effective mode is a pure function of the event's type flag, its linked
product and its external URL:

  external + URL                      -> external
  both + product                      -> both
  rsvp + hybrid product               -> both
  rsvp (no product, or $0 product)    -> rsvp
  paid + product                      -> paid
  anything else                       -> none   (misconfigured / coming soon)

A "hybrid" product carries more than one live variation, or a single paid one.
The mode is never stored; it is recomputed on every query.

CTA PRIORITY
============

Strict chain, first match wins:
  1. Event has ended          -> "Event Ended"
  2. Mode is none             -> "Coming Soon"
  3. Tickets available        -> "Buy Tickets"  (paid conversion is favoured over RSVP)
  4. RSVP available           -> "RSVP Now", or "Join Waitlist" when exactly full
  5. External mode            -> "Get Tickets" (opens in a new tab)
  6. Otherwise                -> "Coming Soon"

Every public decision reads the clock once and passes that instant down, so a
single answer never straddles a clock tick.
"""

from datetime import datetime, timezone
from typing import Optional

from eventlane.core.config import Settings, get_settings
from eventlane.core.logging import get_logger
from eventlane.core.metrics import record_collaborator_error, record_cta_decision
from eventlane.domain import (
    EVENT_BUNDLE,
    ConfigurationStatus,
    CtaDecision,
    CtaKind,
    Event,
    EventType,
    Mode,
    PathStatus,
    Product,
    RsvpAvailability,
    TicketAvailability,
)
from eventlane.domain.enums import RSVP_MODES, TICKET_MODES
from eventlane.services.interfaces.availability import AvailabilityOracle
from eventlane.services.interfaces.clock import Clock

logger = get_logger(__name__)


def _as_utc(value: datetime) -> datetime:
    # Naive datetimes are stored as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class EventModeManager:
    """Single source of truth for how an event is booked."""

    def __init__(
        self,
        availability: AvailabilityOracle,
        clock: Clock,
        settings: Optional[Settings] = None,
    ):
        self._availability = availability
        self._clock = clock
        self._settings = settings or get_settings()

    def get_effective_mode(self, event: Event) -> Mode:
        if event.bundle != EVENT_BUNDLE:
            return Mode.NONE

        event_type = event.event_type
        product = event.product

        if event_type == EventType.EXTERNAL and event.has_external_url:
            return Mode.EXTERNAL

        if event_type == EventType.BOTH and product is not None:
            return Mode.BOTH

        if event_type == EventType.RSVP:
            if product is not None and self.is_hybrid_product(product):
                return Mode.BOTH
            return Mode.RSVP

        if event_type == EventType.PAID and product is not None:
            return Mode.PAID

        return Mode.NONE

    def is_hybrid_product(self, product: Product) -> bool:
        """True for several variations, or a single paid one. Retired variations count."""
        variations = product.variations
        if len(variations) > 1:
            return True
        if len(variations) == 1:
            return variations[0].price.amount > 0
        return False

    def is_rsvp_enabled(self, event: Event) -> bool:
        return self.get_effective_mode(event) in RSVP_MODES

    def is_tickets_enabled(self, event: Event) -> bool:
        return self.get_effective_mode(event) in TICKET_MODES

    def is_external_link(self, event: Event) -> bool:
        return self.get_effective_mode(event) == Mode.EXTERNAL

    def is_event_past(self, event: Event, now: Optional[datetime] = None) -> bool:
        """End time (falling back to start time) is before now. No dates: never past."""
        ends_at = event.end_at or event.start_at
        if ends_at is None:
            return False
        now = now if now is not None else self._clock.now()
        return _as_utc(ends_at) < _as_utc(now)

    async def get_rsvp_availability(
        self, event: Event, now: Optional[datetime] = None
    ) -> RsvpAvailability:
        if not self.is_rsvp_enabled(event):
            return RsvpAvailability(
                available=False,
                reason="RSVP is not enabled for this event.",
                spots_remaining=None,
            )

        if self.is_event_past(event, now):
            return RsvpAvailability(
                available=False,
                reason="This event has already ended.",
                spots_remaining=0,
            )

        try:
            availability = await self._availability.get_availability(event)
        except Exception:
            logger.error("availability_lookup_failed", event_id=event.id, exc_info=True)
            record_collaborator_error("availability")
            # Unknown, not full: no waitlist offer
            return RsvpAvailability(
                available=False,
                reason="RSVP availability is temporarily unavailable.",
                spots_remaining=None,
            )

        return RsvpAvailability(
            available=availability.available,
            reason=availability.reason,
            spots_remaining=availability.remaining,
        )

    def get_ticket_availability(
        self, event: Event, now: Optional[datetime] = None
    ) -> TicketAvailability:
        if not self.is_tickets_enabled(event):
            return TicketAvailability(
                available=False, reason="Tickets are not enabled for this event."
            )

        if self.is_event_past(event, now):
            return TicketAvailability(available=False, reason="This event has already ended.")

        product = event.product
        if product is None:
            return TicketAvailability(available=False, reason="No ticket product configured.")

        if not product.published:
            return TicketAvailability(
                available=False, reason="Tickets are not currently on sale.", product=product
            )

        # TODO: gate on per-variation stock once ticket capacity is tracked by commerce.
        return TicketAvailability(available=True, reason="Tickets available.", product=product)

    async def is_bookable(self, event: Event) -> bool:
        now = self._clock.now()
        mode = self.get_effective_mode(event)

        if mode == Mode.NONE:
            return False

        if self.is_event_past(event, now):
            return False

        if mode in RSVP_MODES:
            rsvp = await self.get_rsvp_availability(event, now)
            if rsvp.available:
                return True

        if mode in TICKET_MODES:
            if self.get_ticket_availability(event, now).available:
                return True

        # External links are always bookable once configured
        return mode == Mode.EXTERNAL

    async def get_primary_cta(self, event: Event) -> CtaDecision:
        now = self._clock.now()
        mode = self.get_effective_mode(event)

        if self.is_event_past(event, now):
            decision = self._past_event_cta()
        elif mode == Mode.NONE:
            decision = self._coming_soon_cta()
        else:
            decision = await self._choose_primary_cta(event, mode, now)

        record_cta_decision(decision.kind.value)
        return decision

    async def _choose_primary_cta(self, event: Event, mode: Mode, now: datetime) -> CtaDecision:
        if mode in TICKET_MODES and self.get_ticket_availability(event, now).available:
            return self._ticket_cta(event)

        if mode in RSVP_MODES:
            rsvp = await self.get_rsvp_availability(event, now)
            if rsvp.available:
                return self._rsvp_cta(event)
            if rsvp.spots_remaining == 0:
                return self._waitlist_cta(event)

        if mode == Mode.EXTERNAL:
            return self._external_cta(event)

        return self._coming_soon_cta()

    async def get_all_ctas(self, event: Event) -> dict[str, CtaDecision]:
        """Every active path at once, keyed tickets / rsvp|waitlist / external."""
        now = self._clock.now()
        mode = self.get_effective_mode(event)
        ctas: dict[str, CtaDecision] = {}

        if mode == Mode.NONE or self.is_event_past(event, now):
            return ctas

        if mode in TICKET_MODES and self.get_ticket_availability(event, now).available:
            ctas[CtaKind.TICKETS.value] = self._ticket_cta(event)

        if mode in RSVP_MODES:
            rsvp = await self.get_rsvp_availability(event, now)
            if rsvp.available:
                ctas[CtaKind.RSVP.value] = self._rsvp_cta(event, secondary=mode == Mode.BOTH)
            elif rsvp.spots_remaining == 0:
                ctas[CtaKind.WAITLIST.value] = self._waitlist_cta(event)

        if mode == Mode.EXTERNAL:
            ctas[CtaKind.EXTERNAL.value] = self._external_cta(event)

        return ctas

    async def get_configuration_status(self, event: Event) -> ConfigurationStatus:
        event_type = event.event_type
        mode = self.get_effective_mode(event)
        product = event.product
        has_product = product is not None

        capacity: Optional[int] = None
        try:
            capacity = (await self._availability.get_availability(event)).capacity
        except Exception:
            logger.error("availability_lookup_failed", event_id=event.id, exc_info=True)
            record_collaborator_error("availability")

        rsvp_enabled = event_type in (EventType.RSVP, EventType.BOTH)
        if not rsvp_enabled:
            rsvp_message = "RSVP not enabled."
        elif capacity is None:
            rsvp_message = "RSVP enabled; capacity could not be determined."
        elif capacity > 0:
            rsvp_message = f"RSVP enabled with {capacity} person capacity."
        else:
            rsvp_message = "RSVP enabled with unlimited capacity."

        tickets_enabled = event_type in (EventType.PAID, EventType.BOTH) or (
            event_type == EventType.RSVP and has_product and self.is_hybrid_product(product)
        )

        external_enabled = event_type == EventType.EXTERNAL
        if not external_enabled:
            external_message = "Not using external link mode."
        elif event.has_external_url:
            external_message = "External link configured."
        else:
            external_message = "External URL not set."

        return ConfigurationStatus(
            event_type=event_type.value if event_type else None,
            effective_mode=mode,
            rsvp=PathStatus(enabled=rsvp_enabled, configured=True, message=rsvp_message),
            tickets=PathStatus(
                enabled=tickets_enabled,
                configured=has_product,
                message="Ticket product linked." if has_product else "No ticket product linked yet.",
            ),
            external=PathStatus(
                enabled=external_enabled,
                configured=event.has_external_url,
                message=external_message,
            ),
            rsvp_capacity=capacity,
            product_id=product.id if product else None,
            external_url=event.external_url if event.has_external_url else None,
            message=self._status_message(event, mode),
        )

    def _status_message(self, event: Event, mode: Mode) -> str:
        if mode != Mode.NONE:
            return f"Bookings are configured ({mode.value})."
        if event.event_type is None:
            return "Choose how people book this event: RSVP, paid tickets, both, or an external link."
        if event.event_type == EventType.EXTERNAL:
            return "Add an external booking URL to enable the external link."
        return "Link a ticket product or define ticket types to start selling tickets."

    def _booking_url(self, event: Event) -> str:
        return self._settings.BOOKING_URL_TEMPLATE.format(event_id=event.id)

    def _ticket_cta(self, event: Event) -> CtaDecision:
        return CtaDecision(kind=CtaKind.TICKETS, label="Buy Tickets", url=self._booking_url(event))

    def _rsvp_cta(self, event: Event, secondary: bool = False) -> CtaDecision:
        # RSVP shares the commerce booking route with tickets
        return CtaDecision(
            kind=CtaKind.RSVP,
            label="RSVP Now",
            url=self._booking_url(event),
            emphasis="secondary" if secondary else "primary",
        )

    def _waitlist_cta(self, event: Event) -> CtaDecision:
        return CtaDecision(
            kind=CtaKind.WAITLIST,
            label="Join Waitlist",
            url=self._settings.WAITLIST_URL_TEMPLATE.format(event_id=event.id),
            emphasis="secondary",
        )

    def _external_cta(self, event: Event) -> CtaDecision:
        return CtaDecision(
            kind=CtaKind.EXTERNAL,
            label="Get Tickets",
            url=event.external_url,
            opens_in_new_tab=True,
        )

    def _coming_soon_cta(self) -> CtaDecision:
        return CtaDecision(
            kind=CtaKind.COMING_SOON, label="Coming Soon", emphasis="disabled", enabled=False
        )

    def _past_event_cta(self) -> CtaDecision:
        return CtaDecision(
            kind=CtaKind.EVENT_ENDED, label="Event Ended", emphasis="disabled", enabled=False
        )

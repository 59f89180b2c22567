"""Result types returned by the booking-mode decision engine."""

from dataclasses import dataclass, field

from eventlane.domain.enums import CtaKind, Mode
from eventlane.domain.models import Product


@dataclass(frozen=True)
class Availability:
    """Answer from an availability oracle about RSVP capacity."""

    available: bool
    reason: str
    capacity: int = 0
    current_count: int = 0
    remaining: int | None = None  # None means unlimited


@dataclass(frozen=True)
class RsvpAvailability:
    available: bool
    reason: str
    # None: not applicable or unknown. 0: definitely full or closed.
    spots_remaining: int | None = None


@dataclass(frozen=True)
class TicketAvailability:
    available: bool
    reason: str
    product: Product | None = None


@dataclass(frozen=True)
class CtaDecision:
    """A call to action for rendering layers to draw as a button."""

    kind: CtaKind
    label: str
    url: str | None = None
    emphasis: str = "primary"  # primary, secondary, disabled
    enabled: bool = True
    opens_in_new_tab: bool = False


@dataclass(frozen=True)
class PathStatus:
    enabled: bool
    configured: bool
    message: str


@dataclass(frozen=True)
class ConfigurationStatus:
    """Vendor-facing diagnostic of which booking paths are set up."""

    event_type: str | None
    effective_mode: Mode
    rsvp: PathStatus
    tickets: PathStatus
    external: PathStatus
    rsvp_capacity: int | None = None
    product_id: int | None = None
    external_url: str | None = None
    message: str = ""


@dataclass
class SyncReport:
    """Outcome of a product sync, with advisory warnings for the vendor."""

    synced: bool
    warnings: list[str] = field(default_factory=list)
    product: Product | None = None

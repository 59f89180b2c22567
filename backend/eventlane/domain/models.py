"""Domain models for events and their commerce products.

These are plain objects with explicit optional fields. Persistence lives in
eventlane/models (SQLAlchemy) and is mapped to and from these types by the
repositories in eventlane/infrastructure.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from eventlane.domain.enums import EventType, LabelMode

EVENT_BUNDLE = "event"
TICKET_BUNDLE = "ticket"

# Separates the event title from the ticket label in product/variation titles.
TITLE_DELIMITER = " – "


@dataclass(frozen=True)
class Money:
    """Price amount in a currency."""

    amount: Decimal
    currency: str

    def __post_init__(self) -> None:
        amount = Decimal(str(self.amount))
        if amount < 0:
            raise ValueError("Money amount cannot be negative")
        object.__setattr__(self, "amount", amount)
        object.__setattr__(self, "currency", self.currency.upper())

    @property
    def is_zero(self) -> bool:
        return self.amount == 0

    def __str__(self) -> str:
        return f"{self.amount:.2f} {self.currency}"


@dataclass
class Storefront:
    """Commerce store that products are sold through."""

    id: int | None
    name: str
    default_currency: str
    is_default: bool = False


@dataclass
class Variation:
    """One priced, purchasable SKU under a product."""

    handle: UUID
    sku: str
    title: str
    price: Money
    published: bool = True
    product_id: int | None = None
    event_id: int | None = None
    id: int | None = None

    def retire(self) -> None:
        """Soft-delete: historic orders may still reference this SKU."""
        self.published = False


@dataclass
class Product:
    title: str
    bundle: str = TICKET_BUNDLE
    published: bool = True
    event_id: int | None = None
    owner_id: int | None = None
    storefront: Storefront | None = None
    variations: list[Variation] = field(default_factory=list)
    id: int | None = None

    @property
    def active_variations(self) -> list[Variation]:
        """Variations that are still on sale (retired ones excluded)."""
        return [variation for variation in self.variations if variation.published]

    def find_variation(self, handle: UUID | None) -> Variation | None:
        if handle is None:
            return None
        for variation in self.variations:
            if variation.handle == handle:
                return variation
        return None


@dataclass
class TicketTypeConfig:
    """Vendor-authored description of one ticket tier."""

    label_mode: LabelMode = LabelMode.PRESET
    preset_key: str | None = None
    custom_label: str | None = None
    price: Decimal = Decimal("0.00")
    capacity: int = 0
    variation_handle: UUID | None = None
    id: int | None = None

    def __post_init__(self) -> None:
        self.price = Decimal(str(self.price))
        if self.price < 0:
            raise ValueError("Ticket price cannot be negative")
        if self.capacity < 0:
            raise ValueError("Capacity cannot be negative")

    @property
    def is_active(self) -> bool:
        # Display status only; capacity does not gate sales.
        return self.capacity > 0


@dataclass
class Event:
    title: str
    event_type: EventType | None = None
    bundle: str = EVENT_BUNDLE
    product: Product | None = None
    external_url: str | None = None
    start_at: datetime | None = None
    end_at: datetime | None = None
    ticket_types: list[TicketTypeConfig] = field(default_factory=list)
    rsvp_capacity: int = 0
    owner_id: int | None = None
    published: bool = True
    id: int | None = None

    @property
    def has_external_url(self) -> bool:
        return bool(self.external_url and self.external_url.strip())

    def find_ticket_type(self, config_id: int) -> TicketTypeConfig | None:
        for config in self.ticket_types:
            if config.id == config_id:
                return config
        return None

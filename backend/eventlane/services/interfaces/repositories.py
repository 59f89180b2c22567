"""
Repository interfaces for events and commerce entities.

Repositories must be swappable and return domain models. The decision
engine never talks to a database or framework directly.
"""

from abc import ABC, abstractmethod
from uuid import UUID

from eventlane.domain import Event, Product, Storefront, Variation


class EventRepository(ABC):
    """Interface for event persistence operations."""

    @abstractmethod
    async def get_event(self, event_id: int) -> Event | None:
        """Return an event with its linked product and ticket types, or None."""
        ...

    @abstractmethod
    async def save_event(self, event: Event) -> Event:
        """Persist event fields, product link and ticket type configs.

        Assigns ids to new events and configs in place.
        """
        ...

    @abstractmethod
    async def count_rsvp_attendees(self, event_id: int) -> int:
        """Return the number of confirmed RSVP attendees."""
        ...

    @abstractmethod
    async def commit(self) -> None:
        """Make everything saved so far visible to other workers.

        Syncs call this before releasing their lock, so the next holder
        reads the product and variation handles they wrote.
        """
        ...


class CommerceRepository(ABC):
    """Interface for commerce product and variation storage."""

    @abstractmethod
    async def get_default_storefront(self) -> Storefront | None:
        """Return the default storefront, falling back to any storefront."""
        ...

    @abstractmethod
    async def get_product(self, product_id: int) -> Product | None:
        """Return a product with all variations, published or not."""
        ...

    @abstractmethod
    async def save_product(self, product: Product) -> Product:
        """Persist product fields and its variation membership."""
        ...

    @abstractmethod
    async def get_variation(self, handle: UUID) -> Variation | None:
        """Return a variation by its stable handle."""
        ...

    @abstractmethod
    async def save_variation(self, variation: Variation) -> Variation:
        """Persist a variation. Variations are never deleted."""
        ...

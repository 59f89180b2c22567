"""
In-memory repositories.

Use when:
- Unit tests and local development
- Running the decision engine without a database

Objects are stored by reference, so callers see each other's mutations the
same way they would after a round trip through a real store.
"""

from collections import defaultdict
from itertools import count
from typing import Iterable, Optional
from uuid import UUID

from eventlane.domain import Event, Product, Storefront, Variation
from eventlane.services.interfaces.repositories import CommerceRepository, EventRepository


class InMemoryEventRepository(EventRepository):
    def __init__(self):
        self._events: dict[int, Event] = {}
        self._attendees: defaultdict[int, int] = defaultdict(int)
        self._event_ids = count(1)
        self._config_ids = count(1)

    async def get_event(self, event_id: int) -> Optional[Event]:
        return self._events.get(event_id)

    async def save_event(self, event: Event) -> Event:
        if event.id is None:
            event.id = next(self._event_ids)
        for config in event.ticket_types:
            if config.id is None:
                config.id = next(self._config_ids)
        self._events[event.id] = event
        return event

    async def count_rsvp_attendees(self, event_id: int) -> int:
        return self._attendees[event_id]

    async def commit(self) -> None:
        pass

    def add_attendees(self, event_id: int, number: int = 1) -> None:
        self._attendees[event_id] += number


class InMemoryCommerceRepository(CommerceRepository):
    def __init__(self, storefronts: Iterable[Storefront] = ()):
        self._storefronts = list(storefronts)
        self._products: dict[int, Product] = {}
        self._variations: dict[UUID, Variation] = {}
        self._product_ids = count(1)
        self._variation_ids = count(1)

    async def get_default_storefront(self) -> Optional[Storefront]:
        for storefront in self._storefronts:
            if storefront.is_default:
                return storefront
        return self._storefronts[0] if self._storefronts else None

    async def get_product(self, product_id: int) -> Optional[Product]:
        return self._products.get(product_id)

    async def save_product(self, product: Product) -> Product:
        if product.id is None:
            product.id = next(self._product_ids)
        for variation in product.variations:
            variation.product_id = product.id
            self._variations[variation.handle] = variation
        self._products[product.id] = product
        return product

    async def get_variation(self, handle: UUID) -> Optional[Variation]:
        return self._variations.get(handle)

    async def save_variation(self, variation: Variation) -> Variation:
        if variation.id is None:
            variation.id = next(self._variation_ids)
        self._variations[variation.handle] = variation
        return variation

    @property
    def products(self) -> list[Product]:
        return list(self._products.values())

    @property
    def variations(self) -> list[Variation]:
        return list(self._variations.values())

"""
Commerce product lifecycle for RSVP events.

RSVP-only events get an auto-generated product with a single $0 variation so
that every booking goes through the same commerce path. The product can be
created before the event exists (create_rsvp_product_for_new_event): the event
cannot be saved without a product, and the product would otherwise want an
event reference. The back-reference is repaired on the next sync.
"""

import uuid
from decimal import Decimal
from typing import Any, Optional
from uuid import UUID

from eventlane.core.config import Settings, get_settings
from eventlane.core.logging import get_logger
from eventlane.core.metrics import (
    record_collaborator_error,
    record_lock_contention,
    rsvp_products_created,
)
from eventlane.domain import (
    EVENT_BUNDLE,
    TICKET_BUNDLE,
    Event,
    EventType,
    Money,
    Product,
    Storefront,
    SyncIntent,
    SyncReport,
    Variation,
)
from eventlane.services.interfaces.repositories import CommerceRepository, EventRepository
from eventlane.services.interfaces.sync_lock import SyncLock
from eventlane.services.naming import (
    compose_title,
    generate_sku,
    resolve_ticket_label,
    retitle_variations,
)

logger = get_logger(__name__)

RSVP_LABEL = "RSVP"
RSVP_VARIATION_TITLE = "Free RSVP"
UNTITLED_EVENT = "Untitled Event"


class EventProductManager:
    def __init__(
        self,
        events: EventRepository,
        commerce: CommerceRepository,
        lock: SyncLock,
        settings: Optional[Settings] = None,
    ):
        self._events = events
        self._commerce = commerce
        self._lock = lock
        self._settings = settings or get_settings()

    async def ensure_rsvp_product(self, event: Event) -> Optional[Product]:
        """Return the event's RSVP product, creating and linking one if needed.

        Only applies to events flagged exactly "rsvp".
        """
        if event.event_type != EventType.RSVP:
            return None

        product = event.product
        if product is not None and product.published:
            return product

        product = await self._create_rsvp_product(
            event.title, event_id=event.id, owner_id=event.owner_id
        )
        if product is None:
            return None

        event.product = product
        await self._events.save_event(event)

        logger.info("rsvp_product_linked", product_id=product.id, event_id=event.id)
        return product

    async def create_rsvp_product_for_new_event(
        self, title: Optional[str] = None, owner_id: Optional[int] = None
    ) -> Optional[Product]:
        """Create an RSVP product for an event that has not been saved yet."""
        return await self._create_rsvp_product(title or UNTITLED_EVENT, event_id=None, owner_id=owner_id)

    async def sync_product_to_event(self, event: Event) -> SyncReport:
        """Reconcile the linked product with the event. Called on every event save."""
        if event.bundle != EVENT_BUNDLE:
            return SyncReport(synced=False)

        if event.event_type == EventType.RSVP:
            return await self._sync_rsvp_product(event)

        warnings = []
        if event.event_type in (EventType.PAID, EventType.BOTH):
            if event.product is not None and not await self._sync_ticket_product_titles(event):
                return SyncReport(synced=False, product=event.product)
            if event.product is None and not event.ticket_types:
                kind = "paid" if event.event_type == EventType.PAID else "hybrid"
                warnings.append(
                    f"Please link a ticket product for this {kind} event, or define ticket types below."
                )
                logger.warning("ticket_product_missing", event_id=event.id, event_type=kind)

        return SyncReport(synced=True, warnings=warnings, product=event.product)

    async def sync_products(self, event: Event, intent: str) -> SyncReport:
        """Sync with an explicit intent ("publish" or "sync").

        Refuses unsaved events, "publish" for unpublished events, and
        duplicate concurrent requests for the same event.
        """
        try:
            sync_intent = SyncIntent(intent)
        except ValueError:
            logger.warning("sync_intent_invalid", intent=intent, event_id=event.id)
            return SyncReport(
                synced=False,
                warnings=[f'Invalid sync intent "{intent}". Allowed: publish, sync.'],
            )

        if event.id is None:
            logger.warning("sync_unsaved_event", intent=sync_intent.value)
            return SyncReport(synced=False, warnings=["Save the event before syncing products."])

        if sync_intent == SyncIntent.PUBLISH and not event.published:
            logger.warning("sync_publish_unpublished_event", event_id=event.id)
            return SyncReport(
                synced=False,
                warnings=["Products are only published for published events."],
            )

        async with self._lock.hold(f"sync_products:{event.id}", blocking=False) as acquired:
            if not acquired:
                record_lock_contention("sync_products")
                logger.warning("sync_lock_busy", scope="sync_products", event_id=event.id)
                return SyncReport(
                    synced=False,
                    warnings=["A product sync is already in progress for this event."],
                )
            report = await self.sync_product_to_event(event)
            if report.synced:
                await self._events.commit()
            return report

    def calculate_product_definitions(self, event: Event) -> dict[str, dict[str, Any]]:
        """Preview the products this event should own. No side effects."""
        definitions: dict[str, dict[str, Any]] = {}
        if event.bundle != EVENT_BUNDLE:
            return definitions

        if event.event_type == EventType.RSVP:
            definitions["rsvp"] = {
                "bundle": TICKET_BUNDLE,
                "title": compose_title(event.title, RSVP_LABEL),
                "variations": [
                    {
                        "title": RSVP_VARIATION_TITLE,
                        "price": Money(Decimal("0"), self._settings.DEFAULT_CURRENCY),
                    }
                ],
            }
        elif event.event_type in (EventType.PAID, EventType.BOTH):
            storefront = event.product.storefront if event.product else None
            currency = storefront.default_currency if storefront else self._settings.DEFAULT_CURRENCY
            definitions["ticket"] = {
                "bundle": TICKET_BUNDLE,
                "title": event.title,
                "variations": [
                    {
                        "title": compose_title(event.title, resolve_ticket_label(config)),
                        "price": Money(config.price, currency),
                    }
                    for config in event.ticket_types
                ],
            }

        return definitions

    def is_auto_generated_rsvp_product(self, product: Product) -> bool:
        """Exactly one variation, priced at exactly zero. Retired variations count."""
        if product.bundle != TICKET_BUNDLE:
            return False
        variations = product.variations
        if len(variations) != 1:
            return False
        return variations[0].price.is_zero

    async def _sync_rsvp_product(self, event: Event) -> SyncReport:
        product = event.product
        if product is None or not product.published:
            product = await self.ensure_rsvp_product(event)
            if product is None:
                return SyncReport(
                    synced=False,
                    warnings=["The RSVP product could not be created. Please try again later."],
                )
            return SyncReport(synced=True, product=product)

        changed = product.event_id != event.id
        if changed:
            logger.info(
                "rsvp_product_relinked",
                product_id=product.id,
                previous_event_id=product.event_id,
                event_id=event.id,
            )
            product.event_id = event.id

        retitled: set[UUID] = set()
        if self.is_auto_generated_rsvp_product(product):
            title = compose_title(event.title, RSVP_LABEL)
            if product.title != title:
                product.title = title
                changed = True
        else:
            # Vendor-managed title stays; only labelled variations follow the event
            retitled = {v.handle for v in retitle_variations(product, event.title, product.title)}

        try:
            for variation in product.variations:
                if variation.event_id != event.id or variation.handle in retitled:
                    variation.event_id = event.id
                    await self._commerce.save_variation(variation)
            if changed:
                await self._commerce.save_product(product)
        except Exception:
            logger.error("rsvp_product_sync_failed", product_id=product.id, event_id=event.id, exc_info=True)
            record_collaborator_error("commerce")
            return SyncReport(synced=False, product=product)

        if retitled:
            logger.info("variations_retitled", product_id=product.id, event_id=event.id, count=len(retitled))
        return SyncReport(synced=True, product=product)

    async def _sync_ticket_product_titles(self, event: Event) -> bool:
        """Carry an event rename over to the ticket product and its variations."""
        product = event.product
        previous_event_title = product.title
        changed = retitle_variations(product, event.title, previous_event_title)
        try:
            for variation in changed:
                await self._commerce.save_variation(variation)
            if product.title != event.title:
                product.title = event.title
                await self._commerce.save_product(product)
        except Exception:
            logger.error("ticket_product_retitle_failed", product_id=product.id, event_id=event.id, exc_info=True)
            record_collaborator_error("commerce")
            return False

        if changed:
            logger.info("variations_retitled", product_id=product.id, event_id=event.id, count=len(changed))
        return True

    async def _default_storefront(self) -> Optional[Storefront]:
        try:
            return await self._commerce.get_default_storefront()
        except Exception:
            logger.error("storefront_lookup_failed", exc_info=True)
            record_collaborator_error("commerce")
            return None

    async def _create_rsvp_product(
        self, title: str, event_id: Optional[int], owner_id: Optional[int]
    ) -> Optional[Product]:
        storefront = await self._default_storefront()
        if storefront is None:
            logger.error("storefront_missing", purpose="rsvp_product", event_id=event_id)
            return None

        try:
            variation = await self._commerce.save_variation(
                Variation(
                    handle=uuid.uuid4(),
                    sku=generate_sku("rsvp", event_id, RSVP_LABEL),
                    title=RSVP_VARIATION_TITLE,
                    price=Money(Decimal("0"), self._settings.DEFAULT_CURRENCY),
                    event_id=event_id,
                )
            )
            product = await self._commerce.save_product(
                Product(
                    title=compose_title(title, RSVP_LABEL),
                    bundle=TICKET_BUNDLE,
                    storefront=storefront,
                    variations=[variation],
                    event_id=event_id,
                    owner_id=owner_id,
                )
            )
        except Exception:
            logger.error("rsvp_product_create_failed", event_id=event_id, exc_info=True)
            record_collaborator_error("commerce")
            return None

        rsvp_products_created.inc()
        logger.info("rsvp_product_created", product_id=product.id, event_id=event_id, title=product.title)
        return product

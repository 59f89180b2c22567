"""
Ticket type to commerce variation reconciliation.

Vendors edit an ordered list of ticket type configs on paid and hybrid events.
Each sync brings the event's ticket product in line with that list:

1. Get or create the ticket product
2. Update or create one variation per config (the config keeps the handle)
3. Retire variations no config points at any more (never deleted: historic
   orders still reference their SKUs)
4. Re-derive titles from the current event title

Concurrent syncs of the same event are serialized by a SyncLock. The holder
re-reads the stored configs and product link after acquiring it and commits
before releasing it, so a request that waited never works from a stale copy.
"""

import uuid
from typing import Optional
from uuid import UUID

from eventlane.core.config import Settings, get_settings
from eventlane.core.logging import get_logger
from eventlane.core.metrics import (
    record_collaborator_error,
    record_lock_contention,
    record_sync_run,
    record_variation_operation,
    ticket_sync_latency,
)
from eventlane.domain import (
    TICKET_BUNDLE,
    Event,
    EventType,
    Money,
    Product,
    TicketTypeConfig,
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

TICKET_EVENT_TYPES = (EventType.PAID, EventType.BOTH)


class TicketTypeManager:
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

    async def sync_ticket_types_to_variations(self, event: Event) -> bool:
        """
        Reconcile the event's ticket type configs into product variations.

        Returns:
            True when the sync ran to completion, False when it was skipped
            (not a ticketed event, lock busy) or the product was unavailable.
        """
        if event.event_type not in TICKET_EVENT_TYPES:
            record_sync_run("skipped")
            return False

        key = f"ticket_types:{event.id if event.id is not None else 'new'}"
        async with self._lock.hold(key) as acquired:
            if not acquired:
                record_lock_contention("ticket_types")
                record_sync_run("locked")
                logger.warning("sync_lock_busy", scope="ticket_types", event_id=event.id)
                return False

            with ticket_sync_latency.time():
                synced = await self._sync(event)

        record_sync_run("completed" if synced else "failed")
        return synced

    async def _sync(self, event: Event) -> bool:
        await self._load_stored_state(event)

        product = await self._get_or_create_ticket_product(event)
        if product is None:
            logger.error("ticket_product_unavailable", event_id=event.id)
            return False

        previous_event_title = product.title
        currency = self._currency_for(product)
        active_handles: set[UUID] = set()

        for config in event.ticket_types:
            try:
                variation = await self._sync_config(event, product, config, currency)
                active_handles.add(variation.handle)
            except Exception:
                logger.error(
                    "ticket_type_sync_failed",
                    event_id=event.id,
                    config_id=config.id,
                    exc_info=True,
                )
                record_collaborator_error("ticket_type")
                # Keep its current variation live; a transient error must not retire it
                if config.variation_handle is not None:
                    active_handles.add(config.variation_handle)

        await self._retire_orphans(event, product, active_handles)

        try:
            await self._sync_titles(event, product, previous_event_title, active_handles)
            await self._commerce.save_product(product)
            event.product = product
            await self._events.save_event(event)
            await self._events.commit()
        except Exception:
            logger.error("ticket_product_save_failed", event_id=event.id, product_id=product.id, exc_info=True)
            record_collaborator_error("commerce")
            return False

        logger.info(
            "ticket_types_synced",
            event_id=event.id,
            product_id=product.id,
            ticket_types=len(event.ticket_types),
            active_variations=len(product.active_variations),
        )
        return True

    async def _load_stored_state(self, event: Event) -> None:
        """Adopt the stored configs and product, which may be newer than the caller's copy.

        Callers save their config edits before syncing.
        """
        if event.id is None:
            return
        stored = await self._events.get_event(event.id)
        if stored is None or stored is event:
            return
        event.ticket_types = stored.ticket_types
        event.product = stored.product

    async def _get_or_create_ticket_product(self, event: Event) -> Optional[Product]:
        product = event.product
        if product is not None and product.bundle == TICKET_BUNDLE:
            if product.event_id != event.id:
                product.event_id = event.id
            return product

        try:
            storefront = await self._commerce.get_default_storefront()
        except Exception:
            logger.error("storefront_lookup_failed", event_id=event.id, exc_info=True)
            record_collaborator_error("commerce")
            return None

        if storefront is None:
            logger.error("storefront_missing", purpose="ticket_product", event_id=event.id)
            return None

        try:
            product = await self._commerce.save_product(
                Product(
                    title=event.title,
                    bundle=TICKET_BUNDLE,
                    storefront=storefront,
                    event_id=event.id,
                    owner_id=event.owner_id,
                )
            )
        except Exception:
            logger.error("ticket_product_create_failed", event_id=event.id, exc_info=True)
            record_collaborator_error("commerce")
            return None

        event.product = product
        logger.info("ticket_product_created", event_id=event.id, product_id=product.id)
        return product

    def _currency_for(self, product: Product) -> str:
        if product.storefront is not None and product.storefront.default_currency:
            return product.storefront.default_currency
        return self._settings.DEFAULT_CURRENCY

    async def _sync_config(
        self, event: Event, product: Product, config: TicketTypeConfig, currency: str
    ) -> Variation:
        label = resolve_ticket_label(config)
        title = compose_title(event.title, label)
        price = Money(config.price, currency)

        variation = product.find_variation(config.variation_handle)
        if variation is None and config.variation_handle is not None:
            await self._log_stale_handle(event, product, config)

        if variation is not None:
            variation.title = title
            variation.price = price
            variation.published = True
            variation.event_id = event.id
            variation = await self._commerce.save_variation(variation)
            record_variation_operation("updated")
            logger.debug("variation_updated", event_id=event.id, config_id=config.id, sku=variation.sku)
            return variation

        variation = await self._commerce.save_variation(
            Variation(
                handle=uuid.uuid4(),
                sku=generate_sku("ticket", event.id, label),
                title=title,
                price=price,
                product_id=product.id,
                event_id=event.id,
            )
        )
        product.variations.append(variation)
        config.variation_handle = variation.handle
        record_variation_operation("created")
        logger.info(
            "variation_created",
            event_id=event.id,
            config_id=config.id,
            sku=variation.sku,
            price=str(price),
        )
        return variation

    async def _log_stale_handle(self, event: Event, product: Product, config: TicketTypeConfig) -> None:
        stored = await self._commerce.get_variation(config.variation_handle)
        if stored is None:
            logger.warning(
                "variation_reference_missing",
                event_id=event.id,
                config_id=config.id,
                handle=str(config.variation_handle),
            )
        else:
            logger.warning(
                "variation_reference_cross_product",
                event_id=event.id,
                config_id=config.id,
                handle=str(config.variation_handle),
                product_id=product.id,
                other_product_id=stored.product_id,
            )

    async def _retire_orphans(self, event: Event, product: Product, active_handles: set[UUID]) -> None:
        for variation in product.variations:
            if variation.handle in active_handles or not variation.published:
                continue
            try:
                variation.retire()
                await self._commerce.save_variation(variation)
            except Exception:
                logger.error("orphaned_variation_retire_failed", event_id=event.id, sku=variation.sku, exc_info=True)
                record_collaborator_error("commerce")
                continue
            record_variation_operation("retired")
            logger.info("orphaned_variation_retired", event_id=event.id, sku=variation.sku)

    async def _sync_titles(
        self, event: Event, product: Product, previous_event_title: str, current: set[UUID]
    ) -> None:
        if product.title != event.title:
            product.title = event.title

        for variation in retitle_variations(product, event.title, previous_event_title, skip=current):
            await self._commerce.save_variation(variation)
            record_variation_operation("retitled")
            logger.debug("variation_retitled", event_id=event.id, sku=variation.sku, title=variation.title)

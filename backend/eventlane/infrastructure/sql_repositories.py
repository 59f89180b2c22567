"""
SQLAlchemy-backed repositories.

ORM rows never leave this module: every method maps to and from the domain
dataclasses. The session is owned by the caller (one per request via get_db),
so saves only flush. The one exception is SqlEventRepository.commit, which a
sync calls while it still holds the per-event lock.

get_event always re-reads rows, even ones already in the session: a request
that waited on a sync lock must see what the previous holder committed.
"""

from typing import Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from eventlane.domain import (
    Event,
    EventType,
    LabelMode,
    Money,
    Product,
    Storefront,
    TicketTypeConfig,
    Variation,
)
from eventlane.models import (
    AttendeeModel,
    EventModel,
    ProductModel,
    StorefrontModel,
    TicketTypeConfigModel,
    VariationModel,
)
from eventlane.services.interfaces.repositories import CommerceRepository, EventRepository


def _to_storefront(model: Optional[StorefrontModel]) -> Optional[Storefront]:
    if model is None:
        return None
    return Storefront(
        id=model.id,
        name=model.name,
        default_currency=model.default_currency,
        is_default=model.is_default,
    )


def _to_variation(model: VariationModel) -> Variation:
    return Variation(
        handle=model.handle,
        sku=model.sku,
        title=model.title,
        price=Money(model.price_amount, model.currency),
        published=model.published,
        product_id=model.product_id,
        event_id=model.event_id,
        id=model.id,
    )


def _to_product(model: Optional[ProductModel]) -> Optional[Product]:
    if model is None:
        return None
    return Product(
        title=model.title,
        bundle=model.bundle,
        published=model.published,
        event_id=model.event_id,
        owner_id=model.owner_id,
        storefront=_to_storefront(model.storefront),
        variations=[_to_variation(variation) for variation in model.variations],
        id=model.id,
    )


def _to_ticket_type(model: TicketTypeConfigModel) -> TicketTypeConfig:
    return TicketTypeConfig(
        label_mode=LabelMode(model.label_mode),
        preset_key=model.preset_key,
        custom_label=model.custom_label,
        price=model.price,
        capacity=model.capacity,
        variation_handle=model.variation_handle,
        id=model.id,
    )


def _to_event(model: EventModel) -> Event:
    return Event(
        title=model.title,
        event_type=EventType.parse(model.event_type),
        bundle=model.bundle,
        product=_to_product(model.product),
        external_url=model.external_url,
        start_at=model.start_at,
        end_at=model.end_at,
        ticket_types=[_to_ticket_type(config) for config in model.ticket_types],
        rsvp_capacity=model.rsvp_capacity,
        owner_id=model.owner_id,
        published=model.published,
        id=model.id,
    )


class SqlEventRepository(EventRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_event(self, event_id: int) -> Optional[Event]:
        result = await self._session.execute(
            select(EventModel)
            .where(EventModel.id == event_id)
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return _to_event(model) if model else None

    async def save_event(self, event: Event) -> Event:
        model = await self._session.get(EventModel, event.id) if event.id is not None else None
        if model is None:
            model = EventModel()
            self._session.add(model)

        model.title = event.title
        model.event_type = event.event_type.value if event.event_type else None
        model.bundle = event.bundle
        model.external_url = event.external_url
        model.start_at = event.start_at
        model.end_at = event.end_at
        model.rsvp_capacity = event.rsvp_capacity
        model.owner_id = event.owner_id
        model.published = event.published

        product = event.product
        if product is not None and product.id is not None:
            model.product = await self._session.get(ProductModel, product.id)
        else:
            model.product = None

        existing = {config.id: config for config in model.ticket_types}
        rows = []
        for position, config in enumerate(event.ticket_types):
            row = existing.get(config.id) if config.id is not None else None
            if row is None:
                row = TicketTypeConfigModel()
            row.position = position
            row.label_mode = config.label_mode.value
            row.preset_key = config.preset_key
            row.custom_label = config.custom_label
            row.price = config.price
            row.capacity = config.capacity
            row.variation_handle = config.variation_handle
            rows.append(row)
        # Configs missing from the list are deleted (delete-orphan)
        model.ticket_types = rows

        await self._session.flush()

        event.id = model.id
        for config, row in zip(event.ticket_types, rows):
            config.id = row.id
        return event

    async def count_rsvp_attendees(self, event_id: int) -> int:
        result = await self._session.execute(
            select(func.count())
            .select_from(AttendeeModel)
            .where(
                AttendeeModel.event_id == event_id,
                AttendeeModel.source == "rsvp",
                AttendeeModel.status == "confirmed",
            )
        )
        return result.scalar_one()

    async def commit(self) -> None:
        await self._session.commit()


class SqlCommerceRepository(CommerceRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_default_storefront(self) -> Optional[Storefront]:
        result = await self._session.execute(
            select(StorefrontModel)
            .order_by(StorefrontModel.is_default.desc(), StorefrontModel.id.asc())
            .limit(1)
        )
        return _to_storefront(result.scalar_one_or_none())

    async def get_product(self, product_id: int) -> Optional[Product]:
        return _to_product(await self._session.get(ProductModel, product_id))

    async def save_product(self, product: Product) -> Product:
        model = await self._session.get(ProductModel, product.id) if product.id is not None else None
        if model is None:
            model = ProductModel(variations=[])
            self._session.add(model)

        model.title = product.title
        model.bundle = product.bundle
        model.published = product.published
        model.event_id = product.event_id
        model.owner_id = product.owner_id
        if product.storefront is not None and product.storefront.id is not None:
            model.storefront = await self._session.get(StorefrontModel, product.storefront.id)
        else:
            model.storefront = None

        members = []
        for variation in product.variations:
            if variation.id is None:
                await self.save_variation(variation)
            members.append(await self._session.get(VariationModel, variation.id))
        model.variations = members

        await self._session.flush()

        product.id = model.id
        for variation in product.variations:
            variation.product_id = model.id
        return product

    async def get_variation(self, handle: UUID) -> Optional[Variation]:
        model = await self._variation_by_handle(handle)
        return _to_variation(model) if model else None

    async def save_variation(self, variation: Variation) -> Variation:
        model = None
        if variation.id is not None:
            model = await self._session.get(VariationModel, variation.id)
        if model is None:
            model = await self._variation_by_handle(variation.handle)
        if model is None:
            model = VariationModel(handle=variation.handle)
            self._session.add(model)

        model.sku = variation.sku
        model.title = variation.title
        model.price_amount = variation.price.amount
        model.currency = variation.price.currency
        model.published = variation.published
        model.event_id = variation.event_id
        if variation.product_id is not None:
            model.product_id = variation.product_id

        await self._session.flush()

        variation.id = model.id
        return variation

    async def _variation_by_handle(self, handle: UUID) -> Optional[VariationModel]:
        result = await self._session.execute(
            select(VariationModel).where(VariationModel.handle == handle)
        )
        return result.scalar_one_or_none()

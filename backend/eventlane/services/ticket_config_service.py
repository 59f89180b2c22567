"""
Vendor ticket type operations behind the event "Tickets" page.

Adding or editing a ticket type only stores the config; variations are
reconciled when the vendor saves the tickets, or immediately on delete so the
removed ticket stops selling.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional
from uuid import UUID

from fastapi import HTTPException, status

from eventlane.core.logging import get_logger
from eventlane.domain import Event, LabelMode, TicketTypeConfig
from eventlane.services.interfaces.repositories import EventRepository
from eventlane.services.naming import resolve_ticket_label
from eventlane.services.ticket_type_manager import TicketTypeManager

logger = get_logger(__name__)

GENERAL_ADMISSION = "general_admission"
DEFAULT_PAID_PRICE = Decimal("50.00")
DEFAULT_CAPACITY = 100


@dataclass(frozen=True)
class TicketTypeRow:
    id: int
    label: str
    price: Decimal
    capacity: int
    status: str
    variation_handle: Optional[UUID]


@dataclass(frozen=True)
class TicketTypeListing:
    rows: list[TicketTypeRow]
    total_capacity: int


def get_ticket_type_or_404(event: Event, config_id: int) -> TicketTypeConfig:
    config = event.find_ticket_type(config_id)
    if not config:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Ticket type {config_id} not found on event {event.id}",
        )
    return config


class TicketConfigService:
    def __init__(self, events: EventRepository, tickets: TicketTypeManager):
        self._events = events
        self._tickets = tickets

    def list_ticket_types(self, event: Event) -> TicketTypeListing:
        rows = [
            TicketTypeRow(
                id=config.id,
                label=resolve_ticket_label(config),
                price=config.price,
                capacity=config.capacity,
                status="Active" if config.is_active else "Inactive",
                variation_handle=config.variation_handle,
            )
            for config in event.ticket_types
        ]
        return TicketTypeListing(rows=rows, total_capacity=sum(row.capacity for row in rows))

    async def add_paid_ticket(self, event: Event) -> TicketTypeConfig:
        return await self.add_ticket_type(
            event, preset_key=GENERAL_ADMISSION, price=DEFAULT_PAID_PRICE, capacity=DEFAULT_CAPACITY
        )

    async def add_free_ticket(self, event: Event) -> TicketTypeConfig:
        return await self.add_ticket_type(
            event, preset_key=GENERAL_ADMISSION, price=Decimal("0.00"), capacity=DEFAULT_CAPACITY
        )

    async def add_ticket_type(
        self,
        event: Event,
        label_mode: LabelMode = LabelMode.PRESET,
        preset_key: Optional[str] = None,
        custom_label: Optional[str] = None,
        price: Decimal = Decimal("0.00"),
        capacity: int = 0,
    ) -> TicketTypeConfig:
        config = TicketTypeConfig(
            label_mode=label_mode,
            preset_key=preset_key,
            custom_label=custom_label,
            price=price,
            capacity=capacity,
        )
        event.ticket_types.append(config)
        await self._events.save_event(event)

        logger.info(
            "ticket_type_added",
            event_id=event.id,
            config_id=config.id,
            label=resolve_ticket_label(config),
            price=str(config.price),
        )
        return config

    async def update_ticket_type(self, event: Event, config: TicketTypeConfig, **changes) -> TicketTypeConfig:
        updated = TicketTypeConfig(
            label_mode=changes.get("label_mode") or config.label_mode,
            preset_key=changes.get("preset_key", config.preset_key),
            custom_label=changes.get("custom_label", config.custom_label),
            price=changes.get("price") if changes.get("price") is not None else config.price,
            capacity=changes.get("capacity") if changes.get("capacity") is not None else config.capacity,
            variation_handle=config.variation_handle,
            id=config.id,
        )
        index = event.ticket_types.index(config)
        event.ticket_types[index] = updated
        await self._events.save_event(event)

        logger.info("ticket_type_updated", event_id=event.id, config_id=config.id, fields=sorted(changes))
        return updated

    async def delete_ticket_type(self, event: Event, config: TicketTypeConfig) -> bool:
        """Remove the config, then retire its variation through a sync."""
        event.ticket_types.remove(config)
        await self._events.save_event(event)
        logger.info("ticket_type_deleted", event_id=event.id, config_id=config.id)
        return await self._tickets.sync_ticket_types_to_variations(event)

    async def save_ticket_types(self, event: Event) -> bool:
        synced = await self._tickets.sync_ticket_types_to_variations(event)
        if not synced:
            logger.warning("ticket_types_not_synced", event_id=event.id)
        return synced

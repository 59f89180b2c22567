"""
FastAPI dependency wiring: repositories bound to the request session, and
the booking-mode services built on top of them.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from eventlane.db.session import get_db
from eventlane.infrastructure.sql_repositories import SqlCommerceRepository, SqlEventRepository
from eventlane.services.availability_service import CapacityAvailabilityOracle
from eventlane.services.event_mode_manager import EventModeManager
from eventlane.services.event_product_manager import EventProductManager
from eventlane.services.event_type_service import EventTypeService
from eventlane.services.interfaces import (
    Clock,
    CommerceRepository,
    EventRepository,
    SyncLock,
    SystemClock,
)
from eventlane.services.strategy_factory import get_sync_lock
from eventlane.services.ticket_config_service import TicketConfigService
from eventlane.services.ticket_type_manager import TicketTypeManager


def get_event_repository(db: AsyncSession = Depends(get_db)) -> EventRepository:
    return SqlEventRepository(db)


def get_commerce_repository(db: AsyncSession = Depends(get_db)) -> CommerceRepository:
    return SqlCommerceRepository(db)


def get_clock() -> Clock:
    return SystemClock()


def get_lock() -> SyncLock:
    return get_sync_lock()


def get_mode_manager(
    events: EventRepository = Depends(get_event_repository),
    clock: Clock = Depends(get_clock),
) -> EventModeManager:
    return EventModeManager(CapacityAvailabilityOracle(events), clock)


def get_event_type_service(
    modes: EventModeManager = Depends(get_mode_manager),
) -> EventTypeService:
    return EventTypeService(modes)


def get_product_manager(
    events: EventRepository = Depends(get_event_repository),
    commerce: CommerceRepository = Depends(get_commerce_repository),
    lock: SyncLock = Depends(get_lock),
) -> EventProductManager:
    return EventProductManager(events, commerce, lock)


def get_ticket_type_manager(
    events: EventRepository = Depends(get_event_repository),
    commerce: CommerceRepository = Depends(get_commerce_repository),
    lock: SyncLock = Depends(get_lock),
) -> TicketTypeManager:
    return TicketTypeManager(events, commerce, lock)


def get_ticket_config_service(
    events: EventRepository = Depends(get_event_repository),
    tickets: TicketTypeManager = Depends(get_ticket_type_manager),
) -> TicketConfigService:
    return TicketConfigService(events, tickets)

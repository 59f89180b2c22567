"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from eventlane.api.routes import events, products, tickets, vendor_events

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(events.router)
api_router.include_router(vendor_events.router)
api_router.include_router(tickets.router)
api_router.include_router(products.router)

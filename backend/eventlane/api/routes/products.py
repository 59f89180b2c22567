"""
Vendor commerce product endpoints for event booking products.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from eventlane.api.deps import get_event_repository, get_product_manager
from eventlane.schemas.event import ProductResponse
from eventlane.schemas.product import (
    ProductDefinition,
    ProductDefinitionsResponse,
    RsvpDraftCreate,
    SyncReportResponse,
    VariationDefinition,
)
from eventlane.services.event_product_manager import EventProductManager
from eventlane.services.event_service import get_event_or_404
from eventlane.services.interfaces import EventRepository

router = APIRouter(prefix="/vendor", tags=["Vendor Products"])


@router.post("/events/{event_id}/product/ensure-rsvp", response_model=ProductResponse)
async def ensure_rsvp_product_endpoint(
    event_id: int,
    events: EventRepository = Depends(get_event_repository),
    products: EventProductManager = Depends(get_product_manager),
):
    event = await get_event_or_404(events, event_id)
    product = await products.ensure_rsvp_product(event)
    if product is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="An RSVP product is only created for RSVP events with a storefront available",
        )
    return ProductResponse.model_validate(product)


@router.post("/events/{event_id}/product/sync", response_model=SyncReportResponse)
async def sync_products_endpoint(
    event_id: int,
    intent: str = Query("sync"),
    events: EventRepository = Depends(get_event_repository),
    products: EventProductManager = Depends(get_product_manager),
):
    """Invalid intents are reported in the body, not as an HTTP error."""
    event = await get_event_or_404(events, event_id)
    return SyncReportResponse.model_validate(await products.sync_products(event, intent))


@router.get("/events/{event_id}/product/definitions", response_model=ProductDefinitionsResponse)
async def product_definitions_endpoint(
    event_id: int,
    events: EventRepository = Depends(get_event_repository),
    products: EventProductManager = Depends(get_product_manager),
):
    event = await get_event_or_404(events, event_id)
    definitions = products.calculate_product_definitions(event)
    return ProductDefinitionsResponse(
        event_id=event.id,
        definitions={
            key: ProductDefinition(
                bundle=definition["bundle"],
                title=definition["title"],
                variations=[
                    VariationDefinition(
                        title=line["title"],
                        price={"amount": line["price"].amount, "currency": line["price"].currency},
                    )
                    for line in definition["variations"]
                ],
            )
            for key, definition in definitions.items()
        },
    )


@router.post("/products/rsvp-draft", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_rsvp_draft_endpoint(
    draft: RsvpDraftCreate,
    products: EventProductManager = Depends(get_product_manager),
):
    """RSVP product for an event form that has not been saved yet."""
    product = await products.create_rsvp_product_for_new_event(draft.title, draft.owner_id)
    if product is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="No storefront is available for RSVP products",
        )
    return ProductResponse.model_validate(product)

"""
Pydantic schemas for event request/response validation.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from eventlane.domain import CtaKind, EventType, Mode


class EventCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    event_type: Optional[EventType] = None
    external_url: Optional[str] = Field(None, max_length=2048)
    start_at: Optional[datetime] = None
    end_at: Optional[datetime] = None
    rsvp_capacity: int = Field(0, ge=0, le=1000000)
    owner_id: Optional[int] = None
    published: bool = True
    product_id: Optional[int] = None


class EventUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    event_type: Optional[EventType] = None
    external_url: Optional[str] = Field(None, max_length=2048)
    start_at: Optional[datetime] = None
    end_at: Optional[datetime] = None
    rsvp_capacity: Optional[int] = Field(None, ge=0, le=1000000)
    published: Optional[bool] = None
    product_id: Optional[int] = None


class MoneyResponse(BaseModel):
    amount: Decimal
    currency: str

    model_config = {"from_attributes": True}


class VariationResponse(BaseModel):
    id: Optional[int]
    handle: UUID
    sku: str
    title: str
    price: MoneyResponse
    published: bool

    model_config = {"from_attributes": True}


class ProductResponse(BaseModel):
    id: Optional[int]
    title: str
    bundle: str
    published: bool
    event_id: Optional[int]
    variations: list[VariationResponse]

    model_config = {"from_attributes": True}


class EventResponse(BaseModel):
    id: int
    title: str
    event_type: Optional[EventType]
    external_url: Optional[str]
    start_at: Optional[datetime]
    end_at: Optional[datetime]
    rsvp_capacity: int
    owner_id: Optional[int]
    published: bool
    product: Optional[ProductResponse]

    model_config = {"from_attributes": True}


class EventSaveResponse(BaseModel):
    event: EventResponse
    mode: Mode
    warnings: list[str] = []


class ModeResponse(BaseModel):
    event_id: int
    mode: Mode
    rsvp_enabled: bool
    tickets_enabled: bool
    external_link: bool
    is_past: bool
    is_bookable: bool


class CtaResponse(BaseModel):
    kind: CtaKind
    label: str
    url: Optional[str]
    emphasis: str
    enabled: bool
    opens_in_new_tab: bool

    model_config = {"from_attributes": True}


class RsvpAvailabilityResponse(BaseModel):
    available: bool
    reason: str
    spots_remaining: Optional[int]

    model_config = {"from_attributes": True}


class TicketAvailabilityResponse(BaseModel):
    available: bool
    reason: str
    product_id: Optional[int] = None


class AvailabilityResponse(BaseModel):
    event_id: int
    rsvp: RsvpAvailabilityResponse
    tickets: TicketAvailabilityResponse


class PathStatusResponse(BaseModel):
    enabled: bool
    configured: bool
    message: str

    model_config = {"from_attributes": True}


class ConfigurationStatusResponse(BaseModel):
    event_type: Optional[str]
    effective_mode: Mode
    rsvp: PathStatusResponse
    tickets: PathStatusResponse
    external: PathStatusResponse
    rsvp_capacity: Optional[int]
    product_id: Optional[int]
    external_url: Optional[str]
    message: str

    model_config = {"from_attributes": True}

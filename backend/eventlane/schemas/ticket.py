"""
Pydantic schemas for vendor ticket type management.
"""

from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from eventlane.domain import LabelMode


class TicketTypeCreate(BaseModel):
    label_mode: LabelMode = LabelMode.PRESET
    preset_key: Optional[str] = Field(None, max_length=64)
    custom_label: Optional[str] = Field(None, max_length=255)
    price: Decimal = Field(Decimal("0.00"), ge=0, max_digits=10, decimal_places=2)
    capacity: int = Field(0, ge=0, le=1000000)


class TicketTypeUpdate(BaseModel):
    label_mode: Optional[LabelMode] = None
    preset_key: Optional[str] = Field(None, max_length=64)
    custom_label: Optional[str] = Field(None, max_length=255)
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    capacity: Optional[int] = Field(None, ge=0, le=1000000)


class TicketTypeResponse(BaseModel):
    id: int
    label_mode: LabelMode
    preset_key: Optional[str]
    custom_label: Optional[str]
    price: Decimal
    capacity: int
    variation_handle: Optional[UUID]

    model_config = {"from_attributes": True}


class TicketTypeRowResponse(BaseModel):
    id: int
    label: str
    price: Decimal
    capacity: int
    status: str
    variation_handle: Optional[UUID]

    model_config = {"from_attributes": True}


class TicketTypeListResponse(BaseModel):
    event_id: int
    ticket_types: list[TicketTypeRowResponse]
    total_capacity: int


class TicketSyncResponse(BaseModel):
    event_id: int
    synced: bool
    ticket_types: list[TicketTypeRowResponse]

"""
Pydantic schemas for commerce product sync endpoints.
"""

from typing import Optional

from pydantic import BaseModel, Field

from eventlane.schemas.event import MoneyResponse, ProductResponse


class RsvpDraftCreate(BaseModel):
    title: Optional[str] = Field(None, max_length=255)
    owner_id: Optional[int] = None


class SyncReportResponse(BaseModel):
    synced: bool
    warnings: list[str]
    product: Optional[ProductResponse]

    model_config = {"from_attributes": True}


class VariationDefinition(BaseModel):
    title: str
    price: MoneyResponse

    model_config = {"from_attributes": True}


class ProductDefinition(BaseModel):
    bundle: str
    title: str
    variations: list[VariationDefinition]


class ProductDefinitionsResponse(BaseModel):
    event_id: int
    definitions: dict[str, ProductDefinition]


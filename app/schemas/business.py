"""
Pydantic schemas for businesses and per-business special prices.
"""

from datetime import datetime
from typing import List, Optional, Union
from pydantic import AliasChoices, BaseModel, Field, field_validator

from app.core import validation


class BusinessUpdate(BaseModel):
    """Schema for updating a business; omitted or null fields keep their value"""
    abn: Optional[str] = Field(None, description="Australian Business Number")
    entity_name: Optional[str] = Field(None, max_length=255, description="Legal entity name")
    business_name: Optional[str] = Field(None, max_length=255, description="Trading name")
    delivery_address: Optional[str] = Field(None, description="Delivery address")
    billing_address: Optional[str] = Field(None, description="Billing address")

    @field_validator("abn")
    @classmethod
    def check_abn(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        abn = validation.normalize_abn(v)
        error = validation.validate_abn(abn)
        if error:
            raise ValueError(error)
        return abn or None


class BusinessResponse(BaseModel):
    """Schema for a business"""
    id: int
    abn: Optional[str] = None
    entity_name: Optional[str] = None
    business_name: Optional[str] = None
    delivery_address: Optional[str] = None
    billing_address: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class BusinessAdminRow(BusinessResponse):
    """Schema for the admin business list"""
    n_customers: int = 0


# ============================================================================
# Special Pricing Schemas
# ============================================================================

class BusinessPriceCreate(BaseModel):
    """Schema for setting a business special price"""
    item_number: str = Field(..., validation_alias=AliasChoices("item_number", "itemNumber"), description="Item Number")
    price: Union[float, str] = Field(..., description="Price in dollars, e.g. 12.5 or \"$12.50\"")

    @field_validator("item_number")
    @classmethod
    def strip_item_number(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("itemNumber is required")
        return v


class BusinessPriceResponse(BaseModel):
    item_number: str
    price_cents: int

    class Config:
        from_attributes = True


class BusinessPricingList(BaseModel):
    ok: bool = True
    overrides: List[BusinessPriceResponse]


class DeleteResponse(BaseModel):
    ok: bool = True
    deleted: int

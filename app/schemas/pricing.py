"""
Pydantic schemas for customer price resolution.
"""

from typing import List, Literal
from pydantic import BaseModel, Field


class AppliedRuleSchema(BaseModel):
    type: Literal["fixed", "rule", "default", "none"]
    value: float = Field(..., description="Fixed price in cents, or the discount fraction applied")


class PriceResolutionResponse(BaseModel):
    """Schema for one resolved customer price"""
    customer_id: str
    sku: str
    base_price_cents: int
    customer_price_cents: int
    applied: AppliedRuleSchema


class CustomerPriceRow(BaseModel):
    sku: str
    name: str
    list_price_cents: int
    customer_price_cents: int
    applied: AppliedRuleSchema


class CustomerPriceListResponse(BaseModel):
    """Schema for every priced item resolved for one customer"""
    customer_id: str
    count: int
    prices: List[CustomerPriceRow]

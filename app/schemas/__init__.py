"""
Schemas for the application.

This module exports all Pydantic models and schemas used for request/response validation.
"""

from app.schemas.item import (
    # Item schemas
    ItemResponse,
    ItemUpdate,
    CompactItemResponse,
    ItemCountResponse,
    # Import rules
    ImportRulesPayload,
    # Upload schemas
    SnapshotInfo,
    IngestionResponse,
    ClearResponse,
    PriceUploadResponse,
    # Price list
    PriceListRow,
    PriceListResponse,
)

from app.schemas.customer import (
    BusinessFields,
    CustomerRegister,
    CustomerLogin,
    ProfileUpdate,
    CustomerProfile,
    PasswordReset,
    AdminFlagUpdate,
    BusinessLinkUpdate,
    OkResponse,
)

from app.schemas.business import (
    BusinessUpdate,
    BusinessResponse,
    BusinessAdminRow,
    BusinessPriceCreate,
    BusinessPriceResponse,
    BusinessPricingList,
    DeleteResponse,
)

from app.schemas.pricing import (
    AppliedRuleSchema,
    PriceResolutionResponse,
    CustomerPriceRow,
    CustomerPriceListResponse,
)

__all__ = [
    # Item schemas
    "ItemResponse",
    "ItemUpdate",
    "CompactItemResponse",
    "ItemCountResponse",
    "ImportRulesPayload",
    "SnapshotInfo",
    "IngestionResponse",
    "ClearResponse",
    "PriceUploadResponse",
    "PriceListRow",
    "PriceListResponse",

    # Customer schemas
    "BusinessFields",
    "CustomerRegister",
    "CustomerLogin",
    "ProfileUpdate",
    "CustomerProfile",
    "PasswordReset",
    "AdminFlagUpdate",
    "BusinessLinkUpdate",
    "OkResponse",

    # Business schemas
    "BusinessUpdate",
    "BusinessResponse",
    "BusinessAdminRow",
    "BusinessPriceCreate",
    "BusinessPriceResponse",
    "BusinessPricingList",
    "DeleteResponse",

    # Pricing schemas
    "AppliedRuleSchema",
    "PriceResolutionResponse",
    "CustomerPriceRow",
    "CustomerPriceListResponse",
]

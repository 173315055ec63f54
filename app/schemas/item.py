"""
Pydantic schemas for Items and price-list uploads.
Item responses are keyed by the canonical column headers ("Item Number", ...).
"""

from datetime import datetime
from typing import List, Optional
from pydantic import AliasChoices, BaseModel, Field


def _column(header: str):
    return Field("", serialization_alias=header, description=header)


def _update(attr: str, header: str):
    return Field(None, validation_alias=AliasChoices(attr, header), description=header)


# ============================================================================
# Item Schemas
# ============================================================================

class ItemResponse(BaseModel):
    """Schema for a stored item, serialized with canonical header names"""
    item_number: str = Field(..., serialization_alias="Item Number", description="Item Number")
    item_name: Optional[str] = _column("Item Name")
    buy: Optional[str] = _column("Buy")
    sell: Optional[str] = _column("Sell")
    inventory: Optional[str] = _column("Inventory")
    asset_acct: Optional[str] = _column("Asset Acct")
    income_acct: Optional[str] = _column("Income Acct")
    expense_cos_acct: Optional[str] = _column("Expense/COS Acct")
    description: Optional[str] = _column("Description")
    use_desc_on_invoice: Optional[str] = _column("Use Desc. On Invoice")
    primary_supplier: Optional[str] = _column("Primary Supplier")
    supplier_item_number: Optional[str] = _column("Supplier Item Number")
    tax_code_when_bought: Optional[str] = _column("Tax Code When Bought")
    buy_unit_measure: Optional[str] = _column("Buy Unit Measure")
    no_items_buy_unit: Optional[str] = _column("No. Items/Buy Unit")
    reorder_quantity: Optional[str] = _column("Reorder Quantity")
    minimum_level: Optional[str] = _column("Minimum Level")
    selling_price: Optional[str] = _column("Selling Price")
    sell_unit_measure: Optional[str] = _column("Sell Unit Measure")
    tax_code_when_sold: Optional[str] = _column("Tax Code When Sold")
    sell_price_inclusive: Optional[str] = _column("Sell Price Inclusive")
    no_items_sell_unit: Optional[str] = _column("No. Items/Sell Unit")
    inactive_item: Optional[str] = _column("Inactive Item")
    standard_cost: Optional[str] = _column("Standard Cost")
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ItemUpdate(BaseModel):
    """Schema for a partial item update; accepts attribute or header names"""
    item_name: Optional[str] = _update("item_name", "Item Name")
    buy: Optional[str] = _update("buy", "Buy")
    sell: Optional[str] = _update("sell", "Sell")
    inventory: Optional[str] = _update("inventory", "Inventory")
    asset_acct: Optional[str] = _update("asset_acct", "Asset Acct")
    income_acct: Optional[str] = _update("income_acct", "Income Acct")
    expense_cos_acct: Optional[str] = _update("expense_cos_acct", "Expense/COS Acct")
    description: Optional[str] = _update("description", "Description")
    use_desc_on_invoice: Optional[str] = _update("use_desc_on_invoice", "Use Desc. On Invoice")
    primary_supplier: Optional[str] = _update("primary_supplier", "Primary Supplier")
    supplier_item_number: Optional[str] = _update("supplier_item_number", "Supplier Item Number")
    tax_code_when_bought: Optional[str] = _update("tax_code_when_bought", "Tax Code When Bought")
    buy_unit_measure: Optional[str] = _update("buy_unit_measure", "Buy Unit Measure")
    no_items_buy_unit: Optional[str] = _update("no_items_buy_unit", "No. Items/Buy Unit")
    reorder_quantity: Optional[str] = _update("reorder_quantity", "Reorder Quantity")
    minimum_level: Optional[str] = _update("minimum_level", "Minimum Level")
    selling_price: Optional[str] = _update("selling_price", "Selling Price")
    sell_unit_measure: Optional[str] = _update("sell_unit_measure", "Sell Unit Measure")
    tax_code_when_sold: Optional[str] = _update("tax_code_when_sold", "Tax Code When Sold")
    sell_price_inclusive: Optional[str] = _update("sell_price_inclusive", "Sell Price Inclusive")
    no_items_sell_unit: Optional[str] = _update("no_items_sell_unit", "No. Items/Sell Unit")
    inactive_item: Optional[str] = _update("inactive_item", "Inactive Item")
    standard_cost: Optional[str] = _update("standard_cost", "Standard Cost")


class CompactItemResponse(BaseModel):
    """Schema for the compact item list"""
    item_number: str
    product_name: str
    description: str
    price: str


class ItemCountResponse(BaseModel):
    count: int


# ============================================================================
# Import Rules Schemas
# ============================================================================

class ImportRulesPayload(BaseModel):
    """Item-number prefixes skipped during ingestion"""
    itemNumberPrefixes: List[str] = Field(default_factory=list, description="Prefixes to skip (case-insensitive)")


# ============================================================================
# Upload Schemas
# ============================================================================

class SnapshotInfo(BaseModel):
    saved: bool
    filename: Optional[str] = None
    relative: Optional[str] = None


class IngestionResponse(BaseModel):
    """Schema for a successful price-list upload"""
    ok: bool = True
    parsed_rows: int = Field(..., description="Data rows read from the file")
    upserted: int = Field(..., description="Rows written to the items table")
    skipped_by_rule: int = Field(0, description="Rows excluded by an import rule prefix")
    skipped_missing_id: int = Field(0, description="Rows without an Item Number")
    saw_headers: List[str] = Field(default_factory=list, description="Header row as read")
    dropped_headers: List[str] = Field(default_factory=list, description="Headers with no canonical column")
    first_line: str = Field("", description="First line of the file, truncated")
    snapshot: SnapshotInfo
    encoding_hint: str = Field("", description="First two bytes of the upload as hex")


class ClearResponse(BaseModel):
    ok: bool = True
    deleted: int


class PriceUploadResponse(BaseModel):
    """Schema for an audit log entry"""
    id: int
    filename: str
    stored_path: str
    mimetype: Optional[str] = None
    size_bytes: Optional[int] = None
    parsed_rows: int
    uploaded_at: datetime

    class Config:
        from_attributes = True


# ============================================================================
# Price List Schemas
# ============================================================================

class PriceListRow(BaseModel):
    """One line of the public price list"""
    item_number: str
    product_name: str
    description: str
    price: str = Field("", description="Display price as exported")
    price_cents: Optional[int] = Field(None, description="Parsed list price, after any named-business discount")
    list_price_cents: Optional[int] = Field(None, description="Parsed list price before discount")
    special_price_cents: Optional[int] = Field(None, description="Business-specific fixed price, shown separately")


class PriceListResponse(BaseModel):
    items: List[PriceListRow]
    business_discount_applied: bool = False
    business_discount_pct: float = 0.0

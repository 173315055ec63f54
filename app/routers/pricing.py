"""
API Router for customer price resolution.
Prices come from the customer rule files and default discounts in DATA_DIR.
"""

from pathlib import Path

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.config import get_data_dir
from app.core.database import get_db
from app.schemas.pricing import (
    AppliedRuleSchema,
    CustomerPriceListResponse,
    CustomerPriceRow,
    PriceResolutionResponse,
)
from app.services.item_repository import ItemRepository
from app.services.money import to_cents
from app.services.pricing_resolver import CustomerDiscountStore, CustomerRulesStore, resolve_price

router = APIRouter(prefix="/prices", tags=["Customer Pricing"])


def get_rules_store(data_dir: Path = Depends(get_data_dir)) -> CustomerRulesStore:
    return CustomerRulesStore(data_dir)


def get_discount_store(data_dir: Path = Depends(get_data_dir)) -> CustomerDiscountStore:
    return CustomerDiscountStore(data_dir)


@router.get("/resolve", response_model=PriceResolutionResponse)
def resolve_customer_price(
    customer_id: str = Query("", alias="customerId", description="Customer identifier, e.g. MGIS"),
    sku: str = Query(..., min_length=1, description="Item Number"),
    base_price_cents: int = Query(..., alias="basePriceCents", ge=0, description="List price in cents"),
    rules: CustomerRulesStore = Depends(get_rules_store),
    discounts: CustomerDiscountStore = Depends(get_discount_store),
):
    """
    Resolve one customer price.

    **Precedence:** fixed price rule, then percentage rule, then the
    customer's default discount (or DEFAULT), then the list price.
    """
    resolution = resolve_price(customer_id, sku, base_price_cents, rules, discounts)
    return PriceResolutionResponse(
        customer_id=customer_id,
        sku=sku,
        base_price_cents=base_price_cents,
        customer_price_cents=resolution.customer_price_cents,
        applied=AppliedRuleSchema(type=resolution.applied.type, value=resolution.applied.value),
    )


@router.get("", response_model=CustomerPriceListResponse)
def get_customer_prices(
    customer_id: str = Query("", alias="customerId", description="Customer identifier, e.g. MGIS"),
    db: Session = Depends(get_db),
    rules: CustomerRulesStore = Depends(get_rules_store),
    discounts: CustomerDiscountStore = Depends(get_discount_store),
):
    """
    Resolve every stored item with a readable Selling Price for one customer.
    Items whose Selling Price does not parse are left out.
    """
    prices = []
    for item in ItemRepository.get_all(db):
        list_cents = to_cents(item.selling_price) if item.selling_price else None
        if list_cents is None:
            continue
        resolution = resolve_price(customer_id, item.item_number, list_cents, rules, discounts)
        prices.append(CustomerPriceRow(
            sku=item.item_number,
            name=item.item_name or "",
            list_price_cents=list_cents,
            customer_price_cents=resolution.customer_price_cents,
            applied=AppliedRuleSchema(type=resolution.applied.type, value=resolution.applied.value),
        ))

    return CustomerPriceListResponse(customer_id=customer_id, count=len(prices), prices=prices)

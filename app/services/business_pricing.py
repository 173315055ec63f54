"""
Public price list with business-level pricing.

Two things can change what a signed-in customer sees, independently:
- the named-business discount: when the customer's linked business entity or
  trading name equals NAMED_BUSINESS_NAME (case-insensitive), every list
  price is reduced by NAMED_BUSINESS_DISCOUNT;
- business special prices: a fixed price per (business, item) shown in its
  own column next to the (possibly discounted) list price.

Rule-file pricing (pricing_resolver) is not consulted here.
"""

from typing import Optional

from sqlalchemy.orm import Session

from app.core.config import settings
from app.models.customer import Business, Customer
from app.schemas.item import PriceListResponse, PriceListRow
from app.services.item_repository import ItemRepository
from app.services.business_repository import BusinessRepository
from app.services.money import format_cents, to_cents
from app.services.pricing_resolver import apply_discount


def is_named_business(business: Optional[Business]) -> bool:
    if business is None:
        return False
    target = settings.NAMED_BUSINESS_NAME.strip().lower()
    if not target:
        return False
    names = [business.entity_name, business.business_name]
    return any((name or "").strip().lower() == target for name in names)


def named_business_price(list_cents: int) -> int:
    return apply_discount(list_cents, settings.NAMED_BUSINESS_DISCOUNT)


class PriceListService:
    """Builds the price list shown on the public pricing page"""

    @staticmethod
    def build(db: Session, customer: Optional[Customer]) -> PriceListResponse:
        business = customer.business if customer else None
        discounted = is_named_business(business)
        specials = BusinessRepository.special_prices(db, business.id) if business else {}

        rows = []
        for item in ItemRepository.get_all(db):
            list_cents = to_cents(item.selling_price) if item.selling_price else None
            price_cents = list_cents
            price = item.selling_price or ""
            if discounted and list_cents is not None:
                price_cents = named_business_price(list_cents)
                price = format_cents(price_cents)

            rows.append(PriceListRow(
                item_number=item.item_number,
                product_name=item.item_name or "",
                description=item.description or "",
                price=price,
                price_cents=price_cents,
                list_price_cents=list_cents,
                special_price_cents=specials.get(item.item_number),
            ))

        return PriceListResponse(
            items=rows,
            business_discount_applied=discounted,
            business_discount_pct=settings.NAMED_BUSINESS_DISCOUNT if discounted else 0.0,
        )

"""
API Router for Business endpoints (admin only).
Business details and per-business special prices.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.auth import require_admin
from app.core.database import get_db
from app.models.customer import Business, Customer
from app.schemas.business import (
    BusinessAdminRow,
    BusinessPriceCreate,
    BusinessPriceResponse,
    BusinessPricingList,
    BusinessResponse,
    BusinessUpdate,
    DeleteResponse,
)
from app.services.business_repository import BusinessRepository
from app.services.money import to_cents

router = APIRouter(prefix="/businesses", tags=["Businesses"])


def _get_business_or_404(db: Session, business_id: int) -> Business:
    business = BusinessRepository.get_by_id(db, business_id)
    if not business:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Business with ID {business_id} not found"
        )
    return business


# ============================================================================
# BUSINESS ENDPOINTS
# ============================================================================

@router.get("/admin/list", response_model=List[BusinessAdminRow])
def list_businesses(
    db: Session = Depends(get_db),
    _: Customer = Depends(require_admin),
):
    """All businesses with the number of linked customers."""
    rows = BusinessRepository.list_with_customer_counts(db)
    return [
        BusinessAdminRow(**BusinessResponse.model_validate(b).model_dump(), n_customers=n)
        for b, n in rows
    ]


@router.put("/{business_id}", response_model=BusinessResponse)
def update_business(
    business_id: int,
    business_update: BusinessUpdate,
    db: Session = Depends(get_db),
    _: Customer = Depends(require_admin),
):
    """
    Update a business. Fields that are omitted or null keep their current value.
    """
    business = BusinessRepository.update(db, business_id, business_update)
    if not business:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Business with ID {business_id} not found"
        )
    return BusinessResponse.model_validate(business)


# ============================================================================
# SPECIAL PRICING ENDPOINTS
# ============================================================================

@router.get("/{business_id}/pricing", response_model=BusinessPricingList)
def list_business_pricing(
    business_id: int,
    db: Session = Depends(get_db),
    _: Customer = Depends(require_admin),
):
    """Special prices for one business, ordered by Item Number."""
    _get_business_or_404(db, business_id)
    entries = BusinessRepository.list_pricing(db, business_id)
    return BusinessPricingList(overrides=[BusinessPriceResponse.model_validate(e) for e in entries])


@router.post("/{business_id}/pricing", response_model=BusinessPriceResponse)
def set_business_price(
    business_id: int,
    entry: BusinessPriceCreate,
    db: Session = Depends(get_db),
    _: Customer = Depends(require_admin),
):
    """
    Set (or replace) a special price.

    **Body:** item_number (or itemNumber) and price in dollars, as a number or
    text such as "$1,234.50". Negative prices are stored as zero.
    """
    _get_business_or_404(db, business_id)
    cents = to_cents(entry.price)
    if cents is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="price invalid"
        )
    db_entry = BusinessRepository.set_price(db, business_id, entry.item_number, cents)
    return BusinessPriceResponse.model_validate(db_entry)


@router.delete("/{business_id}/pricing/{item_number}", response_model=DeleteResponse)
def delete_business_price(
    business_id: int,
    item_number: str,
    db: Session = Depends(get_db),
    _: Customer = Depends(require_admin),
):
    """Remove a special price. deleted is 0 when none was set."""
    deleted = BusinessRepository.delete_price(db, business_id, item_number.strip())
    return DeleteResponse(deleted=deleted)

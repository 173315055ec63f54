"""
Repository layer for Business and BusinessPricing operations.
"""

from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException, status

from app.models.customer import Business, BusinessPricing, Customer
from app.schemas.business import BusinessUpdate


def _lower_or_blank(column):
    return func.lower(func.coalesce(column, ""))


class BusinessRepository:
    """Repository for Business operations"""

    @staticmethod
    def get_by_id(db: Session, business_id: int) -> Optional[Business]:
        return db.query(Business).filter(Business.id == business_id).first()

    @staticmethod
    def find_by_identity(
        db: Session,
        abn: Optional[str],
        entity_name: Optional[str],
        business_name: Optional[str],
    ) -> Optional[Business]:
        """Match on (abn, entity_name, business_name), case-insensitive, null as blank"""
        return (
            db.query(Business)
            .filter(
                _lower_or_blank(Business.abn) == (abn or "").lower(),
                _lower_or_blank(Business.entity_name) == (entity_name or "").lower(),
                _lower_or_blank(Business.business_name) == (business_name or "").lower(),
            )
            .first()
        )

    @staticmethod
    def find_or_create(
        db: Session,
        abn: Optional[str],
        entity_name: Optional[str],
        business_name: Optional[str],
        delivery_address: Optional[str] = None,
        billing_address: Optional[str] = None,
    ) -> Business:
        """Existing business with the same identity, else a new one. Caller commits."""
        business = BusinessRepository.find_by_identity(db, abn, entity_name, business_name)
        if business:
            return business

        business = Business(
            abn=abn,
            entity_name=entity_name,
            business_name=business_name,
            delivery_address=delivery_address,
            billing_address=billing_address,
        )
        db.add(business)
        db.flush()
        return business

    @staticmethod
    def list_with_customer_counts(db: Session) -> List[Tuple[Business, int]]:
        """All businesses with the number of linked customers, newest first"""
        counts = (
            db.query(Customer.business_id, func.count(Customer.id).label("n"))
            .filter(Customer.business_id.isnot(None))
            .group_by(Customer.business_id)
            .subquery()
        )
        rows = (
            db.query(Business, func.coalesce(counts.c.n, 0))
            .outerjoin(counts, counts.c.business_id == Business.id)
            .order_by(Business.created_at.desc(), Business.id.desc())
            .all()
        )
        return [(business, int(n)) for business, n in rows]

    @staticmethod
    def update(db: Session, business_id: int, business_update: BusinessUpdate) -> Optional[Business]:
        """Update provided, non-null fields only"""
        business = BusinessRepository.get_by_id(db, business_id)

        if not business:
            return None

        update_data = business_update.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            if value is not None:
                setattr(business, field, value)

        try:
            db.commit()
            db.refresh(business)
            return business
        except IntegrityError:
            db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Another business already has this ABN and name combination"
            )

    # ============================================================================
    # SPECIAL PRICING
    # ============================================================================

    @staticmethod
    def list_pricing(db: Session, business_id: int) -> List[BusinessPricing]:
        return (
            db.query(BusinessPricing)
            .filter(BusinessPricing.business_id == business_id)
            .order_by(BusinessPricing.item_number)
            .all()
        )

    @staticmethod
    def set_price(db: Session, business_id: int, item_number: str, price_cents: int) -> BusinessPricing:
        """Insert or replace the special price for one item"""
        entry = (
            db.query(BusinessPricing)
            .filter(
                BusinessPricing.business_id == business_id,
                BusinessPricing.item_number == item_number,
            )
            .first()
        )
        if entry:
            entry.price_cents = price_cents
        else:
            entry = BusinessPricing(business_id=business_id, item_number=item_number, price_cents=price_cents)
            db.add(entry)

        try:
            db.commit()
            db.refresh(entry)
            return entry
        except IntegrityError as e:
            db.rollback()
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Database integrity error: {str(e.orig)}"
            )

    @staticmethod
    def delete_price(db: Session, business_id: int, item_number: str) -> int:
        deleted = (
            db.query(BusinessPricing)
            .filter(
                BusinessPricing.business_id == business_id,
                BusinessPricing.item_number == item_number,
            )
            .delete(synchronize_session=False)
        )
        db.commit()
        return deleted

    @staticmethod
    def special_prices(db: Session, business_id: int) -> dict:
        """item_number -> price_cents for one business"""
        rows = db.query(BusinessPricing.item_number, BusinessPricing.price_cents).filter(
            BusinessPricing.business_id == business_id
        )
        return {r.item_number: r.price_cents for r in rows}

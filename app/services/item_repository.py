"""
Repository layer for Item operations.
Handles all database queries and writes for the items table.
"""

from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException, status

from app.models.item import Item
from app.schemas.item import ItemUpdate
from app.services.header_canonicalizer import CanonicalItem

# Bound on IN (...) parameters when prefetching existing rows.
PREFETCH_CHUNK = 500


class ItemRepository:
    """Repository for Item operations"""

    @staticmethod
    def upsert_many(db: Session, items: Iterable[CanonicalItem]) -> int:
        """
        Insert or fully replace items keyed by Item Number.

        Every column of an existing row is overwritten and created_at is
        refreshed. Later rows with the same Item Number win. Nothing is
        committed here: the caller owns the transaction.

        Raises:
            ValueError: if any item has an empty Item Number
        """
        items = list(items)
        for item in items:
            if not item.item_number:
                raise ValueError("Item Number must not be empty")

        numbers = list({item.item_number for item in items})
        existing: Dict[str, Item] = {}
        for start in range(0, len(numbers), PREFETCH_CHUNK):
            chunk = numbers[start:start + PREFETCH_CHUNK]
            for row in db.query(Item).filter(Item.item_number.in_(chunk)).all():
                existing[row.item_number] = row

        now = datetime.now(timezone.utc)
        upserted = 0
        for item in items:
            values = item.as_attributes()
            db_item = existing.get(item.item_number)
            if db_item is None:
                db_item = Item(**values)
                db.add(db_item)
                existing[item.item_number] = db_item
            else:
                for attr, value in values.items():
                    setattr(db_item, attr, value)
            db_item.created_at = now
            upserted += 1

        db.flush()
        return upserted

    @staticmethod
    def clear_all(db: Session) -> int:
        """Delete every item; returns the number deleted. Caller commits."""
        return db.query(Item).delete()

    @staticmethod
    def get_by_item_number(db: Session, item_number: str) -> Optional[Item]:
        """Get item by Item Number"""
        return db.query(Item).filter(Item.item_number == item_number).first()

    @staticmethod
    def get_all(db: Session) -> List[Item]:
        """All items ordered by name, case-insensitive"""
        return db.query(Item).order_by(func.lower(Item.item_name), Item.item_number).all()

    @staticmethod
    def get_compact(db: Session) -> List[dict]:
        """Item number, name, description and selling price for list views"""
        rows = (
            db.query(Item.item_number, Item.item_name, Item.description, Item.selling_price)
            .order_by(func.lower(Item.item_name), Item.item_number)
            .all()
        )
        return [
            {
                "item_number": r.item_number,
                "product_name": r.item_name or "",
                "description": r.description or "",
                "price": r.selling_price or "",
            }
            for r in rows
        ]

    @staticmethod
    def count(db: Session) -> int:
        return db.query(func.count(Item.id)).scalar() or 0

    @staticmethod
    def sample(db: Session, limit: int = 3) -> List[Item]:
        return db.query(Item).order_by(Item.id).limit(limit).all()

    @staticmethod
    def partial_update(db: Session, item_number: str, item_update: ItemUpdate) -> Optional[Item]:
        """Update only the provided fields of one item and refresh created_at"""
        db_item = ItemRepository.get_by_item_number(db, item_number)

        if not db_item:
            return None

        update_data = item_update.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            setattr(db_item, field, (value or "").strip())
        db_item.created_at = datetime.now(timezone.utc)

        try:
            db.commit()
            db.refresh(db_item)
            return db_item
        except IntegrityError as e:
            db.rollback()
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Database integrity error: {str(e.orig)}"
            )

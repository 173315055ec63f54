"""
API Router for Item endpoints.
Price-list upload and clear, import rules, and item read views.
"""

from dataclasses import asdict
from pathlib import Path
from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from sqlalchemy.orm import Session

from app.core.auth import get_optional_customer, require_admin
from app.core.config import get_data_dir, settings
from app.core.database import get_db
from app.models.customer import Customer
from app.schemas.item import (
    ClearResponse,
    CompactItemResponse,
    ImportRulesPayload,
    IngestionResponse,
    ItemCountResponse,
    ItemResponse,
    ItemUpdate,
    PriceListResponse,
    PriceUploadResponse,
)
from app.services.audit_repository import AuditRepository
from app.services.business_pricing import PriceListService
from app.services.import_rules import ImportRulesStore
from app.services.item_repository import ItemRepository
from app.services.price_list_ingestion import PriceListIngestionService

router = APIRouter(prefix="/items", tags=["Items (Price List)"])


def get_ingestion_service(data_dir: Path = Depends(get_data_dir)) -> PriceListIngestionService:
    return PriceListIngestionService(data_dir, settings.MAX_UPLOAD_BYTES)


def get_import_rules_store(data_dir: Path = Depends(get_data_dir)) -> ImportRulesStore:
    return ImportRulesStore(data_dir)


# ============================================================================
# UPLOAD & CLEAR ENDPOINTS
# ============================================================================

@router.post("/upload", response_model=IngestionResponse)
async def upload_price_list(
    file: Optional[UploadFile] = File(None, description="Tab or comma delimited price list export"),
    db: Session = Depends(get_db),
    service: PriceListIngestionService = Depends(get_ingestion_service),
    _: Customer = Depends(require_admin),
):
    """
    Upload a price list and upsert its rows into the items table.

    **File format:**
    - UTF-8 or UTF-16 (with or without BOM)
    - Tab delimited if the header line holds a tab, otherwise comma delimited
    - Header names are matched loosely ("Item No.", "SKU", "item_number" ...)

    **Returns:**
    - Row counts, the header row as read and snapshot details

    Rows without an Item Number, or whose Item Number matches an import rule
    prefix, are counted in parsed_rows but not upserted.
    """
    if file is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No file uploaded"
        )

    # Read one byte past the limit so oversize uploads are rejected without buffering them whole
    content = await file.read(settings.MAX_UPLOAD_BYTES + 1)

    result = service.ingest(
        db,
        content,
        filename=file.filename or "upload",
        mimetype=file.content_type,
        size_bytes=file.size if file.size is not None else len(content),
    )
    return IngestionResponse(**asdict(result))


@router.post("/clear", response_model=ClearResponse)
def clear_items(
    db: Session = Depends(get_db),
    service: PriceListIngestionService = Depends(get_ingestion_service),
    _: Customer = Depends(require_admin),
):
    """
    Delete every item. The clear is recorded in the upload audit log with a
    negative row count.
    """
    deleted = service.clear(db)
    return ClearResponse(deleted=deleted)


@router.get("/uploads", response_model=List[PriceUploadResponse])
def list_uploads(
    limit: int = Query(50, ge=1, le=500, description="Maximum entries to return"),
    db: Session = Depends(get_db),
    _: Customer = Depends(require_admin),
):
    """Recent uploads and clears, newest first."""
    return [PriceUploadResponse.model_validate(e) for e in AuditRepository.list_recent(db, limit)]


# ============================================================================
# IMPORT RULES ENDPOINTS
# ============================================================================

@router.get("/rules", response_model=ImportRulesPayload)
def get_import_rules(store: ImportRulesStore = Depends(get_import_rules_store)):
    """Item-number prefixes skipped during upload."""
    rules = store.load()
    return ImportRulesPayload(itemNumberPrefixes=rules.item_number_prefixes)


@router.put("/rules", response_model=ImportRulesPayload)
def update_import_rules(
    payload: ImportRulesPayload,
    store: ImportRulesStore = Depends(get_import_rules_store),
    _: Customer = Depends(require_admin),
):
    """
    Replace the import rules.

    Prefixes are trimmed; blanks and case-insensitive duplicates are dropped.
    """
    rules = store.save(payload.itemNumberPrefixes)
    return ImportRulesPayload(itemNumberPrefixes=rules.item_number_prefixes)


# ============================================================================
# READ ENDPOINTS
# ============================================================================

@router.get("", response_model=List[ItemResponse])
def get_all_items(db: Session = Depends(get_db)):
    """All items keyed by canonical column name, ordered by Item Name."""
    return [ItemResponse.model_validate(i) for i in ItemRepository.get_all(db)]


@router.get("/compact", response_model=List[CompactItemResponse])
def get_compact_items(db: Session = Depends(get_db)):
    """Item number, name, description and selling price only."""
    return ItemRepository.get_compact(db)


@router.get("/price-list", response_model=PriceListResponse)
def get_price_list(
    db: Session = Depends(get_db),
    customer: Optional[Customer] = Depends(get_optional_customer),
):
    """
    Price list for the pricing page.

    Signed-in customers of the named business see discounted prices; any
    special prices set for their business are returned alongside.
    """
    return PriceListService.build(db, customer)


@router.get("/_count", response_model=ItemCountResponse)
def count_items(db: Session = Depends(get_db)):
    return ItemCountResponse(count=ItemRepository.count(db))


@router.get("/_sample", response_model=List[ItemResponse])
def sample_items(db: Session = Depends(get_db)):
    """First three stored items, for checking an upload landed."""
    return [ItemResponse.model_validate(i) for i in ItemRepository.sample(db)]


# ============================================================================
# UPDATE ENDPOINTS
# ============================================================================

@router.patch("/{item_number}", response_model=ItemResponse)
def update_item(
    item_number: str,
    item_update: ItemUpdate,
    db: Session = Depends(get_db),
    _: Customer = Depends(require_admin),
):
    """
    Update some columns of one item. Columns not sent keep their value.
    """
    db_item = ItemRepository.partial_update(db, item_number, item_update)
    if not db_item:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Item {item_number} not found"
        )
    return ItemResponse.model_validate(db_item)

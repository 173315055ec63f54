"""
Repository layer for the price upload audit log.
Rows are only ever inserted.
"""

from datetime import datetime
from typing import List, Optional
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session

from app.core.config import settings
from app.models.price_upload import PriceUpload

CLEAR_FILENAME = "CLEAR"
CLEAR_STORED_PATH = "items table truncate"


def local_now() -> datetime:
    """Current time in the business timezone"""
    return datetime.now(ZoneInfo(settings.TIMEZONE))


class AuditRepository:
    """Repository for PriceUpload audit entries"""

    @staticmethod
    def log_upload(
        db: Session,
        filename: str,
        stored_path: str,
        mimetype: Optional[str],
        size_bytes: Optional[int],
        parsed_rows: int,
        uploaded_at: Optional[datetime] = None,
    ) -> PriceUpload:
        """Add an upload entry to the current transaction. Caller commits."""
        entry = PriceUpload(
            filename=filename,
            stored_path=stored_path,
            mimetype=mimetype,
            size_bytes=size_bytes,
            parsed_rows=parsed_rows,
            uploaded_at=uploaded_at or local_now(),
        )
        db.add(entry)
        return entry

    @staticmethod
    def log_clear(db: Session, deleted: int) -> PriceUpload:
        """Record a clear as a negative row count. Caller commits."""
        return AuditRepository.log_upload(
            db,
            filename=CLEAR_FILENAME,
            stored_path=CLEAR_STORED_PATH,
            mimetype=None,
            size_bytes=None,
            parsed_rows=-deleted,
        )

    @staticmethod
    def list_recent(db: Session, limit: int = 50) -> List[PriceUpload]:
        """Newest entries first"""
        return (
            db.query(PriceUpload)
            .order_by(PriceUpload.id.desc())
            .limit(limit)
            .all()
        )

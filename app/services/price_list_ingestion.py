"""
Price-list ingestion: uploaded bytes to stored items.

decode -> parse -> canonicalize -> import-rule filter -> upsert -> snapshot
-> audit, with every database write of one upload in a single transaction.
"""

import itertools
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import EmptyPriceListError, UploadTooLargeError
from app.services.audit_repository import AuditRepository, local_now
from app.services.delimited_parser import RawRow, parse_delimited
from app.services.encoding import decode_buffer, encoding_hint
from app.services.header_canonicalizer import CanonicalItem, canonicalize_row, dropped_headers
from app.services.import_rules import ImportRulesStore, should_skip
from app.services.item_repository import ItemRepository

logger = logging.getLogger(__name__)

SNAPSHOT_DIRNAME = "pricelists"


@dataclass
class SnapshotResult:
    saved: bool
    filename: Optional[str] = None
    relative: Optional[str] = None


@dataclass
class IngestionResult:
    parsed_rows: int
    upserted: int
    skipped_by_rule: int
    skipped_missing_id: int
    saw_headers: List[str]
    dropped_headers: List[str]
    first_line: str
    snapshot: SnapshotResult
    encoding_hint: str
    ok: bool = True


@dataclass
class _Selection:
    accepted: List[CanonicalItem] = field(default_factory=list)
    skipped_by_rule: int = 0
    skipped_missing_id: int = 0


def snapshot_filename(when: datetime, attempt: int = 1) -> str:
    suffix = f"-{attempt}" if attempt > 1 else ""
    return f"pricelist-{when:%Y-%m-%d-%H%M}{suffix}.json"


class PriceListIngestionService:
    """Runs uploads and clears against the items table"""

    def __init__(self, data_dir: Path, max_upload_bytes: int, rules_store: Optional[ImportRulesStore] = None):
        self.data_dir = Path(data_dir)
        self.max_upload_bytes = max_upload_bytes
        self.rules_store = rules_store or ImportRulesStore(self.data_dir)

    def ingest(
        self,
        db: Session,
        data: bytes,
        filename: str,
        mimetype: Optional[str] = None,
        size_bytes: Optional[int] = None,
    ) -> IngestionResult:
        """
        Ingest one uploaded price list.

        Raises:
            UploadTooLargeError: upload exceeds the configured limit
            PriceListDecodeError: bytes are not text
            EmptyPriceListError: no data rows after parsing
        """
        if len(data) > self.max_upload_bytes:
            raise UploadTooLargeError(
                f"File size exceeds {self.max_upload_bytes // (1024 * 1024)} MB limit"
            )

        text = decode_buffer(data)
        parsed = parse_delimited(text)
        if not parsed.rows:
            raise EmptyPriceListError("No rows parsed from file", first_line=parsed.first_line)

        dropped = dropped_headers(parsed.headers)
        if dropped:
            logger.debug(f"Headers with no canonical column in {filename}: {dropped}")

        selection = self._select(parsed.rows)
        now = local_now()
        snapshot = None

        try:
            upserted = ItemRepository.upsert_many(db, selection.accepted)
            snapshot = self._write_snapshot(parsed.rows, now)
            AuditRepository.log_upload(
                db,
                filename=filename,
                stored_path=snapshot.relative or "",
                mimetype=mimetype,
                size_bytes=size_bytes if size_bytes is not None else len(data),
                parsed_rows=upserted,
                uploaded_at=now,
            )
            db.commit()
        except Exception:
            db.rollback()
            self._discard_snapshot(snapshot)
            logger.error(f"Price list ingestion of {filename} rolled back", exc_info=True)
            raise

        logger.info(
            f"Ingested {filename}: {len(data)} bytes, {len(parsed.rows)} rows parsed, "
            f"{upserted} upserted, {selection.skipped_by_rule} skipped by rule, "
            f"{selection.skipped_missing_id} without Item Number"
        )

        return IngestionResult(
            parsed_rows=len(parsed.rows),
            upserted=upserted,
            skipped_by_rule=selection.skipped_by_rule,
            skipped_missing_id=selection.skipped_missing_id,
            saw_headers=parsed.headers,
            dropped_headers=dropped,
            first_line=parsed.first_line,
            snapshot=snapshot,
            encoding_hint=encoding_hint(data),
        )

    def clear(self, db: Session) -> int:
        """Delete every item and record the clear in the audit log"""
        try:
            deleted = ItemRepository.clear_all(db)
            AuditRepository.log_clear(db, deleted)
            db.commit()
        except Exception:
            db.rollback()
            raise

        logger.warning(f"Items table cleared: {deleted} rows deleted")
        return deleted

    def _select(self, rows: List[RawRow]) -> _Selection:
        rules = self.rules_store.load()
        selection = _Selection()
        for row in rows:
            item = canonicalize_row(row)
            if not item.item_number:
                selection.skipped_missing_id += 1
            elif should_skip(item.item_number, rules):
                selection.skipped_by_rule += 1
            else:
                selection.accepted.append(item)
        return selection

    def _write_snapshot(self, rows: List[RawRow], when: datetime) -> SnapshotResult:
        """
        Raw rows as JSON under <DATA_DIR>/pricelists; failure is logged, not raised.

        An existing file is never replaced: a second upload in the same
        minute gets a "-2", "-3" ... suffix.
        """
        filename = snapshot_filename(when)
        directory = self.data_dir / SNAPSHOT_DIRNAME
        try:
            directory.mkdir(parents=True, exist_ok=True)
            payload = json.dumps([row.as_dict() for row in rows], indent=2, ensure_ascii=False)
            for attempt in itertools.count(1):
                filename = snapshot_filename(when, attempt)
                try:
                    with open(directory / filename, "x", encoding="utf-8") as f:
                        f.write(payload)
                    break
                except FileExistsError:
                    continue
        except OSError as e:
            logger.warning(f"Could not write price list snapshot {filename}: {str(e)}")
            return SnapshotResult(saved=False)

        return SnapshotResult(saved=True, filename=filename, relative=f"{SNAPSHOT_DIRNAME}/{filename}")

    def _discard_snapshot(self, snapshot: Optional[SnapshotResult]):
        """Remove the snapshot of a rolled-back upload"""
        if snapshot is None or not snapshot.saved:
            return
        try:
            (self.data_dir / snapshot.relative).unlink()
        except OSError as e:
            logger.warning(f"Could not remove snapshot {snapshot.relative} of rolled-back upload: {str(e)}")

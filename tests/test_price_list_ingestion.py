import json
from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from app.core.exceptions import EmptyPriceListError, PriceListDecodeError, UploadTooLargeError
from app.models.item import Item
from app.models.price_upload import PriceUpload
from app.schemas.item import ItemResponse
from app.services.import_rules import ImportRulesStore
from app.services.json_documents import JsonDocumentCache
from app.services.price_list_ingestion import PriceListIngestionService

TSV = (
    "Item Number\tItem Name\tDescription\tSelling Price\tColour\n"
    "A100\tWidget\tSmall widget\t$5.00\tred\n"
    "B200\tGadget\tLarge gadget\t$7.25\tblue\n"
)


@pytest.fixture
def service(data_dir):
    return PriceListIngestionService(
        data_dir,
        max_upload_bytes=1024 * 1024,
        rules_store=ImportRulesStore(data_dir, JsonDocumentCache()),
    )


def stored(db):
    db.expire_all()
    return {
        i.item_number: ItemResponse.model_validate(i).model_dump(exclude={"created_at"})
        for i in db.query(Item).all()
    }


def test_ingest_stores_items(db, service):
    result = service.ingest(db, TSV.encode("utf-8"), "items.txt", "text/plain")

    assert result.parsed_rows == 2
    assert result.upserted == 2
    assert result.saw_headers == ["Item Number", "Item Name", "Description", "Selling Price", "Colour"]
    assert result.dropped_headers == ["Colour"]
    assert result.first_line.startswith("Item Number")
    assert result.encoding_hint == TSV.encode("utf-8")[:2].hex()

    items = stored(db)
    assert items["A100"]["item_name"] == "Widget"
    assert items["B200"]["selling_price"] == "$7.25"
    assert items["A100"]["buy"] == ""


def test_reupload_is_idempotent(db, service):
    first = service.ingest(db, TSV.encode("utf-8"), "items.txt")
    before = stored(db)
    second = service.ingest(db, TSV.encode("utf-8"), "items.txt")

    assert first.upserted == second.upserted == 2
    assert stored(db) == before
    assert db.query(Item).count() == 2


def test_reupload_replaces_all_columns(db, service):
    service.ingest(db, TSV.encode("utf-8"), "items.txt")
    service.ingest(db, b"Item Number,Item Name\nA100,Renamed\n", "items.csv")

    items = stored(db)
    assert items["A100"]["item_name"] == "Renamed"
    assert items["A100"]["description"] == ""
    assert items["A100"]["selling_price"] == ""
    assert items["B200"]["item_name"] == "Gadget"


def test_sku_header_equivalent_to_item_number(db, service):
    service.ingest(db, b"SKU,Item Name,Selling Price\nA1,Widget,$5.00\n", "sku.csv")
    via_sku = stored(db)

    service.clear(db)
    service.ingest(db, b"Item Number,Item Name,Selling Price\nA1,Widget,$5.00\n", "number.csv")
    assert stored(db) == via_sku


def test_utf16_upload_matches_utf8(db, service):
    service.ingest(db, b"\xff\xfe" + TSV.encode("utf-16-le"), "utf16.txt")
    utf16 = stored(db)
    service.clear(db)
    service.ingest(db, TSV.encode("utf-8"), "utf8.txt")
    assert stored(db) == utf16


def test_skip_prefix_rule(db, service, data_dir):
    service.rules_store.save(["X-"])
    result = service.ingest(db, b"Item Number,Item Name\nX-100,Skipped\nY-100,Kept\n", "items.csv")

    assert result.parsed_rows == 2
    assert result.upserted == 1
    assert result.skipped_by_rule == 1
    assert set(stored(db)) == {"Y-100"}


def test_empty_identifier_rows_are_skipped(db, service):
    result = service.ingest(db, b"Item Number,Item Name\n,No number\nA1,Widget\n", "items.csv")
    assert result.parsed_rows == 2
    assert result.upserted == 1
    assert result.skipped_missing_id == 1


def test_unmapped_identifier_header_skips_every_row(db, service):
    result = service.ingest(db, b"Part,Item Name\nP1,Widget\n", "items.csv")
    assert result.parsed_rows == 1
    assert result.upserted == 0
    assert result.skipped_missing_id == 1


def test_stray_preamble_file(db, service):
    service.ingest(db, ("{}\n\n" + TSV).encode("utf-8"), "items.txt")
    with_preamble = stored(db)
    service.clear(db)
    service.ingest(db, TSV.encode("utf-8"), "items.txt")
    assert stored(db) == with_preamble


def test_empty_file_is_rejected(db, service):
    with pytest.raises(EmptyPriceListError) as exc:
        service.ingest(db, b"Item Number\tItem Name\n", "header-only.txt")
    assert exc.value.first_line == "Item Number\tItem Name"
    assert db.query(PriceUpload).count() == 0


def test_binary_file_is_rejected(db, service):
    with pytest.raises(PriceListDecodeError):
        service.ingest(db, b"PK\x03\x04\x14\x00\x06\x00\x08\x00", "book.xlsx")
    assert db.query(Item).count() == 0


def test_upload_size_limit(db, data_dir):
    small = PriceListIngestionService(data_dir, max_upload_bytes=10)
    with pytest.raises(UploadTooLargeError):
        small.ingest(db, TSV.encode("utf-8"), "items.txt")


def test_failure_mid_batch_rolls_back(db, service, monkeypatch):
    service.ingest(db, TSV.encode("utf-8"), "items.txt")
    before = stored(db)

    def fail(*args, **kwargs):
        raise RuntimeError("disk full")

    monkeypatch.setattr("app.services.price_list_ingestion.AuditRepository.log_upload", fail)
    with pytest.raises(RuntimeError):
        service.ingest(db, b"Item Number,Item Name\nA100,Changed\nC300,New\n", "items.csv")

    assert stored(db) == before
    assert db.query(PriceUpload).count() == 1


def test_snapshot_and_audit_entry(db, service, data_dir):
    result = service.ingest(db, TSV.encode("utf-8"), "items.txt", "text/plain", 123)

    assert result.snapshot.saved
    snapshot = data_dir / result.snapshot.relative
    assert result.snapshot.filename.startswith("pricelist-")
    rows = json.loads(snapshot.read_text(encoding="utf-8"))
    assert rows[0]["Colour"] == "red"
    assert rows[1]["Item Number"] == "B200"

    entry = db.query(PriceUpload).one()
    assert entry.filename == "items.txt"
    assert entry.stored_path == result.snapshot.relative
    assert entry.mimetype == "text/plain"
    assert entry.size_bytes == 123
    assert entry.parsed_rows == 2


def test_snapshot_failure_does_not_fail_ingestion(db, data_dir):
    (data_dir / "pricelists").write_text("not a directory")
    service = PriceListIngestionService(data_dir, max_upload_bytes=1024 * 1024)
    result = service.ingest(db, TSV.encode("utf-8"), "items.txt")

    assert result.upserted == 2
    assert not result.snapshot.saved
    assert db.query(PriceUpload).one().stored_path == ""


def test_clear_logs_negative_count(db, service):
    service.ingest(db, TSV.encode("utf-8"), "items.txt")
    assert service.clear(db) == 2
    assert db.query(Item).count() == 0

    entry = db.query(PriceUpload).order_by(PriceUpload.id.desc()).first()
    assert entry.filename == "CLEAR"
    assert entry.stored_path == "items table truncate"
    assert entry.parsed_rows == -2


def test_same_minute_uploads_keep_separate_snapshots(db, service, data_dir, monkeypatch):
    fixed = datetime(2026, 10, 18, 17, 49, 5, tzinfo=ZoneInfo("Australia/Sydney"))
    monkeypatch.setattr("app.services.price_list_ingestion.local_now", lambda: fixed)

    first = service.ingest(db, b"Item Number,Item Name\nA1,First\n", "first.csv")
    second = service.ingest(db, b"Item Number,Item Name\nB1,Second\n", "second.csv")

    assert first.snapshot.filename == "pricelist-2026-10-18-1749.json"
    assert second.snapshot.filename == "pricelist-2026-10-18-1749-2.json"

    entries = {e.filename: e.stored_path for e in db.query(PriceUpload).all()}
    first_rows = json.loads((data_dir / entries["first.csv"]).read_text(encoding="utf-8"))
    second_rows = json.loads((data_dir / entries["second.csv"]).read_text(encoding="utf-8"))
    assert first_rows == [{"Item Number": "A1", "Item Name": "First"}]
    assert second_rows == [{"Item Number": "B1", "Item Name": "Second"}]


def test_rolled_back_upload_leaves_no_snapshot(db, service, data_dir, monkeypatch):
    def fail(*args, **kwargs):
        raise RuntimeError("disk full")

    monkeypatch.setattr("app.services.price_list_ingestion.AuditRepository.log_upload", fail)
    with pytest.raises(RuntimeError):
        service.ingest(db, TSV.encode("utf-8"), "items.txt")

    assert list((data_dir / "pricelists").iterdir()) == []
    assert db.query(PriceUpload).count() == 0

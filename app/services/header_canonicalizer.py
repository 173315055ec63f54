"""
Maps arbitrary price-list headers onto the canonical item columns.

Header spellings differ between export versions ("Item No.", "item_number",
"SKU" ...). Each header is normalized and looked up in ALIASES; headers with
no alias are dropped.
"""

import logging
import re
from dataclasses import dataclass
from typing import Dict, List, Tuple

from app.models.item import ATTRIBUTE_BY_HEADER, CANONICAL_HEADERS
from app.services.delimited_parser import RawRow
from app.services.encoding import BOM_CHAR

logger = logging.getLogger(__name__)

IDENTIFIER = CANONICAL_HEADERS[0]

# Checked on the raw row, in order, when no header aliases to the identifier.
IDENTIFIER_FALLBACK_HEADERS = ["Item Number", "Item No", "Item No.", "Item #", "SKU", "Code"]

_SEPARATOR_RUNS = re.compile(r"[\s._\-/]+")
_PUNCTUATION = re.compile(r"[#:().]")

ALIASES: Dict[str, str] = {
    "itemnumber": "Item Number",
    "itemno": "Item Number",
    "item": "Item Number",
    "item#": "Item Number",
    "code": "Item Number",
    "sku": "Item Number",
    "itemname": "Item Name",
    "name": "Item Name",
    "productname": "Item Name",
    "title": "Item Name",
    "buy": "Buy",
    "sell": "Sell",
    "inventory": "Inventory",
    "assetacct": "Asset Acct",
    "incomeacct": "Income Acct",
    "expensecosacct": "Expense/COS Acct",
    "description": "Description",
    "usedesconinvoice": "Use Desc. On Invoice",
    "primarysupplier": "Primary Supplier",
    "supplieritemnumber": "Supplier Item Number",
    "taxcodewhenbought": "Tax Code When Bought",
    "buyunitmeasure": "Buy Unit Measure",
    "noitemsbuyunit": "No. Items/Buy Unit",
    "reorderquantity": "Reorder Quantity",
    "minimumlevel": "Minimum Level",
    "sellingprice": "Selling Price",
    "sellunitmeasure": "Sell Unit Measure",
    "taxcodewhensold": "Tax Code When Sold",
    "sellpriceinclusive": "Sell Price Inclusive",
    "noitemssellunit": "No. Items/Sell Unit",
    "inactiveitem": "Inactive Item",
    "standardcost": "Standard Cost",
}


@dataclass(frozen=True)
class CanonicalItem:
    """One row in canonical column order; every value is a trimmed string."""

    values: Tuple[str, ...]

    @property
    def item_number(self) -> str:
        return self.values[0]

    def get(self, header: str) -> str:
        return self.values[CANONICAL_HEADERS.index(header)]

    def as_attributes(self) -> Dict[str, str]:
        """Values keyed by Item model attribute name."""
        return {
            ATTRIBUTE_BY_HEADER[header]: value
            for header, value in zip(CANONICAL_HEADERS, self.values)
        }

    @classmethod
    def from_mapping(cls, data: Dict[str, str]) -> "CanonicalItem":
        return cls(tuple((data.get(h) or "").strip() for h in CANONICAL_HEADERS))


def normalize_header(text: str) -> str:
    """Lowercase, drop a leading BOM, then remove separators and #:(). characters."""
    text = (text or "").lower()
    if text.startswith(BOM_CHAR):
        text = text[1:]
    text = _SEPARATOR_RUNS.sub("", text)
    return _PUNCTUATION.sub("", text)


def canonical_column(header: str):
    """Canonical column for a raw header, or None when it has no alias."""
    return ALIASES.get(normalize_header(header))


def canonicalize_row(row: RawRow) -> CanonicalItem:
    """
    Build a CanonicalItem from a raw row.

    When several headers map to the same column the later one wins. If none
    maps to the identifier, the literal fallback headers are tried; failing
    that the identifier is empty and the row is skipped by the caller.
    """
    mapped: Dict[str, str] = {}
    for header, cell in row:
        column = canonical_column(header)
        if column:
            mapped[column] = cell

    if IDENTIFIER not in mapped:
        for header in IDENTIFIER_FALLBACK_HEADERS:
            value = row.get(header)
            if value is not None:
                mapped[IDENTIFIER] = value
                break

    return CanonicalItem.from_mapping(mapped)


def dropped_headers(headers: List[str]) -> List[str]:
    """Headers that map to no canonical column."""
    return [h for h in headers if h and canonical_column(h) is None]

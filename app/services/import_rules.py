"""
Import rules: item-number prefixes excluded from price-list ingestion.

Stored as {"itemNumberPrefixes": [...]} in <DATA_DIR>/import-rules.json. A
missing or malformed document means no rules, so ingestion never fails
because of it.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

from app.services.json_documents import MISSING, JsonDocumentCache, document_cache, write_document

logger = logging.getLogger(__name__)

RULES_FILENAME = "import-rules.json"


@dataclass(frozen=True)
class ImportRules:
    item_number_prefixes: List[str] = field(default_factory=list)

    def to_document(self) -> dict:
        return {"itemNumberPrefixes": list(self.item_number_prefixes)}


def clean_prefixes(prefixes: Iterable) -> List[str]:
    """Trim, drop blanks and case-insensitive duplicates, keep order."""
    seen = set()
    cleaned = []
    for prefix in prefixes or []:
        if not isinstance(prefix, str):
            continue
        prefix = prefix.strip()
        key = prefix.upper()
        if prefix and key not in seen:
            seen.add(key)
            cleaned.append(prefix)
    return cleaned


def should_skip(item_number: str, rules: ImportRules) -> bool:
    """True when item_number starts with any configured prefix, ignoring case."""
    value = (item_number or "").upper()
    return any(value.startswith(p.upper()) for p in rules.item_number_prefixes)


class ImportRulesStore:
    """File-backed import rules with a content-hash cache."""

    def __init__(self, data_dir: Path, cache: Optional[JsonDocumentCache] = None):
        self.path = Path(data_dir) / RULES_FILENAME
        self.cache = cache or document_cache

    def load(self) -> ImportRules:
        document = self.cache.load(self.path)
        if document is MISSING:
            return ImportRules()
        if not isinstance(document, dict) or not isinstance(document.get("itemNumberPrefixes"), list):
            logger.warning(f"Import rules at {self.path} have no itemNumberPrefixes list; using none")
            return ImportRules()
        return ImportRules(clean_prefixes(document["itemNumberPrefixes"]))

    def save(self, prefixes: Iterable[str]) -> ImportRules:
        rules = ImportRules(clean_prefixes(prefixes))
        write_document(self.path, rules.to_document(), self.cache)
        logger.info(f"Import rules updated: {rules.item_number_prefixes}")
        return rules

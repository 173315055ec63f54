"""
Customer price resolution from per-customer rule files and default discounts.

Files under DATA_DIR:
    customer-overrides/<customerId>.json
        {"customerName": "...", "rules": [{"sku": "...", "discountPct": 0.1}
                                          | {"sku": "...", "fixedPriceCents": 999}]}
    customer-discounts.json
        {"<customerId>": 0.05, "DEFAULT": 0.0}

Precedence for one (customer, sku): fixed price, then rule percentage, then
the customer's (or DEFAULT) discount, then the list price unchanged.
"""

import logging
import math
import numbers
import re
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import List, Optional

from app.services.json_documents import MISSING, JsonDocumentCache, document_cache
from app.services.money import round_half_away

logger = logging.getLogger(__name__)

MIN_DISCOUNT = 0.0
MAX_DISCOUNT = 0.9
DEFAULT_KEY = "DEFAULT"

OVERRIDES_DIRNAME = "customer-overrides"
DISCOUNTS_FILENAME = "customer-discounts.json"

APPLIED_FIXED = "fixed"
APPLIED_RULE = "rule"
APPLIED_DEFAULT = "default"
APPLIED_NONE = "none"

# Customer ids name files on disk.
_CUSTOMER_ID = re.compile(r"^[A-Za-z0-9_\-]+$")


@dataclass(frozen=True)
class CustomerRule:
    sku: str
    discount_pct: Optional[float] = None
    fixed_price_cents: Optional[float] = None


@dataclass(frozen=True)
class AppliedRule:
    type: str
    value: float


@dataclass(frozen=True)
class PriceResolution:
    customer_price_cents: int
    applied: AppliedRule


def _is_number(value) -> bool:
    """Finite real number; NaN and Infinity (valid in Python's json) count as absent."""
    return isinstance(value, numbers.Real) and not isinstance(value, bool) and math.isfinite(value)


def clamp_pct(pct: float) -> float:
    return min(max(float(pct), MIN_DISCOUNT), MAX_DISCOUNT)


def apply_discount(base_cents: int, pct: float) -> int:
    """base_cents less a clamped percentage, rounded half away from zero, never negative."""
    pct = clamp_pct(pct)
    discounted = round_half_away(Decimal(base_cents) * (1 - Decimal(str(pct))))
    return max(discounted, 0)


def normalize_sku(sku: str) -> str:
    return (sku or "").strip().upper()


class CustomerRulesStore:
    """Per-customer SKU rules read from customer-overrides/<id>.json."""

    def __init__(self, data_dir: Path, cache: Optional[JsonDocumentCache] = None):
        self.directory = Path(data_dir) / OVERRIDES_DIRNAME
        self.cache = cache or document_cache

    def load(self, customer_id: str) -> List[CustomerRule]:
        customer_id = (customer_id or "").strip()
        if not _CUSTOMER_ID.match(customer_id):
            return []

        path = self.directory / f"{customer_id}.json"
        document = self.cache.load(path)
        if document is MISSING:
            return []
        if not isinstance(document, dict) or not isinstance(document.get("rules"), list):
            logger.warning(f"Customer rules at {path} have no rules list; ignoring")
            return []

        rules = []
        for entry in document["rules"]:
            if not isinstance(entry, dict) or not isinstance(entry.get("sku"), str):
                continue
            discount = entry.get("discountPct")
            fixed = entry.get("fixedPriceCents")
            rules.append(CustomerRule(
                sku=entry["sku"],
                discount_pct=discount if _is_number(discount) else None,
                fixed_price_cents=fixed if _is_number(fixed) else None,
            ))
        return rules

    def rule_for_sku(self, customer_id: str, sku: str) -> Optional[CustomerRule]:
        """First rule whose SKU matches, trimmed and case-insensitive."""
        key = normalize_sku(sku)
        for rule in self.load(customer_id):
            if normalize_sku(rule.sku) == key:
                return rule
        return None


class CustomerDiscountStore:
    """Flat per-customer discounts read from customer-discounts.json."""

    def __init__(self, data_dir: Path, cache: Optional[JsonDocumentCache] = None):
        self.path = Path(data_dir) / DISCOUNTS_FILENAME
        self.cache = cache or document_cache

    def discount_for(self, customer_id: str) -> float:
        """Customer's discount, else DEFAULT, else 0; always clamped."""
        document = self.cache.load(self.path)
        if document is MISSING:
            return 0.0
        if not isinstance(document, dict):
            logger.warning(f"Customer discounts at {self.path} are not an object; ignoring")
            return 0.0

        customer_id = (customer_id or "").strip()
        pct = document.get(customer_id)
        if not _is_number(pct):
            pct = document.get(DEFAULT_KEY)
        if not _is_number(pct):
            return 0.0
        return clamp_pct(pct)


def resolve_price(
    customer_id: Optional[str],
    sku: str,
    base_price_cents: int,
    rules: CustomerRulesStore,
    discounts: CustomerDiscountStore,
) -> PriceResolution:
    """
    Price one SKU for one customer.

    A blank customer id never matches a rule file but still receives the
    DEFAULT discount when one is configured.
    """
    customer_id = (customer_id or "").strip()
    rule = rules.rule_for_sku(customer_id, sku) if customer_id else None

    if rule is not None and rule.fixed_price_cents is not None:
        fixed = max(0, round_half_away(rule.fixed_price_cents))
        return PriceResolution(fixed, AppliedRule(APPLIED_FIXED, fixed))

    if rule is not None and rule.discount_pct is not None:
        pct = clamp_pct(rule.discount_pct)
        return PriceResolution(apply_discount(base_price_cents, pct), AppliedRule(APPLIED_RULE, pct))

    default_pct = discounts.discount_for(customer_id)
    if default_pct > 0:
        return PriceResolution(apply_discount(base_price_cents, default_pct), AppliedRule(APPLIED_DEFAULT, default_pct))

    return PriceResolution(base_price_cents, AppliedRule(APPLIED_NONE, 0))

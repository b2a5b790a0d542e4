from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, Optional, Tuple, Union

from .money import D, non_negative


class RuleType(str, Enum):
    PRODUCT_EXCEPTION = "product"
    BRAND_MATCH = "brand"


def normalize_ids(ids: Optional[Iterable[Any]]) -> FrozenSet[str]:
    """Ids worden als string vergeleken: 12 en "12" zijn hetzelfde product."""
    if ids is None:
        return frozenset()
    if isinstance(ids, (str, int)):
        ids = [ids]
    return frozenset(str(i).strip() for i in ids if i is not None and str(i).strip() != "")


@dataclass(frozen=True)
class Tier:
    threshold: D
    percentage: D

    @staticmethod
    def of(threshold: Any, percentage: Any) -> "Tier":
        return Tier(threshold=non_negative(threshold), percentage=non_negative(percentage))


@dataclass(frozen=True)
class TierConfig:
    """
    Tiers in config order. Resolution does not depend on that order,
    but a sane config has non-decreasing thresholds.
    """

    tiers: Tuple[Tier, ...] = ()

    @staticmethod
    def from_pairs(pairs: Iterable[Tuple[Any, Any]]) -> "TierConfig":
        return TierConfig(tiers=tuple(Tier.of(t, p) for t, p in pairs))

    def __iter__(self):
        return iter(self.tiers)

    def __len__(self) -> int:
        return len(self.tiers)


@dataclass(frozen=True)
class Rule:
    type: RuleType
    ids: FrozenSet[str]
    percentage: D

    @staticmethod
    def product(ids: Iterable[Any], percentage: Any) -> "Rule":
        return Rule(RuleType.PRODUCT_EXCEPTION, normalize_ids(ids), non_negative(percentage))

    @staticmethod
    def brand(ids: Iterable[Any], percentage: Any) -> "Rule":
        return Rule(RuleType.BRAND_MATCH, normalize_ids(ids), non_negative(percentage))


@dataclass(frozen=True)
class CashbackSettings:
    use_brand_rules: bool = False
    rules: Tuple[Rule, ...] = ()
    brand_taxonomy: str = "product_brand"


@dataclass(frozen=True)
class LineItem:
    product_id: str
    line_total: D
    brand_ids: FrozenSet[str] = frozenset()

    def __post_init__(self) -> None:
        # ook direct aangemaakte items krijgen dezelfde normalisatie als of()
        object.__setattr__(self, "product_id", str(self.product_id).strip())
        object.__setattr__(self, "line_total", non_negative(self.line_total))
        object.__setattr__(self, "brand_ids", normalize_ids(self.brand_ids))

    @staticmethod
    def of(product_id: Any, line_total: Any, brand_ids: Optional[Iterable[Any]] = None) -> "LineItem":
        return LineItem(product_id=product_id, line_total=line_total, brand_ids=brand_ids or ())


# -----------------------------
# Order input (one of)
# -----------------------------


@dataclass(frozen=True)
class FlatSubtotal:
    subtotal: D


@dataclass(frozen=True)
class LineItems:
    items: Tuple[LineItem, ...] = ()
    # used by the legacy fallback when no items could be resolved
    subtotal: Optional[D] = None

    def items_total(self) -> D:
        return sum((i.line_total for i in self.items), D("0"))


OrderInput = Union[FlatSubtotal, LineItems]


# -----------------------------
# Detailed output
# -----------------------------


class CashbackMode(str, Enum):
    LEGACY = "legacy"
    BRAND = "brand"


class PercentageSource(str, Enum):
    PRODUCT_RULE = "product_rule"
    BRAND_RULE = "brand_rule"
    TIER = "tier"


@dataclass(frozen=True)
class LineCashback:
    product_id: str
    line_total: D
    percentage: D
    source: PercentageSource
    # unrounded; rounding happens once on the order total
    cashback: D
    rule_index: Optional[int] = None


@dataclass(frozen=True)
class CashbackResult:
    mode: CashbackMode
    subtotal: D
    fallback_pct: D
    total: D
    lines: Tuple[LineCashback, ...] = ()
    meta: Dict[str, Any] = field(default_factory=dict)

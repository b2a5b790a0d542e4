from __future__ import annotations

from typing import Iterable, Optional, Sequence, Tuple

from ..domain.models import Rule, RuleType, normalize_ids

Match = Tuple[int, Rule]


def match_product_rule(product_id: str, rules: Sequence[Rule]) -> Optional[Match]:
    """Eerste product-uitzondering (in lijstvolgorde) die dit product noemt."""
    pid = str(product_id).strip()
    for idx, rule in enumerate(rules):
        if rule.type is not RuleType.PRODUCT_EXCEPTION:
            continue
        if pid in rule.ids:
            return idx, rule
    return None


def match_brand_rule(brand_ids: Iterable[str], rules: Sequence[Rule]) -> Optional[Match]:
    """Eerste brand rule (in lijstvolgorde) met overlap in brand ids."""
    brands = normalize_ids(brand_ids)
    if not brands:
        return None
    for idx, rule in enumerate(rules):
        if rule.type is not RuleType.BRAND_MATCH:
            continue
        if brands & rule.ids:
            return idx, rule
    return None

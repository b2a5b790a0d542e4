from __future__ import annotations

from decimal import Decimal

import pytest

from app.verticals.cashback.domain.models import (
    CashbackSettings,
    LineItem,
    Rule,
    TierConfig,
)
from app.verticals.cashback.engine.cashback_engine import CashbackEngine


@pytest.fixture
def tiers():
    # 500 -> 3%, 1000 -> 5%, 1500 -> 7%
    return TierConfig.from_pairs([(500, 3), (1000, 5), (1500, 7)])


@pytest.fixture
def engine():
    return CashbackEngine()


@pytest.fixture
def brand_rules():
    return (
        Rule.product(["101", "102"], "10"),
        Rule.brand(["7"], "2"),
        Rule.brand(["7", "8"], "4"),
    )


@pytest.fixture
def brand_settings(brand_rules):
    return CashbackSettings(use_brand_rules=True, rules=brand_rules)


@pytest.fixture
def legacy_settings(brand_rules):
    return CashbackSettings(use_brand_rules=False, rules=brand_rules)


@pytest.fixture
def item():
    def _make(product_id, line_total, brands=()):
        return LineItem.of(product_id, Decimal(str(line_total)), brands)

    return _make

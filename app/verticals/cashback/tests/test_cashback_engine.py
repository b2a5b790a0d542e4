from decimal import Decimal

import pytest

from app.verticals.cashback.domain.models import (
    CashbackMode,
    CashbackSettings,
    FlatSubtotal,
    LineItem,
    LineItems,
    PercentageSource,
    Rule,
    TierConfig,
)
from app.verticals.cashback.engine.cashback_engine import calculate


def test_legacy_flat_subtotal(engine, legacy_settings, tiers):
    out = engine.calculate(FlatSubtotal(Decimal("1200")), legacy_settings, tiers)
    assert out == Decimal("60.00")


def test_legacy_below_first_tier_is_zero(engine, legacy_settings, tiers):
    out = engine.calculate(FlatSubtotal(Decimal("499")), legacy_settings, tiers)
    assert out == Decimal("0")


def test_legacy_rounds_half_up(engine, legacy_settings):
    tiers = TierConfig.from_pairs([(0, 5)])
    # 10.10 * 5% = 0.505
    out = engine.calculate(FlatSubtotal(Decimal("10.10")), legacy_settings, tiers)
    assert out == Decimal("0.51")


def test_legacy_ignores_rules_even_with_line_items(engine, legacy_settings, tiers, item):
    order = LineItems(items=(item("101", 600), item("55", 600, ["7"])))
    detailed = engine.calculate_detailed(order, legacy_settings, tiers)

    assert detailed.mode == CashbackMode.LEGACY
    assert detailed.subtotal == Decimal("1200")
    # 5% over 1200, the 10% product rule plays no role
    assert detailed.total == Decimal("60.00")


def test_legacy_prefers_explicit_subtotal_over_items(engine, legacy_settings, tiers, item):
    order = LineItems(items=(item("1", 100),), subtotal=Decimal("1600"))
    assert engine.calculate(order, legacy_settings, tiers) == Decimal("112.00")


def test_product_exception_beats_brand_rule(engine, brand_settings, tiers, item):
    order = LineItems(items=(item("101", 100, ["7"]),))
    detailed = engine.calculate_detailed(order, brand_settings, tiers)

    assert detailed.mode == CashbackMode.BRAND
    assert detailed.total == Decimal("10.00")
    line = detailed.lines[0]
    assert line.source == PercentageSource.PRODUCT_RULE
    assert line.rule_index == 0
    assert line.percentage == Decimal("10")


def test_first_matching_brand_rule_wins(engine, brand_settings, tiers, item):
    order = LineItems(items=(item("1", 100, ["7", "8"]), item("2", 100, ["8"])))
    detailed = engine.calculate_detailed(order, brand_settings, tiers)

    assert [l.rule_index for l in detailed.lines] == [1, 2]
    assert [l.percentage for l in detailed.lines] == [Decimal("2"), Decimal("4")]
    assert detailed.total == Decimal("6.00")


def test_fallback_uses_order_subtotal_not_line_total(engine, brand_settings, tiers, item):
    # order subtotal 1100 -> 5%; item A alone (400) would be below every tier
    order = LineItems(items=(item("A", 400), item("B", 700, ["7"])))
    detailed = engine.calculate_detailed(order, brand_settings, tiers)

    assert detailed.fallback_pct == Decimal("5")
    a, b = detailed.lines
    assert a.source == PercentageSource.TIER
    assert a.percentage == Decimal("5")
    assert a.cashback == Decimal("20")
    assert b.source == PercentageSource.BRAND_RULE
    assert detailed.total == Decimal("34.00")


def test_brand_mode_without_items_falls_back_to_legacy(engine, brand_settings, tiers):
    order = LineItems(items=(), subtotal=Decimal("1200"))
    detailed = engine.calculate_detailed(order, brand_settings, tiers)

    assert detailed.mode == CashbackMode.LEGACY
    assert detailed.meta["reason"] == "no_line_items"
    assert detailed.total == Decimal("60.00")


def test_brand_mode_with_flat_subtotal_falls_back_to_legacy(engine, brand_settings, tiers):
    out = engine.calculate(FlatSubtotal(Decimal("1500")), brand_settings, tiers)
    assert out == Decimal("105.00")


def test_brand_mode_without_items_or_subtotal_is_zero(engine, brand_settings, tiers):
    assert engine.calculate(LineItems(), brand_settings, tiers) == Decimal("0")


def test_rounding_happens_once_on_the_sum(engine, tiers, item):
    settings = CashbackSettings(use_brand_rules=True, rules=(Rule.product(["a", "b", "c"], 10),))
    third = Decimal("3.3333333")
    order = LineItems(items=(item("a", third), item("b", third), item("c", third)))

    # per line 0.33333333 -> 0.33 each would give 0.99
    assert engine.calculate(order, settings, tiers) == Decimal("1.00")


def test_rule_with_empty_ids_never_matches(engine, tiers, item):
    settings = CashbackSettings(
        use_brand_rules=True,
        rules=(Rule.product([], 50), Rule.brand([], 50)),
    )
    order = LineItems(items=(item("1", 1000, ["7"]),))
    detailed = engine.calculate_detailed(order, settings, tiers)

    assert detailed.lines[0].source == PercentageSource.TIER
    assert detailed.total == Decimal("50.00")


def test_product_ids_compare_as_strings(engine, tiers, item):
    settings = CashbackSettings(use_brand_rules=True, rules=(Rule.product([12], 10),))
    order = LineItems(items=(item("12", 100),))
    assert engine.calculate(order, settings, tiers) == Decimal("10.00")


def test_zero_percent_rule_still_overrides_tier(engine, tiers, item):
    settings = CashbackSettings(use_brand_rules=True, rules=(Rule.brand(["9"], 0),))
    order = LineItems(items=(item("1", 2000, ["9"]),))
    assert engine.calculate(order, settings, tiers) == Decimal("0")


def test_same_input_same_output(engine, brand_settings, tiers, item):
    order = LineItems(items=(item("101", 250), item("3", 999.99, ["8"]), item("4", 10)))
    out1 = engine.calculate_detailed(order, brand_settings, tiers)
    out2 = engine.calculate_detailed(order, brand_settings, tiers)

    assert out1 == out2
    assert calculate(order, brand_settings, tiers) == out1.total


def test_directly_built_items_with_float_totals(engine, brand_settings, legacy_settings, tiers):
    order = LineItems(items=(LineItem("1", 1200.0),))

    assert order.items[0].line_total == Decimal("1200.0")
    assert engine.calculate(order, legacy_settings, tiers) == Decimal("60.00")
    assert engine.calculate(order, brand_settings, tiers) == Decimal("60.00")


def test_directly_built_items_normalise_ids(engine, brand_settings, tiers):
    order = LineItems(items=(LineItem(101, "100", [7]),))
    detailed = engine.calculate_detailed(order, brand_settings, tiers)

    assert detailed.lines[0].product_id == "101"
    assert detailed.lines[0].source == PercentageSource.PRODUCT_RULE
    assert detailed.total == Decimal("10.00")


@pytest.mark.parametrize("raw", ["abc", "", None, "-250", -250, float("nan")])
def test_unusable_line_totals_count_as_zero(engine, brand_settings, tiers, raw):
    order = LineItems(items=(LineItem("5", raw, ["8"]), LineItem("6", "1000")))
    detailed = engine.calculate_detailed(order, brand_settings, tiers)

    assert detailed.lines[0].line_total == Decimal("0")
    assert detailed.subtotal == Decimal("1000")
    # only the 1000 line earns: fallback 5%
    assert detailed.total == Decimal("50.00")


@pytest.mark.parametrize("raw", ["abc", None, "-1200", -1200.5])
def test_unusable_flat_subtotal_is_zero_cashback(engine, legacy_settings, tiers, raw):
    assert engine.calculate(FlatSubtotal(raw), legacy_settings, tiers) == Decimal("0")


def test_float_flat_subtotal(engine, legacy_settings, tiers):
    assert engine.calculate(FlatSubtotal(1200.0), legacy_settings, tiers) == Decimal("60.00")

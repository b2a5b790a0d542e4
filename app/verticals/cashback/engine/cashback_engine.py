from __future__ import annotations

from typing import List

from app.logging_config import get_logger

from ..calculators.tier_resolver import resolve_percentage
from ..domain.models import (
    CashbackMode,
    CashbackResult,
    CashbackSettings,
    FlatSubtotal,
    LineCashback,
    LineItems,
    OrderInput,
    PercentageSource,
    TierConfig,
)
from ..domain.money import D, HUNDRED, ZERO, non_negative, round_money
from .rule_matcher import match_brand_rule, match_product_rule

logger = get_logger("cashback.engine")


class CashbackEngine:
    """
    Stateless cashback calculator.

    Two modes:
    - legacy: tier percentage over the whole subtotal
    - brand: per line item, product exceptions > brand rules > tier percentage

    Settings and tiers are passed per call; nothing is cached between calls.
    """

    def calculate(self, order: OrderInput, settings: CashbackSettings, tiers: TierConfig) -> D:
        return self.calculate_detailed(order, settings, tiers).total

    def calculate_detailed(
        self, order: OrderInput, settings: CashbackSettings, tiers: TierConfig
    ) -> CashbackResult:
        items = order.items if isinstance(order, LineItems) else ()

        if not settings.use_brand_rules:
            return self._legacy(self._order_subtotal(order), tiers, reason="brand_rules_off")

        if not items:
            # brand mode gevraagd maar geen regels => oude berekening
            return self._legacy(self._order_subtotal(order), tiers, reason="no_line_items")

        return self._brand(order, settings, tiers)

    # -----------------
    # modes
    # -----------------

    def _legacy(self, subtotal: D, tiers: TierConfig, reason: str) -> CashbackResult:
        pct = resolve_percentage(subtotal, tiers)
        total = round_money(subtotal * pct / HUNDRED) if pct > ZERO else round_money(ZERO)

        logger.debug(f"legacy cashback | subtotal={subtotal} pct={pct} total={total} reason={reason}")
        return CashbackResult(
            mode=CashbackMode.LEGACY,
            subtotal=subtotal,
            fallback_pct=pct,
            total=total,
            meta={"reason": reason},
        )

    def _brand(self, order: LineItems, settings: CashbackSettings, tiers: TierConfig) -> CashbackResult:
        subtotal = order.items_total()
        # bewust 1x over de hele order, niet per regel
        fallback_pct = resolve_percentage(subtotal, tiers)
        rules = settings.rules

        lines: List[LineCashback] = []
        accumulated = ZERO

        for item in order.items:
            source = PercentageSource.TIER
            pct = fallback_pct
            rule_index = None

            match = match_product_rule(item.product_id, rules)
            if match is not None:
                source = PercentageSource.PRODUCT_RULE
            else:
                match = match_brand_rule(item.brand_ids, rules)
                if match is not None:
                    source = PercentageSource.BRAND_RULE

            if match is not None:
                rule_index, rule = match
                pct = rule.percentage

            cashback = item.line_total * pct / HUNDRED
            accumulated += cashback
            lines.append(
                LineCashback(
                    product_id=item.product_id,
                    line_total=item.line_total,
                    percentage=pct,
                    source=source,
                    cashback=cashback,
                    rule_index=rule_index,
                )
            )

        total = round_money(accumulated)
        logger.debug(
            f"brand cashback | items={len(lines)} subtotal={subtotal} fallback_pct={fallback_pct} total={total}"
        )
        return CashbackResult(
            mode=CashbackMode.BRAND,
            subtotal=subtotal,
            fallback_pct=fallback_pct,
            total=total,
            lines=tuple(lines),
        )

    @staticmethod
    def _order_subtotal(order: OrderInput) -> D:
        if isinstance(order, FlatSubtotal):
            return non_negative(order.subtotal)
        if order.subtotal is not None:
            return non_negative(order.subtotal)
        return order.items_total()


def calculate(order: OrderInput, settings: CashbackSettings, tiers: TierConfig) -> D:
    return CashbackEngine().calculate(order, settings, tiers)

from __future__ import annotations

from typing import Any, List

from ..domain.models import Tier, TierConfig
from ..domain.money import D, ZERO, non_negative


def resolve_percentage(subtotal: Any, tiers: TierConfig) -> D:
    """
    Hoogste tier eerst: de eerste tier met subtotal >= threshold en
    percentage > 0 wint. Geen match => 0.

    Tiers with percentage 0 are disabled and always skipped. Equal thresholds
    are checked last-configured first.
    """
    amount = non_negative(subtotal)

    ordered = sorted(
        enumerate(tiers),
        key=lambda pair: (pair[1].threshold, pair[0]),
        reverse=True,
    )
    for _, tier in ordered:
        if amount >= tier.threshold and tier.percentage > ZERO:
            return tier.percentage

    return ZERO


def tiers_info(tiers: TierConfig) -> List[Tier]:
    """Enabled tiers, ascending by threshold (for display)."""
    return sorted((t for t in tiers if t.percentage > ZERO), key=lambda t: t.threshold)

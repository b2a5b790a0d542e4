#!/usr/bin/env python3
"""
Demo script voor de CashbackEngine.
Toont legacy en brand mode met de voorbeeld-settings.
"""

from decimal import Decimal

from app.logging_config import LoggingContext, setup_logging
from app.verticals.cashback.catalog import order_input_from_rows
from app.verticals.cashback.domain.models import FlatSubtotal
from app.verticals.cashback.engine.cashback_engine import CashbackEngine
from app.verticals.cashback.storage.loader import example_settings_path, load_settings_file

# Brand lookup zoals de catalogus hem zou leveren
BRANDS = {"101": ["7"], "55": ["8"], "56": []}


def main():
    """Demo van de cashback engine."""
    setup_logging(to_files=False)
    print("Cashback Engine Demo")
    print("=" * 50)

    loaded = load_settings_file(example_settings_path())
    engine = CashbackEngine()

    print("\nTiers:")
    for t in loaded.tiers:
        print(f"  • vanaf {t.threshold}: {t.percentage}%")

    for subtotal in ("450", "1200", "1800"):
        out = engine.calculate(FlatSubtotal(Decimal(subtotal)), loaded.settings, loaded.tiers)
        print(f"\nLegacy subtotal {subtotal}: cashback {out}")

    rows = [
        {"product_id": 101, "line_total": "200"},
        {"product_id": 55, "line_total": "800"},
        {"product_id": 56, "line_total": "500"},
    ]
    order = order_input_from_rows(rows, lambda pid: BRANDS.get(pid, []))

    with LoggingContext(order_id="demo-1"):
        result = engine.calculate_detailed(order, loaded.settings, loaded.tiers)

    print(f"\nBrand mode (fallback {result.fallback_pct}% over {result.subtotal}):")
    for line in result.lines:
        print(f"  • {line.product_id}: {line.line_total} x {line.percentage}% ({line.source.value})")
    print(f"  Totaal cashback: {result.total}")

    print("\n" + "=" * 50)


if __name__ == "__main__":
    main()

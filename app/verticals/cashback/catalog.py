from __future__ import annotations

from typing import Any, Callable, Iterable, List, Mapping, Optional

from app.logging_config import get_logger

from .domain.models import LineItem, LineItems, normalize_ids
from .domain.money import D, non_negative

logger = get_logger("cashback.catalog")

# product_id -> brand ids (taxonomy / catalog lookup lives outside this package)
BrandLookup = Callable[[str], Iterable[Any]]


def _first(row: Mapping[str, Any], keys: Iterable[str]) -> Any:
    for k in keys:
        v = row.get(k)
        if v is not None and str(v).strip() != "":
            return v
    return None


def resolve_brand_ids(product_id: str, brand_lookup: Optional[BrandLookup]) -> frozenset:
    """Brand ids for a product; a failing lookup means "no brands"."""
    if brand_lookup is None:
        return frozenset()
    try:
        return normalize_ids(brand_lookup(product_id))
    except Exception as e:
        logger.warning(f"brand lookup failed | product_id={product_id} error={e!r}")
        return frozenset()


def build_line_items(
    rows: Iterable[Mapping[str, Any]],
    brand_lookup: Optional[BrandLookup] = None,
) -> List[LineItem]:
    """
    Order items en cart items hebben een andere vorm; hier wordt dat één LineItem.

    Accepted keys: product_id | id, line_total | total. Rows without a
    product id are skipped.
    """
    items: List[LineItem] = []
    for row in rows:
        product_id = _first(row, ("product_id", "id"))
        if product_id is None:
            logger.debug(f"skipping row without product id: {dict(row)!r}")
            continue

        pid = str(product_id).strip()
        items.append(
            LineItem.of(
                product_id=pid,
                line_total=_first(row, ("line_total", "total")),
                brand_ids=resolve_brand_ids(pid, brand_lookup),
            )
        )
    return items


def order_input_from_rows(
    rows: Iterable[Mapping[str, Any]],
    brand_lookup: Optional[BrandLookup] = None,
    subtotal: Any = None,
) -> LineItems:
    items = build_line_items(rows, brand_lookup)
    fallback: Optional[D] = non_negative(subtotal) if subtotal is not None else None
    return LineItems(items=tuple(items), subtotal=fallback)

"""Inventory rules - product name matching and stock arithmetic"""

from collections import Counter
from dataclasses import replace
from typing import List, Sequence, Tuple

from retailpro.domain.exceptions import AmbiguousProductMatchError
from retailpro.domain.models import InvoiceItem, Product, StockAction


def matches_product_name(product_name: str, query: str) -> bool:
    """
    Case-insensitive, bidirectional substring match.

    "digestive biscuits" matches "Digestive Biscuits Pack" and vice versa.
    A blank query matches nothing.
    """
    needle = query.strip().lower()
    if not needle:
        return False
    name = product_name.lower()
    return needle in name or name in needle


def adjusted_stock(stock: int, quantity: int, action: StockAction) -> int:
    """ADD_STOCK adds unconditionally; REDUCE_STOCK is floored at zero"""
    if action == StockAction.ADD_STOCK:
        return stock + quantity
    return max(0, stock - quantity)


def apply_stock_adjustment(
    products: Sequence[Product],
    product_name: str,
    quantity: int,
    action: StockAction,
    strict: bool = False,
) -> Tuple[List[Product], List[str]]:
    """
    Apply an adjustment to every product whose name matches.

    Returns (updated product list, ids of matched products). In strict mode a
    name that resolves to more than one product raises instead of updating all.
    """
    matched = [p for p in products if matches_product_name(p.name, product_name)]

    if strict and len(matched) > 1:
        raise AmbiguousProductMatchError(product_name, [p.name for p in matched])

    matched_ids = {p.id for p in matched}
    updated = [
        replace(p, stock=adjusted_stock(p.stock, quantity, action)) if p.id in matched_ids else p
        for p in products
    ]
    return updated, [p.id for p in matched]


def decrement_for_items(products: Sequence[Product], items: Sequence[InvoiceItem]) -> List[Product]:
    """
    Deduct sold quantities from products matched by exact id.

    Every item counts, so two lines for one product decrement twice.
    No floor: stock may go negative.
    """
    sold: Counter = Counter()
    for item in items:
        sold[item.product_id] += item.quantity

    return [replace(p, stock=p.stock - sold[p.id]) if p.id in sold else p for p in products]


def is_low_stock(product: Product) -> bool:
    return product.stock <= product.low_stock_threshold


def low_stock_products(products: Sequence[Product]) -> List[Product]:
    return [p for p in products if is_low_stock(p)]

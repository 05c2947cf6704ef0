"""Stock classification, filtering and counters.

These functions are the single definition of what "low stock" and "out of
stock" mean.  The ORM look-ups in ``filters.py`` and the counters in the
repository mirror them exactly, and the seller console client calls them
directly on API payloads, so a listing is never counted in one bucket and
filtered into another.

Listings may be ORM rows, plain objects or JSON mappings; both
``stock_quantity`` and the wire name ``stockQuantity`` are understood.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional

from modules.listings.constants import StockFilter, StockStatus


def classify_stock(stock_quantity: int, low_stock_threshold: int) -> StockStatus:
    """Total, non-overlapping classification of a stock level.

    ``0`` is out of stock, ``1..threshold`` is low stock, anything above the
    threshold is in stock.
    """
    if stock_quantity <= 0:
        return StockStatus.OUT_OF_STOCK
    if stock_quantity <= low_stock_threshold:
        return StockStatus.LOW_STOCK
    return StockStatus.IN_STOCK


def is_low_stock(stock_quantity: int, low_stock_threshold: int) -> bool:
    return 0 < stock_quantity <= low_stock_threshold


def is_out_of_stock(stock_quantity: int) -> bool:
    return stock_quantity == 0


def is_in_stock(stock_quantity: int, low_stock_threshold: int) -> bool:
    return stock_quantity > low_stock_threshold


def matches_stock_filter(
    stock_quantity: int, low_stock_threshold: int, stock_filter: str
) -> bool:
    if stock_filter == StockFilter.LOW:
        return is_low_stock(stock_quantity, low_stock_threshold)
    if stock_filter == StockFilter.OUT:
        return is_out_of_stock(stock_quantity)
    return True


def matches_search(title: str, sku: Optional[str], query: str) -> bool:
    """Case-insensitive substring match on title or SKU; empty query matches."""
    if not query:
        return True
    needle = query.lower()
    return needle in (title or "").lower() or needle in (sku or "").lower()


@dataclass(frozen=True)
class InventorySummary:
    total: int
    in_stock: int
    low_stock: int
    out_of_stock: int

    def as_dict(self) -> dict:
        return {
            "totalProducts": self.total,
            "inStock": self.in_stock,
            "lowStock": self.low_stock,
            "outOfStock": self.out_of_stock,
        }


def summarize(listings: Iterable[Any]) -> InventorySummary:
    total = in_stock = low_stock = out_of_stock = 0
    for listing in listings:
        stock, threshold = stock_levels(listing)
        total += 1
        if is_in_stock(stock, threshold):
            in_stock += 1
        elif is_low_stock(stock, threshold):
            low_stock += 1
        elif is_out_of_stock(stock):
            out_of_stock += 1
    return InventorySummary(total, in_stock, low_stock, out_of_stock)


def filter_listings(
    listings: Iterable[Any],
    search: str = "",
    state: Optional[str] = None,
    stock_filter: str = StockFilter.ALL,
) -> List[Any]:
    """Apply search, state and stock filters, all of which must match."""
    selected = []
    for listing in listings:
        stock, threshold = stock_levels(listing)
        if not matches_search(_field(listing, "title"), _field(listing, "sku"), search):
            continue
        if state and state != "all" and _field(listing, "state") != state:
            continue
        if not matches_stock_filter(stock, threshold, stock_filter):
            continue
        selected.append(listing)
    return selected


def stock_levels(listing: Any) -> tuple[int, int]:
    stock = _field(listing, "stock_quantity", "stockQuantity")
    threshold = _field(listing, "low_stock_threshold", "lowStockThreshold")
    return int(stock or 0), int(threshold or 0)


def _field(listing: Any, name: str, wire_name: Optional[str] = None) -> Any:
    if isinstance(listing, Mapping):
        if name in listing:
            return listing[name]
        return listing.get(wire_name) if wire_name else None
    value = getattr(listing, name, None)
    if value is None and wire_name:
        value = getattr(listing, wire_name, None)
    return value

"""Domain events for the Listings bounded context."""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class StockLevelChanged(DomainEvent):
    """A listing or variation stock count was edited by its seller."""

    seller_id: str = ""
    variation_id: str = ""
    old_quantity: int = 0
    new_quantity: int = 0


@dataclass(frozen=True)
class LowStockReached(DomainEvent):
    """A listing moved into a worse stock classification (low or out)."""

    seller_id: str = ""
    stock_status: str = ""
    stock_quantity: int = 0
    low_stock_threshold: int = 0

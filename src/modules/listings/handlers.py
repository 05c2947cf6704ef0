"""Event handlers for Listings domain events."""

from __future__ import annotations

import structlog

from modules.listings.events import LowStockReached, StockLevelChanged
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class StockLevelChangedHandler(IEventHandler[StockLevelChanged]):
    def handle(self, event: StockLevelChanged) -> None:
        logger.info(
            "listing.event.stock_level_changed",
            listing_id=str(event.aggregate_id),
            variation_id=event.variation_id or None,
            old_quantity=event.old_quantity,
            new_quantity=event.new_quantity,
        )


class LowStockReachedHandler(IEventHandler[LowStockReached]):
    """Raise the restock alert shown on the seller inventory page."""

    def handle(self, event: LowStockReached) -> None:
        logger.warning(
            "listing.event.low_stock_reached",
            listing_id=str(event.aggregate_id),
            seller_id=event.seller_id,
            stock_status=event.stock_status,
            stock_quantity=event.stock_quantity,
            low_stock_threshold=event.low_stock_threshold,
        )


stock_level_changed_handler = StockLevelChangedHandler()
low_stock_reached_handler = LowStockReachedHandler()

"""Inventory service layer (Use Cases).

Seller-facing stock management: listing queries with filters, the low-stock
list and counters, single stock edits and bulk edits.

Rules enforced here:
- A seller only ever sees or changes their own listings; a listing of
  another seller is reported exactly like a missing one.
- Stock quantities are non-negative integers (validated by the DTOs).
- Bulk updates are all-or-nothing.
- Each write locks its rows (``SELECT FOR UPDATE``) so it is atomic, but
  there is no version check: concurrent editors get last-write-wins.
- Every stock change emits ``StockLevelChanged``; a change that makes the
  stock classification worse also emits ``LowStockReached``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, List, Optional

import structlog
from django.db import transaction

from modules.listings.constants import STOCK_STATUS_SEVERITY
from modules.listings.dtos import ListingQueryDTO
from modules.listings.events import LowStockReached, StockLevelChanged
from modules.listings.exceptions import (
    InvalidBulkUpdate,
    ListingNotFound,
    VariationNotFound,
)
from modules.listings.stock import InventorySummary, classify_stock

if TYPE_CHECKING:
    from modules.listings.dtos import BulkUpdateDTO, UpdateStockDTO
    from modules.listings.models import Listing, ListingVariation
    from modules.listings.repositories.interfaces import IListingRepository
    from modules.sellers.models import Seller

logger = structlog.get_logger(__name__)


class InventoryService:
    """Application service for seller inventory use-cases."""

    def __init__(self, listing_repository: IListingRepository) -> None:
        self._repo = listing_repository

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_seller_listings(
        self, seller: Seller, query: Optional[ListingQueryDTO] = None
    ) -> List[Listing]:
        query = query or ListingQueryDTO()
        filters: dict[str, Any] = {"stock": query.stock.value}
        if query.search:
            filters["search"] = query.search
        if query.state is not None:
            filters["state"] = query.state.value
        return self._repo.list_for_seller(seller.id, filters)

    def low_stock_listings(self, seller: Seller) -> List[Listing]:
        return self._repo.low_stock_for_seller(seller.id)

    def inventory_summary(self, seller: Seller) -> InventorySummary:
        return self._repo.summary_for_seller(seller.id)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def update_stock(self, seller: Seller, listing_id: Any, dto: UpdateStockDTO) -> Listing:
        """Set the stock quantity of one listing.

        Raises:
            ListingNotFound: missing, removed, or owned by another seller.
        """
        listing = self._owned_listing_for_update(seller, listing_id)
        log = logger.bind(listing_id=str(listing.id), seller_id=str(seller.id))

        old_quantity = listing.stock_quantity
        old_status = listing.stock_status
        listing.stock_quantity = dto.quantity
        listing.add_domain_event(
            StockLevelChanged(
                aggregate_id=listing.id,
                seller_id=str(seller.id),
                old_quantity=old_quantity,
                new_quantity=dto.quantity,
            )
        )
        self._raise_stock_alert(listing, old_status)
        self._repo.save(listing)

        log.info(
            "listing.stock_updated",
            old_quantity=old_quantity,
            new_quantity=dto.quantity,
            stock_status=listing.stock_status.value,
        )
        return listing

    @transaction.atomic
    def update_variation_stock(
        self,
        seller: Seller,
        listing_id: Any,
        variation_id: Any,
        dto: UpdateStockDTO,
    ) -> ListingVariation:
        """Set the stock quantity of one variation of a listing.

        Raises:
            ListingNotFound: the parent listing is not the seller's.
            VariationNotFound: no such variation on that listing.
        """
        listing = self._owned_listing_for_update(seller, listing_id)
        variation = self._repo.get_variation_for_update(listing.id, variation_id)
        if variation is None:
            raise VariationNotFound(
                f"Variation {variation_id} not found on listing {listing_id}."
            )

        old_quantity = variation.stock_quantity
        variation.stock_quantity = dto.quantity
        self._repo.save_variation(variation)

        listing.add_domain_event(
            StockLevelChanged(
                aggregate_id=listing.id,
                seller_id=str(seller.id),
                variation_id=str(variation.id),
                old_quantity=old_quantity,
                new_quantity=dto.quantity,
            )
        )
        self._repo.save(listing)

        logger.info(
            "listing.variation_stock_updated",
            listing_id=str(listing.id),
            variation_id=str(variation.id),
            old_quantity=old_quantity,
            new_quantity=dto.quantity,
        )
        return variation

    @transaction.atomic
    def bulk_update(self, seller: Seller, dto: BulkUpdateDTO) -> List[Listing]:
        """Apply per-listing changes to many listings in one transaction.

        Raises:
            InvalidBulkUpdate: any listing is missing or not the seller's;
                nothing is changed in that case.
        """
        requested = {update.id: update for update in dto.updates}
        listings = self._repo.get_many_for_update(list(requested))
        owned = {listing.id: listing for listing in listings if listing.seller_id == seller.id}

        missing = [str(listing_id) for listing_id in requested if listing_id not in owned]
        if missing:
            logger.warning(
                "listing.bulk_update_rejected",
                seller_id=str(seller.id),
                missing=missing,
            )
            raise InvalidBulkUpdate(f"Listings not found: {', '.join(missing)}.")

        updated = []
        for listing_id, listing in owned.items():
            old_status = listing.stock_status
            for attr, value in requested[listing_id].changes().items():
                setattr(listing, attr, value)
            self._raise_stock_alert(listing, old_status)
            updated.append(self._repo.save(listing))

        logger.info(
            "listing.bulk_updated",
            seller_id=str(seller.id),
            listing_count=len(updated),
        )
        return updated

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _owned_listing_for_update(self, seller: Seller, listing_id: Any) -> Listing:
        listing = self._repo.get_for_update(listing_id)
        if listing is None or listing.seller_id != seller.id:
            if listing is not None:
                logger.warning(
                    "listing.not_owned",
                    listing_id=str(listing_id),
                    seller_id=str(seller.id),
                )
            raise ListingNotFound(f"Listing {listing_id} not found.")
        return listing

    @staticmethod
    def _raise_stock_alert(listing: Listing, old_status: str) -> None:
        new_status = classify_stock(listing.stock_quantity, listing.low_stock_threshold)
        if STOCK_STATUS_SEVERITY[new_status] > STOCK_STATUS_SEVERITY[old_status]:
            listing.add_domain_event(
                LowStockReached(
                    aggregate_id=listing.id,
                    seller_id=str(listing.seller_id),
                    stock_status=new_status.value,
                    stock_quantity=listing.stock_quantity,
                    low_stock_threshold=listing.low_stock_threshold,
                )
            )

"""Listing repository interface.

Extends ``IRepository[Listing]`` with the seller-scoped look-ups and row
locks the inventory use cases need.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.listings.models import Listing, ListingVariation
    from modules.listings.stock import InventorySummary


class IListingRepository(IRepository["Listing"]):
    @abstractmethod
    def list_for_seller(
        self, seller_id: Any, filters: Optional[Dict[str, Any]] = None
    ) -> List[Listing]:
        """Live listings of a seller, narrowed by ``ListingFilter`` params."""

    @abstractmethod
    def low_stock_for_seller(self, seller_id: Any) -> List[Listing]:
        """Listings with ``0 < stock_quantity <= low_stock_threshold``."""

    @abstractmethod
    def summary_for_seller(self, seller_id: Any) -> InventorySummary:
        """Total / in-stock / low-stock / out-of-stock counters."""

    @abstractmethod
    def get_for_update(self, id: Any) -> Optional[Listing]:
        """Retrieve a listing with a row-level lock (SELECT FOR UPDATE)."""

    @abstractmethod
    def get_many_for_update(self, ids: Sequence[Any]) -> List[Listing]:
        """Lock several listings, always in primary-key order."""

    @abstractmethod
    def get_variation_for_update(
        self, listing_id: Any, variation_id: Any
    ) -> Optional[ListingVariation]:
        """Lock one variation of a listing."""

    @abstractmethod
    def save_variation(self, variation: ListingVariation) -> ListingVariation:
        """Persist a variation."""

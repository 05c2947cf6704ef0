"""Django ORM implementation of the Listing repository.

Look-ups return ``None`` (or skip rows) for missing or malformed IDs; the
service decides how a missing listing is reported.  Domain events
collected on a listing are written to the outbox inside ``save``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Count, Prefetch

from modules.core.outbox import store_domain_events
from modules.listings.filters import (
    IN_STOCK_Q,
    LOW_STOCK_Q,
    OUT_OF_STOCK_Q,
    ListingFilter,
)
from modules.listings.models import Listing, ListingVariation
from modules.listings.repositories.interfaces import IListingRepository
from modules.listings.stock import InventorySummary

logger = structlog.get_logger(__name__)


def _live_variations() -> Prefetch:
    return Prefetch("variations", queryset=ListingVariation.objects.alive())


class ListingDjangoRepository(IListingRepository):
    def _seller_queryset(self, seller_id: Any):
        return (
            Listing.objects.alive()
            .filter(seller_id=seller_id)
            .prefetch_related(_live_variations())
        )

    def get_by_id(self, id: str) -> Optional[Listing]:
        try:
            return (
                Listing.objects.alive()
                .prefetch_related(_live_variations())
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def list_for_seller(
        self, seller_id: Any, filters: Optional[Dict[str, Any]] = None
    ) -> List[Listing]:
        queryset = self._seller_queryset(seller_id)
        if filters:
            queryset = ListingFilter(filters, queryset=queryset).qs
        return list(queryset)

    def low_stock_for_seller(self, seller_id: Any) -> List[Listing]:
        return list(self._seller_queryset(seller_id).filter(LOW_STOCK_Q))

    def summary_for_seller(self, seller_id: Any) -> InventorySummary:
        counts = (
            Listing.objects.alive()
            .filter(seller_id=seller_id)
            .aggregate(
                total=Count("id"),
                in_stock=Count("id", filter=IN_STOCK_Q),
                low_stock=Count("id", filter=LOW_STOCK_Q),
                out_of_stock=Count("id", filter=OUT_OF_STOCK_Q),
            )
        )
        return InventorySummary(**counts)

    def get_for_update(self, id: Any) -> Optional[Listing]:
        try:
            return Listing.objects.alive().select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_many_for_update(self, ids: Sequence[Any]) -> List[Listing]:
        try:
            return list(
                Listing.objects.alive()
                .select_for_update()
                .filter(id__in=list(ids))
                .order_by("id")
            )
        except (ValueError, ValidationError):
            return []

    def get_variation_for_update(
        self, listing_id: Any, variation_id: Any
    ) -> Optional[ListingVariation]:
        try:
            return (
                ListingVariation.objects.alive()
                .select_for_update()
                .filter(id=variation_id, listing_id=listing_id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    @transaction.atomic
    def save(self, entity: Listing) -> Listing:
        entity.save()
        event_count = store_domain_events(entity, topic="listings")
        logger.info(
            "listing.saved", listing_id=str(entity.id), event_count=event_count
        )
        return entity

    @transaction.atomic
    def save_variation(self, variation: ListingVariation) -> ListingVariation:
        variation.save()
        logger.info(
            "listing.variation_saved",
            listing_id=str(variation.listing_id),
            variation_id=str(variation.id),
        )
        return variation

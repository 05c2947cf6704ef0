"""Django ORM implementation of the Order repository.

Transitions lock the order row with ``select_for_update()``; there is no
version column, so concurrent writers resolve as last-write-wins in
arrival order.  Domain events collected on an order are written to the
outbox inside ``save``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.core.outbox import store_domain_events
from modules.orders.filters import OrderFilter
from modules.orders.models import Order, TrackingEvent
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    def _queryset(self):
        return (
            Order.objects.alive()
            .select_related("buyer", "seller")
            .prefetch_related("items")
        )

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[Order]:
        """Order with buyer, seller and items eager-loaded.

        Returns ``None`` for non-existent or malformed IDs.
        """
        try:
            return self._queryset().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: Any) -> Optional[Order]:
        try:
            return (
                Order.objects.alive()
                .select_for_update()
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def list_for_seller(
        self, seller_id: Any, filters: Optional[Dict[str, Any]] = None
    ) -> List[Order]:
        queryset = self._queryset().filter(seller_id=seller_id)
        if filters:
            queryset = OrderFilter(filters, queryset=queryset).qs
        return list(queryset)

    def list_for_buyer(self, buyer_id: Any) -> List[Order]:
        return list(self._queryset().filter(buyer_id=buyer_id))

    # ------------------------------------------------------------------
    # Tracking timeline
    # ------------------------------------------------------------------

    def add_tracking_event(self, order: Order, **data: Any) -> TrackingEvent:
        event = TrackingEvent.objects.create(order=order, **data)
        logger.info(
            "order.tracking_event_added",
            order_id=str(order.id),
            status=event.status,
        )
        return event

    def has_tracking_event(self, order_id: Any, idempotency_key: str) -> bool:
        return TrackingEvent.objects.filter(
            order_id=order_id, idempotency_key=idempotency_key
        ).exists()

    def tracking_events(self, order_id: Any) -> List[TrackingEvent]:
        return list(TrackingEvent.objects.filter(order_id=order_id))

    def latest_tracking_event(self, order_id: Any) -> Optional[TrackingEvent]:
        return TrackingEvent.objects.filter(order_id=order_id).first()

    # ------------------------------------------------------------------
    # Save (IRepository contract)
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Order) -> Order:
        entity.save()
        event_count = store_domain_events(entity, topic="orders")
        logger.info("order.saved", order_id=str(entity.id), event_count=event_count)
        return entity

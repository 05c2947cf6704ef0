"""Event handlers for Orders domain events."""

from __future__ import annotations

import structlog

from modules.orders.events import (
    OrderCancelled,
    OrderDelivered,
    OrderShipped,
    OrderStatusChanged,
)
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class OrderShippedHandler(IEventHandler[OrderShipped]):
    """Queue the shipment email to the buyer."""

    def handle(self, event: OrderShipped) -> None:
        from modules.orders.tasks import send_shipment_notification

        logger.info(
            "order.event.shipped",
            order_id=str(event.aggregate_id),
            carrier=event.carrier,
        )
        send_shipment_notification.delay(str(event.aggregate_id))


class OrderDeliveredHandler(IEventHandler[OrderDelivered]):
    def handle(self, event: OrderDelivered) -> None:
        logger.info(
            "order.event.delivered",
            order_id=str(event.aggregate_id),
            seller_id=event.seller_id,
        )


class OrderCancelledHandler(IEventHandler[OrderCancelled]):
    def handle(self, event: OrderCancelled) -> None:
        logger.info(
            "order.event.cancelled",
            order_id=str(event.aggregate_id),
            cancelled_by=event.cancelled_by,
        )


class OrderStatusChangedHandler(IEventHandler[OrderStatusChanged]):
    def handle(self, event: OrderStatusChanged) -> None:
        logger.info(
            "order.event.status_changed",
            order_id=str(event.aggregate_id),
            old_status=event.old_status,
            new_status=event.new_status,
        )


order_shipped_handler = OrderShippedHandler()
order_delivered_handler = OrderDeliveredHandler()
order_cancelled_handler = OrderCancelledHandler()
order_status_changed_handler = OrderStatusChangedHandler()

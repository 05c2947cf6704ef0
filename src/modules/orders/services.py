"""Order workflow service layer (Use Cases).

Seller fulfilment actions (ship, deliver, tracking updates), cancellation
by either party and the role-scoped order queries.  All write operations
are atomic and lock the order row first.

Rules enforced here:
- Transitions follow ``modules.orders.workflow``; anything else raises
  ``InvalidOrderStatus``.
- Only the order's seller ships, delivers or posts tracking updates; the
  buyer and the seller may both read and cancel.
- Every transition appends a tracking event and emits
  ``OrderStatusChanged`` plus the specific event (``OrderShipped``...).
- Shipping is idempotent: re-sending the tracking data an order already
  shipped with returns it unchanged and records nothing.
- Cancelling does not restock listings; stock is never decremented by
  this service.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, List, Optional

import structlog
from django.db import transaction
from django.utils import timezone

from modules.orders import workflow
from modules.orders.constants import OrderStatus
from modules.orders.dtos import MISSING_SHIPPING_INFO, CancelOrderDTO, OrderQueryDTO
from modules.orders.events import (
    OrderCancelled,
    OrderDelivered,
    OrderShipped,
    OrderStatusChanged,
)
from modules.orders.exceptions import (
    InvalidOrderStatus,
    MissingShippingInfo,
    OrderAccessDenied,
    OrderNotFound,
)

if TYPE_CHECKING:
    from modules.orders.dtos import ShipOrderDTO, TrackingUpdateDTO
    from modules.orders.models import Order, TrackingEvent
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.sellers.models import Seller

logger = structlog.get_logger(__name__)


def shipment_key(carrier: str, tracking_number: str) -> str:
    return f"shipped:{carrier}:{tracking_number}"


class OrderWorkflowService:
    """Application service for the order status workflow."""

    def __init__(self, order_repository: IOrderRepository) -> None:
        self._order_repo = order_repository

    # ------------------------------------------------------------------
    # Seller actions
    # ------------------------------------------------------------------

    @transaction.atomic
    def ship_order(self, seller: Seller, order_id: Any, dto: ShipOrderDTO) -> Order:
        """Mark a paid order as shipped with its carrier and tracking number.

        Raises:
            OrderNotFound: order does not exist.
            OrderAccessDenied: order belongs to another seller.
            InvalidOrderStatus: order is not ``paid``.
        """
        order = self._seller_order_for_update(seller, order_id)
        log = logger.bind(order_id=str(order.id), seller_id=str(seller.id))
        key = shipment_key(dto.carrier, dto.tracking_number)

        if (
            order.status == OrderStatus.SHIPPED
            and order.carrier == dto.carrier
            and order.tracking_number == dto.tracking_number
        ):
            log.info("order.ship_replayed", carrier=dto.carrier)
            return self._reload(order)

        if not workflow.can_ship(order):
            log.warning("order.invalid_transition", current_status=order.status)
            raise InvalidOrderStatus(f"Cannot ship an order that is {order.status}.")

        order.carrier = dto.carrier
        order.tracking_number = dto.tracking_number
        self._apply_transition(order, OrderStatus.SHIPPED, actor=str(seller.user_id))
        self._order_repo.save(order)

        if not self._order_repo.has_tracking_event(order.id, key):
            self._order_repo.add_tracking_event(
                order,
                status=OrderStatus.SHIPPED,
                description=f"Shipped via {dto.carrier}",
                carrier=dto.carrier,
                tracking_number=dto.tracking_number,
                idempotency_key=key,
                created_by=seller.user,
            )

        log.info("order.shipped", carrier=dto.carrier)
        return self._reload(order)

    @transaction.atomic
    def mark_delivered(self, seller: Seller, order_id: Any) -> Order:
        """Mark a shipped order as delivered.

        Raises:
            OrderNotFound, OrderAccessDenied, InvalidOrderStatus (not shipped).
        """
        order = self._seller_order_for_update(seller, order_id)
        log = logger.bind(order_id=str(order.id), seller_id=str(seller.id))

        if not workflow.can_mark_delivered(order):
            log.warning("order.invalid_transition", current_status=order.status)
            raise InvalidOrderStatus(
                f"Cannot mark an order that is {order.status} as delivered."
            )

        self._apply_transition(order, OrderStatus.DELIVERED, actor=str(seller.user_id))
        self._order_repo.save(order)
        self._order_repo.add_tracking_event(
            order,
            status=OrderStatus.DELIVERED,
            description="Delivered",
            carrier=order.carrier,
            tracking_number=order.tracking_number,
            created_by=seller.user,
        )

        log.info("order.delivered")
        return self._reload(order)

    @transaction.atomic
    def add_tracking_event(
        self, seller: Seller, order_id: Any, dto: TrackingUpdateDTO
    ) -> TrackingEvent:
        """Append a tracking entry, moving the order when the status changes.

        Posting the current status records an informational entry.

        Raises:
            OrderNotFound, OrderAccessDenied,
            InvalidOrderStatus: the order is final or the transition is not
                allowed.
            MissingShippingInfo: moving to shipped without a carrier and a
                tracking number.
        """
        order = self._seller_order_for_update(seller, order_id)
        log = logger.bind(
            order_id=str(order.id),
            current_status=order.status,
            new_status=dto.status,
        )

        if order.is_terminal:
            log.warning("order.tracking_rejected")
            raise InvalidOrderStatus(f"Order is already {order.status}.")
        if dto.status != order.status and not order.can_transition_to(dto.status):
            log.warning("order.invalid_transition")
            raise InvalidOrderStatus(
                f"Cannot transition from {order.status} to {dto.status}."
            )
        if dto.status == OrderStatus.SHIPPED and order.status != OrderStatus.SHIPPED:
            if not (dto.tracking_number or order.tracking_number) or not (
                dto.carrier or order.carrier
            ):
                log.warning("order.shipping_info_missing")
                raise MissingShippingInfo(MISSING_SHIPPING_INFO)

        if dto.tracking_number:
            order.tracking_number = dto.tracking_number
        if dto.carrier:
            order.carrier = dto.carrier
        if dto.status != order.status:
            self._apply_transition(
                order, dto.status, actor=str(seller.user_id), reason=dto.notes
            )
        self._order_repo.save(order)

        event = self._order_repo.add_tracking_event(
            order,
            status=dto.status,
            location=dto.location,
            description=dto.description or OrderStatus(dto.status).label,
            notes=dto.notes,
            carrier=order.carrier,
            tracking_number=order.tracking_number,
            created_by=seller.user,
        )
        log.info("order.tracking_updated")
        return event

    # ------------------------------------------------------------------
    # Buyer or seller actions
    # ------------------------------------------------------------------

    @transaction.atomic
    def cancel_order(
        self, user: Any, order_id: Any, dto: Optional[CancelOrderDTO] = None
    ) -> Order:
        """Cancel a non-final order on behalf of its buyer or seller.

        Raises:
            OrderNotFound, OrderAccessDenied,
            InvalidOrderStatus: the order is already final.
        """
        dto = dto or CancelOrderDTO()
        order = self._order_repo.get_for_update(order_id)
        if order is None:
            raise OrderNotFound(f"Order {order_id} not found.")
        if not order.is_visible_to(user):
            raise OrderAccessDenied(f"Order {order_id} is not yours.")

        log = logger.bind(order_id=str(order.id), current_status=order.status)
        if not workflow.can_cancel(order):
            log.warning("order.cancel_not_allowed")
            raise InvalidOrderStatus(f"Cannot cancel order in status {order.status}.")

        self._apply_transition(
            order, OrderStatus.CANCELLED, actor=str(user.id), reason=dto.reason
        )
        self._order_repo.save(order)
        self._order_repo.add_tracking_event(
            order,
            status=OrderStatus.CANCELLED,
            description="Order cancelled",
            notes=dto.reason,
            created_by=user,
        )

        log.info("order.cancelled", cancelled_by=str(user.id))
        return self._reload(order)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, user: Any, order_id: Any) -> Order:
        """Fetch an order readable by *user* (its buyer or its seller).

        Raises:
            OrderNotFound, OrderAccessDenied (neither buyer nor seller).
        """
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise OrderNotFound(f"Order {order_id} not found.")
        if not order.is_visible_to(user):
            logger.warning(
                "order.access_denied", order_id=str(order_id), user_id=str(user.id)
            )
            raise OrderAccessDenied(f"Order {order_id} is not yours.")
        return order

    def list_seller_orders(
        self, seller: Seller, query: Optional[OrderQueryDTO] = None
    ) -> List[Order]:
        query = query or OrderQueryDTO()
        filters = {"status": query.status.value} if query.status else None
        return self._order_repo.list_for_seller(seller.id, filters)

    def list_buyer_orders(self, user: Any) -> List[Order]:
        return self._order_repo.list_for_buyer(user.id)

    def tracking_history(self, user: Any, order_id: Any) -> List[TrackingEvent]:
        order = self.get_order(user, order_id)
        return self._order_repo.tracking_events(order.id)

    def order_progress(self, order: Order) -> int:
        """Progress of the most recent tracking entry, else of the order."""
        latest = self._order_repo.latest_tracking_event(order.id)
        return workflow.progress_for(latest.status if latest else order.status)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _seller_order_for_update(self, seller: Seller, order_id: Any) -> Order:
        order = self._order_repo.get_for_update(order_id)
        if order is None:
            raise OrderNotFound(f"Order {order_id} not found.")
        if order.seller_id != seller.id:
            logger.warning(
                "order.access_denied", order_id=str(order_id), seller_id=str(seller.id)
            )
            raise OrderAccessDenied(f"Order {order_id} belongs to another seller.")
        return order

    def _reload(self, order: Order) -> Order:
        return self._order_repo.get_by_id(order.id) or order

    @staticmethod
    def _apply_transition(
        order: Order, new_status: str, actor: str, reason: str = ""
    ) -> None:
        old_status = order.status
        now = timezone.now()
        order.status = new_status
        order.add_domain_event(
            OrderStatusChanged(
                aggregate_id=order.id, old_status=old_status, new_status=new_status
            )
        )
        if new_status == OrderStatus.SHIPPED:
            order.shipped_at = now
            order.add_domain_event(
                OrderShipped(
                    aggregate_id=order.id,
                    buyer_id=str(order.buyer_id),
                    seller_id=str(order.seller_id),
                    carrier=order.carrier,
                    tracking_number=order.tracking_number,
                )
            )
        elif workflow.is_delivered_like(new_status):
            order.delivered_at = now
            order.add_domain_event(
                OrderDelivered(aggregate_id=order.id, seller_id=str(order.seller_id))
            )
        elif new_status == OrderStatus.CANCELLED:
            order.cancelled_at = now
            order.cancellation_reason = reason
            order.add_domain_event(
                OrderCancelled(aggregate_id=order.id, cancelled_by=actor, reason=reason)
            )

"""Unit tests for OrderWorkflowService.

Covers:
- Shipping: only paid orders, only by their seller, replay is a no-op.
- Delivery, cancellation and free-form tracking updates.
- Events written to the outbox for every transition.
- Read access for the buyer and the seller, progress from the timeline.
"""

from __future__ import annotations

import uuid

import pytest

from modules.core.models import OutboxEvent
from modules.orders.constants import OrderStatus
from modules.orders.dtos import (
    CancelOrderDTO,
    OrderQueryDTO,
    ShipOrderDTO,
    TrackingUpdateDTO,
)
from modules.orders.exceptions import (
    InvalidOrderStatus,
    MissingShippingInfo,
    OrderAccessDenied,
    OrderNotFound,
)
from modules.orders.models import TrackingEvent
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderWorkflowService, shipment_key

pytestmark = pytest.mark.unit


@pytest.fixture()
def service():
    return OrderWorkflowService(order_repository=OrderDjangoRepository())


def _ship(tracking="9400111899223", carrier="USPS"):
    return ShipOrderDTO(tracking_number=tracking, carrier=carrier)


def _event_types(order):
    return list(
        OutboxEvent.objects.filter(aggregate_id=str(order.id))
        .order_by("created_at")
        .values_list("event_type", flat=True)
    )


# ---------------------------------------------------------------------------
# Ship
# ---------------------------------------------------------------------------


class TestShipOrder:
    def test_paid_order_is_shipped(self, service, seller, make_order):
        order = make_order(status=OrderStatus.PAID)

        shipped = service.ship_order(seller, order.id, _ship())

        assert shipped.status == OrderStatus.SHIPPED
        assert shipped.carrier == "USPS"
        assert shipped.tracking_number == "9400111899223"
        assert shipped.shipped_at is not None

    def test_records_tracking_event(self, service, seller, make_order):
        order = make_order(status=OrderStatus.PAID)

        service.ship_order(seller, order.id, _ship())

        [event] = TrackingEvent.objects.filter(order=order)
        assert event.status == OrderStatus.SHIPPED
        assert event.carrier == "USPS"
        assert event.idempotency_key == shipment_key("USPS", "9400111899223")
        assert event.created_by == seller.user

    def test_writes_status_changed_and_shipped_events(self, service, seller, make_order):
        order = make_order(status=OrderStatus.PAID)

        service.ship_order(seller, order.id, _ship())

        assert sorted(_event_types(order)) == ["OrderShipped", "OrderStatusChanged"]
        shipped = OutboxEvent.objects.get(event_type="OrderShipped")
        assert shipped.topic == "orders"
        assert shipped.payload["tracking_number"] == "9400111899223"
        assert shipped.payload["buyer_id"] == str(order.buyer_id)

    def test_replay_returns_order_unchanged(self, service, seller, make_order):
        order = make_order(status=OrderStatus.PAID)
        first = service.ship_order(seller, order.id, _ship())

        again = service.ship_order(seller, order.id, _ship())

        assert again.status == OrderStatus.SHIPPED
        assert again.shipped_at == first.shipped_at
        assert TrackingEvent.objects.filter(order=order).count() == 1
        assert _event_types(order).count("OrderShipped") == 1

    def test_reshipping_with_other_tracking_is_rejected(
        self, service, seller, make_order
    ):
        order = make_order(status=OrderStatus.PAID)
        service.ship_order(seller, order.id, _ship())

        with pytest.raises(InvalidOrderStatus):
            service.ship_order(seller, order.id, _ship(tracking="1Z999"))

    @pytest.mark.parametrize(
        "status",
        [OrderStatus.PENDING, OrderStatus.PROCESSING, OrderStatus.CANCELLED],
    )
    def test_only_paid_orders_ship(self, service, seller, make_order, status):
        order = make_order(status=status)

        with pytest.raises(InvalidOrderStatus):
            service.ship_order(seller, order.id, _ship())

        order.refresh_from_db()
        assert order.status == status
        assert not TrackingEvent.objects.filter(order=order).exists()

    def test_other_sellers_order_is_denied(
        self, service, other_seller, make_order
    ):
        order = make_order(status=OrderStatus.PAID)

        with pytest.raises(OrderAccessDenied):
            service.ship_order(other_seller, order.id, _ship())

    def test_unknown_order(self, service, seller):
        with pytest.raises(OrderNotFound):
            service.ship_order(seller, uuid.uuid4(), _ship())


# ---------------------------------------------------------------------------
# Deliver
# ---------------------------------------------------------------------------


class TestMarkDelivered:
    def test_shipped_order_is_delivered(self, service, seller, make_order):
        order = make_order(status=OrderStatus.PAID)
        service.ship_order(seller, order.id, _ship())

        delivered = service.mark_delivered(seller, order.id)

        assert delivered.status == OrderStatus.DELIVERED
        assert delivered.delivered_at is not None
        assert "OrderDelivered" in _event_types(order)
        latest = TrackingEvent.objects.filter(order=order).first()
        assert latest.status == OrderStatus.DELIVERED

    def test_paid_order_cannot_be_delivered(self, service, seller, make_order):
        order = make_order(status=OrderStatus.PAID)

        with pytest.raises(InvalidOrderStatus):
            service.mark_delivered(seller, order.id)

    def test_other_seller_is_denied(self, service, other_seller, make_order):
        order = make_order(status=OrderStatus.SHIPPED)

        with pytest.raises(OrderAccessDenied):
            service.mark_delivered(other_seller, order.id)


# ---------------------------------------------------------------------------
# Tracking updates
# ---------------------------------------------------------------------------


class TestAddTrackingEvent:
    def test_moves_order_to_new_status(self, service, seller, make_order):
        order = make_order(status=OrderStatus.PAID)

        event = service.add_tracking_event(
            seller,
            order.id,
            TrackingUpdateDTO(status="processing", notes="Packing", location="Salem"),
        )

        order.refresh_from_db()
        assert order.status == OrderStatus.PROCESSING
        assert event.status == OrderStatus.PROCESSING
        assert event.location == "Salem"
        assert event.description == "Processing"

    def test_same_status_is_informational(self, service, seller, make_order):
        order = make_order(status=OrderStatus.SHIPPED, carrier="UPS")

        service.add_tracking_event(
            seller,
            order.id,
            TrackingUpdateDTO(status="shipped", description="Arrived at hub"),
        )

        order.refresh_from_db()
        assert order.status == OrderStatus.SHIPPED
        assert TrackingEvent.objects.get(order=order).description == "Arrived at hub"
        assert _event_types(order) == []

    def test_updates_tracking_fields(self, service, seller, make_order):
        order = make_order(status=OrderStatus.PROCESSING)

        service.add_tracking_event(
            seller,
            order.id,
            TrackingUpdateDTO(status="shipped", trackingNumber="1Z999", carrier="UPS"),
        )

        order.refresh_from_db()
        assert order.status == OrderStatus.SHIPPED
        assert order.tracking_number == "1Z999"
        assert order.carrier == "UPS"

    def test_shipping_without_tracking_data_is_rejected(
        self, service, seller, make_order
    ):
        order = make_order(status=OrderStatus.PROCESSING)

        with pytest.raises(MissingShippingInfo):
            service.add_tracking_event(
                seller, order.id, TrackingUpdateDTO(status="shipped", carrier="UPS")
            )

        order.refresh_from_db()
        assert order.status == OrderStatus.PROCESSING
        assert not TrackingEvent.objects.filter(order=order).exists()
        assert _event_types(order) == []

    def test_shipping_uses_tracking_data_already_on_order(
        self, service, seller, make_order
    ):
        order = make_order(
            status=OrderStatus.PROCESSING, carrier="DHL", tracking_number="JD0142"
        )

        service.add_tracking_event(seller, order.id, TrackingUpdateDTO(status="shipped"))

        order.refresh_from_db()
        assert order.status == OrderStatus.SHIPPED
        assert order.tracking_number == "JD0142"

    def test_disallowed_transition(self, service, seller, make_order):
        order = make_order(status=OrderStatus.PENDING)

        with pytest.raises(InvalidOrderStatus):
            service.add_tracking_event(
                seller, order.id, TrackingUpdateDTO(status="delivered")
            )

    def test_final_order_rejects_updates(self, service, seller, make_order):
        order = make_order(status=OrderStatus.DELIVERED)

        with pytest.raises(InvalidOrderStatus):
            service.add_tracking_event(
                seller, order.id, TrackingUpdateDTO(status="delivered")
            )


# ---------------------------------------------------------------------------
# Cancel
# ---------------------------------------------------------------------------


class TestCancelOrder:
    def test_buyer_cancels(self, service, buyer, make_order):
        order = make_order(status=OrderStatus.PAID)

        cancelled = service.cancel_order(
            buyer, order.id, CancelOrderDTO(reason="Ordered twice")
        )

        assert cancelled.status == OrderStatus.CANCELLED
        assert cancelled.cancellation_reason == "Ordered twice"
        assert cancelled.cancelled_at is not None
        cancel_event = OutboxEvent.objects.get(event_type="OrderCancelled")
        assert cancel_event.payload["cancelled_by"] == str(buyer.id)

    def test_seller_cancels(self, service, seller, make_order):
        order = make_order(status=OrderStatus.PROCESSING)

        cancelled = service.cancel_order(seller.user, order.id)

        assert cancelled.status == OrderStatus.CANCELLED

    def test_stranger_is_denied(self, service, make_user, make_order):
        order = make_order(status=OrderStatus.PAID)

        with pytest.raises(OrderAccessDenied):
            service.cancel_order(make_user("igor"), order.id)

    @pytest.mark.parametrize(
        "status", [OrderStatus.DELIVERED, OrderStatus.FULFILLED, OrderStatus.CANCELLED]
    )
    def test_final_orders_cannot_be_cancelled(
        self, service, buyer, make_order, status
    ):
        order = make_order(status=status)

        with pytest.raises(InvalidOrderStatus):
            service.cancel_order(buyer, order.id)

    def test_cancel_does_not_touch_stock(
        self, service, buyer, make_order, make_listing
    ):
        listing = make_listing(stock_quantity=4)
        order = make_order(status=OrderStatus.PAID)
        order.items.update(listing=listing, quantity=2)

        service.cancel_order(buyer, order.id)

        listing.refresh_from_db()
        assert listing.stock_quantity == 4


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


class TestQueries:
    def test_buyer_and_seller_can_read(self, service, seller, buyer, make_order):
        order = make_order()

        assert service.get_order(buyer, order.id).id == order.id
        assert service.get_order(seller.user, order.id).id == order.id

    def test_other_seller_cannot_read(self, service, other_seller, make_order):
        order = make_order()

        with pytest.raises(OrderAccessDenied):
            service.get_order(other_seller.user, order.id)

    def test_malformed_id_is_not_found(self, service, buyer):
        with pytest.raises(OrderNotFound):
            service.get_order(buyer, "not-a-uuid")

    def test_seller_list_filters_by_status(
        self, service, seller, other_seller, make_order
    ):
        make_order(status=OrderStatus.PAID)
        make_order(status=OrderStatus.SHIPPED)
        make_order(status=OrderStatus.PAID, owner=other_seller)

        paid = service.list_seller_orders(seller, OrderQueryDTO(status="paid"))
        everything = service.list_seller_orders(seller, OrderQueryDTO(status="all"))

        assert [o.status for o in paid] == [OrderStatus.PAID]
        assert len(everything) == 2

    def test_buyer_list(self, service, buyer, make_user, make_order):
        make_order()
        make_order(placed_by=make_user("pugsley"))

        assert len(service.list_buyer_orders(buyer)) == 1

    def test_tracking_history_is_newest_first(self, service, seller, buyer, make_order):
        order = make_order(status=OrderStatus.PAID)
        service.ship_order(seller, order.id, _ship())
        service.mark_delivered(seller, order.id)

        history = service.tracking_history(buyer, order.id)

        assert [e.status for e in history] == ["delivered", "shipped"]

    def test_progress_follows_latest_tracking_event(
        self, service, seller, make_order
    ):
        order = make_order(
            status=OrderStatus.PAID, carrier="USPS", tracking_number="9400111899223"
        )
        assert service.order_progress(order) == 0

        for status, expected in [("confirmed", 25), ("processing", 50), ("shipped", 75)]:
            service.add_tracking_event(
                seller, order.id, TrackingUpdateDTO(status=status)
            )
            assert service.order_progress(order) == expected

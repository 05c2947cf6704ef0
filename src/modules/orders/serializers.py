"""Order DRF serializers (output only).

Request bodies are validated by the pydantic DTOs in ``dtos.py``.  These
serializers render orders in the camelCase shape the marketplace front
end reads, including the workflow flags that drive the seller's ship and
deliver buttons.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders import workflow
from modules.orders.models import Order, OrderItem, TrackingEvent


class OrderItemSerializer(serializers.ModelSerializer):
    listingId = serializers.UUIDField(source="listing_id", read_only=True)
    lineTotal = serializers.DecimalField(
        source="line_total", max_digits=12, decimal_places=2, read_only=True
    )

    class Meta:
        model = OrderItem
        fields = ["id", "listingId", "title", "price", "quantity", "image", "lineTotal"]
        read_only_fields = fields


class TrackingEventSerializer(serializers.ModelSerializer):
    trackingNumber = serializers.CharField(source="tracking_number", read_only=True)

    class Meta:
        model = TrackingEvent
        fields = [
            "id",
            "status",
            "location",
            "description",
            "notes",
            "carrier",
            "trackingNumber",
            "timestamp",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Order with items, derived workflow flags and progress.

    ``progress`` defaults to the order's own status; views that know the
    latest tracking entry pass it as ``context["progress"]``.
    """

    orderNumber = serializers.CharField(source="order_number", read_only=True)
    buyerId = serializers.CharField(source="buyer_id", read_only=True)
    sellerId = serializers.UUIDField(source="seller_id", read_only=True)
    shopName = serializers.CharField(source="seller.shop_name", read_only=True)
    displayStatus = serializers.SerializerMethodField()
    progress = serializers.SerializerMethodField()
    shippingCost = serializers.DecimalField(
        source="shipping_cost", max_digits=10, decimal_places=2, read_only=True
    )
    platformFee = serializers.DecimalField(
        source="platform_fee", max_digits=10, decimal_places=2, read_only=True
    )
    shippingAddress = serializers.JSONField(source="shipping_address", read_only=True)
    trackingNumber = serializers.CharField(source="tracking_number", read_only=True)
    trackingUrl = serializers.SerializerMethodField()
    canShip = serializers.SerializerMethodField()
    canMarkDelivered = serializers.SerializerMethodField()
    canCancel = serializers.SerializerMethodField()
    estimatedDelivery = serializers.SerializerMethodField()
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    shippedAt = serializers.DateTimeField(source="shipped_at", read_only=True)
    deliveredAt = serializers.DateTimeField(source="delivered_at", read_only=True)
    cancelledAt = serializers.DateTimeField(source="cancelled_at", read_only=True)
    items = OrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "orderNumber",
            "buyerId",
            "sellerId",
            "shopName",
            "status",
            "displayStatus",
            "progress",
            "subtotal",
            "shippingCost",
            "platformFee",
            "total",
            "shippingAddress",
            "trackingNumber",
            "carrier",
            "trackingUrl",
            "canShip",
            "canMarkDelivered",
            "canCancel",
            "estimatedDelivery",
            "createdAt",
            "shippedAt",
            "deliveredAt",
            "cancelledAt",
            "items",
        ]
        read_only_fields = fields

    def get_displayStatus(self, obj: Order) -> str:
        return workflow.display_status(obj.status)

    def get_progress(self, obj: Order) -> int:
        return self.context.get("progress", workflow.progress_for(obj.status))

    def get_trackingUrl(self, obj: Order):
        return workflow.carrier_tracking_url(obj.carrier, obj.tracking_number)

    def get_canShip(self, obj: Order) -> bool:
        return workflow.can_ship(obj)

    def get_canMarkDelivered(self, obj: Order) -> bool:
        return workflow.can_mark_delivered(obj)

    def get_canCancel(self, obj: Order) -> bool:
        return workflow.can_cancel(obj)

    def get_estimatedDelivery(self, obj: Order) -> str:
        return workflow.estimated_delivery(obj.created_at).isoformat()

"""Order domain constants.

Status and carrier choices plus the lookup tables behind the order
workflow in ``modules.orders.workflow``.
"""

from django.db import models


class OrderStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    PAID = "paid", "Paid"
    CONFIRMED = "confirmed", "Confirmed"
    PROCESSING = "processing", "Processing"
    SHIPPED = "shipped", "Shipped"
    DELIVERED = "delivered", "Delivered"
    FULFILLED = "fulfilled", "Fulfilled"
    CANCELLED = "cancelled", "Cancelled"


class Carrier(models.TextChoices):
    USPS = "USPS", "USPS"
    UPS = "UPS", "UPS"
    FEDEX = "FedEx", "FedEx"
    DHL = "DHL", "DHL"
    OTHER = "Other", "Other"


ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    OrderStatus.PENDING: frozenset(
        {OrderStatus.PAID, OrderStatus.CONFIRMED, OrderStatus.CANCELLED}
    ),
    OrderStatus.PAID: frozenset(
        {
            OrderStatus.CONFIRMED,
            OrderStatus.PROCESSING,
            OrderStatus.SHIPPED,
            OrderStatus.CANCELLED,
        }
    ),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset(
        {OrderStatus.DELIVERED, OrderStatus.FULFILLED, OrderStatus.CANCELLED}
    ),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.FULFILLED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

TERMINAL_STATES: frozenset[str] = frozenset(
    {OrderStatus.DELIVERED, OrderStatus.FULFILLED, OrderStatus.CANCELLED}
)

# Buyer-facing progress bar, in percent. Statuses not listed show 0.
PROGRESS_BY_STATUS: dict[str, int] = {
    OrderStatus.PENDING: 0,
    OrderStatus.CONFIRMED: 25,
    OrderStatus.PROCESSING: 50,
    OrderStatus.SHIPPED: 75,
    OrderStatus.DELIVERED: 100,
    OrderStatus.CANCELLED: 0,
}

CARRIER_TRACKING_URLS: dict[str, str] = {
    Carrier.USPS: "https://tools.usps.com/go/TrackConfirmAction?tLabels={number}",
    Carrier.UPS: "https://www.ups.com/track?tracknum={number}",
    Carrier.FEDEX: "https://www.fedex.com/fedextrack/?trknbr={number}",
    Carrier.DHL: "https://www.dhl.com/en/express/tracking.html?AWB={number}",
}

DEFAULT_PROCESSING_DAYS = 3
SHIPPING_DAYS = 5

ORDER_NUMBER_MAX_RETRIES = 5

"""Order notification tasks."""

from __future__ import annotations

import structlog
from celery import shared_task
from django.conf import settings
from django.core.mail import send_mail

from modules.orders.models import Order
from modules.orders.workflow import carrier_tracking_url, estimated_delivery

logger = structlog.get_logger(__name__)


@shared_task(name="orders.send_shipment_notification")
def send_shipment_notification(order_id: str) -> bool:
    """Email the buyer that their order is on its way.

    Returns ``False`` when notifications are disabled or the buyer has no
    email address.
    """
    log = logger.bind(order_id=order_id)
    if not settings.SHIPPING_NOTIFICATIONS_ENABLED:
        log.info("order.notification_skipped", reason="disabled")
        return False

    order = Order.objects.select_related("buyer", "seller").get(id=order_id)
    if not order.buyer.email:
        log.info("order.notification_skipped", reason="no_email")
        return False

    lines = [
        f"Your order {order.order_number} from {order.seller.shop_name} has shipped.",
        f"Carrier: {order.carrier or 'N/A'}",
        f"Tracking number: {order.tracking_number}",
    ]
    url = carrier_tracking_url(order.carrier, order.tracking_number)
    if url:
        lines.append(f"Track your package: {url}")
    lines.append(
        f"Estimated delivery: {estimated_delivery(order.created_at):%B %d, %Y}"
    )

    send_mail(
        subject=f"Your order {order.order_number} has shipped",
        message="\n".join(lines),
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[order.buyer.email],
    )
    log.info("order.notification_sent", carrier=order.carrier)
    return True

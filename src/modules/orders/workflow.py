"""Order status workflow.

Pure functions over order statuses, shared by the service layer (server
side validation), the serializers (action flags, progress) and the seller
console client (button enablement).  ``order`` arguments may be an
``Order`` row, an API payload mapping or a bare status string.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Mapping, Optional

from modules.orders.constants import (
    ALLOWED_TRANSITIONS,
    CARRIER_TRACKING_URLS,
    DEFAULT_PROCESSING_DAYS,
    PROGRESS_BY_STATUS,
    SHIPPING_DAYS,
    TERMINAL_STATES,
    Carrier,
    OrderStatus,
)

__all__ = [
    "ALLOWED_TRANSITIONS",
    "Carrier",
    "OrderStatus",
    "can_cancel",
    "can_mark_delivered",
    "can_ship",
    "can_transition",
    "carrier_tracking_url",
    "display_status",
    "estimated_delivery",
    "is_delivered_like",
    "is_terminal",
    "progress_for",
    "status_of",
]


def status_of(order: Any) -> Optional[str]:
    if order is None or isinstance(order, str):
        return order
    if isinstance(order, Mapping):
        return order.get("status")
    return getattr(order, "status", None)


def can_transition(from_status: str, to_status: str) -> bool:
    return to_status in ALLOWED_TRANSITIONS.get(from_status, frozenset())


def is_terminal(order: Any) -> bool:
    return status_of(order) in TERMINAL_STATES


def can_ship(order: Any) -> bool:
    return status_of(order) == OrderStatus.PAID


def can_mark_delivered(order: Any) -> bool:
    return status_of(order) == OrderStatus.SHIPPED


def can_cancel(order: Any) -> bool:
    status = status_of(order)
    return status in ALLOWED_TRANSITIONS and status not in TERMINAL_STATES


def progress_for(status: Optional[str]) -> int:
    return PROGRESS_BY_STATUS.get(status, 0)


def is_delivered_like(status: Optional[str]) -> bool:
    """``fulfilled`` is the completed-order alias of ``delivered``."""
    return status in (OrderStatus.DELIVERED, OrderStatus.FULFILLED)


def display_status(status: Optional[str]) -> str:
    if status == OrderStatus.FULFILLED:
        return "completed"
    return status or ""


def carrier_tracking_url(carrier: Optional[str], tracking_number: Optional[str]) -> Optional[str]:
    """Public tracking page for the known carriers, ``None`` otherwise."""
    template = CARRIER_TRACKING_URLS.get(carrier or "")
    if template is None or not tracking_number:
        return None
    return template.format(number=tracking_number)


def estimated_delivery(
    created_at: datetime, processing_days: int = DEFAULT_PROCESSING_DAYS
) -> datetime:
    return created_at + timedelta(days=processing_days + SHIPPING_DAYS)

"""Domain events for the Orders bounded context."""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class OrderStatusChanged(DomainEvent):
    """Raised on every workflow transition."""

    old_status: str = ""
    new_status: str = ""


@dataclass(frozen=True)
class OrderShipped(DomainEvent):
    """The seller handed the order to a carrier; the buyer gets an email."""

    buyer_id: str = ""
    seller_id: str = ""
    carrier: str = ""
    tracking_number: str = ""


@dataclass(frozen=True)
class OrderDelivered(DomainEvent):
    seller_id: str = ""


@dataclass(frozen=True)
class OrderCancelled(DomainEvent):
    cancelled_by: str = ""
    reason: str = ""

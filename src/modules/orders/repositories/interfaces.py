"""Order repository interface.

Extends ``IRepository[Order]`` with the look-ups the workflow service
needs: row locking for transitions, role-scoped lists and the append-only
tracking timeline.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.models import Order, TrackingEvent


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root.

    The aggregate includes OrderItem children and TrackingEvent records.
    """

    @abstractmethod
    def get_for_update(self, id: Any) -> Optional[Order]:
        """Retrieve an order with a row-level lock, ``None`` if missing."""

    @abstractmethod
    def list_for_seller(
        self, seller_id: Any, filters: Optional[Dict[str, Any]] = None
    ) -> List[Order]:
        """Orders placed with a seller, newest first."""

    @abstractmethod
    def list_for_buyer(self, buyer_id: Any) -> List[Order]:
        """Orders placed by a buyer, newest first."""

    @abstractmethod
    def add_tracking_event(self, order: Order, **data: Any) -> TrackingEvent:
        """Append a tracking event to the order's timeline."""

    @abstractmethod
    def has_tracking_event(self, order_id: Any, idempotency_key: str) -> bool:
        """Whether an event with this idempotency key was already recorded."""

    @abstractmethod
    def tracking_events(self, order_id: Any) -> List[TrackingEvent]:
        """The order's timeline, most recent first."""

    @abstractmethod
    def latest_tracking_event(self, order_id: Any) -> Optional[TrackingEvent]:
        """The most recent timeline entry, ``None`` for an empty timeline."""

"""Seller console actions.

Every mutation validates its input before touching the network, sends a
single request and returns ``Ok(data)`` or ``Err(ClientError)``.  On
success the affected queries are invalidated so the next read fetches
fresh data.  Failures are never retried.
"""

from __future__ import annotations

from typing import Any, Hashable, Iterable, Iterator, List, Optional, Sequence

import structlog

from client.api import ApiClient
from client.errors import ClientError, ValidationFailed
from modules.listings.constants import BULK_UPDATE_FIELDS, StockFilter
from modules.listings.stock import (
    InventorySummary,
    classify_stock,
    filter_listings,
    stock_levels,
    summarize,
)
from modules.orders.constants import Carrier
from modules.orders.dtos import MISSING_SHIPPING_INFO
from shared.domain.result import Err, Ok, Result

logger = structlog.get_logger(__name__)

SELLER_LISTINGS = ("/api/seller/listings",)
SELLER_LOW_STOCK = ("/api/seller/low-stock",)
SELLER_ORDERS = ("/api/seller/orders",)
ORDERS = "/api/orders"


def _mutate(
    api: ApiClient,
    method: str,
    path: str,
    payload: Any,
    invalidate: Sequence[Sequence[Hashable]] = (),
) -> Result:
    try:
        data = api.request(method, path, json=payload)
    except ClientError as exc:
        logger.warning("console.mutation_failed", path=path, error=str(exc))
        return Err(exc)
    for prefix in invalidate:
        api.invalidate(*prefix)
    return Ok(data)


def _order_id(order: Any) -> str:
    if isinstance(order, dict):
        return str(order["id"])
    return str(getattr(order, "id", order))


class Selection:
    """Listing ids picked for a bulk update, in the order they were picked."""

    def __init__(self, ids: Iterable[Any] = ()) -> None:
        self._ids: dict[str, None] = {}
        for listing_id in ids:
            self.add(listing_id)

    def add(self, listing_id: Any) -> None:
        self._ids[str(listing_id)] = None

    def remove(self, listing_id: Any) -> None:
        self._ids.pop(str(listing_id), None)

    def toggle(self, listing_id: Any) -> None:
        if str(listing_id) in self._ids:
            self.remove(listing_id)
        else:
            self.add(listing_id)

    def clear(self) -> None:
        self._ids.clear()

    @property
    def ids(self) -> List[str]:
        return list(self._ids)

    def __contains__(self, listing_id: object) -> bool:
        return str(listing_id) in self._ids

    def __iter__(self) -> Iterator[str]:
        return iter(self.ids)

    def __len__(self) -> int:
        return len(self._ids)


class OrderActions:
    """Ship, deliver, cancel and tracking updates for the seller's orders."""

    def __init__(self, api: ApiClient) -> None:
        self._api = api

    def seller_orders(self) -> Any:
        return self._api.query(*SELLER_ORDERS)

    def order(self, order_id: Any) -> Any:
        return self._api.query(ORDERS, str(order_id))

    def tracking(self, order_id: Any) -> Any:
        return self._api.query(ORDERS, str(order_id), "tracking")

    def ship(self, order: Any, tracking_number: str, carrier: Optional[str]) -> Result:
        tracking_number = (tracking_number or "").strip()
        if not tracking_number or not carrier:
            return Err(ValidationFailed("Missing information", MISSING_SHIPPING_INFO))
        if carrier not in Carrier.values:
            return Err(ValidationFailed("Unknown carrier", f"{carrier} is not supported."))
        order_id = _order_id(order)
        return _mutate(
            self._api,
            "POST",
            f"{ORDERS}/{order_id}/ship",
            {"trackingNumber": tracking_number, "carrier": carrier},
            invalidate=self._order_keys(order_id),
        )

    def mark_delivered(self, order: Any) -> Result:
        order_id = _order_id(order)
        return _mutate(
            self._api,
            "POST",
            f"{ORDERS}/{order_id}/deliver",
            {},
            invalidate=self._order_keys(order_id),
        )

    def post_tracking(
        self,
        order_id: Any,
        status: Optional[str],
        notes: str = "",
        tracking_number: Optional[str] = None,
        carrier: Optional[str] = None,
    ) -> Result:
        if not status:
            return Err(ValidationFailed("Status required", "Please select a status"))
        payload: dict[str, Any] = {"status": status, "notes": notes}
        if tracking_number:
            payload["trackingNumber"] = tracking_number
        if carrier:
            payload["carrier"] = carrier
        return _mutate(
            self._api,
            "POST",
            f"{ORDERS}/{order_id}/tracking",
            payload,
            invalidate=self._order_keys(str(order_id)),
        )

    def cancel(self, order: Any, reason: str = "") -> Result:
        order_id = _order_id(order)
        return _mutate(
            self._api,
            "POST",
            f"{ORDERS}/{order_id}/cancel",
            {"reason": reason},
            invalidate=self._order_keys(order_id),
        )

    @staticmethod
    def _order_keys(order_id: str) -> list:
        return [SELLER_ORDERS, (ORDERS, order_id)]


class InventoryActions:
    """Stock edits, bulk updates and the inventory page's local filtering."""

    def __init__(self, api: ApiClient) -> None:
        self._api = api

    def listings(
        self,
        search: str = "",
        state: Optional[str] = None,
        stock_filter: str = StockFilter.ALL,
    ) -> List[Any]:
        return filter_listings(
            self._api.query(*SELLER_LISTINGS) or [], search, state, stock_filter
        )

    def low_stock(self) -> List[Any]:
        return self._api.query(*SELLER_LOW_STOCK) or []

    def summary(self) -> InventorySummary:
        return summarize(self._api.query(*SELLER_LISTINGS) or [])

    @staticmethod
    def stock_status(listing: Any):
        return classify_stock(*stock_levels(listing))

    def update_stock(self, listing_id: Any, quantity: Any) -> Result:
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 0:
            return Err(
                ValidationFailed(
                    "Invalid quantity", "Stock quantity must be a non-negative whole number."
                )
            )
        return _mutate(
            self._api,
            "PUT",
            f"/api/listings/{listing_id}/stock",
            {"quantity": quantity},
            invalidate=[SELLER_LISTINGS, SELLER_LOW_STOCK],
        )

    def bulk_update(self, selection: Selection, field: str, value: Any) -> Result:
        """Apply ``field = value`` to every selected listing in one request.

        The selection is cleared only when the request succeeds.
        """
        if not selection:
            return Err(
                ValidationFailed(
                    "No listings selected", "Select at least one listing to update."
                )
            )
        if field not in BULK_UPDATE_FIELDS:
            return Err(
                ValidationFailed(
                    "Unsupported field",
                    f"Bulk updates support: {', '.join(BULK_UPDATE_FIELDS)}.",
                )
            )
        result = _mutate(
            self._api,
            "PUT",
            "/api/seller/listings/bulk",
            {"updates": [{"id": listing_id, field: value} for listing_id in selection]},
            invalidate=[SELLER_LISTINGS, SELLER_LOW_STOCK],
        )
        if result.is_ok:
            selection.clear()
        return result

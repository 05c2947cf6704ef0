"""Unit tests for the seller console actions and result rendering."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from client.actions import InventoryActions, OrderActions, Selection
from client.errors import AuthRedirect, HttpError, NetworkError, ValidationFailed
from client.feedback import DESTRUCTIVE, Notice, Redirect, render
from modules.listings.constants import StockStatus
from modules.orders.dtos import MISSING_SHIPPING_INFO
from shared.domain.result import Err, Ok

pytestmark = pytest.mark.unit

ORDER = {"id": "o-13", "status": "paid"}


@pytest.fixture()
def api():
    api = MagicMock()
    api.request.return_value = {"id": "o-13", "status": "shipped"}
    return api


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------


class TestShip:
    @pytest.mark.parametrize(
        ("tracking", "carrier"),
        [("", "USPS"), ("   ", "USPS"), ("9400111", ""), ("9400111", None)],
    )
    def test_missing_information_never_hits_the_network(self, api, tracking, carrier):
        result = OrderActions(api).ship(ORDER, tracking, carrier)

        assert isinstance(result, Err)
        assert result.error.title == "Missing information"
        assert result.error.description == MISSING_SHIPPING_INFO
        api.request.assert_not_called()

    def test_unknown_carrier(self, api):
        result = OrderActions(api).ship(ORDER, "9400111", "Raven Post")

        assert isinstance(result.error, ValidationFailed)
        api.request.assert_not_called()

    def test_posts_and_invalidates(self, api):
        result = OrderActions(api).ship(ORDER, " 9400111 ", "USPS")

        assert result == Ok({"id": "o-13", "status": "shipped"})
        api.request.assert_called_once_with(
            "POST",
            "/api/orders/o-13/ship",
            json={"trackingNumber": "9400111", "carrier": "USPS"},
        )
        api.invalidate.assert_any_call("/api/seller/orders")
        api.invalidate.assert_any_call("/api/orders", "o-13")

    def test_server_error_is_returned_not_raised(self, api):
        api.request.side_effect = HttpError(409, "Cannot ship an order that is shipped.")

        result = OrderActions(api).ship(ORDER, "9400111", "USPS")

        assert isinstance(result, Err)
        assert result.error.status == 409
        api.invalidate.assert_not_called()


class TestOtherOrderActions:
    def test_mark_delivered(self, api):
        OrderActions(api).mark_delivered("o-13")

        api.request.assert_called_once_with("POST", "/api/orders/o-13/deliver", json={})

    def test_cancel_sends_reason(self, api):
        OrderActions(api).cancel(ORDER, reason="Out of velvet")

        api.request.assert_called_once_with(
            "POST", "/api/orders/o-13/cancel", json={"reason": "Out of velvet"}
        )

    def test_post_tracking_requires_status(self, api):
        result = OrderActions(api).post_tracking("o-13", "")

        assert result.error.title == "Status required"
        api.request.assert_not_called()

    def test_post_tracking_payload(self, api):
        OrderActions(api).post_tracking(
            "o-13", "shipped", notes="Left Salem", tracking_number="1Z9", carrier="UPS"
        )

        api.request.assert_called_once_with(
            "POST",
            "/api/orders/o-13/tracking",
            json={
                "status": "shipped",
                "notes": "Left Salem",
                "trackingNumber": "1Z9",
                "carrier": "UPS",
            },
        )

    def test_reads_go_through_query(self, api):
        actions = OrderActions(api)

        actions.seller_orders()
        actions.tracking("o-13")

        api.query.assert_any_call("/api/seller/orders")
        api.query.assert_any_call("/api/orders", "o-13", "tracking")


# ---------------------------------------------------------------------------
# Inventory
# ---------------------------------------------------------------------------


LISTINGS = [
    {"id": "l-1", "title": "Raven Skull Candle", "sku": "NVM-002",
     "state": "published", "stockQuantity": 3, "lowStockThreshold": 5},
    {"id": "l-2", "title": "Bat Wing Earrings", "sku": "NVM-003",
     "state": "published", "stockQuantity": 0, "lowStockThreshold": 5},
    {"id": "l-3", "title": "Apothecary Bottle Set", "sku": "NVM-005",
     "state": "draft", "stockQuantity": 40, "lowStockThreshold": 5},
]


class TestInventoryReads:
    def test_local_filters(self, api):
        api.query.return_value = LISTINGS
        actions = InventoryActions(api)

        assert [item["id"] for item in actions.listings(stock_filter="low")] == ["l-1"]
        assert [item["id"] for item in actions.listings(stock_filter="out")] == ["l-2"]
        assert [item["id"] for item in actions.listings(search="nvm-005")] == ["l-3"]
        assert [item["id"] for item in actions.listings(state="published")] == ["l-1", "l-2"]

    def test_summary(self, api):
        api.query.return_value = LISTINGS

        summary = InventoryActions(api).summary()

        assert summary.as_dict() == {
            "totalProducts": 3,
            "inStock": 1,
            "lowStock": 1,
            "outOfStock": 1,
        }

    def test_stock_status(self):
        assert InventoryActions.stock_status(LISTINGS[0]) == StockStatus.LOW_STOCK


class TestUpdateStock:
    @pytest.mark.parametrize("quantity", [-1, 2.5, "7", True, None])
    def test_invalid_quantity(self, api, quantity):
        result = InventoryActions(api).update_stock("l-1", quantity)

        assert result.error.title == "Invalid quantity"
        api.request.assert_not_called()

    def test_puts_quantity_and_invalidates(self, api):
        result = InventoryActions(api).update_stock("l-1", 7)

        assert result.is_ok
        api.request.assert_called_once_with(
            "PUT", "/api/listings/l-1/stock", json={"quantity": 7}
        )
        api.invalidate.assert_any_call("/api/seller/listings")
        api.invalidate.assert_any_call("/api/seller/low-stock")

    def test_zero_is_allowed(self, api):
        assert InventoryActions(api).update_stock("l-1", 0).is_ok


class TestBulkUpdate:
    def test_one_request_for_the_whole_selection(self, api):
        selection = Selection(["l-1", "l-2", "l-3"])

        result = InventoryActions(api).bulk_update(selection, "state", "draft")

        assert result.is_ok
        api.request.assert_called_once_with(
            "PUT",
            "/api/seller/listings/bulk",
            json={
                "updates": [
                    {"id": "l-1", "state": "draft"},
                    {"id": "l-2", "state": "draft"},
                    {"id": "l-3", "state": "draft"},
                ]
            },
        )
        assert len(selection) == 0

    def test_failure_keeps_selection(self, api):
        api.request.side_effect = NetworkError("connection reset")
        selection = Selection(["l-1", "l-2"])

        result = InventoryActions(api).bulk_update(selection, "lowStockThreshold", 3)

        assert not result.is_ok
        assert selection.ids == ["l-1", "l-2"]

    def test_empty_selection(self, api):
        result = InventoryActions(api).bulk_update(Selection(), "state", "draft")

        assert result.error.title == "No listings selected"
        api.request.assert_not_called()

    def test_unsupported_field(self, api):
        result = InventoryActions(api).bulk_update(Selection(["l-1"]), "price", "1.00")

        assert result.error.title == "Unsupported field"


class TestSelection:
    def test_toggle_and_order(self):
        selection = Selection()
        selection.add("l-2")
        selection.toggle("l-1")
        selection.add("l-2")

        assert selection.ids == ["l-2", "l-1"]

        selection.toggle("l-2")
        assert "l-2" not in selection
        assert list(selection) == ["l-1"]


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


class TestRender:
    def test_success(self):
        notice = render(Ok({}), success="Order shipped", success_description="USPS")

        assert notice == Notice("Order shipped", "USPS")

    def test_validation_failure(self):
        notice = render(Err(ValidationFailed("Missing information", MISSING_SHIPPING_INFO)))

        assert notice == Notice("Missing information", MISSING_SHIPPING_INFO, DESTRUCTIVE)

    def test_auth_redirect(self):
        result = Err(AuthRedirect(401, "https://shop.curio.market/api/login"))

        assert render(result) == Redirect("https://shop.curio.market/api/login")

    def test_http_error(self):
        notice = render(Err(HttpError(409, "Cannot ship an order that is delivered.")))

        assert notice.title == "Error"
        assert notice.description == "409: Cannot ship an order that is delivered."
        assert notice.variant == DESTRUCTIVE


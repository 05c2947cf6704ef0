from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from rest_framework.test import APIClient

from modules.listings.constants import ListingState
from modules.listings.models import Listing
from modules.orders.constants import OrderStatus
from modules.orders.models import Order, OrderItem
from modules.sellers.models import Seller


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _clear_cache():
    """Throttle counters live in the cache; start every test from zero."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


# ---------------------------------------------------------------------------
# Users and sellers
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_user():
    def _make(username, **extra):
        extra.setdefault("email", f"{username}@example.com")
        return get_user_model().objects.create_user(
            username=username, password="pass1234", **extra
        )

    return _make


@pytest.fixture()
def make_seller(make_user):
    def _make(username, shop_name=None, **extra):
        return Seller.objects.create(
            user=make_user(username),
            shop_name=shop_name or f"{username.title()} Oddities",
            **extra,
        )

    return _make


@pytest.fixture()
def seller(make_seller):
    return make_seller("morticia", "Nevermore Curiosities")


@pytest.fixture()
def other_seller(make_seller):
    return make_seller("lenore", "Lenore's Lockets")


@pytest.fixture()
def buyer(make_user):
    return make_user("wednesday")


@pytest.fixture()
def seller_client(seller):
    client = APIClient()
    client.force_authenticate(user=seller.user)
    return client


@pytest.fixture()
def buyer_client(buyer):
    client = APIClient()
    client.force_authenticate(user=buyer)
    return client


# ---------------------------------------------------------------------------
# Listings and orders
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_listing(seller):
    def _make(title="Jet Mourning Brooch", owner=None, **fields):
        fields.setdefault("price", Decimal("89.00"))
        fields.setdefault("stock_quantity", 10)
        fields.setdefault("low_stock_threshold", 5)
        fields.setdefault("state", ListingState.PUBLISHED)
        return Listing.objects.create(seller=owner or seller, title=title, **fields)

    return _make


@pytest.fixture()
def make_order(seller, buyer):
    def _make(status=OrderStatus.PAID, owner=None, placed_by=None, **fields):
        order = Order.objects.create(
            buyer=placed_by or buyer,
            seller=owner or seller,
            status=status,
            subtotal=Decimal("89.00"),
            shipping_cost=Decimal("6.00"),
            total=Decimal("95.00"),
            shipping_address={"line1": "0001 Cemetery Lane", "city": "Salem"},
            **fields,
        )
        OrderItem.objects.create(
            order=order, title="Jet Mourning Brooch", price=Decimal("89.00"), quantity=1
        )
        return order

    return _make

"""Integration tests for OrderDjangoRepository.

Covers:
- get_by_id loads relations and tolerates malformed IDs.
- get_for_update skips soft-deleted orders.
- Seller and buyer listings with filters.
- Tracking timeline ordering and idempotency keys.
- save writes collected domain events to the outbox.
"""

from __future__ import annotations

from datetime import timedelta

import pytest
from django.utils import timezone

from modules.core.models import OutboxEvent
from modules.orders.constants import OrderStatus
from modules.orders.events import OrderDelivered
from modules.orders.repositories.django_repository import OrderDjangoRepository

pytestmark = pytest.mark.integration


@pytest.fixture()
def repo():
    return OrderDjangoRepository()


class TestRead:
    def test_get_by_id_eager_loads(self, repo, make_order, django_assert_num_queries):
        order = make_order()

        with django_assert_num_queries(2):
            loaded = repo.get_by_id(str(order.id))
            assert loaded.seller.shop_name == "Nevermore Curiosities"
            assert loaded.buyer.username == "wednesday"
            assert [item.title for item in loaded.items.all()] == ["Jet Mourning Brooch"]

    @pytest.mark.parametrize("bad_id", ["not-a-uuid", "00000000-0000-0000-0000-000000000000"])
    def test_get_by_id_returns_none(self, repo, bad_id):
        assert repo.get_by_id(bad_id) is None

    def test_get_for_update_skips_deleted(self, repo, make_order):
        order = make_order()
        order.delete()

        assert repo.get_for_update(order.id) is None

    def test_list_for_seller_is_scoped_and_filtered(
        self, repo, seller, other_seller, make_order
    ):
        shipped = make_order(status=OrderStatus.SHIPPED)
        make_order(status=OrderStatus.PAID)
        make_order(status=OrderStatus.SHIPPED, owner=other_seller)

        assert len(repo.list_for_seller(seller.id)) == 2
        assert repo.list_for_seller(seller.id, {"status": "shipped"}) == [shipped]

    def test_list_for_buyer(self, repo, buyer, make_user, make_order):
        mine = make_order()
        make_order(placed_by=make_user("pugsley"))

        assert repo.list_for_buyer(buyer.id) == [mine]


class TestTrackingTimeline:
    def test_newest_first(self, repo, make_order):
        order = make_order()
        now = timezone.now()
        older = repo.add_tracking_event(
            order, status=OrderStatus.PROCESSING, timestamp=now - timedelta(hours=2)
        )
        newer = repo.add_tracking_event(order, status=OrderStatus.SHIPPED, timestamp=now)

        assert repo.tracking_events(order.id) == [newer, older]
        assert repo.latest_tracking_event(order.id) == newer

    def test_idempotency_key_lookup(self, repo, make_order):
        order = make_order()
        repo.add_tracking_event(
            order, status=OrderStatus.SHIPPED, idempotency_key="shipped:USPS:9400"
        )

        assert repo.has_tracking_event(order.id, "shipped:USPS:9400")
        assert not repo.has_tracking_event(order.id, "shipped:UPS:9400")

    def test_latest_is_none_without_events(self, repo, make_order):
        assert repo.latest_tracking_event(make_order().id) is None


class TestSave:
    def test_save_stores_and_clears_events(self, repo, make_order):
        order = make_order(status=OrderStatus.SHIPPED)
        order.status = OrderStatus.DELIVERED
        order.add_domain_event(
            OrderDelivered(aggregate_id=order.id, seller_id=str(order.seller_id))
        )

        repo.save(order)

        row = OutboxEvent.objects.get(aggregate_id=str(order.id))
        assert row.event_type == "OrderDelivered"
        assert row.topic == "orders"
        assert order.domain_events == []

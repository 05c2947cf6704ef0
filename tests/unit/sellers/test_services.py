"""Unit tests for SellerService and the IsSeller permission."""

from __future__ import annotations

from types import SimpleNamespace

import pytest
from django.contrib.auth.models import AnonymousUser

from modules.sellers.exceptions import InactiveSeller, SellerNotFound
from modules.sellers.models import Seller
from modules.sellers.permissions import IsSeller
from modules.sellers.repositories.django_repository import SellerDjangoRepository
from modules.sellers.services import SellerService

pytestmark = pytest.mark.unit


@pytest.fixture()
def service():
    return SellerService(SellerDjangoRepository())


class TestGetForUser:
    def test_active_seller(self, service, seller):
        assert service.get_for_user(seller.user) == seller

    def test_user_without_shop(self, service, buyer):
        with pytest.raises(SellerNotFound):
            service.get_for_user(buyer)

    def test_suspended_shop(self, service, seller):
        Seller.objects.filter(id=seller.id).update(is_active=False)

        with pytest.raises(InactiveSeller):
            service.get_for_user(seller.user)

    def test_removed_shop(self, service, seller):
        seller.delete()

        with pytest.raises(SellerNotFound):
            service.get_for_user(seller.user)

    def test_slug_from_shop_name(self, seller):
        assert seller.slug == "nevermore-curiosities"


class TestIsSellerPermission:
    def test_resolves_seller_onto_request(self, seller):
        request = SimpleNamespace(user=seller.user)

        assert IsSeller().has_permission(request, view=None)
        assert request.seller == seller

    def test_buyer_is_rejected(self, buyer):
        assert not IsSeller().has_permission(SimpleNamespace(user=buyer), view=None)

    def test_anonymous_is_rejected(self):
        request = SimpleNamespace(user=AnonymousUser())

        assert not IsSeller().has_permission(request, view=None)

"""DRF permission for seller-only endpoints."""

from __future__ import annotations

from rest_framework.permissions import BasePermission

from modules.sellers.exceptions import InactiveSeller, SellerNotFound
from modules.sellers.repositories.django_repository import SellerDjangoRepository
from modules.sellers.services import SellerService


class IsSeller(BasePermission):
    """Grant access only to users with an active seller profile.

    The resolved profile is cached on ``request.seller`` so views do not
    look it up a second time.
    """

    message = "Seller profile required."

    def has_permission(self, request, view) -> bool:
        if not (request.user and request.user.is_authenticated):
            return False
        try:
            request.seller = SellerService(SellerDjangoRepository()).get_for_user(
                request.user
            )
        except (SellerNotFound, InactiveSeller):
            return False
        return True

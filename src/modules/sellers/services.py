"""Seller service layer.

Resolves the seller acting on a request.  Every inventory and fulfilment
use case starts here, so a user without an active shop never reaches them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from modules.sellers.exceptions import InactiveSeller, SellerNotFound

if TYPE_CHECKING:
    from modules.sellers.models import Seller
    from modules.sellers.repositories.interfaces import ISellerRepository

logger = structlog.get_logger(__name__)


class SellerService:
    def __init__(self, repository: ISellerRepository) -> None:
        self._repo = repository

    def get_for_user(self, user: Any) -> Seller:
        """Return the active seller profile of *user*.

        Raises:
            SellerNotFound: the user has no seller profile.
            InactiveSeller: the shop is suspended.
        """
        seller = self._repo.get_by_user(getattr(user, "pk", None))
        if seller is None:
            raise SellerNotFound(f"User {getattr(user, 'pk', None)} has no seller profile.")
        if not seller.is_active:
            logger.warning("seller.inactive_access", seller_id=str(seller.id))
            raise InactiveSeller(f"Seller {seller.id} is inactive.")
        return seller

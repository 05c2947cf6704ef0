"""Seller repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.sellers.models import Seller


class ISellerRepository(IRepository["Seller"]):
    """Repository contract for seller profiles."""

    @abstractmethod
    def get_by_user(self, user_id: Any) -> Optional[Seller]:
        """Retrieve the live seller profile attached to a user."""

"""Django ORM implementation of the Seller repository."""

from __future__ import annotations

from typing import Any, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.sellers.models import Seller
from modules.sellers.repositories.interfaces import ISellerRepository

logger = structlog.get_logger(__name__)


class SellerDjangoRepository(ISellerRepository):
    def get_by_id(self, id: str) -> Optional[Seller]:
        try:
            return Seller.objects.alive().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_by_user(self, user_id: Any) -> Optional[Seller]:
        if user_id is None:
            return None
        return Seller.objects.alive().select_related("user").filter(user_id=user_id).first()

    @transaction.atomic
    def save(self, entity: Seller) -> Seller:
        entity.save()
        logger.info("seller.saved", seller_id=str(entity.id))
        return entity

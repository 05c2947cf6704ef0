"""Seller shop profile.

A seller is an ordinary marketplace user with a shop attached.  Listings
and orders point at the ``Seller`` row, never at the user, so a shop can be
suspended (``is_active=False``) without touching the account.
"""

from __future__ import annotations

import structlog
from django.conf import settings
from django.db import models
from django.utils.text import slugify

from modules.core.models import SoftDeleteModel

logger = structlog.get_logger(__name__)


class Seller(SoftDeleteModel):
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="seller_profile",
    )
    shop_name = models.CharField(max_length=120)
    slug = models.SlugField(max_length=140, unique=True)
    description = models.TextField(blank=True, default="")
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "sellers"
        ordering = ["shop_name"]
        indexes = [
            models.Index(fields=["is_active"], name="sellers_active_idx"),
        ]

    def save(self, *args, **kwargs) -> None:
        is_new = self._state.adding
        if not self.slug:
            self.slug = slugify(self.shop_name)[:140]
        super().save(*args, **kwargs)
        if is_new:
            logger.info("seller.created", seller_id=str(self.id), slug=self.slug)

    def __str__(self) -> str:
        return self.shop_name

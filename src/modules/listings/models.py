"""Listing and ListingVariation models.

Rules implemented here:
- Stock quantities and low-stock thresholds are non-negative integers
  (``PositiveIntegerField`` plus check constraints).
- Price must be greater than zero.
- SKU is optional but normalised to uppercase when present.
- Stock status is derived, never stored: see ``modules.listings.stock``.
"""

from __future__ import annotations

from decimal import Decimal

import structlog
from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils.text import slugify

from modules.core.models import SoftDeleteModel
from modules.listings.constants import ListingState, StockStatus
from modules.listings.stock import classify_stock
from shared.domain.events import DomainEventMixin

logger = structlog.get_logger(__name__)


def default_low_stock_threshold() -> int:
    return settings.DEFAULT_LOW_STOCK_THRESHOLD


class Listing(DomainEventMixin, SoftDeleteModel):
    """A sellable item in a seller's shop.

    ``stock_quantity`` is only changed through ``InventoryService`` (single
    edits and bulk updates) so every change leaves a domain event behind.
    """

    seller = models.ForeignKey(
        "sellers.Seller",
        on_delete=models.PROTECT,
        related_name="listings",
    )
    title = models.CharField(max_length=255)
    slug = models.SlugField(max_length=280, unique=True)
    description = models.TextField(blank=True, default="")
    sku = models.CharField(max_length=64, blank=True, default="")
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    shipping_cost = models.DecimalField(
        max_digits=10, decimal_places=2, default=Decimal("0.00")
    )
    stock_quantity = models.PositiveIntegerField(default=0)
    low_stock_threshold = models.PositiveIntegerField(
        default=default_low_stock_threshold
    )
    state = models.CharField(
        max_length=20,
        choices=ListingState.choices,
        default=ListingState.DRAFT,
    )

    class Meta:
        db_table = "listings"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["seller", "state"], name="listings_seller_state_idx"),
            models.Index(
                fields=["seller", "stock_quantity"], name="listings_seller_stock_idx"
            ),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price__gt=0),
                name="listings_price_positive",
            ),
            models.CheckConstraint(
                condition=models.Q(stock_quantity__gte=0),
                name="listings_stock_non_negative",
            ),
        ]

    @property
    def stock_status(self) -> StockStatus:
        return classify_stock(self.stock_quantity, self.low_stock_threshold)

    def clean(self) -> None:
        super().clean()
        if self.sku:
            self.sku = self.sku.strip().upper()
        if self.price is not None and self.price <= 0:
            raise ValidationError({"price": "Price must be greater than zero."})

    def save(self, *args, **kwargs) -> None:
        if self.sku:
            self.sku = self.sku.strip().upper()
        if not self.slug:
            self.slug = f"{slugify(self.title)[:240]}-{str(self.id)[-8:]}"
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.title} ({self.stock_quantity} in stock)"


class ListingVariation(SoftDeleteModel):
    """A variant of a listing (size, finish...) with its own stock count."""

    listing = models.ForeignKey(
        "listings.Listing",
        on_delete=models.CASCADE,
        related_name="variations",
    )
    name = models.CharField(max_length=120)
    sku = models.CharField(max_length=64, blank=True, default="")
    stock_quantity = models.PositiveIntegerField(default=0)
    price_adjustment = models.DecimalField(
        max_digits=10, decimal_places=2, default=Decimal("0.00")
    )
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "listing_variations"
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(stock_quantity__gte=0),
                name="listing_variations_stock_non_negative",
            ),
        ]

    def save(self, *args, **kwargs) -> None:
        if self.sku:
            self.sku = self.sku.strip().upper()
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.listing.title} / {self.name}"

"""Order, OrderItem and TrackingEvent models.

Rules implemented here:
- Orders are created at checkout and afterwards only move through the
  workflow in ``modules.orders.workflow``; they are never deleted by the
  API (soft delete is inherited for admin use only).
- ``buyer`` owns the order for reading; ``seller`` owns the shipping and
  tracking fields.
- OrderItem snapshots the listing title and price at purchase time.
- TrackingEvent rows are append-only; ``idempotency_key`` is unique per
  order so re-sending the same shipment does not duplicate an event.
"""

from __future__ import annotations

import secrets
from decimal import Decimal
from typing import Any

import structlog
from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from modules.core.models import BaseModel, SoftDeleteModel
from modules.orders import workflow
from modules.orders.constants import ORDER_NUMBER_MAX_RETRIES, Carrier, OrderStatus
from shared.domain.events import DomainEventMixin

logger = structlog.get_logger(__name__)


class Order(DomainEventMixin, SoftDeleteModel):
    """Order aggregate root.

    ``order_number`` is a human-readable identifier generated on first save
    (``ORD-YYYYMMDD-XXXXXX``); the UUIDv7 ``id`` is used by the API.
    """

    order_number = models.CharField(max_length=20, unique=True, editable=False)
    buyer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="orders",
    )
    seller = models.ForeignKey(
        "sellers.Seller",
        on_delete=models.PROTECT,
        related_name="orders",
    )
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
    )
    subtotal = models.DecimalField(
        max_digits=10, decimal_places=2, default=Decimal("0.00")
    )
    shipping_cost = models.DecimalField(
        max_digits=10, decimal_places=2, default=Decimal("0.00")
    )
    platform_fee = models.DecimalField(
        max_digits=10, decimal_places=2, default=Decimal("0.00")
    )
    total = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    shipping_address = models.JSONField(default=dict, blank=True)
    notes = models.TextField(blank=True, default="")
    tracking_number = models.CharField(max_length=100, blank=True, default="")
    carrier = models.CharField(
        max_length=20, choices=Carrier.choices, blank=True, default=""
    )
    shipped_at = models.DateTimeField(null=True, blank=True, default=None)
    delivered_at = models.DateTimeField(null=True, blank=True, default=None)
    cancelled_at = models.DateTimeField(null=True, blank=True, default=None)
    cancellation_reason = models.TextField(blank=True, default="")

    class Meta:
        db_table = "orders"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["seller", "status"], name="orders_seller_status_idx"),
            models.Index(fields=["buyer", "-created_at"], name="orders_buyer_created_idx"),
        ]

    # ------------------------------------------------------------------
    # Workflow helpers
    # ------------------------------------------------------------------

    @property
    def is_terminal(self) -> bool:
        return workflow.is_terminal(self)

    def can_transition_to(self, new_status: str) -> bool:
        return workflow.can_transition(self.status, new_status)

    def is_visible_to(self, user) -> bool:
        """Buyers read their own orders; sellers read orders placed with them."""
        if user is None or not user.is_authenticated:
            return False
        if self.buyer_id == user.id:
            return True
        seller = getattr(user, "seller_profile", None)
        return seller is not None and self.seller_id == seller.id

    # ------------------------------------------------------------------
    # Order number generation
    # ------------------------------------------------------------------

    @staticmethod
    def generate_order_number() -> str:
        now = timezone.now()
        suffix = secrets.token_hex(3).upper()
        return f"ORD-{now:%Y%m%d}-{suffix}"

    def save(self, *args: Any, **kwargs: Any) -> None:
        if not self.order_number:
            for _ in range(ORDER_NUMBER_MAX_RETRIES):
                candidate = self.generate_order_number()
                if not Order.objects.filter(order_number=candidate).exists():
                    self.order_number = candidate
                    break
            else:
                raise RuntimeError(
                    f"Failed to generate unique order_number after "
                    f"{ORDER_NUMBER_MAX_RETRIES} attempts"
                )
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.order_number} ({self.status})"


class OrderItem(BaseModel):
    """Line item with a snapshot of the listing at purchase time.

    ``listing`` is kept nullable so an order survives its listing being
    purged; ``title`` and ``price`` never change after checkout.
    """

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="items",
    )
    listing = models.ForeignKey(
        "listings.Listing",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="order_items",
    )
    title = models.CharField(max_length=255)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    quantity = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    image = models.URLField(max_length=500, blank=True, default="")

    class Meta:
        db_table = "order_items"
        ordering = ["created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="order_items_quantity_positive",
            ),
        ]

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity

    def __str__(self) -> str:
        return f"{self.title} x{self.quantity}"


class TrackingEvent(BaseModel):
    """Append-only shipment tracking entry.

    The most recent event (by ``timestamp``) drives the buyer's progress
    bar.  ``created_by`` is ``None`` for system generated events.
    """

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="tracking_events",
    )
    status = models.CharField(max_length=20, choices=OrderStatus.choices)
    location = models.CharField(max_length=255, blank=True, default="")
    description = models.TextField(blank=True, default="")
    notes = models.TextField(blank=True, default="")
    carrier = models.CharField(
        max_length=20, choices=Carrier.choices, blank=True, default=""
    )
    tracking_number = models.CharField(max_length=100, blank=True, default="")
    timestamp = models.DateTimeField(default=timezone.now)
    idempotency_key = models.CharField(  # noqa: DJ01
        max_length=255, null=True, blank=True, default=None
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    class Meta:
        db_table = "order_tracking_events"
        ordering = ["-timestamp", "-created_at"]
        indexes = [
            models.Index(
                fields=["order", "-timestamp"],
                name="tracking_order_timestamp_idx",
            ),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["order", "idempotency_key"],
                name="tracking_order_idempotency_key_uniq",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.order} : {self.status} @ {self.timestamp:%Y-%m-%d %H:%M}"

"""Listing domain constants: publication states and stock classification."""

from django.db import models


class ListingState(models.TextChoices):
    DRAFT = "draft", "Draft"
    PUBLISHED = "published", "Published"
    SUSPENDED = "suspended", "Suspended"


class StockStatus(models.TextChoices):
    IN_STOCK = "in_stock", "In Stock"
    LOW_STOCK = "low_stock", "Low Stock"
    OUT_OF_STOCK = "out_of_stock", "Out of Stock"


class StockFilter(models.TextChoices):
    ALL = "all", "All"
    LOW = "low", "Low stock"
    OUT = "out", "Out of stock"


# How bad a classification is; a move to a higher rank raises a stock alert.
STOCK_STATUS_SEVERITY: dict[str, int] = {
    StockStatus.IN_STOCK: 0,
    StockStatus.LOW_STOCK: 1,
    StockStatus.OUT_OF_STOCK: 2,
}

# Bulk update wire field -> model attribute.
BULK_UPDATE_FIELDS: dict[str, str] = {
    "state": "state",
    "lowStockThreshold": "low_stock_threshold",
}

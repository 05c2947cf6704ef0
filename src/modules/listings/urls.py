"""Seller inventory URL configuration."""

from __future__ import annotations

from django.urls import path

from modules.listings.views import InventoryViewSet

urlpatterns = [
    path(
        "seller/listings",
        InventoryViewSet.as_view({"get": "list"}),
        name="seller-listings",
    ),
    path(
        "seller/listings/bulk",
        InventoryViewSet.as_view({"put": "bulk_update"}),
        name="seller-listings-bulk",
    ),
    path(
        "seller/low-stock",
        InventoryViewSet.as_view({"get": "low_stock"}),
        name="seller-low-stock",
    ),
    path(
        "seller/inventory/summary",
        InventoryViewSet.as_view({"get": "summary"}),
        name="seller-inventory-summary",
    ),
    path(
        "listings/<uuid:pk>/stock",
        InventoryViewSet.as_view({"put": "update_stock"}),
        name="listing-stock",
    ),
    path(
        "listings/<uuid:pk>/variations/<uuid:variation_pk>/stock",
        InventoryViewSet.as_view({"put": "update_variation_stock"}),
        name="listing-variation-stock",
    ),
]

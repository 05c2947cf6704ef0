"""Listing DRF serializers (output only).

Input is validated by the pydantic DTOs in ``dtos.py``; these serializers
render listings in the camelCase shape the seller console reads.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.listings.models import Listing, ListingVariation


class ListingVariationSerializer(serializers.ModelSerializer):
    stockQuantity = serializers.IntegerField(source="stock_quantity", read_only=True)
    priceAdjustment = serializers.DecimalField(
        source="price_adjustment", max_digits=10, decimal_places=2, read_only=True
    )
    isActive = serializers.BooleanField(source="is_active", read_only=True)

    class Meta:
        model = ListingVariation
        fields = ["id", "name", "sku", "stockQuantity", "priceAdjustment", "isActive"]
        read_only_fields = fields


class ListingSerializer(serializers.ModelSerializer):
    """Listing with derived stock status and its live variations."""

    stockQuantity = serializers.IntegerField(source="stock_quantity", read_only=True)
    lowStockThreshold = serializers.IntegerField(
        source="low_stock_threshold", read_only=True
    )
    shippingCost = serializers.DecimalField(
        source="shipping_cost", max_digits=10, decimal_places=2, read_only=True
    )
    stockStatus = serializers.CharField(source="stock_status.value", read_only=True)
    stockStatusLabel = serializers.CharField(source="stock_status.label", read_only=True)
    variations = ListingVariationSerializer(many=True, read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Listing
        fields = [
            "id",
            "title",
            "slug",
            "sku",
            "price",
            "shippingCost",
            "stockQuantity",
            "lowStockThreshold",
            "state",
            "stockStatus",
            "stockStatusLabel",
            "variations",
            "updatedAt",
        ]
        read_only_fields = fields


class InventorySummarySerializer(serializers.Serializer):
    totalProducts = serializers.IntegerField(source="total", read_only=True)
    inStock = serializers.IntegerField(source="in_stock", read_only=True)
    lowStock = serializers.IntegerField(source="low_stock", read_only=True)
    outOfStock = serializers.IntegerField(source="out_of_stock", read_only=True)

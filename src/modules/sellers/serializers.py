from __future__ import annotations

from rest_framework import serializers

from modules.sellers.models import Seller


class SellerSerializer(serializers.ModelSerializer):
    shopName = serializers.CharField(source="shop_name", read_only=True)
    isActive = serializers.BooleanField(source="is_active", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Seller
        fields = ["id", "shopName", "slug", "description", "isActive", "createdAt"]
        read_only_fields = fields

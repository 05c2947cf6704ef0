"""Seller URL configuration."""

from __future__ import annotations

from django.urls import path

from modules.sellers.views import SellerProfileView

urlpatterns = [
    path("seller/profile", SellerProfileView.as_view(), name="seller-profile"),
]

"""Order URL configuration."""

from __future__ import annotations

from django.urls import path

from modules.orders.views import OrderViewSet

urlpatterns = [
    path(
        "seller/orders",
        OrderViewSet.as_view({"get": "seller_orders"}),
        name="seller-orders",
    ),
    path("orders", OrderViewSet.as_view({"get": "list"}), name="order-list"),
    path(
        "orders/<uuid:pk>",
        OrderViewSet.as_view({"get": "retrieve"}),
        name="order-detail",
    ),
    path(
        "orders/<uuid:pk>/ship",
        OrderViewSet.as_view({"post": "ship"}),
        name="order-ship",
    ),
    path(
        "orders/<uuid:pk>/deliver",
        OrderViewSet.as_view({"post": "deliver"}),
        name="order-deliver",
    ),
    path(
        "orders/<uuid:pk>/tracking",
        OrderViewSet.as_view({"get": "tracking", "post": "add_tracking"}),
        name="order-tracking",
    ),
    path(
        "orders/<uuid:pk>/cancel",
        OrderViewSet.as_view({"post": "cancel"}),
        name="order-cancel",
    ),
]

"""Order API views.

Exposes ``OrderWorkflowService`` over HTTP.  Domain exceptions are
translated into DRF exceptions (404 not found, 403 not yours, 409 invalid
transition) and rendered by the project exception handler; the views
never swallow generic exceptions.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError
from rest_framework.permissions import BasePermission, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.core.exceptions import Conflict, validation_error_from
from modules.orders.dtos import (
    CancelOrderDTO,
    OrderQueryDTO,
    ShipOrderDTO,
    TrackingUpdateDTO,
)
from modules.orders.exceptions import (
    InvalidOrderStatus,
    MissingShippingInfo,
    OrderAccessDenied,
    OrderNotFound,
)
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import OrderSerializer, TrackingEventSerializer
from modules.orders.services import OrderWorkflowService
from modules.sellers.permissions import IsSeller

SELLER_ACTIONS = {"seller_orders", "ship", "deliver", "add_tracking"}
WRITE_ACTIONS = {"ship", "deliver", "add_tracking", "cancel"}


@contextmanager
def order_errors() -> Iterator[None]:
    """Translate workflow exceptions raised inside the block into HTTP errors."""
    try:
        yield
    except OrderNotFound as exc:
        raise NotFound("Order not found.") from exc
    except OrderAccessDenied as exc:
        raise PermissionDenied("You do not have access to this order.") from exc
    except InvalidOrderStatus as exc:
        raise Conflict(str(exc)) from exc
    except MissingShippingInfo as exc:
        raise ValidationError({"non_field_errors": [str(exc)]}) from exc
    except PydanticValidationError as exc:
        raise validation_error_from(exc) from exc


class OrderViewSet(GenericViewSet):
    """Order reads for buyers and sellers, fulfilment actions for sellers.

    Does **not** extend ``ModelViewSet``; all ORM access goes through the
    service/repository layer.
    """

    queryset = Order.objects.none()
    serializer_class = OrderSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderWorkflowService(order_repository=OrderDjangoRepository())

    def get_permissions(self) -> list[BasePermission]:
        if self.action in SELLER_ACTIONS:
            return [IsAuthenticated(), IsSeller()]
        return [IsAuthenticated()]

    def get_throttles(self) -> list[BaseThrottle]:
        self.throttle_scope = "order_actions" if self.action in WRITE_ACTIONS else None
        return super().get_throttles()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/orders (orders placed by the caller)"""
        orders = self._service.list_buyer_orders(request.user)
        return Response(OrderSerializer(orders, many=True).data)

    def seller_orders(self, request: Request) -> Response:
        """GET /api/seller/orders?status="""
        with order_errors():
            query = OrderQueryDTO(status=request.query_params.get("status") or None)
        orders = self._service.list_seller_orders(request.seller, query)
        return Response(OrderSerializer(orders, many=True).data)

    def retrieve(self, request: Request, pk=None) -> Response:
        """GET /api/orders/{pk}"""
        with order_errors():
            order = self._service.get_order(request.user, pk)
        context = {"progress": self._service.order_progress(order)}
        return Response(OrderSerializer(order, context=context).data)

    def tracking(self, request: Request, pk=None) -> Response:
        """GET /api/orders/{pk}/tracking (most recent first)"""
        with order_errors():
            events = self._service.tracking_history(request.user, pk)
        return Response(TrackingEventSerializer(events, many=True).data)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def ship(self, request: Request, pk=None) -> Response:
        """POST /api/orders/{pk}/ship  body ``{"trackingNumber", "carrier"}``"""
        with order_errors():
            dto = ShipOrderDTO.model_validate(request.data)
            order = self._service.ship_order(request.seller, pk, dto)
        return Response(OrderSerializer(order).data)

    def deliver(self, request: Request, pk=None) -> Response:
        """POST /api/orders/{pk}/deliver  body ``{}``"""
        with order_errors():
            order = self._service.mark_delivered(request.seller, pk)
        return Response(OrderSerializer(order).data)

    def add_tracking(self, request: Request, pk=None) -> Response:
        """POST /api/orders/{pk}/tracking

        Body ``{"status", "notes"?, "location"?, "trackingNumber"?, "carrier"?}``.
        """
        with order_errors():
            dto = TrackingUpdateDTO.model_validate(request.data)
            event = self._service.add_tracking_event(request.seller, pk, dto)
        return Response(
            TrackingEventSerializer(event).data, status=status.HTTP_201_CREATED
        )

    def cancel(self, request: Request, pk=None) -> Response:
        """POST /api/orders/{pk}/cancel  body ``{"reason"?}``"""
        with order_errors():
            dto = CancelOrderDTO.model_validate(request.data or {})
            order = self._service.cancel_order(request.user, pk, dto)
        return Response(OrderSerializer(order).data)

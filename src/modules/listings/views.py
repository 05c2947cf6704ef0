"""Seller inventory API views.

Exposes ``InventoryService`` over HTTP.  Request bodies and query strings
are validated by the pydantic DTOs; domain exceptions are translated into
DRF exceptions so every error leaves through the project exception
handler in the same shape.
"""

from __future__ import annotations

from pydantic import ValidationError as PydanticValidationError
from rest_framework.exceptions import NotFound
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.core.exceptions import validation_error_from
from modules.listings.dtos import BulkUpdateDTO, ListingQueryDTO, UpdateStockDTO
from modules.listings.exceptions import (
    InvalidBulkUpdate,
    ListingNotFound,
    VariationNotFound,
)
from modules.listings.models import Listing
from modules.listings.repositories.django_repository import ListingDjangoRepository
from modules.listings.serializers import (
    InventorySummarySerializer,
    ListingSerializer,
    ListingVariationSerializer,
)
from modules.listings.services import InventoryService
from modules.sellers.permissions import IsSeller


class InventoryViewSet(GenericViewSet):
    """Seller inventory: listing queries, stock edits and bulk updates.

    Does **not** extend ``ModelViewSet``; all ORM access goes through the
    service/repository layer.
    """

    queryset = Listing.objects.none()
    serializer_class = ListingSerializer
    permission_classes = [IsAuthenticated, IsSeller]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = InventoryService(listing_repository=ListingDjangoRepository())

    def get_throttles(self) -> list[BaseThrottle]:
        self.throttle_scope = "bulk_update" if self.action == "bulk_update" else None
        return super().get_throttles()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/seller/listings?search=&state=&stock=all|low|out"""
        params = request.query_params
        try:
            query = ListingQueryDTO(
                search=params.get("search", ""),
                state=params.get("state") or None,
                stock=params.get("stock") or "all",
            )
        except PydanticValidationError as exc:
            raise validation_error_from(exc) from exc

        listings = self._service.list_seller_listings(request.seller, query)
        return Response(ListingSerializer(listings, many=True).data)

    def low_stock(self, request: Request) -> Response:
        """GET /api/seller/low-stock"""
        listings = self._service.low_stock_listings(request.seller)
        return Response(ListingSerializer(listings, many=True).data)

    def summary(self, request: Request) -> Response:
        """GET /api/seller/inventory/summary"""
        summary = self._service.inventory_summary(request.seller)
        return Response(InventorySummarySerializer(summary).data)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def update_stock(self, request: Request, pk=None) -> Response:
        """PUT /api/listings/{pk}/stock  body ``{"quantity": n}``"""
        dto = self._stock_dto(request)
        try:
            listing = self._service.update_stock(request.seller, pk, dto)
        except ListingNotFound as exc:
            raise NotFound("Listing not found.") from exc
        return Response(ListingSerializer(listing).data)

    def update_variation_stock(
        self, request: Request, pk=None, variation_pk=None
    ) -> Response:
        """PUT /api/listings/{pk}/variations/{variation_pk}/stock"""
        dto = self._stock_dto(request)
        try:
            variation = self._service.update_variation_stock(
                request.seller, pk, variation_pk, dto
            )
        except ListingNotFound as exc:
            raise NotFound("Listing not found.") from exc
        except VariationNotFound as exc:
            raise NotFound("Variation not found.") from exc
        return Response(ListingVariationSerializer(variation).data)

    def bulk_update(self, request: Request) -> Response:
        """PUT /api/seller/listings/bulk  body ``{"updates": [{"id", field: value}]}``"""
        try:
            dto = BulkUpdateDTO.model_validate(request.data)
        except PydanticValidationError as exc:
            raise validation_error_from(exc) from exc

        try:
            listings = self._service.bulk_update(request.seller, dto)
        except InvalidBulkUpdate as exc:
            raise NotFound(str(exc)) from exc
        return Response(
            {
                "updated": len(listings),
                "listings": ListingSerializer(listings, many=True).data,
            }
        )

    @staticmethod
    def _stock_dto(request: Request) -> UpdateStockDTO:
        try:
            return UpdateStockDTO.model_validate(request.data)
        except PydanticValidationError as exc:
            raise validation_error_from(exc) from exc

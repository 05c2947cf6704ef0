"""Seller profile endpoint."""

from __future__ import annotations

from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.sellers.permissions import IsSeller
from modules.sellers.serializers import SellerSerializer


class SellerProfileView(APIView):
    """``GET /api/seller/profile``"""

    permission_classes = [IsAuthenticated, IsSeller]

    def get(self, request: Request) -> Response:
        return Response(SellerSerializer(request.seller).data)

import time
from typing import Any, Dict

import structlog
from django.core.cache import cache
from django.db import connections
from django.http import HttpRequest, JsonResponse
from django.utils import timezone
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

logger = structlog.get_logger()


def health_check(request: HttpRequest) -> JsonResponse:
    services: Dict[str, Dict[str, Any]] = {}
    overall_healthy = True

    try:
        start = time.monotonic()
        conn = connections["default"]
        conn.ensure_connection()
        with conn.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
        services["database"] = {
            "status": "up",
            "response_time_ms": round((time.monotonic() - start) * 1000, 2),
        }
    except Exception:
        services["database"] = {"status": "down"}
        overall_healthy = False
        logger.exception("health_check_db_failure")

    try:
        start = time.monotonic()
        cache.set("_health_check", "ok", 10)
        if cache.get("_health_check") != "ok":
            raise ConnectionError("Cache read failed")
        services["cache"] = {
            "status": "up",
            "response_time_ms": round((time.monotonic() - start) * 1000, 2),
        }
    except Exception:
        services["cache"] = {"status": "down"}
        overall_healthy = False
        logger.exception("health_check_cache_failure")

    state = "healthy" if overall_healthy else "unhealthy"
    logger.info("health_check_completed", status=state)

    return JsonResponse(
        {
            "status": state,
            "timestamp": timezone.now().isoformat(),
            "services": services,
        },
        status=200 if overall_healthy else 503,
    )


class CurrentUserView(APIView):
    """``GET /api/auth/user`` - who the session or bearer token belongs to.

    ``isSeller`` lets the client decide whether to show seller tooling.
    """

    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        user = request.user
        seller = getattr(user, "seller_profile", None)
        return Response(
            {
                "id": str(user.pk),
                "username": user.get_username(),
                "email": user.email,
                "isSeller": bool(seller and seller.is_active),
            }
        )

"""Project-wide DRF exception handler.

Every error leaves the API with the same body::

    {
        "type": "validation_error" | "client_error" | "server_error",
        "detail": "<first message>",
        "errors": [{"code": ..., "detail": ..., "attr": ...}, ...]
    }

401/403 responses served to non-local hosts additionally carry
``login_url`` and an ``X-Login-Redirect`` header so the browser client can
send the user to the login flow instead of showing an error.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.conf import settings
from pydantic import ValidationError as PydanticValidationError
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = structlog.get_logger(__name__)

LOGIN_REDIRECT_HEADER = "X-Login-Redirect"


def api_exception_handler(exc: Exception, context: Dict[str, Any]) -> Optional[Response]:
    response = exception_handler(exc, context)
    if response is None:
        return None  # unhandled: let Django turn it into a 500

    errors = _flatten(response.data)
    response.data = {
        "type": _error_type(exc, response.status_code),
        "detail": errors[0]["detail"] if errors else "",
        "errors": errors,
    }

    if response.status_code in (
        status.HTTP_401_UNAUTHORIZED,
        status.HTTP_403_FORBIDDEN,
    ):
        request = context.get("request")
        if request is not None and not is_local_host(request.get_host()):
            response.data["login_url"] = settings.LOGIN_URL_PATH
            response[LOGIN_REDIRECT_HEADER] = settings.LOGIN_URL_PATH
        logger.warning(
            "api.auth_rejected",
            status_code=response.status_code,
            path=getattr(request, "path", ""),
        )
    return response


def is_local_host(host: str) -> bool:
    """``True`` for local or development hosts, where no redirect is hinted."""
    hostname = host.split(":", 1)[0].lower()
    if hostname in settings.LOCAL_HOSTS:
        return True
    return any(hostname.endswith(suffix) for suffix in settings.DEV_HOST_SUFFIXES)


def _error_type(exc: Exception, status_code: int) -> str:
    if isinstance(exc, exceptions.ValidationError):
        return "validation_error"
    if status_code >= 500:
        return "server_error"
    return "client_error"


def _flatten(data: Any, attr: Optional[str] = None) -> List[Dict[str, Any]]:
    """Turn DRF's nested ``ErrorDetail`` structures into a flat error list."""
    if isinstance(data, dict):
        items: List[Dict[str, Any]] = []
        for key, value in data.items():
            if key == "detail" and attr is None:
                items.extend(_flatten(value, None))
            else:
                nested = key if attr is None else f"{attr}.{key}"
                items.extend(_flatten(value, nested))
        return items
    if isinstance(data, list):
        items = []
        for index, value in enumerate(data):
            nested = attr
            if isinstance(value, (dict, list)):
                nested = f"{attr}.{index}" if attr else str(index)
            items.extend(_flatten(value, nested))
        return items
    return [
        {
            "code": getattr(data, "code", "error"),
            "detail": str(data),
            "attr": attr,
        }
    ]


class Conflict(exceptions.APIException):
    """The request is valid but clashes with the resource's current state."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = "Request conflicts with the current state of the resource."
    default_code = "conflict"


def validation_error_from(exc: PydanticValidationError) -> exceptions.ValidationError:
    """Re-raise a DTO validation failure as a DRF ``ValidationError``.

    Field locations become dotted keys (``updates.0.lowStockThreshold``);
    model-level errors land under ``non_field_errors``.
    """
    detail: Dict[str, List[str]] = {}
    for error in exc.errors():
        key = ".".join(str(part) for part in error["loc"]) or "non_field_errors"
        ctx_error = error.get("ctx", {}).get("error")
        message = str(ctx_error) if ctx_error is not None else error["msg"]
        detail.setdefault(key, []).append(message)
    return exceptions.ValidationError(detail)

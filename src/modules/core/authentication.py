"""Extra DRF authentication backends.

The marketplace front end may receive its access token in the URL (e.g.
after an OAuth callback, ``/seller/orders?token=...``) before it has had a
chance to store it.  ``QueryParamJWTAuthentication`` accepts that token with
the same SimpleJWT validation used for the ``Authorization`` header, so the
resolution order configured in settings is: bearer header, URL parameter,
session cookie.
"""

import structlog
from rest_framework_simplejwt.authentication import JWTAuthentication

logger = structlog.get_logger(__name__)

TOKEN_QUERY_PARAM = "token"


class QueryParamJWTAuthentication(JWTAuthentication):
    """Authenticate with a SimpleJWT access token passed as ``?token=``."""

    def authenticate(self, request):
        """Return ``(user, validated_token)`` or ``None`` (no credentials)."""
        if self.get_header(request) is not None:
            return None  # the header backend owns this request

        raw_token = request.query_params.get(TOKEN_QUERY_PARAM)
        if not raw_token:
            return None

        validated_token = self.get_validated_token(raw_token.encode())
        user = self.get_user(validated_token)
        logger.info("jwt_authenticated", source="query_param", user_id=str(user.pk))
        return user, validated_token

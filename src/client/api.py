"""HTTP transport for the seller console.

``ApiClient.request`` performs one call and turns the response into data
or a ``ClientError``; ``ApiClient.query`` serves GETs through the injected
``QueryCache``.  Nothing is retried.
"""

from __future__ import annotations

from typing import Any, Hashable, Optional

import requests
import structlog

from client.cache import QueryCache
from client.config import ClientConfig
from client.errors import AuthRedirect, HttpError, NetworkError

logger = structlog.get_logger(__name__)

AUTH_FAILURE_STATUSES = (401, 403)


class ApiClient:
    def __init__(
        self,
        config: ClientConfig,
        cache: Optional[QueryCache] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.config = config
        self.cache = cache if cache is not None else QueryCache()
        self._session = session or requests.Session()

    def request(self, method: str, path: str, json: Any = None) -> Any:
        """Send one request and return the decoded JSON body.

        Empty and non-JSON bodies (``204 No Content``) decode to ``{}``.

        Raises:
            AuthRedirect: 401/403 from a non-local host.
            HttpError: any other non-2xx status, as ``"<status>: <body>"``.
            NetworkError: no response at all.
        """
        url = self.config.url_for(path)
        log = logger.bind(method=method, url=url)
        try:
            response = self._session.request(
                method,
                url,
                json=json,
                headers=self._headers(),
                timeout=self.config.timeout,
            )
        except requests.RequestException as exc:
            log.warning("api.request_failed", error=str(exc))
            raise NetworkError(str(exc)) from exc

        self._raise_for_status(response)
        log.debug("api.request_completed", status_code=response.status_code)
        return self._decode(response)

    def query(self, *key: Hashable, on_unauthorized: str = "raise") -> Any:
        """GET the URL made of *key* parts joined by ``/``, cached under *key*.

        With ``on_unauthorized="none"`` a 401/403 on a local host yields
        ``None`` instead of raising.
        """
        cached = self.cache.get(key)
        if cached is not None:
            return cached
        try:
            data = self.request("GET", "/".join(str(part) for part in key))
        except HttpError as exc:
            if on_unauthorized == "none" and exc.status in AUTH_FAILURE_STATUSES:
                return None
            raise
        self.cache.set(key, data)
        return data

    def invalidate(self, *prefix: Hashable) -> int:
        return self.cache.invalidate(prefix)

    def _headers(self) -> dict:
        if self.config.token:
            return {"Authorization": f"Bearer {self.config.token}"}
        return {}

    def _raise_for_status(self, response: requests.Response) -> None:
        if response.ok:
            return
        status = response.status_code
        if status in AUTH_FAILURE_STATUSES and not self.config.is_local:
            logger.info("api.auth_redirect", status_code=status)
            raise AuthRedirect(status, self.config.login_url)
        raise HttpError(status, response.text or response.reason or "")

    @staticmethod
    def _decode(response: requests.Response) -> Any:
        if response.status_code == 204 or not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            return {}

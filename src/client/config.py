"""Client configuration."""

from __future__ import annotations

from typing import Optional, Tuple
from urllib.parse import parse_qs, urljoin, urlparse

from pydantic import BaseModel, ConfigDict, field_validator


class ClientConfig(BaseModel):
    """Where the API lives and how to authenticate against it.

    Without a ``token`` requests rely on the session cookie held by the
    ``requests.Session``.  ``timeout`` is ``None`` by default: requests
    wait until the server answers.
    """

    model_config = ConfigDict(frozen=True)

    base_url: str = "http://localhost:8000"
    token: Optional[str] = None
    timeout: Optional[float] = None
    login_path: str = "/api/login"
    local_hosts: Tuple[str, ...] = ("localhost", "127.0.0.1")
    dev_host_suffixes: Tuple[str, ...] = (".replit.dev", ".local")

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @classmethod
    def from_location(
        cls, url: str, stored_token: Optional[str] = None, **overrides
    ) -> ClientConfig:
        """Config for a page URL; a ``?token=`` parameter beats a stored token."""
        parsed = urlparse(url)
        token = parse_qs(parsed.query).get("token", [None])[0] or stored_token
        return cls(
            base_url=f"{parsed.scheme}://{parsed.netloc}", token=token, **overrides
        )

    @property
    def hostname(self) -> str:
        return (urlparse(self.base_url).hostname or "").lower()

    @property
    def is_local(self) -> bool:
        """Local and development hosts never get redirected to the login page."""
        host = self.hostname
        return host in self.local_hosts or any(
            host.endswith(suffix) for suffix in self.dev_host_suffixes
        )

    @property
    def login_url(self) -> str:
        return urljoin(self.base_url + "/", self.login_path.lstrip("/"))

    def url_for(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

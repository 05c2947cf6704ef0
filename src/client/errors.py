"""Client error taxonomy.

- ``ValidationFailed``: rejected locally, no request was sent.
- ``HttpError``: the server answered with a non-2xx status.
- ``AuthRedirect``: 401/403 outside local hosts; the user must log in.
- ``NetworkError``: the request never got an answer.
"""

from __future__ import annotations


class ClientError(Exception):
    """Base class for every failure the client reports."""


class ValidationFailed(ClientError):
    def __init__(self, title: str, description: str = "") -> None:
        super().__init__(f"{title}: {description}" if description else title)
        self.title = title
        self.description = description


class HttpError(ClientError):
    def __init__(self, status: int, body: str) -> None:
        super().__init__(f"{status}: {body}")
        self.status = status
        self.body = body


class AuthRedirect(ClientError):
    def __init__(self, status: int, login_url: str) -> None:
        super().__init__(f"{status}: authentication required")
        self.status = status
        self.login_url = login_url


class NetworkError(ClientError):
    pass

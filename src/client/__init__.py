"""Seller console client for the marketplace HTTP API."""

from client.api import ApiClient
from client.cache import QueryCache
from client.config import ClientConfig

__all__ = ["ApiClient", "ClientConfig", "QueryCache"]

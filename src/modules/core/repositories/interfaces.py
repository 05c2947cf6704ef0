"""Generic repository interface.

``IRepository[T]`` is the base contract every module repository extends.
Services depend on these abstractions and receive the Django ORM
implementations through their constructors.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class IRepository(ABC, Generic[T]):
    """Base repository contract for entity ``T`` (a listing, an order...)."""

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[T]:
        """Retrieve an entity by primary key, ``None`` when missing or invalid."""

    @abstractmethod
    def save(self, entity: T) -> T:
        """Persist (create or update) an entity."""

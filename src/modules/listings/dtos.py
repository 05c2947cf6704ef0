"""Listing DTOs for the Service Layer.

Pydantic v2 models shared by the API layer and ``InventoryService``.
DTOs are immutable (``frozen=True``).  Wire names are camelCase, matching
the JSON the marketplace front end sends (``lowStockThreshold``).

- ``UpdateStockDTO``: single-listing or single-variation stock edit.
- ``BulkListingUpdateDTO`` / ``BulkUpdateDTO``: one bulk update request.
- ``ListingQueryDTO``: seller listing filters.
"""

from __future__ import annotations

from typing import Any, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from modules.listings.constants import BULK_UPDATE_FIELDS, ListingState, StockFilter

# Upper bound of the PositiveIntegerField columns holding stock counts.
MAX_STOCK_QUANTITY = 2_147_483_647


def _reject_bool(value: Any) -> Any:
    if isinstance(value, bool):
        raise ValueError("Expected an integer, not a boolean.")
    return value


class UpdateStockDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    quantity: int = Field(le=MAX_STOCK_QUANTITY)

    @field_validator("quantity", mode="before")
    @classmethod
    def quantity_must_not_be_bool(cls, v: Any) -> Any:
        return _reject_bool(v)

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Stock quantity cannot be negative.")
        return v


class BulkListingUpdateDTO(BaseModel):
    """Changes for one listing in a bulk request.

    Only ``state`` and ``lowStockThreshold`` may be bulk edited; at least
    one of them must be present.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    id: UUID
    state: Optional[ListingState] = None
    low_stock_threshold: Optional[int] = Field(
        default=None, alias="lowStockThreshold", le=MAX_STOCK_QUANTITY
    )

    @field_validator("low_stock_threshold", mode="before")
    @classmethod
    def threshold_must_not_be_bool(cls, v: Any) -> Any:
        return _reject_bool(v)

    @field_validator("low_stock_threshold")
    @classmethod
    def threshold_must_be_non_negative(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 0:
            raise ValueError("Low stock threshold cannot be negative.")
        return v

    @model_validator(mode="after")
    def must_change_something(self):
        if self.state is None and self.low_stock_threshold is None:
            raise ValueError(
                f"Each update needs one of: {', '.join(BULK_UPDATE_FIELDS)}."
            )
        return self

    def changes(self) -> dict[str, Any]:
        """Model attribute -> new value for every supplied field."""
        changes: dict[str, Any] = {}
        if self.state is not None:
            changes["state"] = self.state
        if self.low_stock_threshold is not None:
            changes["low_stock_threshold"] = self.low_stock_threshold
        return changes


class BulkUpdateDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    updates: List[BulkListingUpdateDTO]

    @field_validator("updates")
    @classmethod
    def updates_must_not_be_empty(
        cls, v: List[BulkListingUpdateDTO]
    ) -> List[BulkListingUpdateDTO]:
        if not v:
            raise ValueError("Select at least one listing to update.")
        return v

    @model_validator(mode="after")
    def no_duplicate_listings(self):
        ids = [update.id for update in self.updates]
        if len(ids) != len(set(ids)):
            raise ValueError("Duplicate listing IDs are not allowed in a bulk update.")
        return self


class ListingQueryDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    search: str = ""
    state: Optional[ListingState] = None
    stock: StockFilter = StockFilter.ALL

    @field_validator("state", mode="before")
    @classmethod
    def all_means_any_state(cls, v: Any) -> Any:
        return None if v in ("", "all") else v

    @field_validator("search")
    @classmethod
    def strip_search(cls, v: str) -> str:
        return v.strip()

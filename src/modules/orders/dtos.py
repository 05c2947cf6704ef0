"""Order DTOs for the Service Layer.

Pydantic v2 models validating seller and buyer workflow requests.  DTOs
are immutable (``frozen=True``) and accept the camelCase names the
marketplace front end sends (``trackingNumber``).

- ``ShipOrderDTO``: carrier plus a non-empty tracking number.
- ``TrackingUpdateDTO``: a tracking timeline entry, optionally moving the
  order to a new status.
- ``CancelOrderDTO``: optional cancellation reason.
- ``OrderQueryDTO``: seller order list filter.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from modules.orders.constants import Carrier, OrderStatus

MISSING_SHIPPING_INFO = "Please enter a tracking number and select a carrier."


class ShipOrderDTO(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    tracking_number: str = Field(default="", alias="trackingNumber")
    carrier: Optional[Carrier] = None

    @field_validator("tracking_number")
    @classmethod
    def strip_tracking_number(cls, v: str) -> str:
        return v.strip()

    @field_validator("carrier", mode="before")
    @classmethod
    def empty_carrier_is_missing(cls, v):
        return v or None

    @model_validator(mode="after")
    def require_shipping_info(self):
        if not self.tracking_number or self.carrier is None:
            raise ValueError(MISSING_SHIPPING_INFO)
        return self


class TrackingUpdateDTO(BaseModel):
    """A tracking entry posted by the seller.

    ``status`` equal to the order's current status records an
    informational event without a transition.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    status: OrderStatus
    notes: str = ""
    location: str = ""
    description: str = ""
    tracking_number: Optional[str] = Field(default=None, alias="trackingNumber")
    carrier: Optional[Carrier] = None

    @field_validator("tracking_number", "carrier", mode="before")
    @classmethod
    def blank_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v.strip() if isinstance(v, str) else v


class CancelOrderDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    reason: str = ""

    @field_validator("reason")
    @classmethod
    def strip_reason(cls, v: str) -> str:
        return v.strip()


class OrderQueryDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Optional[OrderStatus] = None

    @field_validator("status", mode="before")
    @classmethod
    def all_means_any_status(cls, v):
        return None if v in ("", "all") else v

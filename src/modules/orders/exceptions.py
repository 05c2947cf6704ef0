"""Order domain exceptions.

Raised by the Service Layer when workflow rules are violated.  The API
layer translates them into HTTP errors.
"""

from __future__ import annotations


class OrderNotFound(Exception):
    """The requested order does not exist or has been soft-deleted."""


class OrderAccessDenied(Exception):
    """The caller is neither the buyer nor the seller of the order."""


class InvalidOrderStatus(Exception):
    """The requested transition is not allowed from the current status."""


class MissingShippingInfo(Exception):
    """A move to ``shipped`` lacks a carrier or a tracking number."""

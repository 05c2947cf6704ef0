"""Listing domain exceptions.

Raised by ``InventoryService``; the views translate them into HTTP errors.
"""

from __future__ import annotations


class ListingNotFound(Exception):
    """The listing does not exist, was removed, or belongs to another seller."""


class VariationNotFound(Exception):
    """The variation does not exist on the given listing."""


class InvalidBulkUpdate(Exception):
    """A bulk update referenced listings the seller cannot modify."""

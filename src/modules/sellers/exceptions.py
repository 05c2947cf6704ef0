"""Seller domain exceptions."""

from __future__ import annotations


class SellerNotFound(Exception):
    """The user has no seller profile, or the profile was removed."""


class InactiveSeller(Exception):
    """The seller's shop is suspended and cannot manage inventory or orders."""

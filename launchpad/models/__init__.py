"""Shared types and HTTP models for the launchpad."""

from launchpad.models.types import Address, Uint256, is_valid_address, normalize_address

__all__ = [
    "Address",
    "Uint256",
    "is_valid_address",
    "normalize_address",
]

"""Utility modules for the FCR client."""

from .validators import (
    MAX_UINT256,
    validate_address,
    validate_amount,
    validate_bounds,
    sender_address,
)

__all__ = [
    "MAX_UINT256",
    "validate_address",
    "validate_amount",
    "validate_bounds",
    "sender_address",
]

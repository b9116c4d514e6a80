"""
Input validation utilities.

Validates addresses, token amounts and bounds before contract calls.
"""

from typing import Any

from eth_account.signers.local import LocalAccount
from web3 import Web3

from ..exceptions import ValidationError

MAX_UINT256 = 2**256 - 1
MIN_INT256 = -(2**255)
MAX_INT256 = 2**255 - 1


def validate_address(address: Any) -> str:
    """
    Validate Ethereum address.

    Args:
        address: Ethereum address (hex string)

    Returns:
        Checksummed address

    Raises:
        ValidationError: If address is invalid
    """
    if not isinstance(address, str):
        raise ValidationError(f"Address must be string, got {type(address)}")

    if not Web3.is_address(address):
        raise ValidationError(f"Invalid Ethereum address: {address}")

    return Web3.to_checksum_address(address)


def sender_address(sender: Any) -> str:
    """
    Address of a transaction sender.

    Args:
        sender: Node-managed account address or a local eth_account signer

    Returns:
        Checksummed address
    """
    if isinstance(sender, LocalAccount):
        return Web3.to_checksum_address(sender.address)
    return validate_address(sender)


def validate_amount(amount: Any, name: str = "amount") -> int:
    """
    Validate a token amount in base units.

    Args:
        amount: Amount as int (floats are rejected to avoid precision loss)
        name: Parameter name for error messages

    Returns:
        Amount as int

    Raises:
        ValidationError: If amount is not an int in uint256 range
    """
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValidationError(f"{name} must be int, got {type(amount)}")

    if amount < 0:
        raise ValidationError(f"{name} must be non-negative, got {amount}")

    if amount > MAX_UINT256:
        raise ValidationError(f"{name} {amount} exceeds uint256 maximum")

    return amount


def validate_bounds(lower_bound: Any, upper_bound: Any) -> tuple[int, int]:
    """
    Validate scalar event bounds.

    Returns:
        Tuple of (lower_bound, upper_bound)

    Raises:
        ValidationError: If bounds are not int256 or lower >= upper
    """
    for name, value in (("lower_bound", lower_bound), ("upper_bound", upper_bound)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(f"{name} must be int, got {type(value)}")
        if not (MIN_INT256 <= value <= MAX_INT256):
            raise ValidationError(f"{name} {value} is outside int256 range")

    if lower_bound >= upper_bound:
        raise ValidationError(
            f"lower_bound must be below upper_bound, got {lower_bound} >= {upper_bound}"
        )

    return lower_bound, upper_bound

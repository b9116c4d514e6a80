"""
Custom exceptions for the FCR client.

Provides typed exceptions for challenge lifecycle, outcome validation and
transaction failures. Transport errors raised by web3 are not wrapped and
propagate to the caller unchanged.
"""

from typing import Optional, Any


class FCRError(Exception):
    """Base exception for all FCR client errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(FCRError):
    """Input validation failed."""
    pass


class InvalidOutcomeError(ValidationError):
    """Outcome is not one of the known challenge outcomes."""

    def __init__(self, message: str, outcome: Any = None):
        super().__init__(message, {"outcome": outcome})
        self.outcome = outcome


class InvalidDecisionError(ValidationError):
    """Decision has no decision market index."""

    def __init__(self, message: str, decision: Any = None):
        super().__init__(message, {"decision": decision})
        self.decision = decision


# Challenge state exceptions
class ChallengeStateError(FCRError):
    """Challenge is not in the state the operation requires."""

    def __init__(self, message: str, challenge: Optional[str] = None):
        super().__init__(message, {"challenge": challenge})
        self.challenge = challenge


class AlreadyStartedError(ChallengeStateError):
    """Challenge has already been started."""
    pass


class AlreadyFundedError(ChallengeStateError):
    """Challenge markets have already been funded."""
    pass


class NotStartedError(ChallengeStateError):
    """Challenge has not been started."""
    pass


class NotFundedError(ChallengeStateError):
    """Challenge markets have not been funded."""
    pass


# Transaction exceptions
class TransactionError(FCRError):
    """Base exception for transaction submission."""
    pass


class TransactionRevertedError(TransactionError):
    """
    Transaction was mined with a failed status.

    ``record`` holds every transaction that completed before the revert,
    including any approvals already committed on-chain.
    """

    def __init__(self, message: str, tx_hash: Optional[str] = None,
                 label: Optional[str] = None, record: Any = None):
        super().__init__(message, {"tx_hash": tx_hash, "label": label})
        self.tx_hash = tx_hash
        self.label = label
        self.record = record


class GasPriceError(TransactionError):
    """Configured gas price exceeds the safety limit."""

    def __init__(self, message: str, gas_price_gwei: Optional[float] = None,
                 max_gas_price_gwei: Optional[float] = None):
        super().__init__(message, {
            "gas_price_gwei": gas_price_gwei,
            "max_gas_price_gwei": max_gas_price_gwei,
        })
        self.gas_price_gwei = gas_price_gwei
        self.max_gas_price_gwei = max_gas_price_gwei


# Event subscription exceptions
class EventWatchError(FCRError):
    """Event subscription failed."""

    def __init__(self, message: str, event_name: Optional[str] = None,
                 contract: Optional[str] = None):
        super().__init__(message, {"event_name": event_name, "contract": contract})
        self.event_name = event_name
        self.contract = contract


class ConnectionError(FCRError):
    """Web3 provider is not reachable or on the wrong network."""
    pass

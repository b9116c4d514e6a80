"""
FCR Client Library

Python client for Futarchy Curated Registry challenges: starts and funds
challenges, buys decision-market outcome tokens, quotes LMSR costs and
watches challenge and market events.
"""

from .client import FCRClient
from .challenge import Challenge
from .token import Token
from .config import FCRSettings, get_settings
from .events import EventWatcher, Subscription
from .transactions import Transactor, TransactionSender
from .models import (
    Outcome,
    Decision,
    TransactionEntry,
    TransactionRecord,
    ChallengeStatus,
    PRICE_SCALE,
    validate_outcome,
    decision_for_outcome,
    index_for_outcome,
    decision_market_index,
)
from .exceptions import (
    FCRError,
    ValidationError,
    InvalidOutcomeError,
    InvalidDecisionError,
    ChallengeStateError,
    AlreadyStartedError,
    AlreadyFundedError,
    NotStartedError,
    NotFundedError,
    TransactionError,
    TransactionRevertedError,
    GasPriceError,
    EventWatchError,
)

__version__ = "0.1.0"

__all__ = [
    # Main client
    "FCRClient",
    "Challenge",
    "Token",
    "FCRSettings",
    "get_settings",
    "EventWatcher",
    "Subscription",
    "Transactor",
    "TransactionSender",

    # Types
    "Outcome",
    "Decision",
    "TransactionEntry",
    "TransactionRecord",
    "ChallengeStatus",
    "PRICE_SCALE",
    "validate_outcome",
    "decision_for_outcome",
    "index_for_outcome",
    "decision_market_index",

    # Exceptions
    "FCRError",
    "ValidationError",
    "InvalidOutcomeError",
    "InvalidDecisionError",
    "ChallengeStateError",
    "AlreadyStartedError",
    "AlreadyFundedError",
    "NotStartedError",
    "NotFundedError",
    "TransactionError",
    "TransactionRevertedError",
    "GasPriceError",
    "EventWatchError",
]

"""
Type definitions for the FCR client.

Outcome and decision enumerations, the transaction record returned by every
state-changing operation, and read-only challenge snapshots.

PRECISION: token amounts and prices are plain ``int`` (arbitrary precision);
floats are never used for on-chain values.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, Field
from web3 import Web3

from .exceptions import InvalidDecisionError, InvalidOutcomeError

# Prices reported by the decision markets are fixed point with this scale
PRICE_SCALE = 10 ** 20


class Decision(str, Enum):
    """Futarchy decision."""
    ACCEPTED = "ACCEPTED"
    DENIED = "DENIED"


class Outcome(str, Enum):
    """Tradable challenge outcome (decision x scalar position)."""
    ACCEPTED_LONG = "ACCEPTED_LONG"
    ACCEPTED_SHORT = "ACCEPTED_SHORT"
    DENIED_LONG = "DENIED_LONG"
    DENIED_SHORT = "DENIED_SHORT"

    @property
    def decision(self) -> Decision:
        return _OUTCOME_DECISIONS[self]

    @property
    def token_index(self) -> int:
        """Outcome token index in the decision market (0=SHORT, 1=LONG)."""
        return _OUTCOME_INDEXES[self]


SHORT_INDEX = 0
LONG_INDEX = 1

_OUTCOME_DECISIONS = {
    Outcome.ACCEPTED_LONG: Decision.ACCEPTED,
    Outcome.ACCEPTED_SHORT: Decision.ACCEPTED,
    Outcome.DENIED_LONG: Decision.DENIED,
    Outcome.DENIED_SHORT: Decision.DENIED,
}

_OUTCOME_INDEXES = {
    Outcome.ACCEPTED_LONG: LONG_INDEX,
    Outcome.ACCEPTED_SHORT: SHORT_INDEX,
    Outcome.DENIED_LONG: LONG_INDEX,
    Outcome.DENIED_SHORT: SHORT_INDEX,
}

# Index of each decision's market in FutarchyOracle.markets()
DECISION_MARKET_INDEXES = {
    Decision.ACCEPTED: 0,
    Decision.DENIED: 1,
}


def validate_outcome(outcome: Union[Outcome, str]) -> Outcome:
    """
    Validate an outcome.

    Args:
        outcome: ``Outcome`` member or its name (e.g. "ACCEPTED_LONG")

    Returns:
        The matching ``Outcome``

    Raises:
        InvalidOutcomeError: If outcome is not a known outcome
    """
    if isinstance(outcome, Outcome):
        return outcome
    if isinstance(outcome, str):
        try:
            return Outcome(outcome)
        except ValueError:
            pass
    raise InvalidOutcomeError(f"'{outcome}' is not a valid outcome", outcome=outcome)


def decision_for_outcome(outcome: Union[Outcome, str]) -> Decision:
    """Decision whose market trades the outcome."""
    return validate_outcome(outcome).decision


def index_for_outcome(outcome: Union[Outcome, str]) -> int:
    """Outcome token index: 0 for SHORT outcomes, 1 for LONG outcomes."""
    return validate_outcome(outcome).token_index


def decision_market_index(decision: Union[Decision, str]) -> int:
    """
    Index of the decision's market in the futarchy oracle.

    Raises:
        InvalidDecisionError: If decision is not ACCEPTED or DENIED
    """
    try:
        return DECISION_MARKET_INDEXES[Decision(decision)]
    except (ValueError, KeyError):
        raise InvalidDecisionError(
            f"'{decision}' is not a valid decision", decision=decision
        ) from None


@dataclass(frozen=True)
class TransactionEntry:
    """One mined transaction produced by an operation."""
    receipt: Any
    label: str
    token_address: Optional[str] = None

    @property
    def tx_hash(self) -> Optional[str]:
        tx_hash = _get(self.receipt, "transactionHash")
        if tx_hash is None:
            return None
        return tx_hash if isinstance(tx_hash, str) else Web3.to_hex(tx_hash)

    @property
    def is_approval(self) -> bool:
        return self.token_address is not None


@dataclass
class TransactionRecord:
    """
    Ordered record of the transactions an operation produced.

    Entries are only ever appended. ``response`` is the receipt of the last
    contract call sent through the record.
    """
    entries: list[TransactionEntry] = field(default_factory=list)
    response: Any = None

    def add(self, receipt: Any, label: str, token_address: Optional[str] = None) -> TransactionEntry:
        entry = TransactionEntry(receipt=receipt, label=label, token_address=token_address)
        self.entries.append(entry)
        return entry

    @property
    def approvals(self) -> list[TransactionEntry]:
        return [e for e in self.entries if e.is_approval]

    @property
    def transactions(self) -> list[TransactionEntry]:
        """Entries that are not token approvals."""
        return [e for e in self.entries if not e.is_approval]

    @property
    def labels(self) -> list[str]:
        return [e.label for e in self.entries]

    @property
    def tx_hashes(self) -> list[Optional[str]]:
        return [e.tx_hash for e in self.entries]

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)


class ChallengeStatus(BaseModel):
    """Snapshot of a challenge's on-chain state."""
    address: str = Field(..., description="Challenge contract address")
    started: bool = Field(..., description="isStarted()")
    funded: bool = Field(..., description="isFunded()")
    stake_amount: int = Field(..., ge=0, description="Registry tokens required to fund")
    futarchy_oracle: Optional[str] = Field(None, description="Oracle address, once started")


def _get(obj: Any, key: str) -> Any:
    if isinstance(obj, dict):
        return obj.get(key)
    try:
        return obj[key]
    except (KeyError, TypeError, IndexError):
        return getattr(obj, key, None)

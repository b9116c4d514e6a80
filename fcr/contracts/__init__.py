"""
Futarchy Curated Registry contract interfaces.

Provides ABIs for:
- FutarchyChallenge: challenge lifecycle (start, fund)
- FutarchyOracle: categorical event and decision markets
- CategoricalEvent / ScalarEvent: outcome share minting and collateral
- StandardMarketWithPriceLogger: decision markets
- LMSRMarketMaker: cost function
"""

from .abi import (
    FUTARCHY_CHALLENGE_ABI,
    FUTARCHY_ORACLE_ABI,
    CATEGORICAL_EVENT_ABI,
    SCALAR_EVENT_ABI,
    STANDARD_MARKET_WITH_PRICE_LOGGER_ABI,
    LMSR_MARKET_MAKER_ABI,
    ERC20_ABI,
    event_abi,
)

__all__ = [
    "FUTARCHY_CHALLENGE_ABI",
    "FUTARCHY_ORACLE_ABI",
    "CATEGORICAL_EVENT_ABI",
    "SCALAR_EVENT_ABI",
    "STANDARD_MARKET_WITH_PRICE_LOGGER_ABI",
    "LMSR_MARKET_MAKER_ABI",
    "ERC20_ABI",
    "event_abi",
]

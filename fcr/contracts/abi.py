"""
ABIs for the Futarchy Curated Registry contracts.

Only the functions and events the client calls are included.

Sources:
- https://github.com/levelkdev/futarchy-curated-registry (FutarchyChallenge)
- https://github.com/gnosis/pm-contracts (oracle, events, markets, LMSR)
"""

from ..exceptions import ValidationError


def _fn(name, inputs=(), outputs=(), mutability="view"):
    return {
        "type": "function",
        "name": name,
        "inputs": [{"name": n, "type": t} for n, t in inputs],
        "outputs": [{"name": n, "type": t} for n, t in outputs],
        "stateMutability": mutability,
    }


def _event(name, inputs):
    return {
        "type": "event",
        "name": name,
        "anonymous": False,
        "inputs": [
            {"name": n, "type": t, "indexed": indexed} for n, t, indexed in inputs
        ],
    }


# FutarchyChallenge - one challenge against a registry listing
FUTARCHY_CHALLENGE_ABI = [
    _fn("isStarted", outputs=[("", "bool")]),
    _fn("isFunded", outputs=[("", "bool")]),
    _fn("stakeAmount", outputs=[("", "uint256")]),
    _fn("futarchyOracle", outputs=[("", "address")]),
    _fn("start", inputs=[("_lowerBound", "int256"), ("_upperBound", "int256")],
        mutability="nonpayable"),
    _fn("fund", mutability="nonpayable"),
    _event("_Started", [
        ("challenger", "address", True),
        ("stakeAmount", "uint256", False),
        ("futarchyOracleAddress", "address", False),
    ]),
    _event("_Funded", [
        ("challenger", "address", True),
        ("stakeAmount", "uint256", False),
    ]),
]

# FutarchyOracle - owns the categorical event and one market per decision
FUTARCHY_ORACLE_ABI = [
    _fn("categoricalEvent", outputs=[("", "address")]),
    _fn("markets", inputs=[("", "uint256")], outputs=[("", "address")]),
]

# CategoricalEvent - mints one share of every outcome per collateral token
CATEGORICAL_EVENT_ABI = [
    _fn("collateralToken", outputs=[("", "address")]),
    _fn("buyAllOutcomes", inputs=[("collateralTokenCount", "uint256")],
        mutability="nonpayable"),
]

# ScalarEvent - decision event backing one decision market
SCALAR_EVENT_ABI = [
    _fn("collateralToken", outputs=[("", "address")]),
    _fn("lowerBound", outputs=[("", "int256")]),
    _fn("upperBound", outputs=[("", "int256")]),
]

# StandardMarketWithPriceLogger - LMSR market for one decision
STANDARD_MARKET_WITH_PRICE_LOGGER_ABI = [
    _fn("eventContract", outputs=[("", "address")]),
    _fn("calcMarketFee", inputs=[("outcomeTokenCost", "uint256")],
        outputs=[("", "uint256")]),
    _fn("getAvgPrice", outputs=[("", "uint256")]),
    _fn("buy",
        inputs=[("outcomeTokenIndex", "uint8"), ("outcomeTokenCount", "uint256"),
                ("maxCost", "uint256")],
        outputs=[("cost", "uint256")],
        mutability="nonpayable"),
    _event("OutcomeTokenPurchase", [
        ("buyer", "address", True),
        ("outcomeTokenIndex", "uint8", False),
        ("outcomeTokenCount", "uint256", False),
        ("outcomeTokenCost", "uint256", False),
        ("marketFees", "uint256", False),
    ]),
]

# LMSRMarketMaker - cost function used by the decision markets
LMSR_MARKET_MAKER_ABI = [
    _fn("calcCost",
        inputs=[("market", "address"), ("outcomeTokenIndex", "uint8"),
                ("outcomeTokenCount", "uint256")],
        outputs=[("cost", "uint256")]),
]

# Standard ERC20 (minimal for allowance operations)
ERC20_ABI = [
    _fn("allowance", inputs=[("owner", "address"), ("spender", "address")],
        outputs=[("", "uint256")]),
    _fn("balanceOf", inputs=[("account", "address")], outputs=[("", "uint256")]),
    _fn("approve", inputs=[("spender", "address"), ("value", "uint256")],
        outputs=[("", "bool")], mutability="nonpayable"),
]


def event_abi(abi: list, event_name: str) -> dict:
    """
    Find an event definition in an ABI.

    Raises:
        ValidationError: If the ABI has no such event
    """
    for entry in abi:
        if entry.get("type") == "event" and entry.get("name") == event_name:
            return entry
    raise ValidationError(f"Event {event_name} not found in ABI")

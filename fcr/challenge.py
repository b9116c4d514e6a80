"""
FutarchyChallenge wrapper.

Orchestrates the multi-contract calls of a futarchy challenge:
- Starting and funding the challenge
- Buying decision-market outcome tokens
- Quoting outcome costs, fees and average prices
- Watching challenge and market events

Contract addresses are resolved from the challenge on every operation
(challenge -> futarchy oracle -> categorical event / decision markets ->
decision event -> decision token). Within one operation the oracle is looked
up once; nothing is cached between operations.
"""

import logging
from typing import Any, Callable, Dict, Optional, Union

from web3 import Web3
from web3.contract import Contract

from .contracts.abi import (
    FUTARCHY_CHALLENGE_ABI,
    FUTARCHY_ORACLE_ABI,
    CATEGORICAL_EVENT_ABI,
    SCALAR_EVENT_ABI,
    STANDARD_MARKET_WITH_PRICE_LOGGER_ABI,
)
from .events import EventWatcher, Subscription
from .exceptions import (
    AlreadyFundedError,
    AlreadyStartedError,
    NotFundedError,
    NotStartedError,
)
from .models import (
    PRICE_SCALE,
    LONG_INDEX,
    ChallengeStatus,
    Decision,
    Outcome,
    TransactionRecord,
    decision_market_index,
    validate_outcome,
)
from .token import Token
from .transactions import TransactionSender, Transactor
from .utils.validators import validate_address, validate_amount, validate_bounds

logger = logging.getLogger(__name__)

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

STARTED_EVENT = "_Started"
FUNDED_EVENT = "_Funded"
OUTCOME_TOKEN_PURCHASE_EVENT = "OutcomeTokenPurchase"


class Challenge:
    """
    Client for one FutarchyChallenge contract.

    Senders (``challenger``, ``buyer``) are either node-managed account
    addresses or eth_account ``LocalAccount`` signers.
    """

    def __init__(
        self,
        web3: Web3,
        address: str,
        fcr_token: Token,
        lmsr: Contract,
        transactor: Transactor,
        watcher: EventWatcher
    ):
        """
        Initialize challenge client.

        Args:
            web3: Connected Web3 instance
            address: FutarchyChallenge contract address
            fcr_token: Registry token (stake and categorical event collateral)
            lmsr: LMSR market maker contract used to quote costs
            transactor: Transaction submission settings
            watcher: Event subscription factory
        """
        self.web3 = web3
        self.address = validate_address(address)
        self.fcr_token = fcr_token
        self.lmsr = lmsr
        self.transactor = transactor
        self.watcher = watcher
        self.contract = web3.eth.contract(address=self.address, abi=FUTARCHY_CHALLENGE_ABI)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def started(self) -> bool:
        return self.contract.functions.isStarted().call()

    def funded(self) -> bool:
        return self.contract.functions.isFunded().call()

    def stake_amount(self) -> int:
        return self.contract.functions.stakeAmount().call()

    def status(self) -> ChallengeStatus:
        """Read the challenge state in one snapshot."""
        started = self.started()
        oracle = None
        if started:
            oracle_address = self.contract.functions.futarchyOracle().call()
            if oracle_address and oracle_address.lower() != ZERO_ADDRESS:
                oracle = Web3.to_checksum_address(oracle_address)

        return ChallengeStatus(
            address=self.address,
            started=started,
            funded=self.funded(),
            stake_amount=self.stake_amount(),
            futarchy_oracle=oracle
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(
        self,
        challenger: Any,
        lower_bound: int,
        upper_bound: int,
        record: Optional[TransactionRecord] = None
    ) -> TransactionRecord:
        """
        Start the challenge, creating its futarchy oracle and markets.

        Args:
            challenger: Sender of the start transaction
            lower_bound: Scalar event lower bound
            upper_bound: Scalar event upper bound
            record: Record to append to (default: a new one)

        Returns:
            TransactionRecord with the start transaction

        Raises:
            AlreadyStartedError: If the challenge is already started
        """
        lower_bound, upper_bound = validate_bounds(lower_bound, upper_bound)

        if self.started():
            raise AlreadyStartedError("challenge is already started", challenge=self.address)

        logger.info(f"Starting challenge {self.address} with bounds [{lower_bound}, {upper_bound}]")

        with TransactionSender(self.transactor, record) as sender:
            sender.send(
                self.contract.functions.start(lower_bound, upper_bound),
                "start",
                challenger
            )
        return sender.response()

    def fund(self, challenger: Any, record: Optional[TransactionRecord] = None) -> TransactionRecord:
        """
        Fund the challenge markets with the stake amount.

        Approves the challenge to spend ``stakeAmount()`` registry tokens, then
        sends ``fund()``.

        Raises:
            AlreadyFundedError: If the challenge is already funded
        """
        if self.funded():
            raise AlreadyFundedError("challenge is already funded", challenge=self.address)

        stake_amount = self.stake_amount()

        logger.info(f"Funding challenge {self.address} with stake {stake_amount}")

        with TransactionSender(self.transactor, record) as sender:
            sender.approve(self.fcr_token, challenger, self.address, stake_amount)
            sender.send(self.contract.functions.fund(), "fund", challenger)
        return sender.response()

    # ------------------------------------------------------------------
    # Trading
    # ------------------------------------------------------------------

    def buy_outcome(
        self,
        buyer: Any,
        outcome: Union[Outcome, str],
        amount: int,
        record: Optional[TransactionRecord] = None
    ) -> TransactionRecord:
        """
        Buy ``amount`` outcome tokens of ``outcome``.

        Steps:
        1. Approve the categorical event to spend ``amount`` registry tokens
        2. ``buyAllOutcomes(amount)`` to mint decision tokens for both decisions
        3. Quote cost and fee for ``amount`` outcome tokens in the decision market
        4. Approve the decision market to spend cost + fee decision tokens
        5. ``buy(outcomeIndex, amount, cost + fee)`` on the decision market

        A failure aborts the remaining steps. Transactions already mined are
        not undone: an exception raised once sending begins carries them as
        ``record``.

        Args:
            buyer: Sender of all four transactions
            outcome: Outcome to buy
            amount: Outcome token count (base units)
            record: Record to append to (default: a new one)

        Returns:
            TransactionRecord: approve, buyAllOutcomes, approve, buy

        Raises:
            InvalidOutcomeError: Before any contract call, if outcome is unknown
            NotStartedError: If the challenge has not been started
            NotFundedError: If the challenge markets have not been funded
            TransactionRevertedError: If any transaction reverts
            Exception: Transport errors propagate unchanged, with ``record`` set
        """
        outcome = validate_outcome(outcome)
        amount = validate_amount(amount)

        if not self.started():
            raise NotStartedError("challenge has not been started", challenge=self.address)

        if not self.funded():
            raise NotFundedError("challenge markets have not been funded", challenge=self.address)

        logger.info(f"Buying {amount} {outcome.value} on challenge {self.address}")

        with TransactionSender(self.transactor, record) as sender:
            oracle = self.get_futarchy_oracle()

            categorical_event = self._categorical_event(oracle)
            sender.approve(self.fcr_token, buyer, categorical_event.address, amount)
            sender.send(
                categorical_event.functions.buyAllOutcomes(amount),
                "buyAllOutcomes",
                buyer
            )

            decision_market = self._decision_market(oracle, outcome.decision)
            outcome_cost = self._outcome_cost(decision_market, outcome, amount)
            outcome_fee = self._outcome_fee(decision_market, outcome_cost)
            total_outcome_cost = outcome_cost + outcome_fee

            logger.debug(
                f"{outcome.value} cost {outcome_cost} + fee {outcome_fee} = {total_outcome_cost}"
            )

            decision_token = self._decision_token(decision_market)
            sender.approve(decision_token, buyer, decision_market.address, total_outcome_cost)
            sender.send(
                decision_market.functions.buy(outcome.token_index, amount, total_outcome_cost),
                "buy",
                buyer
            )
        return sender.response()

    def calculate_outcome_cost(self, outcome: Union[Outcome, str], amount: int) -> int:
        """Quote the LMSR cost of ``amount`` outcome tokens, excluding fees."""
        outcome = validate_outcome(outcome)
        amount = validate_amount(amount)
        decision_market = self.get_decision_market(outcome.decision)
        return self._outcome_cost(decision_market, outcome, amount)

    def calculate_outcome_fee(self, outcome: Union[Outcome, str], amount: int) -> int:
        """Quote the market fee charged on top of the outcome cost."""
        outcome = validate_outcome(outcome)
        amount = validate_amount(amount)
        decision_market = self.get_decision_market(outcome.decision)
        outcome_cost = self._outcome_cost(decision_market, outcome, amount)
        return self._outcome_fee(decision_market, outcome_cost)

    def get_average_outcome_price(self, outcome: Union[Outcome, str]) -> int:
        """
        Average price of an outcome token, scaled by 10**20.

        The market logs the LONG price; SHORT is its complement.
        """
        outcome = validate_outcome(outcome)
        decision_market = self.get_decision_market(outcome.decision)
        average_long_price = decision_market.functions.getAvgPrice().call()
        if outcome.token_index == LONG_INDEX:
            return average_long_price
        return PRICE_SCALE - average_long_price

    # ------------------------------------------------------------------
    # Contract resolution
    # ------------------------------------------------------------------

    def get_futarchy_oracle(self) -> Contract:
        futarchy_oracle_address = self.contract.functions.futarchyOracle().call()
        return self._contract(futarchy_oracle_address, FUTARCHY_ORACLE_ABI)

    def get_categorical_event(self) -> Contract:
        return self._categorical_event(self.get_futarchy_oracle())

    def get_decision_market(self, decision: Union[Decision, str]) -> Contract:
        # Fail on an unknown decision before touching the chain
        decision_market_index(decision)
        return self._decision_market(self.get_futarchy_oracle(), decision)

    def get_decision_event(self, decision: Union[Decision, str]) -> Contract:
        return self._decision_event(self.get_decision_market(decision))

    def get_decision_token(self, decision: Union[Decision, str]) -> Token:
        return self._decision_token(self.get_decision_market(decision))

    def _contract(self, address: str, abi: list) -> Contract:
        return self.web3.eth.contract(address=Web3.to_checksum_address(address), abi=abi)

    def _categorical_event(self, oracle: Contract) -> Contract:
        categorical_event_address = oracle.functions.categoricalEvent().call()
        return self._contract(categorical_event_address, CATEGORICAL_EVENT_ABI)

    def _decision_market(self, oracle: Contract, decision: Union[Decision, str]) -> Contract:
        market_address = oracle.functions.markets(decision_market_index(decision)).call()
        return self._contract(market_address, STANDARD_MARKET_WITH_PRICE_LOGGER_ABI)

    def _decision_event(self, decision_market: Contract) -> Contract:
        decision_event_address = decision_market.functions.eventContract().call()
        return self._contract(decision_event_address, SCALAR_EVENT_ABI)

    def _decision_token(self, decision_market: Contract) -> Token:
        decision_event = self._decision_event(decision_market)
        decision_token_address = decision_event.functions.collateralToken().call()
        return Token(self.web3, decision_token_address, self.transactor)

    def _outcome_cost(self, decision_market: Contract, outcome: Outcome, amount: int) -> int:
        return self.lmsr.functions.calcCost(
            decision_market.address,
            outcome.token_index,
            amount
        ).call()

    def _outcome_fee(self, decision_market: Contract, outcome_cost: int) -> int:
        return decision_market.functions.calcMarketFee(outcome_cost).call()

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def watch_started(
        self,
        argument_filters: Optional[Dict[str, Any]],
        callback: Callable[[Any], None],
        err_callback: Optional[Callable[[Exception], None]] = None
    ) -> Subscription:
        """Watch past and future ``_Started`` events of this challenge."""
        return self.watcher.watch(self.contract, STARTED_EVENT, argument_filters, callback, err_callback)

    def watch_funded(
        self,
        argument_filters: Optional[Dict[str, Any]],
        callback: Callable[[Any], None],
        err_callback: Optional[Callable[[Exception], None]] = None
    ) -> Subscription:
        """Watch past and future ``_Funded`` events of this challenge."""
        return self.watcher.watch(self.contract, FUNDED_EVENT, argument_filters, callback, err_callback)

    def watch_outcome_token_purchases(
        self,
        argument_filters: Optional[Dict[str, Any]],
        callback: Callable[[Any], None],
        err_callback: Optional[Callable[[Exception], None]] = None
    ) -> Dict[Decision, Subscription]:
        """
        Watch ``OutcomeTokenPurchase`` on both decision markets.

        The two subscriptions are independent; events from different markets
        are not ordered relative to each other.
        """
        oracle = self.get_futarchy_oracle()
        return {
            decision: self.watcher.watch(
                self._decision_market(oracle, decision),
                OUTCOME_TOKEN_PURCHASE_EVENT,
                argument_filters,
                callback,
                err_callback
            )
            for decision in (Decision.ACCEPTED, Decision.DENIED)
        }

    def __repr__(self) -> str:
        return f"Challenge({self.address})"

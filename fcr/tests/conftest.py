"""Shared fixtures: a fake chain of FCR contracts behind a mocked Web3."""

from unittest.mock import Mock

import pytest

from fcr.challenge import Challenge
from fcr.contracts.abi import LMSR_MARKET_MAKER_ABI
from fcr.events import EventWatcher
from fcr.token import Token
from fcr.transactions import Transactor

BUYER = "0x" + "a0" * 20
CHALLENGE = "0x" + "1" * 40
FCR_TOKEN = "0x" + "2" * 40
LMSR = "0x" + "3" * 40
ORACLE = "0x" + "4" * 40
CATEGORICAL_EVENT = "0x" + "5" * 40
ACCEPTED_MARKET = "0x" + "6" * 40
DENIED_MARKET = "0x" + "7" * 40
ACCEPTED_EVENT = "0x" + "8" * 40
DENIED_EVENT = "0x" + "9" * 40
ACCEPTED_TOKEN = "0x" + "12" * 20
DENIED_TOKEN = "0x" + "34" * 20

STAKE_AMOUNT = 10 ** 21
OUTCOME_COST = 55 * 10 ** 18
OUTCOME_FEE = 10 ** 17
AVG_LONG_PRICE = 6 * 10 ** 19


def view(value):
    """Bound contract function whose call() returns value."""
    fn = Mock()
    fn.call.return_value = value
    return fn


class FakeChain:
    """
    In-memory stand-in for the deployed FCR contracts.

    Every contract is a Mock keyed by address; state-changing functions
    return a transaction hash named after the call, and every sent
    transaction is appended to ``sent`` as (contract address, label).
    """

    def __init__(self, started=True, funded=True):
        self.contracts = {}
        self.sent = []
        self.receipt_status = {}

        self.web3 = Mock()
        self.web3.eth.contract.side_effect = self._contract
        self.web3.eth.wait_for_transaction_receipt.side_effect = self._receipt

        self.challenge = self.add(CHALLENGE)
        self.challenge.functions.isStarted.return_value = view(started)
        self.challenge.functions.isFunded.return_value = view(funded)
        self.challenge.functions.stakeAmount.return_value = view(STAKE_AMOUNT)
        self.challenge.functions.futarchyOracle.return_value = view(ORACLE)
        self.challenge.functions.start.side_effect = self._tx_factory(CHALLENGE, "start")
        self.challenge.functions.fund.side_effect = self._tx_factory(CHALLENGE, "fund")

        self.oracle = self.add(ORACLE)
        self.oracle.functions.categoricalEvent.return_value = view(CATEGORICAL_EVENT)
        self.oracle.functions.markets.side_effect = (
            lambda index: view([ACCEPTED_MARKET, DENIED_MARKET][index])
        )

        self.categorical_event = self.add(CATEGORICAL_EVENT)
        self.categorical_event.functions.buyAllOutcomes.side_effect = (
            self._tx_factory(CATEGORICAL_EVENT, "buyAllOutcomes")
        )

        self.markets = {}
        for market, event, token in (
            (ACCEPTED_MARKET, ACCEPTED_EVENT, ACCEPTED_TOKEN),
            (DENIED_MARKET, DENIED_EVENT, DENIED_TOKEN),
        ):
            contract = self.add(market)
            contract.functions.eventContract.return_value = view(event)
            contract.functions.calcMarketFee.side_effect = lambda cost: view(OUTCOME_FEE)
            contract.functions.getAvgPrice.return_value = view(AVG_LONG_PRICE)
            contract.functions.buy.side_effect = self._tx_factory(market, "buy")
            self.markets[market] = contract

            self.add(event).functions.collateralToken.return_value = view(token)
            self._add_token(token)

        self._add_token(FCR_TOKEN)

        self.lmsr = self.add(LMSR)
        self.lmsr.functions.calcCost.side_effect = (
            lambda market, index, amount: view(OUTCOME_COST)
        )

    def add(self, address):
        contract = Mock()
        contract.address = address
        self.contracts[address.lower()] = contract
        return contract

    def _add_token(self, address):
        token = self.add(address)
        token.functions.approve.side_effect = self._tx_factory(address, "approve")

    def _contract(self, address, abi):
        return self.contracts[address.lower()]

    def _tx_factory(self, address, label):
        def factory(*args):
            fn = Mock()

            def transact(params):
                self.sent.append((address, label, args, params["from"]))
                return f"{label}:{address}:{len(self.sent)}".encode()

            fn.transact.side_effect = transact
            return fn
        return factory

    def _receipt(self, tx_hash, timeout=None):
        label = tx_hash.decode().split(":")[0]
        return {
            "status": self.receipt_status.get(label, 1),
            "blockNumber": 100,
            "gasUsed": 50_000,
            "transactionHash": tx_hash,
        }


@pytest.fixture
def chain():
    return FakeChain()


@pytest.fixture
def transactor(chain):
    return Transactor(chain.web3, receipt_timeout=5)


@pytest.fixture
def watcher():
    return Mock(spec=EventWatcher)


def make_challenge(chain, transactor, watcher):
    fcr_token = Token(chain.web3, FCR_TOKEN, transactor)
    lmsr = chain.web3.eth.contract(address=LMSR, abi=LMSR_MARKET_MAKER_ABI)
    return Challenge(chain.web3, CHALLENGE, fcr_token, lmsr, transactor, watcher)


@pytest.fixture
def challenge(chain, transactor, watcher):
    return make_challenge(chain, transactor, watcher)

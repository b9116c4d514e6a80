"""Tests for history-then-live event subscriptions."""

import threading
from types import SimpleNamespace

import pytest
from web3 import Web3

from fcr.contracts.abi import STANDARD_MARKET_WITH_PRICE_LOGGER_ABI
from fcr.events import EventWatcher, Subscription
from fcr.exceptions import EventWatchError, ValidationError

from .conftest import ACCEPTED_MARKET, BUYER

CHECKSUM_BUYER = Web3.to_checksum_address(BUYER)
OTHER_BUYER = Web3.to_checksum_address("0x" + "b1" * 20)


def _log(block, index, buyer=CHECKSUM_BUYER):
    return {
        "args": {"buyer": buyer, "outcomeTokenIndex": 1, "outcomeTokenCount": 100},
        "blockNumber": block,
        "logIndex": index,
    }


class FakeEth:
    """
    Minimal eth namespace plus the decoded event log source.

    ``get_logs`` ignores ``from_block`` when ``overlap`` is set, returning
    every log up to ``to_block`` the way a lagging provider might. Argument
    filters match exact values or any value of a list.
    """

    def __init__(self, logs, block_number, overlap=False):
        self.logs = logs
        self.block_number = block_number
        self.overlap = overlap
        self.queries = []
        self.fail_with = None

    def get_logs(self, argument_filters=None, from_block=None, to_block=None):
        self.queries.append((argument_filters, from_block, to_block))
        if self.fail_with is not None:
            raise self.fail_with
        low = 0 if self.overlap else from_block
        return [
            log for log in self.logs
            if low <= log["blockNumber"] <= to_block and _filtered(log, argument_filters)
        ]


def _filtered(log, argument_filters):
    for name, expected in (argument_filters or {}).items():
        accepted = expected if isinstance(expected, list) else [expected]
        if log["args"][name] not in accepted:
            return False
    return True


def _market(eth):
    return SimpleNamespace(
        address=ACCEPTED_MARKET,
        abi=STANDARD_MARKET_WITH_PRICE_LOGGER_ABI,
        events=SimpleNamespace(OutcomeTokenPurchase=lambda: eth),
    )


class Collector:
    def __init__(self, expected):
        self.events = []
        self.errors = []
        self.expected = expected
        self.done = threading.Event()

    def on_event(self, event):
        self.events.append(event)
        if len(self.events) >= self.expected:
            self.done.set()

    def on_error(self, error):
        self.errors.append(error)
        self.done.set()


def _watch(eth, collector, argument_filters=None, from_block=0):
    web3 = SimpleNamespace(eth=eth)
    return EventWatcher(web3, from_block=from_block, poll_interval=0.01).watch(
        _market(eth), "OutcomeTokenPurchase", argument_filters,
        collector.on_event, collector.on_error
    )


def test_history_delivered_in_order():
    eth = FakeEth([_log(3, 1), _log(2, 0), _log(3, 0)], block_number=5)
    collector = Collector(expected=3)

    sub = _watch(eth, collector)
    assert collector.done.wait(2)
    sub.cancel()
    sub.join(1)

    assert [(e["blockNumber"], e["logIndex"]) for e in collector.events] == [(2, 0), (3, 0), (3, 1)]
    assert eth.queries[0] == (None, 0, 5)


def test_live_events_after_history():
    eth = FakeEth([_log(2, 0)], block_number=5)
    collector = Collector(expected=2)

    sub = _watch(eth, collector)
    eth.logs.append(_log(6, 0))
    eth.block_number = 6
    assert collector.done.wait(2)
    sub.cancel()
    sub.join(1)

    assert [e["blockNumber"] for e in collector.events] == [2, 6]


def test_overlap_not_delivered_twice():
    """Logs returned again by later polls are skipped."""
    eth = FakeEth([_log(4, 0), _log(5, 2)], block_number=5, overlap=True)
    collector = Collector(expected=3)

    sub = _watch(eth, collector)
    eth.logs.append(_log(7, 0))
    eth.block_number = 7
    assert collector.done.wait(2)
    eth.block_number = 8
    sub.cancel()
    sub.join(1)

    assert [(e["blockNumber"], e["logIndex"]) for e in collector.events] == [(4, 0), (5, 2), (7, 0)]


def test_argument_filter():
    """Address filters are checksummed and passed to the event query."""
    eth = FakeEth([_log(1, 0, OTHER_BUYER), _log(2, 0)], block_number=2)
    collector = Collector(expected=1)

    sub = _watch(eth, collector, {"buyer": BUYER})
    assert collector.done.wait(2)
    sub.cancel()
    sub.join(1)

    assert [e["blockNumber"] for e in collector.events] == [2]
    assert eth.queries[0][0] == {"buyer": CHECKSUM_BUYER}


def test_argument_filter_list():
    eth = FakeEth([_log(1, 0, OTHER_BUYER), _log(2, 0)], block_number=2)
    collector = Collector(expected=2)

    sub = _watch(eth, collector, {"buyer": [BUYER, OTHER_BUYER.lower()]})
    assert collector.done.wait(2)
    sub.cancel()
    sub.join(1)

    assert [e["blockNumber"] for e in collector.events] == [1, 2]
    assert eth.queries[0][0] == {"buyer": [CHECKSUM_BUYER, OTHER_BUYER]}


def test_live_polling_starts_at_from_block():
    """A start block ahead of the chain head holds back earlier live events."""
    eth = FakeEth([_log(600, 0), _log(1000, 0)], block_number=500)
    collector = Collector(expected=1)

    sub = _watch(eth, collector, from_block=1000)
    eth.block_number = 1000
    assert collector.done.wait(2)
    sub.cancel()
    sub.join(1)

    assert [e["blockNumber"] for e in collector.events] == [1000]
    assert all(from_block >= 1000 for _, from_block, _ in eth.queries)


def test_error_stops_subscription():
    eth = FakeEth([], block_number=1)
    eth.fail_with = ValueError("filter not found")
    collector = Collector(expected=1)

    sub = _watch(eth, collector)
    assert collector.done.wait(2)
    sub.join(1)

    assert len(collector.errors) == 1
    error = collector.errors[0]
    assert isinstance(error, EventWatchError)
    assert isinstance(error.__cause__, ValueError)
    assert error.event_name == "OutcomeTokenPurchase"
    assert sub.error is error
    assert not sub.is_active


def test_cancel_stops_polling():
    eth = FakeEth([], block_number=1)
    collector = Collector(expected=1)

    sub = _watch(eth, collector)
    sub.cancel()
    sub.join(1)
    queries = len(eth.queries)
    eth.block_number = 10

    assert not sub.is_active
    assert len(eth.queries) == queries
    assert collector.events == []


def test_unknown_event():
    eth = FakeEth([], 0)

    with pytest.raises(ValidationError):
        Subscription(SimpleNamespace(eth=eth), _market(eth), "Nope", print)


def test_start_twice():
    sub = _watch(FakeEth([], block_number=1), Collector(expected=1))
    try:
        with pytest.raises(RuntimeError):
            sub.start()
    finally:
        sub.cancel()
        sub.join(1)

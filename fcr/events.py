"""
Contract event subscriptions.

A subscription first delivers every past event matching the filter (one range
query up to the current head block), then polls for new blocks and delivers
live events until cancelled or until an error occurs.

Delivery order is (blockNumber, logIndex). The highest delivered position is
kept as a cursor and anything at or below it is skipped, so the boundary
between the historical query and the first live poll never delivers an event
twice. Nothing below ``from_block`` is ever delivered.

Logs are fetched with the contract event's ``get_logs``, which turns filters on
indexed arguments into topics for the node and checks the rest after decoding.
"""

import logging
import threading
from typing import Any, Callable, Dict, Optional

from eth_utils import is_address, to_checksum_address
from web3 import Web3

from .contracts.abi import event_abi
from .exceptions import EventWatchError
from .metrics import Metrics

logger = logging.getLogger(__name__)

EventCallback = Callable[[Any], None]
ErrorCallback = Callable[[Exception], None]


def _normalize_filters(argument_filters: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Checksum address values so they encode as indexed topics."""
    if not argument_filters:
        return None

    def normalize(value: Any) -> Any:
        if isinstance(value, str) and is_address(value):
            return to_checksum_address(value)
        return value

    normalized = {}
    for name, value in argument_filters.items():
        if isinstance(value, (list, tuple, set)):
            normalized[name] = [normalize(v) for v in value]
        else:
            normalized[name] = normalize(value)
    return normalized


class Subscription:
    """
    History-then-live subscription to one contract event.

    Runs on a daemon thread. Not restartable: once cancelled or failed,
    create a new subscription.
    """

    def __init__(
        self,
        web3: Web3,
        contract: Any,
        event_name: str,
        on_event: EventCallback,
        on_error: Optional[ErrorCallback] = None,
        argument_filters: Optional[Dict[str, Any]] = None,
        from_block: int = 0,
        poll_interval: float = 2.0,
        metrics: Optional[Metrics] = None
    ):
        """
        Initialize subscription.

        Args:
            web3: Web3 instance
            contract: web3 contract emitting the event
            event_name: Event name in the contract ABI
            on_event: Called with each decoded event
            on_error: Called once with an EventWatchError if the subscription fails
            argument_filters: Event argument values to match (value or list of values)
            from_block: First block of the historical query
            poll_interval: Seconds between live polls
            metrics: Metrics collector

        Raises:
            ValidationError: If the contract ABI has no such event
        """
        self.web3 = web3
        self.contract = contract
        self.event_name = event_name
        self.on_event = on_event
        self.on_error = on_error
        self.argument_filters = _normalize_filters(argument_filters)
        self.from_block = from_block
        self.poll_interval = poll_interval
        self.metrics = metrics

        event_abi(contract.abi, event_name)
        self._cursor: Optional[tuple[int, int]] = None
        self._last_block: Optional[int] = None
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self.error: Optional[EventWatchError] = None

    @property
    def is_active(self) -> bool:
        return self._thread is not None and self._thread.is_alive() and not self._stop.is_set()

    def start(self) -> "Subscription":
        """Start delivering events in a background thread."""
        if self._thread is not None:
            raise RuntimeError("Subscription already started")

        self._thread = threading.Thread(
            target=self._run,
            name=f"fcr-watch-{self.event_name}",
            daemon=True
        )
        self._thread.start()
        logger.info(f"Watching {self.event_name} on {self.contract.address}")
        return self

    def cancel(self) -> None:
        """Stop delivering events."""
        self._stop.set()
        logger.info(f"Stopped watching {self.event_name} on {self.contract.address}")

    def join(self, timeout: Optional[float] = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout=timeout)

    def _run(self) -> None:
        try:
            head = self.web3.eth.block_number
            self._deliver(self._fetch(self.from_block, head))
            # Live polling never reaches below from_block
            self._last_block = max(head, self.from_block - 1)

            while not self._stop.wait(self.poll_interval):
                head = self.web3.eth.block_number
                if head > self._last_block:
                    self._deliver(self._fetch(self._last_block + 1, head))
                    self._last_block = head
        except Exception as e:
            self._fail(e)

    def _fail(self, exc: Exception) -> None:
        self._stop.set()
        self.error = EventWatchError(
            f"Watching {self.event_name} failed: {exc}",
            event_name=self.event_name,
            contract=self.contract.address
        )
        self.error.__cause__ = exc
        logger.error(f"Watching {self.event_name} on {self.contract.address} failed: {exc}")
        if self.on_error is not None:
            self.on_error(self.error)

    def _fetch(self, from_block: int, to_block: int) -> list:
        """Fetch and decode matching events in [from_block, to_block]."""
        if to_block < from_block:
            return []

        event = getattr(self.contract.events, self.event_name)()
        # Positional: the block keywords differ between web3 v6 and v7
        events = event.get_logs(self.argument_filters, from_block, to_block)
        return sorted(events, key=lambda e: (e["blockNumber"], e["logIndex"]))

    def _deliver(self, events: list) -> None:
        for event in events:
            if self._stop.is_set():
                return
            position = (event["blockNumber"], event["logIndex"])
            if self._cursor is not None and position <= self._cursor:
                logger.debug(f"Skipping already delivered {self.event_name} at {position}")
                continue
            self._cursor = position
            self.on_event(event)
            if self.metrics:
                self.metrics.track_event(self.event_name)


class EventWatcher:
    """
    Creates event subscriptions with shared polling settings.

    Example:
        >>> watcher = EventWatcher(web3, from_block=0, poll_interval=2.0)
        >>> sub = watcher.watch(market, "OutcomeTokenPurchase", None, print, print)
        >>> sub.cancel()
    """

    def __init__(
        self,
        web3: Web3,
        from_block: int = 0,
        poll_interval: float = 2.0,
        metrics: Optional[Metrics] = None
    ):
        self.web3 = web3
        self.from_block = from_block
        self.poll_interval = poll_interval
        self.metrics = metrics

    def watch(
        self,
        contract: Any,
        event_name: str,
        argument_filters: Optional[Dict[str, Any]],
        on_event: EventCallback,
        on_error: Optional[ErrorCallback] = None
    ) -> Subscription:
        """
        Deliver past and live ``event_name`` events of ``contract``.

        Returns:
            Started subscription handle
        """
        return Subscription(
            self.web3,
            contract,
            event_name,
            on_event,
            on_error=on_error,
            argument_filters=argument_filters,
            from_block=self.from_block,
            poll_interval=self.poll_interval,
            metrics=self.metrics
        ).start()

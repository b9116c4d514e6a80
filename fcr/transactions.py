"""
Transaction submission for FCR contract calls.

``Transactor`` sends a single contract call and waits for its receipt, either
from a node-managed account (``transact``) or from a local eth_account signer
(``build_transaction`` + ``send_raw_transaction``).

``TransactionSender`` drives one multi-step operation: it sends each call in
order and appends every mined receipt to the operation's
``TransactionRecord``. Nothing is rolled back when a later step fails;
receipts already in the record stay on-chain.
"""

import logging
import time
from typing import Any, Optional

from eth_account.signers.local import LocalAccount
from web3 import Web3

from .exceptions import GasPriceError, TransactionRevertedError
from .metrics import Metrics
from .models import TransactionRecord
from .utils.validators import sender_address

logger = logging.getLogger(__name__)

# Gas price safety limits
DEFAULT_MAX_GAS_PRICE_GWEI = 500
WARN_GAS_PRICE_GWEI = 100

APPROVE_LABEL = "approve"


class Transactor:
    """
    Sends contract transactions and waits for receipts.

    Holds the per-client transaction options; safe to share between
    operations.
    """

    def __init__(
        self,
        web3: Web3,
        receipt_timeout: float = 120.0,
        gas: Optional[int] = None,
        gas_price_gwei: Optional[float] = None,
        max_gas_price_gwei: float = DEFAULT_MAX_GAS_PRICE_GWEI,
        metrics: Optional[Metrics] = None
    ):
        """
        Initialize transactor.

        Args:
            web3: Connected Web3 instance
            receipt_timeout: Seconds to wait for each receipt
            gas: Explicit gas limit (None lets the node estimate)
            gas_price_gwei: Explicit gas price (None lets the node decide)
            max_gas_price_gwei: Reject gas prices above this
            metrics: Metrics collector

        Raises:
            GasPriceError: If gas_price_gwei exceeds max_gas_price_gwei
        """
        self.web3 = web3
        self.receipt_timeout = receipt_timeout
        self.gas = gas
        self.gas_price_gwei = gas_price_gwei
        self.max_gas_price_gwei = max_gas_price_gwei
        self.metrics = metrics

        if gas_price_gwei is not None:
            self._validate_gas_price(gas_price_gwei)

    def _validate_gas_price(self, gas_price_gwei: float) -> None:
        if gas_price_gwei > self.max_gas_price_gwei:
            raise GasPriceError(
                f"Gas price {gas_price_gwei} gwei exceeds maximum {self.max_gas_price_gwei} gwei",
                gas_price_gwei=gas_price_gwei,
                max_gas_price_gwei=self.max_gas_price_gwei
            )

        if gas_price_gwei > WARN_GAS_PRICE_GWEI:
            logger.warning(
                f"High gas price: {gas_price_gwei} gwei "
                f"(above warning threshold of {WARN_GAS_PRICE_GWEI} gwei)"
            )

    def tx_params(self, sender: Any) -> dict:
        """Base transaction parameters for a sender."""
        params = {"from": sender_address(sender)}
        if self.gas is not None:
            params["gas"] = self.gas
        if self.gas_price_gwei is not None:
            params["gasPrice"] = self.web3.to_wei(self.gas_price_gwei, "gwei")
        return params

    def transact(self, contract_function: Any, sender: Any, label: str) -> Any:
        """
        Send a contract call and wait for it to be mined.

        Args:
            contract_function: Bound web3 contract function (``contract.functions.x(...)``)
            sender: Node-managed account address or LocalAccount signer
            label: Name recorded for the transaction

        Returns:
            Transaction receipt

        Raises:
            TransactionRevertedError: If the receipt status is not 1
        """
        params = self.tx_params(sender)
        logger.info(f"Sending {label} from {params['from']}")

        start = time.time()
        if isinstance(sender, LocalAccount):
            params["nonce"] = self.web3.eth.get_transaction_count(params["from"], "pending")
            tx = contract_function.build_transaction(params)
            signed_tx = sender.sign_transaction(tx)
            # Handle both web3.py v6 and v7
            raw_tx = getattr(signed_tx, 'raw_transaction', None) or getattr(signed_tx, 'rawTransaction')
            tx_hash = self.web3.eth.send_raw_transaction(raw_tx)
        else:
            tx_hash = contract_function.transact(params)

        receipt = self.web3.eth.wait_for_transaction_receipt(
            tx_hash,
            timeout=self.receipt_timeout
        )
        if self.metrics:
            self.metrics.track_receipt_latency(label, time.time() - start)

        tx_hex = tx_hash if isinstance(tx_hash, str) else Web3.to_hex(tx_hash)

        if receipt["status"] != 1:
            if self.metrics:
                self.metrics.track_transaction(label, "reverted")
            logger.error(
                f"{label} reverted: {tx_hex} "
                f"(block {receipt['blockNumber']}, gas {receipt['gasUsed']})"
            )
            raise TransactionRevertedError(
                f"{label} transaction reverted: {tx_hex}",
                tx_hash=tx_hex,
                label=label
            )

        if self.metrics:
            self.metrics.track_transaction(label, "success")
        logger.info(
            f"{label} confirmed: {tx_hex} "
            f"(block {receipt['blockNumber']}, gas {receipt['gasUsed']})"
        )
        return receipt


class TransactionSender:
    """
    Sends the transactions of one operation and records their receipts.

    Used as a context manager around the whole operation: any exception
    raised inside the block, from a reverted receipt or from the transport,
    leaves with ``record`` set to the entries mined so far. The exception
    itself is re-raised unchanged.

    Example:
        >>> with TransactionSender(transactor) as sender:
        ...     sender.approve(token, buyer, event_address, amount)
        ...     sender.send(event.functions.buyAllOutcomes(amount), "buyAllOutcomes", buyer)
        >>> record = sender.response()
    """

    def __init__(self, transactor: Transactor, record: Optional[TransactionRecord] = None):
        self.transactor = transactor
        self.record = record if record is not None else TransactionRecord()

    def __enter__(self) -> "TransactionSender":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_val is not None and getattr(exc_val, "record", None) is None:
            exc_val.record = self.record
            if len(self.record):
                logger.warning(
                    f"Operation failed after {len(self.record)} mined transaction(s): "
                    f"{', '.join(self.record.labels)}"
                )
        return False

    def send(self, contract_function: Any, label: str, sender: Any) -> Any:
        """Send a contract call, record it and make it the operation's response."""
        receipt = self.transactor.transact(contract_function, sender, label)
        self.record.add(receipt, label)
        self.record.response = receipt
        return receipt

    def approve(self, token: Any, owner: Any, spender: str, amount: int) -> Any:
        """Approve ``spender`` to move ``amount`` of ``token`` and record it."""
        receipt = token.approve(owner, spender, amount)
        self.record.add(receipt, APPROVE_LABEL, token.address)
        return receipt

    def response(self) -> TransactionRecord:
        return self.record

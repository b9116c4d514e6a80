"""
FCR client entry point.

Owns the web3 connection, the registry token and the LMSR market maker, and
hands out ``Challenge`` clients bound to them.
"""

import logging
from typing import Optional

from web3 import Web3

from .challenge import Challenge
from .config import FCRSettings, get_settings
from .contracts.abi import LMSR_MARKET_MAKER_ABI
from .events import EventWatcher
from .exceptions import ConnectionError, ValidationError
from .metrics import Metrics, get_metrics
from .token import Token
from .transactions import Transactor
from .utils.validators import validate_address

logger = logging.getLogger(__name__)


class FCRClient:
    """
    Futarchy Curated Registry client.

    Example:
        >>> client = FCRClient.from_settings()
        >>> challenge = client.challenge("0x...")
        >>> record = challenge.buy_outcome(buyer, "ACCEPTED_LONG", 100)
    """

    def __init__(
        self,
        web3: Web3,
        token_address: str,
        lmsr_address: str,
        settings: Optional[FCRSettings] = None,
        metrics: Optional[Metrics] = None
    ):
        """
        Initialize client.

        Args:
            web3: Web3 instance
            token_address: Registry token address
            lmsr_address: LMSR market maker address
            settings: Client settings (default: loaded from environment)
            metrics: Metrics collector (default: per settings)
        """
        self.settings = settings or get_settings()
        self.web3 = web3

        if metrics is None:
            metrics = get_metrics(
                enabled=self.settings.enable_metrics,
                port=self.settings.metrics_port
            )
        self.metrics = metrics

        self.transactor = Transactor(
            web3,
            receipt_timeout=self.settings.receipt_timeout,
            gas=self.settings.gas,
            gas_price_gwei=self.settings.gas_price_gwei,
            max_gas_price_gwei=self.settings.max_gas_price_gwei,
            metrics=metrics
        )
        self.watcher = EventWatcher(
            web3,
            from_block=self.settings.from_block,
            poll_interval=self.settings.event_poll_interval,
            metrics=metrics
        )

        self.fcr_token = Token(web3, token_address, self.transactor)
        self.lmsr = web3.eth.contract(
            address=validate_address(lmsr_address),
            abi=LMSR_MARKET_MAKER_ABI
        )

        logger.info(
            f"FCR client initialized (token {self.fcr_token.address}, lmsr {self.lmsr.address})"
        )

    @classmethod
    def from_settings(cls, settings: Optional[FCRSettings] = None) -> "FCRClient":
        """
        Connect to ``settings.rpc_url`` and build a client.

        Raises:
            ConnectionError: If the provider is unreachable or on the wrong chain
            ValidationError: If token or LMSR address is not configured
        """
        settings = settings or get_settings()

        if not settings.token_address or not settings.lmsr_address:
            raise ValidationError("token_address and lmsr_address must be configured")

        web3 = Web3(Web3.HTTPProvider(settings.rpc_url))
        if not web3.is_connected():
            raise ConnectionError(f"Web3 provider not connected: {settings.rpc_url}")

        if settings.chain_id is not None:
            chain_id = web3.eth.chain_id
            if chain_id != settings.chain_id:
                raise ConnectionError(
                    f"Wrong network: expected chain {settings.chain_id}, got {chain_id}"
                )

        return cls(web3, settings.token_address, settings.lmsr_address, settings=settings)

    def challenge(self, address: str) -> Challenge:
        """Client for the FutarchyChallenge at ``address``."""
        return Challenge(
            self.web3,
            address,
            self.fcr_token,
            self.lmsr,
            self.transactor,
            self.watcher
        )

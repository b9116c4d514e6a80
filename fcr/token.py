"""ERC20 token wrapper used for registry and decision token allowances."""

import logging
from typing import Any

from web3 import Web3

from .contracts.abi import ERC20_ABI
from .transactions import APPROVE_LABEL, Transactor
from .utils.validators import validate_address, validate_amount, sender_address

logger = logging.getLogger(__name__)


class Token:
    """ERC20 token bound to an address."""

    def __init__(self, web3: Web3, address: str, transactor: Transactor):
        self.web3 = web3
        self.address = validate_address(address)
        self.transactor = transactor
        self.contract = web3.eth.contract(address=self.address, abi=ERC20_ABI)

    def approve(self, owner: Any, spender: str, amount: int) -> Any:
        """
        Approve ``spender`` to transfer ``amount`` from ``owner``.

        Args:
            owner: Token holder (address or LocalAccount signer)
            spender: Contract allowed to spend
            amount: Allowance in token base units

        Returns:
            Transaction receipt
        """
        spender = validate_address(spender)
        amount = validate_amount(amount)
        logger.debug(f"Approving {spender} for {amount} of {self.address}")
        return self.transactor.transact(
            self.contract.functions.approve(spender, amount),
            owner,
            APPROVE_LABEL
        )

    def allowance(self, owner: Any, spender: str) -> int:
        return self.contract.functions.allowance(
            sender_address(owner),
            validate_address(spender)
        ).call()

    def balance_of(self, account: Any) -> int:
        return self.contract.functions.balanceOf(sender_address(account)).call()

    def __repr__(self) -> str:
        return f"Token({self.address})"

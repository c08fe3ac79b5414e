"""
contract.py - Call-at-a-Time Token Contract Runner

TokenContract plays the host's part for one contract instance: it delivers a
single call at a time to the operations module, inside a fresh
StorageTransaction, and commits the buffered writes only if the operation
returns. Any TokenError or ValueError discards the buffer and is re-raised,
so a rejected call leaves storage byte-for-byte unchanged.

Key responsibilities:
    - Builds the CallContext from the caller address
    - Commits or discards each call's writes as one unit
    - Reports accepted and rejected calls when verbose is on
"""

from __future__ import annotations
from typing import Any, Callable, Dict, Iterable, Optional

from . import operations
from .core import (
    Address, Amount, CallContext, Outcome, TokenError,
    DEFAULT_DECIMALS, DEFAULT_TOKEN_NAME, DEFAULT_TOKEN_SYMBOL,
)
from .operations import InitialBalanceLike
from .state import ContractState, TokenInfo, is_instantiated, load_state
from .storage import MemoryStorage, Storage, StorageTransaction


class TokenContract:
    """
    One fungible-token contract instance over a Storage.

    Thread Safety:
        Not thread-safe. Calls must be serialized by the caller, as the host
        serializes them.

    Example:
        token = TokenContract("myt", verbose=False)
        token.instantiate("owner", [("alice", 100)])
        token.transfer("alice", "bob", 40)
        token.query_balance("bob")   # 40
    """

    def __init__(
        self,
        name: str,
        storage: Optional[Storage] = None,
        verbose: bool = True,
    ):
        """
        Args:
            name: Instance identifier, used in verbose output
            storage: Backing store (default: a fresh MemoryStorage)
            verbose: Print one line per accepted or rejected call (default: True)
        """
        self.name = name
        self.storage: Storage = storage if storage is not None else MemoryStorage()
        self.verbose = verbose
        self.calls_applied = 0
        self.calls_rejected = 0

    # ========================================================================
    # CALL EXECUTION
    # ========================================================================

    def _run(
        self,
        action: str,
        sender: Address,
        op: Callable[..., Outcome],
        *args: Any,
        **kwargs: Any,
    ) -> Outcome:
        tx = StorageTransaction(self.storage)
        try:
            ctx = CallContext(sender=sender)
            outcome = op(tx, ctx, *args, **kwargs)
        except (TokenError, ValueError) as e:
            tx.discard()
            self.calls_rejected += 1
            if self.verbose:
                print(f"✗ REJECTED [{self.name}] {action} by {sender}: {type(e).__name__}: {e}")
            raise
        tx.commit()
        self.calls_applied += 1
        if self.verbose:
            attrs = " ".join(f"{k}={v}" for k, v in outcome.attributes)
            print(f"✓ APPLIED  [{self.name}] {outcome.action.value} {attrs}")
        return outcome

    # ========================================================================
    # OPERATIONS (Mutating)
    # ========================================================================

    def instantiate(
        self,
        sender: Address,
        initial_balances: Iterable[InitialBalanceLike] = (),
        name: str = DEFAULT_TOKEN_NAME,
        symbol: str = DEFAULT_TOKEN_SYMBOL,
        decimals: int = DEFAULT_DECIMALS,
    ) -> Outcome:
        return self._run(
            "instantiate", sender, operations.instantiate,
            list(initial_balances), name=name, symbol=symbol, decimals=decimals,
        )

    def transfer(self, sender: Address, recipient: Address, amount: Amount) -> Outcome:
        return self._run("transfer", sender, operations.transfer, recipient, amount)

    def approve(self, sender: Address, spender: Address, amount: Amount) -> Outcome:
        return self._run("approve", sender, operations.approve, spender, amount)

    def transfer_from(
        self, sender: Address, owner: Address, recipient: Address, amount: Amount
    ) -> Outcome:
        return self._run(
            "transfer_from", sender, operations.transfer_from, owner, recipient, amount
        )

    def decrease_allowance(self, sender: Address, spender: Address, amount: Amount) -> Outcome:
        return self._run(
            "decrease_allowance", sender, operations.decrease_allowance, spender, amount
        )

    def mint(self, sender: Address, recipient: Address, amount: Amount) -> Outcome:
        return self._run("mint", sender, operations.mint, recipient, amount)

    def burn(self, sender: Address, amount: Amount) -> Outcome:
        return self._run("burn", sender, operations.burn, amount)

    def pause(self, sender: Address) -> Outcome:
        return self._run("pause", sender, operations.pause)

    def unpause(self, sender: Address) -> Outcome:
        return self._run("unpause", sender, operations.unpause)

    # ========================================================================
    # QUERIES (read-only)
    # ========================================================================

    def query_balance(self, address: Address) -> Amount:
        return operations.query_balance(self.storage, address)

    def query_allowance(self, owner: Address, spender: Address) -> Amount:
        return operations.query_allowance(self.storage, owner, spender)

    def query_token_info(self) -> TokenInfo:
        return operations.query_token_info(self.storage)

    def total_supply(self) -> Amount:
        return self.query_token_info().total_supply

    def contract_state(self) -> ContractState:
        return load_state(self.storage)

    @property
    def instantiated(self) -> bool:
        return is_instantiated(self.storage)

    def verify_supply(self, addresses: Iterable[Address]) -> Dict[str, Any]:
        """
        Verify total supply against the balances of the given addresses.

        Example:
            result = token.verify_supply(["alice", "bob", "carol"])
            assert result['valid'], f"Supply mismatch: {result['difference']}"
        """
        return operations.verify_supply(self.storage, addresses)

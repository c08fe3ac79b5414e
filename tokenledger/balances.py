"""
balances.py - Balances and Total Supply

TokenLedger owns the balance map and TokenInfo.total_supply for one call.
It performs no authorization; the operations module decides who may call what.

Pairing rule: every mint_supply() is matched by a credit() of the same amount
and every burn_supply() by a debit() of the same amount, within the same call.
That pairing is what keeps total_supply equal to the sum of balances.
"""

from __future__ import annotations

from .arithmetic import checked_add, checked_sub, require_amount
from .core import Address, Amount, InsufficientBalance
from .state import (
    TokenInfo,
    balance_key, decode_balance, encode_balance,
    load_token_info, save_token_info,
)
from .storage import Storage


class TokenLedger:
    """
    Balance and supply primitives over a Storage.

    Example:
        ledger = TokenLedger(tx)
        ledger.credit("alice", 100)
        ledger.mint_supply(100)
        ledger.balance_of("alice")  # 100
    """

    def __init__(self, storage: Storage) -> None:
        self.storage = storage

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def balance_of(self, address: Address) -> Amount:
        """Return the balance of address; unseen addresses hold 0."""
        raw = self.storage.load(balance_key(address))
        if raw is None:
            return 0
        return decode_balance(raw)

    def token_info(self) -> TokenInfo:
        return load_token_info(self.storage)

    def total_supply(self) -> Amount:
        return self.token_info().total_supply

    # ------------------------------------------------------------------
    # Balance mutations
    # ------------------------------------------------------------------

    def credit(self, address: Address, amount: Amount) -> Amount:
        """
        Add amount to address's balance.

        Returns:
            The new balance.

        Raises:
            ArithmeticOverflow: If the new balance exceeds u128.
        """
        require_amount(amount)
        new_balance = checked_add(self.balance_of(address), amount)
        self.storage.save(balance_key(address), encode_balance(new_balance))
        return new_balance

    def debit(self, address: Address, amount: Amount) -> Amount:
        """
        Remove amount from address's balance.

        Returns:
            The new balance.

        Raises:
            InsufficientBalance: If amount exceeds the balance.
        """
        require_amount(amount)
        current = self.balance_of(address)
        if amount > current:
            raise InsufficientBalance(
                f"{address} balance {current} is less than {amount}"
            )
        new_balance = checked_sub(current, amount)
        self.storage.save(balance_key(address), encode_balance(new_balance))
        return new_balance

    # ------------------------------------------------------------------
    # Supply mutations
    # ------------------------------------------------------------------

    def mint_supply(self, amount: Amount) -> Amount:
        """
        Increase total supply. Returns the new total.

        Raises:
            ArithmeticOverflow: If total supply would exceed u128.
        """
        require_amount(amount)
        info = self.token_info()
        new_total = checked_add(info.total_supply, amount)
        save_token_info(self.storage, info.with_supply(new_total))
        return new_total

    def burn_supply(self, amount: Amount) -> Amount:
        """
        Decrease total supply. Returns the new total.

        Raises:
            ArithmeticUnderflow: If amount exceeds total supply.
        """
        require_amount(amount)
        info = self.token_info()
        new_total = checked_sub(info.total_supply, amount)
        save_token_info(self.storage, info.with_supply(new_total))
        return new_total

"""
allowances.py - Delegated Spending Rights

AllowanceRegistry owns the (owner, spender) -> amount map. An absent entry
and a zero entry mean the same thing.

Approvals accumulate: increase() adds to whatever is already granted.
"""

from __future__ import annotations

from .arithmetic import checked_add, checked_sub, require_amount
from .core import Address, Amount, InsufficientAllowance
from .state import allowance_key, decode_allowance, encode_allowance
from .storage import Storage


class AllowanceRegistry:
    """Allowance primitives over a Storage. No authorization checks."""

    def __init__(self, storage: Storage) -> None:
        self.storage = storage

    def allowance_of(self, owner: Address, spender: Address) -> Amount:
        """Return what spender may still draw from owner; 0 if never granted."""
        raw = self.storage.load(allowance_key(owner, spender))
        if raw is None:
            return 0
        return decode_allowance(raw)

    def _store(self, owner: Address, spender: Address, amount: Amount) -> None:
        self.storage.save(
            allowance_key(owner, spender),
            encode_allowance(owner, spender, amount),
        )

    def increase(self, owner: Address, spender: Address, amount: Amount) -> Amount:
        """
        Add amount to the allowance. Returns the new allowance.

        Raises:
            ArithmeticOverflow: If the allowance would exceed u128.
        """
        require_amount(amount)
        new_allowance = checked_add(self.allowance_of(owner, spender), amount)
        self._store(owner, spender, new_allowance)
        return new_allowance

    def decrease(self, owner: Address, spender: Address, amount: Amount) -> Amount:
        """
        Subtract amount from the allowance. Returns the new allowance.

        Raises:
            InsufficientAllowance: If amount exceeds the allowance.
        """
        require_amount(amount)
        current = self.allowance_of(owner, spender)
        if amount > current:
            raise InsufficientAllowance(
                f"{spender} allowance from {owner} is {current}, less than {amount}"
            )
        new_allowance = checked_sub(current, amount)
        self._store(owner, spender, new_allowance)
        return new_allowance

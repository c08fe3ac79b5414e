"""
access.py - Owner and Pause Checks

Pure predicates over ContractState. They raise or return; they never write.
Callers decide the order in which they are applied.
"""

from __future__ import annotations

from .core import Address, Unauthorized, ContractPaused
from .state import ContractState


def require_owner(caller: Address, state: ContractState) -> None:
    """
    Raises:
        Unauthorized: If caller is not the contract owner.
    """
    if caller != state.owner:
        raise Unauthorized(f"{caller} is not the contract owner")


def require_not_paused(state: ContractState) -> None:
    """
    Raises:
        ContractPaused: If the contract is paused.
    """
    if state.paused:
        raise ContractPaused("contract is paused")

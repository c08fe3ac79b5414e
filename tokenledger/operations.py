"""
operations.py - The Public Token Operations

Each operation receives the call's StorageTransaction (and the CallContext for
anything the caller's identity matters to), composes the access checks, the
reentrancy guard and the TokenLedger / AllowanceRegistry primitives, and
returns an Outcome whose changes are the buffered writes of the call.

Operations never commit. If one raises, the caller discards the transaction
and nothing the operation wrote survives; that is what makes multi-step
operations such as transfer_from all-or-nothing.

    Operation           Authorization                  Failure modes
    ------------------  -----------------------------  -----------------------------------
    instantiate         first call defines the owner   AlreadyInstantiated, ArithmeticOverflow
    query_balance       none                           none
    transfer            funds                          InsufficientBalance
    approve             caller owns the allowance      ArithmeticOverflow
    transfer_from       allowance from owner, funds    InsufficientAllowance, InsufficientBalance
    decrease_allowance  caller owns the allowance      InsufficientAllowance
    mint                owner, not paused, not nested  Unauthorized, ContractPaused,
                                                       ReentrantCall, ArithmeticOverflow
    burn                funds (own tokens)             InsufficientBalance
    pause / unpause     owner                          Unauthorized

Every operation except instantiate and the queries raises NotInstantiated on
a contract that was never instantiated.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Tuple, Union

from .access import require_not_paused, require_owner
from .allowances import AllowanceRegistry
from .arithmetic import require_amount
from .balances import TokenLedger
from .core import (
    Action, Address, Amount, CallContext, Outcome,
    AlreadyInstantiated,
    DEFAULT_DECIMALS, DEFAULT_TOKEN_NAME, DEFAULT_TOKEN_SYMBOL,
    require_address,
)
from .guard import guarded
from .state import (
    ContractState, TokenInfo,
    is_instantiated, load_state, save_state, save_token_info,
)
from .storage import Storage, StorageTransaction


@dataclass(frozen=True, slots=True)
class InitialBalance:
    """An (address, amount) pair credited at instantiation."""
    address: Address
    amount: Amount

    def __post_init__(self):
        require_address(self.address)
        require_amount(self.amount)


InitialBalanceLike = Union[InitialBalance, Tuple[Address, Amount]]


def _as_initial_balance(entry: InitialBalanceLike) -> InitialBalance:
    if isinstance(entry, InitialBalance):
        return entry
    if not isinstance(entry, (tuple, list)) or len(entry) != 2:
        raise ValueError(f"initial balance must be an (address, amount) pair, got {entry!r}")
    address, amount = entry
    return InitialBalance(address, amount)


def _outcome(tx: StorageTransaction, action: Action, *attributes: Tuple[str, Any]) -> Outcome:
    return Outcome(
        action=action,
        attributes=tuple((k, str(v)) for k, v in attributes),
        changes=tx.changes(),
    )


# ============================================================================
# INSTANTIATION
# ============================================================================

def instantiate(
    tx: StorageTransaction,
    ctx: CallContext,
    initial_balances: Iterable[InitialBalanceLike] = (),
    name: str = DEFAULT_TOKEN_NAME,
    symbol: str = DEFAULT_TOKEN_SYMBOL,
    decimals: int = DEFAULT_DECIMALS,
) -> Outcome:
    """
    Create the contract: the caller becomes owner, supply starts at zero, and
    every initial balance is credited and minted.

    Duplicate addresses in initial_balances accumulate.

    Raises:
        AlreadyInstantiated: If contract state already exists.
        ArithmeticOverflow: If a balance or the total supply would exceed u128.
    """
    if is_instantiated(tx):
        raise AlreadyInstantiated("contract is already instantiated")
    entries = [_as_initial_balance(e) for e in initial_balances]

    save_state(tx, ContractState(owner=ctx.sender))
    save_token_info(tx, TokenInfo(name=name, symbol=symbol, decimals=decimals))

    ledger = TokenLedger(tx)
    total = 0
    for entry in entries:
        ledger.credit(entry.address, entry.amount)
        total = ledger.mint_supply(entry.amount)

    return _outcome(
        tx, Action.INSTANTIATE,
        ("owner", ctx.sender),
        ("total_supply", total),
    )


# ============================================================================
# QUERIES
# ============================================================================

def query_balance(storage: Storage, address: Address) -> Amount:
    """
    Balance of address; 0 for unseen addresses and uninstantiated contracts.

    Raises:
        ValueError: If address is empty, not a str, or not UTF-8 encodable.
    """
    require_address(address)
    return TokenLedger(storage).balance_of(address)


def query_allowance(storage: Storage, owner: Address, spender: Address) -> Amount:
    """Remaining allowance spender may draw from owner; 0 if none."""
    require_address(owner, "owner")
    require_address(spender, "spender")
    return AllowanceRegistry(storage).allowance_of(owner, spender)


def query_token_info(storage: Storage) -> TokenInfo:
    """
    Raises:
        NotInstantiated: If the contract was never instantiated.
    """
    return TokenLedger(storage).token_info()


def verify_supply(storage: Storage, addresses: Iterable[Address]) -> Dict[str, Any]:
    """
    Check that total supply equals the sum of the given addresses' balances.

    The ledger keeps no index of holders, so the caller names the addresses to
    sum. Passing every address that ever held tokens makes this a full
    conservation check.

    Returns:
        Dict with keys:
        - 'valid': bool - True if total_supply == balance_sum
        - 'total_supply': recorded total supply
        - 'balance_sum': sum over the given addresses
        - 'difference': total_supply - balance_sum (signed)
    """
    ledger = TokenLedger(storage)
    total_supply = ledger.total_supply()
    # Sorted for deterministic accumulation order
    balance_sum = sum(ledger.balance_of(a) for a in sorted(set(addresses)))
    return {
        'valid': total_supply == balance_sum,
        'total_supply': total_supply,
        'balance_sum': balance_sum,
        'difference': total_supply - balance_sum,
    }


# ============================================================================
# TRANSFERS
# ============================================================================

def transfer(tx: StorageTransaction, ctx: CallContext, recipient: Address, amount: Amount) -> Outcome:
    """
    Move amount from the caller to recipient.

    Raises:
        InsufficientBalance: If the caller holds less than amount.
    """
    require_address(recipient, "recipient")
    require_amount(amount)
    load_state(tx)

    ledger = TokenLedger(tx)
    ledger.debit(ctx.sender, amount)
    ledger.credit(recipient, amount)

    return _outcome(
        tx, Action.TRANSFER,
        ("from", ctx.sender),
        ("to", recipient),
        ("amount", amount),
    )


def approve(tx: StorageTransaction, ctx: CallContext, spender: Address, amount: Amount) -> Outcome:
    """
    Grant spender amount more of the caller's tokens. Approvals accumulate.

    Raises:
        ArithmeticOverflow: If the allowance would exceed u128.
    """
    require_address(spender, "spender")
    require_amount(amount)
    load_state(tx)

    AllowanceRegistry(tx).increase(ctx.sender, spender, amount)

    return _outcome(
        tx, Action.APPROVE,
        ("owner", ctx.sender),
        ("spender", spender),
        ("amount", amount),
    )


def transfer_from(
    tx: StorageTransaction,
    ctx: CallContext,
    owner: Address,
    recipient: Address,
    amount: Amount,
) -> Outcome:
    """
    Move amount from owner to recipient, spending the caller's allowance.

    The allowance is spent before the owner's balance is checked; the
    transaction boundary undoes the spend if the debit then fails.

    Raises:
        InsufficientAllowance: If the caller's allowance from owner is below amount.
        InsufficientBalance: If owner holds less than amount.
    """
    require_address(owner, "owner")
    require_address(recipient, "recipient")
    require_amount(amount)
    load_state(tx)

    AllowanceRegistry(tx).decrease(owner, ctx.sender, amount)
    ledger = TokenLedger(tx)
    ledger.debit(owner, amount)
    ledger.credit(recipient, amount)

    return _outcome(
        tx, Action.TRANSFER_FROM,
        ("from", owner),
        ("to", recipient),
        ("by", ctx.sender),
        ("amount", amount),
    )


def decrease_allowance(tx: StorageTransaction, ctx: CallContext, spender: Address, amount: Amount) -> Outcome:
    """
    Reduce the allowance the caller granted to spender.

    Raises:
        InsufficientAllowance: If amount exceeds the current allowance.
    """
    require_address(spender, "spender")
    require_amount(amount)
    load_state(tx)

    AllowanceRegistry(tx).decrease(ctx.sender, spender, amount)

    return _outcome(
        tx, Action.DECREASE_ALLOWANCE,
        ("owner", ctx.sender),
        ("spender", spender),
        ("amount", amount),
    )


# ============================================================================
# SUPPLY
# ============================================================================

def mint(tx: StorageTransaction, ctx: CallContext, recipient: Address, amount: Amount) -> Outcome:
    """
    Create amount new tokens for recipient.

    Authorization and pause are checked before the guard is taken; the guard
    covers only the credit/supply pair and is released on every path.

    Raises:
        Unauthorized: If the caller is not the owner.
        ContractPaused: If the contract is paused.
        ReentrantCall: If a mint is already executing in this call.
        ArithmeticOverflow: If the balance or total supply would exceed u128.
    """
    require_address(recipient, "recipient")
    require_amount(amount)
    state = load_state(tx)

    require_owner(ctx.sender, state)
    require_not_paused(state)

    ledger = TokenLedger(tx)
    with guarded(tx, state):
        ledger.credit(recipient, amount)
        ledger.mint_supply(amount)

    return _outcome(
        tx, Action.MINT,
        ("to", recipient),
        ("amount", amount),
    )


def burn(tx: StorageTransaction, ctx: CallContext, amount: Amount) -> Outcome:
    """
    Destroy amount of the caller's own tokens.

    Raises:
        InsufficientBalance: If the caller holds less than amount.
    """
    require_amount(amount)
    load_state(tx)

    ledger = TokenLedger(tx)
    ledger.debit(ctx.sender, amount)
    ledger.burn_supply(amount)

    return _outcome(
        tx, Action.BURN,
        ("from", ctx.sender),
        ("amount", amount),
    )


# ============================================================================
# CONTROL
# ============================================================================

def _set_paused(tx: StorageTransaction, ctx: CallContext, paused: bool) -> ContractState:
    state = load_state(tx)
    require_owner(ctx.sender, state)
    state.paused = paused
    save_state(tx, state)
    return state


def pause(tx: StorageTransaction, ctx: CallContext) -> Outcome:
    """
    Raises:
        Unauthorized: If the caller is not the owner.
    """
    _set_paused(tx, ctx, True)
    return _outcome(tx, Action.PAUSE, ("sender", ctx.sender))


def unpause(tx: StorageTransaction, ctx: CallContext) -> Outcome:
    """
    Raises:
        Unauthorized: If the caller is not the owner.
    """
    _set_paused(tx, ctx, False)
    return _outcome(tx, Action.UNPAUSE, ("sender", ctx.sender))

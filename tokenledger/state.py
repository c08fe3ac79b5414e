"""
state.py - Persistent Records and Storage Layout

One canonical representation for every entity the ledger persists:

    b"token_info"                      -> TokenInfo JSON
    b"state"                           -> ContractState JSON
    ns("balances")   + address         -> {"amount": "<u128>"}
    ns("allowances") + lp(owner) + spender
                                       -> {"allowance": "<u128>", "owner": ..., "spender": ...}

ns()/lp() prefix a component with its 2-byte big-endian length so that
adjacent variable-length components can never be confused.

u128 values are serialized as decimal strings. Values are JSON with sorted
keys, so equal records always encode to equal bytes.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Any, Dict
import json

from .arithmetic import require_amount
from .core import (
    Address, Amount, MAX_DECIMALS,
    NotInstantiated,
    require_address,
)
from .storage import Storage


# ============================================================================
# STORAGE KEYS
# ============================================================================

TOKEN_INFO_KEY = b"token_info"
STATE_KEY = b"state"
BALANCES_PREFIX = b"balances"
ALLOWANCES_PREFIX = b"allowances"


def _length_prefixed(component: bytes) -> bytes:
    if len(component) > 0xFFFF:
        raise ValueError("key component longer than 65535 bytes")
    return len(component).to_bytes(2, "big") + component


def balance_key(address: Address) -> bytes:
    return _length_prefixed(BALANCES_PREFIX) + address.encode("utf-8")


def allowance_key(owner: Address, spender: Address) -> bytes:
    return (
        _length_prefixed(ALLOWANCES_PREFIX)
        + _length_prefixed(owner.encode("utf-8"))
        + spender.encode("utf-8")
    )


# ============================================================================
# RECORDS
# ============================================================================

@dataclass(frozen=True, slots=True)
class TokenInfo:
    """
    Token metadata and the running total supply.

    Invariant: total_supply equals the sum of all balances between calls.
    """
    name: str
    symbol: str
    decimals: int
    total_supply: Amount = 0

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError("token name cannot be empty")
        if not isinstance(self.symbol, str) or not self.symbol.strip():
            raise ValueError("token symbol cannot be empty")
        if isinstance(self.decimals, bool) or not isinstance(self.decimals, int):
            raise ValueError(f"decimals must be int, got {type(self.decimals).__name__}")
        if not 0 <= self.decimals <= MAX_DECIMALS:
            raise ValueError(f"decimals must be in 0..{MAX_DECIMALS}, got {self.decimals}")
        require_amount(self.total_supply, "total_supply")

    def with_supply(self, total_supply: Amount) -> TokenInfo:
        return replace(self, total_supply=total_supply)


@dataclass(slots=True)
class ContractState:
    """
    Owner and control flags for one contract instance.

    Loaded once per call and passed to every check and guard, so the flags
    are explicit per-instance fields rather than ambient globals.

    owner is fixed at instantiation; there is no operation that changes it.
    reentrancy_guard is flipped only through tokenledger.guard.
    """
    owner: Address
    paused: bool = False
    reentrancy_guard: bool = False

    def __post_init__(self):
        require_address(self.owner, "owner")


# ============================================================================
# CODEC
# ============================================================================

def _encode(obj: Dict[str, Any]) -> bytes:
    return json.dumps(obj, sort_keys=True, separators=(",", ":")).encode("utf-8")


def _decode(raw: bytes) -> Dict[str, Any]:
    obj = json.loads(raw.decode("utf-8"))
    if not isinstance(obj, dict):
        raise ValueError(f"expected JSON object, got {type(obj).__name__}")
    return obj


def _amount_to_json(amount: Amount) -> str:
    return str(require_amount(amount))


def _amount_from_json(value: Any, what: str) -> Amount:
    if not isinstance(value, str) or not value.isdigit():
        raise ValueError(f"{what} must be a decimal string, got {value!r}")
    return require_amount(int(value), what)


def encode_token_info(info: TokenInfo) -> bytes:
    return _encode({
        "name": info.name,
        "symbol": info.symbol,
        "decimals": info.decimals,
        "total_supply": _amount_to_json(info.total_supply),
    })


def decode_token_info(raw: bytes) -> TokenInfo:
    obj = _decode(raw)
    return TokenInfo(
        name=obj["name"],
        symbol=obj["symbol"],
        decimals=obj["decimals"],
        total_supply=_amount_from_json(obj["total_supply"], "total_supply"),
    )


def encode_state(state: ContractState) -> bytes:
    return _encode({
        "owner": state.owner,
        "paused": bool(state.paused),
        "reentrancy_guard": bool(state.reentrancy_guard),
    })


def decode_state(raw: bytes) -> ContractState:
    obj = _decode(raw)
    return ContractState(
        owner=obj["owner"],
        paused=bool(obj["paused"]),
        reentrancy_guard=bool(obj["reentrancy_guard"]),
    )


def encode_balance(amount: Amount) -> bytes:
    return _encode({"amount": _amount_to_json(amount)})


def decode_balance(raw: bytes) -> Amount:
    return _amount_from_json(_decode(raw)["amount"], "amount")


def encode_allowance(owner: Address, spender: Address, amount: Amount) -> bytes:
    return _encode({
        "owner": owner,
        "spender": spender,
        "allowance": _amount_to_json(amount),
    })


def decode_allowance(raw: bytes) -> Amount:
    return _amount_from_json(_decode(raw)["allowance"], "allowance")


# ============================================================================
# SINGLETON ACCESS
# ============================================================================

def is_instantiated(storage: Storage) -> bool:
    return storage.load(STATE_KEY) is not None


def load_state(storage: Storage) -> ContractState:
    """
    Raises:
        NotInstantiated: If the contract state was never saved.
    """
    raw = storage.load(STATE_KEY)
    if raw is None:
        raise NotInstantiated("contract has not been instantiated")
    return decode_state(raw)


def save_state(storage: Storage, state: ContractState) -> None:
    storage.save(STATE_KEY, encode_state(state))


def load_token_info(storage: Storage) -> TokenInfo:
    """
    Raises:
        NotInstantiated: If token info was never saved.
    """
    raw = storage.load(TOKEN_INFO_KEY)
    if raw is None:
        raise NotInstantiated("token info missing; contract has not been instantiated")
    return decode_token_info(raw)


def save_token_info(storage: Storage, info: TokenInfo) -> None:
    storage.save(TOKEN_INFO_KEY, encode_token_info(info))

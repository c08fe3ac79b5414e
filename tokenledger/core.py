"""
Core types for the fungible-token ledger.

This module provides the foundational data structures shared by every layer:
1. Constants: integer width, token metadata defaults
2. Type aliases: Address, Amount
3. Exceptions: TokenError and the domain-specific error kinds
4. Immutable data structures: CallContext, StorageChange, Outcome
5. Input validation helpers for addresses

Nothing in this module touches storage.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple


# ============================================================================
# CONSTANTS
# ============================================================================

# Amounts and supply are unsigned 128-bit integers.
U128_MAX = 2**128 - 1

# Token metadata used when instantiate() is not given explicit values.
DEFAULT_TOKEN_NAME = "My Token"
DEFAULT_TOKEN_SYMBOL = "MYT"
DEFAULT_DECIMALS = 6

# Decimals is stored as an unsigned 8-bit integer.
MAX_DECIMALS = 255


# ============================================================================
# TYPE ALIASES
# ============================================================================

# Account identifier as supplied by the host (human-readable address).
Address = str

# Unsigned 128-bit quantity of tokens.
Amount = int


# ============================================================================
# ENUMS
# ============================================================================

class Action(Enum):
    """
    Tag attached to every outcome, naming the operation that produced it.
    """
    INSTANTIATE = "instantiate"
    TRANSFER = "transfer"
    APPROVE = "approve"
    TRANSFER_FROM = "transfer_from"
    DECREASE_ALLOWANCE = "decrease_allowance"
    MINT = "mint"
    BURN = "burn"
    PAUSE = "pause"
    UNPAUSE = "unpause"


# ============================================================================
# EXCEPTIONS
# ============================================================================

class TokenError(Exception):
    """Base exception for all token ledger errors. Every one aborts the call."""
    pass


class Unauthorized(TokenError):
    """Raised when the caller is not the contract owner."""
    pass


class ContractPaused(TokenError):
    """Raised when a pause-gated operation is attempted while paused."""
    pass


class ReentrantCall(TokenError):
    """Raised when a guarded operation is entered while already executing."""
    pass


class InsufficientBalance(TokenError):
    """Raised when a debit exceeds the account balance."""
    pass


class InsufficientAllowance(TokenError):
    """Raised when a spend or decrease exceeds the remaining allowance."""
    pass


class ArithmeticOverflow(TokenError):
    """Raised when an addition would exceed U128_MAX."""
    pass


class ArithmeticUnderflow(TokenError):
    """Raised when a subtraction would go below zero."""
    pass


class NotInstantiated(TokenError):
    """Raised when a call reaches a contract whose state was never created."""
    pass


class AlreadyInstantiated(TokenError):
    """Raised when instantiate() is called on an existing contract."""
    pass


# ============================================================================
# VALIDATION
# ============================================================================

def require_address(address: Address, what: str = "address") -> Address:
    """
    Validate an account address supplied by the caller.

    Addresses become storage key bytes, so they must encode as UTF-8.

    Raises:
        ValueError: If the address is not a non-empty, UTF-8 encodable string.
    """
    if not isinstance(address, str):
        raise ValueError(f"{what} must be str, got {type(address).__name__}")
    if not address or not address.strip():
        raise ValueError(f"{what} cannot be empty")
    try:
        address.encode("utf-8")
    except UnicodeEncodeError:
        raise ValueError(f"{what} is not valid UTF-8: {address!r}") from None
    return address


# ============================================================================
# CALL CONTEXT
# ============================================================================

@dataclass(frozen=True, slots=True)
class CallContext:
    """
    What the host knows about the call being delivered.

    Attributes:
        sender: Address of the caller.
        block_height: Host block height (not used by the ledger).
        block_time: Host block time in seconds (not used by the ledger).
    """
    sender: Address
    block_height: int = 0
    block_time: int = 0

    def __post_init__(self):
        require_address(self.sender, "sender")


# ============================================================================
# OUTCOMES
# ============================================================================

@dataclass(frozen=True, slots=True)
class StorageChange:
    """
    Before/after bytes for one storage key written during a call.

    old_value is None when the key did not exist before the call.
    """
    key: bytes
    old_value: Optional[bytes]
    new_value: bytes

    @property
    def created(self) -> bool:
        return self.old_value is None


@dataclass(frozen=True, slots=True)
class Outcome:
    """
    Result of a mutating operation.

    Attributes:
        action: Which operation ran.
        attributes: Ordered (key, value) pairs describing the addresses and
            amounts involved. The host formats these into events.
        changes: Storage keys written by the operation, in first-write order.
    """
    action: Action
    attributes: Tuple[Tuple[str, str], ...] = ()
    changes: Tuple[StorageChange, ...] = field(default=())

    def attribute(self, key: str) -> Optional[str]:
        """Return the first attribute value for key, or None."""
        for k, v in self.attributes:
            if k == key:
                return v
        return None

    def as_dict(self) -> Dict[str, Any]:
        """Flatten to a plain dict: action plus attributes."""
        out: Dict[str, Any] = {"action": self.action.value}
        out.update(self.attributes)
        return out

    def __repr__(self) -> str:
        w = 72
        bar = "─" * w

        def pad(text: str) -> str:
            if len(text) > w:
                return text[:w-3] + "..."
            return text + " " * (w - len(text))

        lines = [
            "",
            f"┌{bar}┐",
            f"│{pad(' Outcome: ' + self.action.value)}│",
            f"├{bar}┤",
        ]
        for k, v in self.attributes:
            lines.append(f"│{pad(f'   {k:<10}: {v}')}│")
        if self.changes:
            lines.append(f"├{bar}┤")
            lines.append(f"│{pad(' Changes (' + str(len(self.changes)) + '):')}│")
            for ch in self.changes:
                marker = "+" if ch.created else "~"
                lines.append(f"│{pad(f'   {marker} {ch.key!r}')}│")
        lines.append(f"└{bar}┘")
        return "\n".join(lines)

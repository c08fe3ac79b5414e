"""
tokenledger - Fungible Token Ledger

The accounting core of a fungible token: balances, total supply, allowances,
and the owner / pause / reentrancy controls that decide who may change them.

Usage:
    from tokenledger import TokenContract

    token = TokenContract("main")
    token.instantiate("owner", [("alice", 100)])

    token.transfer("alice", "bob", 40)
    token.approve("alice", "bob", 50)
    token.transfer_from("bob", "alice", "carol", 30)

    token.query_balance("alice")   # 30
    token.total_supply()           # 100
"""

# Core types
from .core import (
    Address,
    Amount,
    Action,
    CallContext,
    Outcome,
    StorageChange,
    TokenError,
    Unauthorized,
    ContractPaused,
    ReentrantCall,
    InsufficientBalance,
    InsufficientAllowance,
    ArithmeticOverflow,
    ArithmeticUnderflow,
    NotInstantiated,
    AlreadyInstantiated,
    U128_MAX,
    DEFAULT_TOKEN_NAME,
    DEFAULT_TOKEN_SYMBOL,
    DEFAULT_DECIMALS,
)

# Arithmetic
from .arithmetic import checked_add, checked_sub, require_amount

# Storage
from .storage import Storage, MemoryStorage, StorageTransaction

# Persistent records
from .state import ContractState, TokenInfo

# Access control and guard
from .access import require_owner, require_not_paused
from .guard import ReentrancyGuard, GuardToken, guarded

# Ledger primitives
from .balances import TokenLedger
from .allowances import AllowanceRegistry

# Operations
from .operations import (
    InitialBalance,
    instantiate,
    query_balance,
    query_allowance,
    query_token_info,
    verify_supply,
    transfer,
    approve,
    transfer_from,
    decrease_allowance,
    mint,
    burn,
    pause,
    unpause,
)

# Runner
from .contract import TokenContract

__all__ = [
    # Core
    'Address', 'Amount', 'Action', 'CallContext', 'Outcome', 'StorageChange',
    'TokenError', 'Unauthorized', 'ContractPaused', 'ReentrantCall',
    'InsufficientBalance', 'InsufficientAllowance',
    'ArithmeticOverflow', 'ArithmeticUnderflow',
    'NotInstantiated', 'AlreadyInstantiated',
    'U128_MAX', 'DEFAULT_TOKEN_NAME', 'DEFAULT_TOKEN_SYMBOL', 'DEFAULT_DECIMALS',
    # Arithmetic
    'checked_add', 'checked_sub', 'require_amount',
    # Storage
    'Storage', 'MemoryStorage', 'StorageTransaction',
    # Records
    'ContractState', 'TokenInfo',
    # Access control and guard
    'require_owner', 'require_not_paused',
    'ReentrancyGuard', 'GuardToken', 'guarded',
    # Ledger primitives
    'TokenLedger', 'AllowanceRegistry',
    # Operations
    'InitialBalance', 'instantiate', 'query_balance', 'query_allowance',
    'query_token_info', 'verify_supply',
    'transfer', 'approve', 'transfer_from', 'decrease_allowance',
    'mint', 'burn', 'pause', 'unpause',
    # Runner
    'TokenContract',
]

__version__ = '1.0.0'

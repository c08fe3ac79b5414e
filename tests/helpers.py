"""
helpers.py - Shared constants and assertions for tokenledger tests
"""

from typing import Dict, Iterable

from tokenledger import TokenContract, CallContext


OWNER = "owner"
ALICE = "alice"
BOB = "bob"
CAROL = "carol"
DAVE = "dave"

HOLDERS = (OWNER, ALICE, BOB, CAROL, DAVE)


def verify_conservation(token: TokenContract, addresses: Iterable[str] = HOLDERS) -> bool:
    """total_supply equals the sum of balances over the given addresses."""
    return token.verify_supply(addresses)['valid']


def balances_of(token: TokenContract, addresses: Iterable[str] = HOLDERS) -> Dict[str, int]:
    return {a: token.query_balance(a) for a in addresses}


def ctx(sender: str) -> CallContext:
    return CallContext(sender=sender)

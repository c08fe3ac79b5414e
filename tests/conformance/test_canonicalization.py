"""
Canonicalization Conformance Tests

INVARIANT: Equal logical state has exactly one byte representation.

    ∀ histories h1, h2: state(h1) == state(h2) ⟹ storage(h1) == storage(h2)

Records are JSON with sorted keys and no insignificant whitespace; u128
quantities are decimal strings so no JSON reader can round them.
"""

import json

from hypothesis import given, settings
from hypothesis import strategies as st

from tokenledger import TokenInfo, ContractState, U128_MAX
from tokenledger.state import (
    encode_token_info, decode_token_info, encode_balance, decode_balance,
    encode_allowance, decode_allowance, encode_state, decode_state,
)

from tests.conformance.strategies import new_token
from tests.helpers import OWNER, ALICE, BOB, CAROL


u128 = st.integers(min_value=0, max_value=U128_MAX)
names = st.text(min_size=1, max_size=20).filter(lambda s: s.strip())


class TestEncodingProperties:
    """Property-based encoding tests."""

    @given(u128)
    @settings(max_examples=200)
    def test_balance_is_exact_decimal_string(self, amount):
        """
        PROPERTY: Every u128 survives encoding exactly, as a decimal string.
        """
        raw = encode_balance(amount)
        assert json.loads(raw) == {"amount": str(amount)}
        assert decode_balance(raw) == amount

    @given(names, names, st.integers(min_value=0, max_value=255), u128)
    @settings(max_examples=100)
    def test_token_info_bytes_determined_by_value(self, name, symbol, decimals, supply):
        """
        PROPERTY: Two equal TokenInfo records encode to the same bytes.
        """
        a = TokenInfo(name, symbol, decimals, supply)
        b = TokenInfo(name, symbol, decimals, 0).with_supply(supply)
        assert encode_token_info(a) == encode_token_info(b)
        assert decode_token_info(encode_token_info(a)) == a

    @given(names, st.booleans(), st.booleans())
    def test_state_keys_sorted(self, owner, paused, guard):
        raw = encode_state(ContractState(owner=owner, paused=paused, reentrancy_guard=guard))
        keys = list(json.loads(raw).keys())
        assert keys == sorted(keys)
        assert b" " not in raw.replace(json.dumps(owner).encode(), b"")
        assert decode_state(raw) == ContractState(owner=owner, paused=paused, reentrancy_guard=guard)

    @given(u128)
    def test_allowance_record(self, amount):
        raw = encode_allowance(ALICE, BOB, amount)
        assert decode_allowance(raw) == amount
        assert raw.index(b'"allowance"') < raw.index(b'"owner"') < raw.index(b'"spender"')


class TestEquivalentHistories:
    """Different histories that reach the same logical state store the same bytes."""

    @given(st.lists(st.integers(min_value=0, max_value=1000), min_size=1, max_size=10))
    @settings(max_examples=50, deadline=None)
    def test_split_approvals_equal_single_approval(self, parts):
        split = new_token([(ALICE, 10)])
        for part in parts:
            split.approve(ALICE, BOB, part)
        single = new_token([(ALICE, 10)])
        single.approve(ALICE, BOB, sum(parts))
        assert split.storage.snapshot() == single.storage.snapshot()

    @given(st.lists(st.integers(min_value=0, max_value=1000), min_size=1, max_size=10))
    @settings(max_examples=50, deadline=None)
    def test_split_mints_equal_single_mint(self, parts):
        split = new_token([])
        for part in parts:
            split.mint(OWNER, CAROL, part)
        single = new_token([])
        single.mint(OWNER, CAROL, sum(parts))
        assert split.storage.snapshot() == single.storage.snapshot()

    def test_independent_transfers_commute(self):
        first = new_token([(ALICE, 100), (BOB, 100)])
        first.transfer(ALICE, CAROL, 10)
        first.transfer(BOB, CAROL, 20)
        second = new_token([(ALICE, 100), (BOB, 100)])
        second.transfer(BOB, CAROL, 20)
        second.transfer(ALICE, CAROL, 10)
        assert first.storage.snapshot() == second.storage.snapshot()

    def test_pause_round_trip_restores_bytes(self):
        token = new_token([(ALICE, 100)])
        before = token.storage.snapshot()
        token.pause(OWNER)
        token.unpause(OWNER)
        assert token.storage.snapshot() == before

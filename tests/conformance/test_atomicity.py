"""
Atomicity Conformance Tests

INVARIANT: Calls are all-or-nothing.

    ∀ call C:
        C succeeds ⟹ every write of C reaches storage
        C fails ⟹ storage is byte-for-byte what it was before C

Multi-step operations (transfer_from spends an allowance before it checks
the owner's balance) rely on this: a later failure undoes the earlier step.
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from tokenledger import (
    TokenContract, MemoryStorage, StorageTransaction,
    InsufficientBalance, InsufficientAllowance, ArithmeticOverflow,
    Unauthorized, ContractPaused, TokenError, U128_MAX,
)
from tokenledger import operations as ops

from tests.conformance.strategies import (
    apply_call, call_sequences, calls, initial_balances, new_token,
)
from tests.helpers import OWNER, ALICE, BOB, CAROL, DAVE, ctx


class TestAtomicityProperties:
    """Property-based atomicity tests."""

    @given(initial_balances, call_sequences)
    @settings(max_examples=200, deadline=None)
    def test_rejected_call_changes_nothing(self, balances, sequence):
        """
        PROPERTY: Every rejected call leaves the full storage snapshot unchanged.
        """
        token = new_token(balances)
        for call in sequence:
            before = token.storage.snapshot()
            if not apply_call(token, call):
                assert token.storage.snapshot() == before, f"{call} leaked writes"

    @given(initial_balances, call_sequences, calls())
    @settings(max_examples=100, deadline=None)
    def test_outcome_changes_are_exactly_what_committed(self, balances, sequence, final):
        """
        PROPERTY: An accepted call's reported changes describe storage exactly.
        """
        token = new_token(balances)
        for call in sequence:
            apply_call(token, call)
        before = token.storage.snapshot()
        method, *args = final
        try:
            outcome = getattr(token, method)(*args)
        except TokenError:
            return
        after = token.storage.snapshot()
        for change in outcome.changes:
            assert before.get(change.key) == change.old_value
            assert after[change.key] == change.new_value
        changed = {k for k in after if before.get(k) != after[k]}
        assert changed == {c.key for c in outcome.changes}

    @given(st.integers(min_value=1, max_value=1000), st.integers(min_value=1, max_value=1000))
    @settings(max_examples=50, deadline=None)
    def test_transfer_from_allowance_survives_failed_debit(self, balance, excess):
        """
        PROPERTY: If transfer_from fails on the owner's balance, the allowance
        it already spent inside the call is restored.
        """
        token = new_token([(ALICE, balance)])
        amount = balance + excess
        token.approve(ALICE, BOB, amount)
        with pytest.raises(InsufficientBalance):
            token.transfer_from(BOB, ALICE, CAROL, amount)
        assert token.query_allowance(ALICE, BOB) == amount
        assert token.query_balance(ALICE) == balance
        assert token.query_balance(CAROL) == 0


class TestAtomicityExamples:
    """Explicit atomicity examples."""

    def test_failed_transfer(self):
        token = new_token([(ALICE, 100)])
        before = token.storage.snapshot()
        with pytest.raises(InsufficientBalance):
            token.transfer(ALICE, BOB, 101)
        assert token.storage.snapshot() == before

    def test_failed_transfer_from_on_allowance(self):
        token = new_token([(ALICE, 100)])
        token.approve(ALICE, BOB, 20)
        before = token.storage.snapshot()
        with pytest.raises(InsufficientAllowance):
            token.transfer_from(BOB, ALICE, CAROL, 1000)
        assert token.storage.snapshot() == before

    def test_failed_mint_overflow_after_credit(self):
        """The recipient credit succeeds, the supply update overflows; neither survives."""
        token = new_token([(ALICE, U128_MAX)])
        before = token.storage.snapshot()
        with pytest.raises(ArithmeticOverflow):
            token.mint(OWNER, DAVE, 1)
        assert token.storage.snapshot() == before
        assert token.query_balance(DAVE) == 0
        assert not token.contract_state().reentrancy_guard

    @pytest.mark.parametrize("call,exc", [
        (("mint", ALICE, ALICE, 1), Unauthorized),
        (("pause", BOB), Unauthorized),
        (("burn", CAROL, 1), InsufficientBalance),
        (("decrease_allowance", ALICE, BOB, 1), InsufficientAllowance),
    ])
    def test_rejections_leave_storage_intact(self, call, exc):
        token = new_token([(ALICE, 100)])
        before = token.storage.snapshot()
        method, *args = call
        with pytest.raises(exc):
            getattr(token, method)(*args)
        assert token.storage.snapshot() == before

    def test_paused_mint_leaves_storage_intact(self):
        token = new_token([(ALICE, 100)])
        token.pause(OWNER)
        before = token.storage.snapshot()
        with pytest.raises(ContractPaused):
            token.mint(OWNER, DAVE, 10)
        assert token.storage.snapshot() == before

    def test_uncommitted_transaction_is_invisible(self):
        """Writes made by an operation are invisible until commit()."""
        storage = MemoryStorage()
        setup = StorageTransaction(storage)
        ops.instantiate(setup, ctx(OWNER), [(ALICE, 100)])
        setup.commit()

        tx = StorageTransaction(storage)
        ops.transfer(tx, ctx(ALICE), BOB, 40)
        assert ops.query_balance(tx, BOB) == 40
        assert ops.query_balance(storage, BOB) == 0
        tx.discard()
        assert ops.query_balance(storage, ALICE) == 100

    def test_runner_rejection_with_injected_storage(self):
        storage = MemoryStorage()
        token = TokenContract("atomic", storage=storage, verbose=False)
        token.instantiate(OWNER, [(ALICE, 5)])
        keys_before = len(storage)
        with pytest.raises(InsufficientBalance):
            token.transfer(ALICE, BOB, 6)
        assert len(storage) == keys_before

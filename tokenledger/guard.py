"""
guard.py - Reentrancy Guard

A single flag on ContractState, persisted through the call's storage so that
a nested call within the same logical transaction sees it set.

The flag is cleared on every exit path. Use the context manager form:

    with guarded(storage, state):
        ...  # critical section

or hold the token explicitly:

    token = ReentrancyGuard(storage, state).enter()
    try:
        ...
    finally:
        token.release()
"""

from __future__ import annotations
from contextlib import contextmanager
from typing import Iterator

from .core import ReentrantCall
from .state import ContractState, load_state, save_state
from .storage import Storage


class GuardToken:
    """Proof that the guard is held. Releasing it twice is a no-op."""

    __slots__ = ("_guard", "_released")

    def __init__(self, guard: ReentrancyGuard) -> None:
        self._guard = guard
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        if not self._released:
            self._released = True
            self._guard.exit()

    def __enter__(self) -> GuardToken:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()


class ReentrancyGuard:
    """
    Non-reentrancy latch for one contract instance.

    Args:
        storage: Storage the call is running against
        state: The call's ContractState, whose reentrancy_guard field is the latch
    """

    def __init__(self, storage: Storage, state: ContractState) -> None:
        self.storage = storage
        self.state = state

    @property
    def entered(self) -> bool:
        return self.state.reentrancy_guard

    def enter(self) -> GuardToken:
        """
        Raises:
            ReentrantCall: If the guard is already held.
        """
        if self.state.reentrancy_guard:
            raise ReentrantCall("reentrant call detected")
        self.state.reentrancy_guard = True
        save_state(self.storage, self.state)
        return GuardToken(self)

    def exit(self) -> None:
        """
        Clear the flag on the stored state, keeping whatever else the guarded
        section wrote there (a nested pause, for instance).
        """
        current = load_state(self.storage)
        current.reentrancy_guard = False
        save_state(self.storage, current)
        self.state.paused = current.paused
        self.state.reentrancy_guard = False


@contextmanager
def guarded(storage: Storage, state: ContractState) -> Iterator[GuardToken]:
    """Hold the reentrancy guard for the duration of the with-block."""
    with ReentrancyGuard(storage, state).enter() as token:
        yield token

"""
conftest.py - Shared pytest fixtures for tokenledger tests

Provides common fixtures used across unit, functional and conformance tests:
- Storage backends (plain and recording)
- Token contracts (empty, instantiated, funded with several holders)
"""

import pytest

from tokenledger import TokenContract, MemoryStorage, StorageTransaction

from tests.fake_storage import RecordingStorage
from tests.helpers import OWNER, ALICE, BOB


# =============================================================================
# STORAGE FIXTURES
# =============================================================================

@pytest.fixture
def storage():
    """Fresh in-memory storage."""
    return MemoryStorage()


@pytest.fixture
def recording_storage():
    """Storage that logs every load and save."""
    return RecordingStorage()


@pytest.fixture
def tx(storage):
    """A storage transaction over fresh in-memory storage."""
    return StorageTransaction(storage)


# =============================================================================
# CONTRACT FIXTURES
# =============================================================================

@pytest.fixture
def empty_token():
    """Token contract that has not been instantiated."""
    return TokenContract("test", verbose=False)


@pytest.fixture
def token():
    """Instantiated by OWNER with alice holding 100."""
    t = TokenContract("test", verbose=False)
    t.instantiate(OWNER, [(ALICE, 100)])
    return t


@pytest.fixture
def funded_token():
    """Instantiated by OWNER with several holders."""
    t = TokenContract("test", verbose=False)
    t.instantiate(OWNER, [(OWNER, 1000), (ALICE, 500), (BOB, 250)])
    return t

"""
storage.py - Key-Value Persistence and Per-Call Write Buffering

The ledger never writes to persistent storage directly. Each call runs against
a StorageTransaction: reads fall through to the backing Storage, writes are
buffered, and commit() applies the whole buffer at once. Dropping the
transaction without committing discards every write, which is how a failed
call changes nothing.
"""

from __future__ import annotations
from typing import Dict, Iterator, List, Optional, Protocol, Tuple, runtime_checkable

from .core import StorageChange


@runtime_checkable
class Storage(Protocol):
    """
    Key-value interface supplied by the host, scoped to one contract instance.
    """

    def load(self, key: bytes) -> Optional[bytes]:
        """Return the stored bytes, or None if the key was never written."""
        ...

    def save(self, key: bytes, value: bytes) -> None:
        """Store value under key, replacing any previous value."""
        ...


def _check_key(key: bytes) -> bytes:
    if not isinstance(key, (bytes, bytearray)):
        raise ValueError(f"storage key must be bytes, got {type(key).__name__}")
    if len(key) == 0:
        raise ValueError("storage key cannot be empty")
    return bytes(key)


def _check_value(value: bytes) -> bytes:
    if not isinstance(value, (bytes, bytearray)):
        raise ValueError(f"storage value must be bytes, got {type(value).__name__}")
    return bytes(value)


class MemoryStorage:
    """
    In-process Storage backend for local runs and tests.

    Not thread-safe; calls are serialized by the caller.
    """

    def __init__(self, initial: Optional[Dict[bytes, bytes]] = None) -> None:
        self._data: Dict[bytes, bytes] = dict(initial or {})

    def load(self, key: bytes) -> Optional[bytes]:
        return self._data.get(_check_key(key))

    def save(self, key: bytes, value: bytes) -> None:
        self._data[_check_key(key)] = _check_value(value)

    def items(self) -> Iterator[Tuple[bytes, bytes]]:
        """Iterate over (key, value) pairs in key order."""
        return iter(sorted(self._data.items()))

    def snapshot(self) -> Dict[bytes, bytes]:
        """Return a copy of the full contents."""
        return dict(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: bytes) -> bool:
        return key in self._data


class StorageTransaction:
    """
    Buffered view of a Storage for the duration of one call.

    Implements the Storage protocol itself, so operations are written against
    a plain load/save interface and never know whether they are buffered.

    Example:
        tx = StorageTransaction(storage)
        tx.save(b"k", b"v")
        storage.load(b"k")   # None, not yet committed
        tx.commit()
        storage.load(b"k")   # b"v"
    """

    def __init__(self, backend: Storage) -> None:
        self.backend = backend
        self._writes: Dict[bytes, bytes] = {}
        # First-seen value of every written key, for change reporting
        self._originals: Dict[bytes, Optional[bytes]] = {}
        self._order: List[bytes] = []
        self._committed = False

    def load(self, key: bytes) -> Optional[bytes]:
        key = _check_key(key)
        if key in self._writes:
            return self._writes[key]
        return self.backend.load(key)

    def save(self, key: bytes, value: bytes) -> None:
        if self._committed:
            raise RuntimeError("storage transaction already committed")
        key = _check_key(key)
        value = _check_value(value)
        if key not in self._originals:
            self._originals[key] = self.backend.load(key)
            self._order.append(key)
        self._writes[key] = value

    def changes(self) -> Tuple[StorageChange, ...]:
        """
        Return the net effect of buffered writes, in first-write order.

        Keys rewritten to their original bytes are omitted.
        """
        out = []
        for key in self._order:
            old = self._originals[key]
            new = self._writes[key]
            if old != new:
                out.append(StorageChange(key=key, old_value=old, new_value=new))
        return tuple(out)

    @property
    def pending_writes(self) -> int:
        return len(self._writes)

    def commit(self) -> Tuple[StorageChange, ...]:
        """
        Apply every buffered write to the backend.

        Returns:
            The changes that were applied.
        """
        if self._committed:
            raise RuntimeError("storage transaction already committed")
        applied = self.changes()
        for change in applied:
            self.backend.save(change.key, change.new_value)
        self._committed = True
        return applied

    def discard(self) -> None:
        """Drop all buffered writes."""
        self._writes.clear()
        self._originals.clear()
        self._order.clear()

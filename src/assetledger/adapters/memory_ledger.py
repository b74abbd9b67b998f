import secrets
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TypeVar

from ..core.ports import KeyModification, KeyValue, KeyValueStore, LedgerCursor, TransactionContext

E = TypeVar("E")


class ListCursor(LedgerCursor[E]):
    """Cursor over a snapshot taken when the scan was opened."""

    def __init__(self, entries: list[E], on_close=None):
        self._entries = entries
        self._pos = 0
        self._on_close = on_close
        self.closed = False

    def has_next(self) -> bool:
        if self.closed:
            raise RuntimeError("cursor is closed")
        return self._pos < len(self._entries)

    def next(self) -> E:
        if not self.has_next():
            raise StopIteration
        entry = self._entries[self._pos]
        self._pos += 1
        return entry

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self._on_close:
            self._on_close(self)


class MemoryLedger(KeyValueStore):
    """
    In-process versioned key-value state for tests and local runs.

    Writes apply immediately; there is no rollback. Open cursors are tracked
    so tests can assert that every scan was released.
    """

    def __init__(self):
        self.state: dict[str, bytes] = {}
        self.log: dict[str, list[KeyModification]] = {}
        self.open_cursors: set[ListCursor] = set()
        self.tx_id = "genesis"

    @contextmanager
    def transaction(self, tx_id: str | None = None) -> Iterator[TransactionContext]:
        self.tx_id = tx_id or secrets.token_hex(8)
        yield TransactionContext(stub=self, tx_id=self.tx_id)

    def _record(self, key: str, value: bytes | None) -> None:
        mod = KeyModification(
            tx_id=self.tx_id,
            value=value,
            timestamp=time.time(),
            is_delete=value is None,
        )
        self.log.setdefault(key, []).append(mod)

    def _open(self, entries: list) -> ListCursor:
        cursor = ListCursor(entries, on_close=self.open_cursors.discard)
        self.open_cursors.add(cursor)
        return cursor

    def get_state(self, key: str) -> bytes | None:
        return self.state.get(key)

    def put_state(self, key: str, value: bytes) -> None:
        if not key:
            raise ValueError("key must not be empty")
        self.state[key] = bytes(value)
        self._record(key, bytes(value))

    def delete_state(self, key: str) -> None:
        if self.state.pop(key, None) is not None:
            self._record(key, None)

    def get_state_by_range(self, start_key: str, end_key: str) -> ListCursor:
        keys = sorted(
            k
            for k in self.state
            if k >= start_key and (not end_key or k < end_key)
        )
        return self._open([KeyValue(k, self.state[k]) for k in keys])

    def get_history_for_key(self, key: str) -> ListCursor:
        # newest first
        return self._open(list(reversed(self.log.get(key, []))))

"""SQLite-backed versioned key-value ledger."""

import logging
import secrets
import sqlite3
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TypeVar

from ..core.ports import KeyModification, KeyValue, KeyValueStore, LedgerCursor, TransactionContext

log = logging.getLogger(__name__)

E = TypeVar("E")

SCHEMA_VERSION = "1"


class RowCursor(LedgerCursor[E]):
    """Wraps a sqlite3 cursor with one row of lookahead."""

    def __init__(self, cur: sqlite3.Cursor, convert: Callable[[tuple], E]):
        self._cur = cur
        self._convert = convert
        self._pending = cur.fetchone()

    def has_next(self) -> bool:
        return self._pending is not None

    def next(self) -> E:
        if self._pending is None:
            raise StopIteration
        row = self._pending
        self._pending = self._cur.fetchone()
        return self._convert(row)

    def close(self) -> None:
        self._pending = None
        self._cur.close()


class SQLiteStub(KeyValueStore):
    """World state view bound to one open transaction."""

    def __init__(self, conn: sqlite3.Connection, tx_id: str):
        self.conn = conn
        self.tx_id = tx_id

    def get_state(self, key: str) -> bytes | None:
        row = self.conn.execute(
            "SELECT value FROM state WHERE key = ?", (key,)
        ).fetchone()
        return bytes(row[0]) if row else None

    def put_state(self, key: str, value: bytes) -> None:
        if not key:
            raise ValueError("key must not be empty")
        self.conn.execute(
            "INSERT INTO state (key, value, tx_id) VALUES (?, ?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value = excluded.value, tx_id = excluded.tx_id",
            (key, value, self.tx_id),
        )
        self._record(key, value)

    def delete_state(self, key: str) -> None:
        cur = self.conn.execute("DELETE FROM state WHERE key = ?", (key,))
        if cur.rowcount:
            self._record(key, None)

    def _record(self, key: str, value: bytes | None) -> None:
        self.conn.execute(
            "INSERT INTO history (key, tx_id, value, is_delete, ts) VALUES (?, ?, ?, ?, ?)",
            (key, self.tx_id, value, 1 if value is None else 0, time.time()),
        )

    def get_state_by_range(self, start_key: str, end_key: str) -> RowCursor[KeyValue]:
        # TEXT keys use BINARY collation, i.e. plain string order
        sql = "SELECT key, value FROM state WHERE key >= ?"
        params: list[Any] = [start_key]
        if end_key:
            sql += " AND key < ?"
            params.append(end_key)
        sql += " ORDER BY key"
        cur = self.conn.execute(sql, params)
        return RowCursor(cur, lambda row: KeyValue(row[0], bytes(row[1])))

    def get_history_for_key(self, key: str) -> RowCursor[KeyModification]:
        cur = self.conn.execute(
            "SELECT tx_id, value, ts, is_delete FROM history "
            "WHERE key = ? ORDER BY seq DESC",
            (key,),
        )
        return RowCursor(
            cur,
            lambda row: KeyModification(
                tx_id=row[0],
                value=bytes(row[1]) if row[1] is not None else None,
                timestamp=row[2],
                is_delete=bool(row[3]),
            ),
        )


@dataclass
class SQLiteLedger:
    """
    Durable ledger in a single SQLite file.

    ``state`` holds the current value per key; ``history`` keeps every
    modification so past versions can be read back.
    """

    db_path: Path

    def _conn(self) -> sqlite3.Connection:
        """Get a connection to the SQLite database."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self.db_path))
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA synchronous=NORMAL")
        return conn

    def _init_schema(self, conn: sqlite3.Connection) -> None:
        conn.execute("""
            CREATE TABLE IF NOT EXISTS meta (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            )
        """)
        conn.execute("""
            CREATE TABLE IF NOT EXISTS state (
                key TEXT PRIMARY KEY,
                value BLOB NOT NULL,
                tx_id TEXT NOT NULL
            )
        """)
        conn.execute("""
            CREATE TABLE IF NOT EXISTS history (
                seq INTEGER PRIMARY KEY AUTOINCREMENT,
                key TEXT NOT NULL,
                tx_id TEXT NOT NULL,
                value BLOB,
                is_delete INTEGER NOT NULL DEFAULT 0,
                ts REAL NOT NULL
            )
        """)
        conn.execute("CREATE INDEX IF NOT EXISTS history_key_idx ON history(key, seq)")
        conn.execute(
            "INSERT OR IGNORE INTO meta (key, value) VALUES ('schema_version', ?)",
            (SCHEMA_VERSION,),
        )
        conn.commit()

    @contextmanager
    def transaction(self, tx_id: str | None = None) -> Iterator[TransactionContext]:
        """
        Run one transaction: commit if the block succeeds, roll back if it
        raises.
        """
        tx_id = tx_id or secrets.token_hex(8)
        conn = self._conn()
        try:
            self._init_schema(conn)
            yield TransactionContext(stub=SQLiteStub(conn, tx_id), tx_id=tx_id)
            conn.commit()
            log.debug("committed tx %s", tx_id)
        except BaseException:
            conn.rollback()
            log.debug("rolled back tx %s", tx_id)
            raise
        finally:
            conn.close()

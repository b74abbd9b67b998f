"""Scoped acquisition of ledger cursors."""

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import TypeVar

from .errors import ReadError
from .ports import LedgerCursor

log = logging.getLogger(__name__)

E = TypeVar("E")


def _drain(cursor: LedgerCursor[E], op: str, key: str) -> Iterator[E]:
    while True:
        try:
            if not cursor.has_next():
                return
            entry = cursor.next()
        except Exception as e:
            raise ReadError(f"cursor failed: {e}", op=op, key=key) from e
        yield entry


@contextmanager
def scoped_cursor(
    opener: Callable[[], LedgerCursor[E]], op: str, key: str
) -> Iterator[Iterator[E]]:
    """
    Open a cursor and yield an iterator over its entries.

    The cursor is closed when the block exits, whether it finishes, a decode
    fails part way, or the store itself errors. The yielded iterator must not
    escape the block.

    Args:
        opener: Zero-arg callable asking the store for a fresh cursor
        op: Operation name for error context
        key: Key (or range) for error context
    """
    try:
        cursor = opener()
    except Exception as e:
        raise ReadError(f"failed to open cursor: {e}", op=op, key=key) from e

    log.debug("opened cursor for %s %r", op, key)
    try:
        yield _drain(cursor, op, key)
    finally:
        cursor.close()
        log.debug("closed cursor for %s %r", op, key)

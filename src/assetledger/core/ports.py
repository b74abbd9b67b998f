from dataclasses import dataclass
from typing import Protocol, TypeVar

from .model import Asset

T = TypeVar("T", covariant=True)


@dataclass(frozen=True)
class KeyValue:
    key: str
    value: bytes


@dataclass(frozen=True)
class KeyModification:
    """One version of a key as recorded by the ledger."""

    tx_id: str
    value: bytes | None
    timestamp: float
    is_delete: bool = False

    @property
    def is_tombstone(self) -> bool:
        return self.is_delete or self.value is None


class LedgerCursor(Protocol[T]):
    """
    Single-pass traversal handle over scan results. Must be closed by whoever
    opened it.
    """

    def has_next(self) -> bool:
        pass

    def next(self) -> T:
        pass

    def close(self) -> None:
        pass


class KeyValueStore(Protocol):
    """
    Byte-level, versioned world state supplied by the ledger platform.
    Failures are raised, never returned.
    """

    def get_state(self, key: str) -> bytes | None:
        pass

    def put_state(self, key: str, value: bytes) -> None:
        pass

    def get_state_by_range(self, start_key: str, end_key: str) -> LedgerCursor[KeyValue]:
        """Keys in [start_key, end_key) in string order; "" leaves a side unbounded."""
        pass

    def get_history_for_key(self, key: str) -> LedgerCursor[KeyModification]:
        pass


class AssetCodec(Protocol):
    """
    Deterministic payload format. Every implementation sharing a ledger must
    produce identical bytes for identical assets.
    """

    def encode(self, asset: Asset) -> bytes:
        pass

    def decode(self, payload: bytes) -> Asset:
        pass


@dataclass(frozen=True)
class TransactionContext:
    """Explicit handle for the transaction an operation runs in."""

    stub: KeyValueStore
    tx_id: str

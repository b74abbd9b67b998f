import logging
from collections.abc import Iterable

from ..genesis import GENESIS_ASSETS
from .cursor import scoped_cursor
from .errors import DecodeError, EncodeError, NotFoundError, ReadError, WriteError
from .model import Asset, AssetFields, DealerId, asset_key
from .ports import AssetCodec, TransactionContext

log = logging.getLogger(__name__)


class AssetStore:
    """
    Dealer asset operations over the ledger's key-value state.

    Holds nothing but its codec; every call gets the transaction it runs in.
    Ordering, conflict detection and atomicity across writes belong to the
    ledger, so there is no locking or retry here.
    """

    def __init__(self, codec: AssetCodec):
        self.codec = codec

    def _get(self, ctx: TransactionContext, op: str, key: str) -> bytes | None:
        try:
            raw = ctx.stub.get_state(key)
        except Exception as e:
            raise ReadError(f"failed to read world state: {e}", op=op, key=key) from e
        # the platform reports a missing key as empty bytes
        return raw or None

    def _put(self, ctx: TransactionContext, op: str, asset: Asset) -> None:
        try:
            payload = self.codec.encode(asset)
        except EncodeError as e:
            raise EncodeError(e.message, op=op, key=asset.key) from e
        try:
            ctx.stub.put_state(asset.key, payload)
        except Exception as e:
            raise WriteError(
                f"failed to put to world state: {e}", op=op, key=asset.key
            ) from e
        log.debug("%s %s in tx %s", op, asset.key, ctx.tx_id)

    def _decode(self, payload: bytes, op: str, key: str) -> Asset:
        try:
            return self.codec.decode(payload)
        except DecodeError as e:
            raise DecodeError(e.message, op=op, key=key) from e

    def seed(
        self, ctx: TransactionContext, records: Iterable[Asset] | None = None
    ) -> int:
        """
        Write the genesis set. Stops at the first failed write; records already
        written stay written.
        """
        if records is None:
            records = GENESIS_ASSETS
        count = 0
        for asset in records:
            self._put(ctx, "seed", asset)
            log.info("dealer %s initialized", asset.dealer_id)
            count += 1
        return count

    def create(self, ctx: TransactionContext, asset: Asset) -> None:
        """Write an asset at its key, overwriting any existing record."""
        self._put(ctx, "create", asset)

    def exists(self, ctx: TransactionContext, dealer_id: DealerId) -> bool:
        return self._get(ctx, "exists", asset_key(dealer_id)) is not None

    def read(self, ctx: TransactionContext, dealer_id: DealerId) -> Asset:
        key = asset_key(dealer_id)
        raw = self._get(ctx, "read", key)
        if raw is None:
            raise NotFoundError(f"asset {dealer_id} does not exist", op="read", key=key)
        return self._decode(raw, "read", key)

    def update(
        self, ctx: TransactionContext, dealer_id: DealerId, fields: AssetFields
    ) -> Asset:
        """Replace every mutable field of an existing asset."""
        key = asset_key(dealer_id)
        raw = self._get(ctx, "update", key)
        if raw is None:
            raise NotFoundError(
                f"asset {dealer_id} does not exist", op="update", key=key
            )
        updated = self._decode(raw, "update", key).with_fields(fields)
        self._put(ctx, "update", updated)
        return updated

    def list_all(self, ctx: TransactionContext) -> list[Asset]:
        """
        Every asset in world state, in ledger key order (string order, so
        "1200" comes before "150"). One bad payload fails the whole listing.
        """
        with scoped_cursor(
            lambda: ctx.stub.get_state_by_range("", ""), op="list", key=""
        ) as entries:
            return [self._decode(kv.value, "list", kv.key) for kv in entries]

    def history(self, ctx: TransactionContext, dealer_id: DealerId) -> list[Asset]:
        """Past versions of an asset in ledger order, deletions skipped."""
        key = asset_key(dealer_id)
        with scoped_cursor(
            lambda: ctx.stub.get_history_for_key(key), op="history", key=key
        ) as entries:
            return [
                self._decode(mod.value, "history", key)
                for mod in entries
                if not mod.is_tombstone
            ]

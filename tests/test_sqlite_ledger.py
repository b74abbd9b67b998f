"""Tests for the SQLite ledger backend."""

import tempfile
from pathlib import Path

import pytest

from assetledger.adapters.json_codec import JsonAssetCodec
from assetledger.adapters.sqlite_ledger import SQLiteLedger
from assetledger.core.errors import NotFoundError
from assetledger.core.model import Asset, AssetFields
from assetledger.core.store import AssetStore


@pytest.fixture
def ledger():
    """Create a temporary ledger for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield SQLiteLedger(db_path=Path(tmpdir) / "state" / "ledger.sqlite")


@pytest.fixture
def store():
    return AssetStore(JsonAssetCodec())


def test_state_persists_across_transactions(ledger, store):
    """Committed writes are visible to later transactions."""
    with ledger.transaction() as ctx:
        store.seed(ctx)

    with ledger.transaction() as ctx:
        asset = store.read(ctx, 1203)
    assert asset.msisdn == "+91 456787"
    assert ledger.db_path.exists()


def test_failed_transaction_rolls_back(ledger, store):
    """An error inside the block discards its writes."""
    with pytest.raises(RuntimeError):
        with ledger.transaction() as ctx:
            store.create(ctx, Asset(1, "m", "p", 0, "SUCCESS", 0, "ONLINE", "NO"))
            raise RuntimeError("endorsement failed")

    with ledger.transaction() as ctx:
        assert store.exists(ctx, 1) is False
        with pytest.raises(NotFoundError):
            store.read(ctx, 1)


def test_range_scan_string_order(ledger, store):
    """Range scans order keys as strings."""
    with ledger.transaction() as ctx:
        for dealer_id in (150, 1200, 9):
            store.create(ctx, Asset(dealer_id, "m", "p", 0, "SUCCESS", 0, "ONLINE", "NO"))

    with ledger.transaction() as ctx:
        assert [a.dealer_id for a in store.list_all(ctx)] == [1200, 150, 9]


def test_range_scan_bounds(ledger):
    with ledger.transaction() as ctx:
        for key in ("a", "b", "c"):
            ctx.stub.put_state(key, b"x")
        cursor = ctx.stub.get_state_by_range("b", "c")
        keys = []
        while cursor.has_next():
            keys.append(cursor.next().key)
        cursor.close()
    assert keys == ["b"]


def test_history_across_transactions(ledger, store):
    """History lists versions newest first with their transaction ids."""
    fields = AssetFields("+91 1", "0000", 10, "SUCCESS", 0, "ONLINE", "YES")
    with ledger.transaction("tx-1") as ctx:
        store.create(ctx, Asset.from_fields(55, fields))
    with ledger.transaction("tx-2") as ctx:
        store.update(ctx, 55, AssetFields("+91 2", "0000", 20, "SUCCESS", 0, "ONLINE", "YES"))
    with ledger.transaction("tx-3") as ctx:
        store.update(ctx, 55, AssetFields("+91 3", "0000", 30, "FAILURE", 5, "OFFLINE", "NO"))

    with ledger.transaction() as ctx:
        versions = store.history(ctx, 55)
        cursor = ctx.stub.get_history_for_key("55")
        tx_ids = []
        while cursor.has_next():
            tx_ids.append(cursor.next().tx_id)
        cursor.close()

    assert [v.msisdn for v in versions] == ["+91 3", "+91 2", "+91 1"]
    assert tx_ids == ["tx-3", "tx-2", "tx-1"]


def test_history_skips_deletes(ledger, store):
    with ledger.transaction() as ctx:
        store.create(ctx, Asset(9, "m", "p", 1, "SUCCESS", 0, "ONLINE", "NO"))
        ctx.stub.delete_state("9")
        store.create(ctx, Asset(9, "m", "p", 2, "SUCCESS", 0, "ONLINE", "NO"))
        assert [v.balance for v in store.history(ctx, 9)] == [2, 1]


def test_payload_bytes_stored_verbatim(ledger, store):
    """The stored bytes are the canonical payload."""
    asset = Asset(1203, "+91 456787", "0120", 300, "SUCCESS", 500, "ONLINE", "NO")
    with ledger.transaction() as ctx:
        store.create(ctx, asset)
        assert ctx.stub.get_state("1203") == JsonAssetCodec().encode(asset)

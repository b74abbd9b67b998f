"""Runtime wiring helper for CLI applications."""

from dataclasses import dataclass
from pathlib import Path

from .adapters.json_codec import JsonAssetCodec
from .adapters.sqlite_ledger import SQLiteLedger
from .config import AssetLedgerConfig, load_config
from .core.model import Asset
from .core.store import AssetStore
from .genesis import GENESIS_ASSETS, load_genesis


@dataclass
class Runtime:
    """Container for all wired components."""
    ledger: SQLiteLedger
    store: AssetStore
    config: AssetLedgerConfig

    def genesis_records(self) -> list[Asset]:
        if self.config.genesis.file is not None:
            return load_genesis(self.config.genesis.file)
        return list(GENESIS_ASSETS)


def build_runtime(
    db_path: Path | None = None,
    config_path: Path | None = None,
) -> Runtime:
    """Build and wire all components for a ledger."""
    config = load_config(config_path=config_path)

    # CLI args win over config values
    if db_path is None:
        db_path = config.ledger.db

    ledger = SQLiteLedger(db_path=db_path)
    store = AssetStore(JsonAssetCodec())

    return Runtime(ledger=ledger, store=store, config=config)

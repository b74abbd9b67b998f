"""Configuration loader for assetledger.toml."""

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

CONFIG_NAME = "assetledger.toml"


@dataclass
class LedgerConfig:
    """Where the SQLite ledger lives."""
    db: Path


@dataclass
class GenesisConfig:
    """Optional YAML file replacing the built-in genesis records."""
    file: Path | None = None


@dataclass
class LogConfig:
    level: str = "WARNING"


@dataclass
class AssetLedgerConfig:
    """Complete assetledger configuration."""
    ledger: LedgerConfig
    genesis: GenesisConfig
    log: LogConfig


def load_config(config_path: Path | None = None) -> AssetLedgerConfig:
    """
    Load configuration from assetledger.toml.

    Search order:
    1. config_path (if provided)
    2. cwd/assetledger.toml

    Relative paths inside the file are taken as written (relative to cwd).
    """
    toml_data: dict[str, Any] = {}

    search_paths = []
    if config_path:
        search_paths.append(config_path)
    search_paths.append(Path.cwd() / CONFIG_NAME)

    for path in search_paths:
        if path.exists():
            with open(path, "rb") as f:
                toml_data = tomllib.load(f)
            break

    ledger_data = toml_data.get("ledger", {})
    ledger_config = LedgerConfig(
        db=Path(ledger_data.get("db", Path(".assetledger") / "ledger.sqlite"))
    )

    genesis_data = toml_data.get("genesis", {})
    genesis_file = genesis_data.get("file")
    genesis_config = GenesisConfig(
        file=Path(genesis_file) if genesis_file else None
    )

    log_data = toml_data.get("log", {})
    log_config = LogConfig(level=str(log_data.get("level", "WARNING")).upper())

    return AssetLedgerConfig(
        ledger=ledger_config,
        genesis=genesis_config,
        log=log_config,
    )

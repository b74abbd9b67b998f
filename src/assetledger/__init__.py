"""assetledger - versioned dealer asset records on a key-value ledger."""

__version__ = "0.1.0"

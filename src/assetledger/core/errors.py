"""Error types raised by the asset record manager."""


class AssetLedgerError(Exception):
    """
    Base error. Carries the failing operation and ledger key so callers can
    report or retry the enclosing transaction without parsing messages.
    """

    def __init__(self, message: str, op: str | None = None, key: str | None = None):
        super().__init__(message)
        self.message = message
        self.op = op
        self.key = key

    def __str__(self) -> str:
        if self.op and self.key is not None:
            return f"{self.op} {self.key!r}: {self.message}"
        if self.op:
            return f"{self.op}: {self.message}"
        return self.message


class NotFoundError(AssetLedgerError):
    """Key absent on read or update."""


class DecodeError(AssetLedgerError):
    """Stored bytes are not a valid asset payload."""


class EncodeError(AssetLedgerError):
    """Asset cannot be serialized."""


class WriteError(AssetLedgerError):
    """The key-value store failed to write."""


class ReadError(AssetLedgerError):
    """The key-value store failed to read or scan."""

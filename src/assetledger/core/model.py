from __future__ import annotations
from dataclasses import dataclass

DealerId = int

# Known values; the ledger stores whatever string the caller supplies.
STATUS_SUCCESS = "SUCCESS"
STATUS_FAILURE = "FAILURE"
TRANS_ONLINE = "ONLINE"
TRANS_OFFLINE = "OFFLINE"


def asset_key(dealer_id: DealerId) -> str:
    """
    Ledger key for a dealer: the unpadded decimal id.

    Keys are compared as strings by the ledger, so "1200" sorts before "150".
    Existing data depends on this, so do not pad.
    """
    return str(dealer_id)


@dataclass(frozen=True)
class AssetFields:
    """The mutable part of an asset; update replaces all of it at once."""

    msisdn: str
    pin: str
    balance: int
    status: str
    trans_amount: int
    trans_type: str
    remarks: str


@dataclass(frozen=True)
class Asset:
    dealer_id: DealerId
    msisdn: str
    pin: str
    balance: int
    status: str
    trans_amount: int
    trans_type: str
    remarks: str

    @property
    def key(self) -> str:
        return asset_key(self.dealer_id)

    @property
    def fields(self) -> AssetFields:
        return AssetFields(
            msisdn=self.msisdn,
            pin=self.pin,
            balance=self.balance,
            status=self.status,
            trans_amount=self.trans_amount,
            trans_type=self.trans_type,
            remarks=self.remarks,
        )

    @classmethod
    def from_fields(cls, dealer_id: DealerId, fields: AssetFields) -> "Asset":
        return cls(
            dealer_id=dealer_id,
            msisdn=fields.msisdn,
            pin=fields.pin,
            balance=fields.balance,
            status=fields.status,
            trans_amount=fields.trans_amount,
            trans_type=fields.trans_type,
            remarks=fields.remarks,
        )

    def with_fields(self, fields: AssetFields) -> "Asset":
        return Asset.from_fields(self.dealer_id, fields)

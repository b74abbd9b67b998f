import json
from typing import Any

from ..core.errors import DecodeError, EncodeError
from ..core.model import Asset
from ..core.ports import AssetCodec

# Payload tag -> (Asset attribute, type). Tags are shared with the other
# chaincode implementations on the network and must not change.
_TAGS: dict[str, tuple[str, type]] = {
    "BALANCE": ("balance", int),
    "DEALERID": ("dealer_id", int),
    "ID": ("pin", str),
    "MSISDN": ("msisdn", str),
    "REMARKS": ("remarks", str),
    "Status": ("status", str),
    "TRANS": ("trans_type", str),
    "TRANSAM": ("trans_amount", int),
}


def _type_ok(value: Any, typ: type) -> bool:
    # bool is an int subclass but serializes as true/false
    if typ is int:
        return isinstance(value, int) and not isinstance(value, bool)
    return isinstance(value, typ)


class JsonAssetCodec(AssetCodec):
    """
    Canonical JSON payloads:
    - Keys sorted by code point
    - No whitespace
    - UTF-8 encoded

    Unknown tags (e.g. ``docType``) are ignored on decode.
    """

    def to_payload(self, asset: Asset) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        for tag, (attr, typ) in _TAGS.items():
            value = getattr(asset, attr)
            if not _type_ok(value, typ):
                raise EncodeError(
                    f"{attr} must be {typ.__name__}, got {type(value).__name__}",
                    op="encode",
                    key=str(asset.dealer_id),
                )
            payload[tag] = value
        return payload

    def encode(self, asset: Asset) -> bytes:
        payload = self.to_payload(asset)
        try:
            text = json.dumps(
                payload,
                sort_keys=True,
                separators=(",", ":"),
                ensure_ascii=False,
            )
        except ValueError as e:
            # e.g. an int past the interpreter's digit limit
            raise EncodeError(
                f"cannot serialize asset: {e}", op="encode", key=str(asset.dealer_id)
            ) from e
        return text.encode("utf-8")

    def decode(self, payload: bytes) -> Asset:
        try:
            doc = json.loads(payload.decode("utf-8"))
        except (ValueError, RecursionError) as e:
            # ValueError covers bad UTF-8, bad JSON and oversized ints
            raise DecodeError(f"malformed asset payload: {e}", op="decode") from e

        if not isinstance(doc, dict):
            raise DecodeError(
                f"asset payload must be an object, got {type(doc).__name__}",
                op="decode",
            )

        kwargs: dict[str, Any] = {}
        for tag, (attr, typ) in _TAGS.items():
            if tag not in doc:
                raise DecodeError(f"missing field {tag}", op="decode")
            value = doc[tag]
            if not _type_ok(value, typ):
                raise DecodeError(
                    f"field {tag} must be {typ.__name__}, got {type(value).__name__}",
                    op="decode",
                )
            kwargs[attr] = value
        return Asset(**kwargs)

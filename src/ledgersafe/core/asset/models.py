"""Asset envelope and query result models.

The asset is stored as a docType-tagged JSON document. Decoding is
defensive: ``Asset.decode`` fails loudly with CorruptRecordError where a
structured record is required, while ``decode_value`` falls back to the raw
text (or the bytes themselves when they are not UTF-8) for query results
that may hold tombstones or foreign documents.

Usage:
    asset = Asset(name="asset1", asset_type="Blue", price=35, owner="Tom")
    raw = asset.encode()   # b'{"docType":"asset","name":"asset1","assetType":"blue",...}'
    Asset.decode(raw).owner  # "tom"
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from ledgersafe.core.errors import CorruptRecordError

ASSET_DOC_TYPE = "asset"


class Asset(BaseModel):
    """Primary asset record.

    ``asset_type`` travels as ``assetType`` on the wire (``type`` is accepted
    on input). Unknown fields are preserved so a rewrite never drops data
    written by another client.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="allow")

    doc_type: Literal["asset"] = Field(default=ASSET_DOC_TYPE, alias="docType")
    name: str = Field(min_length=1)
    asset_type: str = Field(
        min_length=1,
        validation_alias=AliasChoices("asset_type", "assetType", "type"),
        serialization_alias="assetType",
    )
    price: int = Field(ge=0)
    owner: str = Field(min_length=1)

    @field_validator("asset_type", "owner")
    @classmethod
    def _lowercase(cls, value: str) -> str:
        return value.lower()

    def encode(self) -> bytes:
        """Serialize to the JSON envelope stored under the asset name."""
        return self.model_dump_json(by_alias=True).encode("utf-8")

    @classmethod
    def decode(cls, raw: bytes) -> Asset:
        """Parse stored bytes into an Asset.

        Raises:
            CorruptRecordError: If bytes are not a valid asset document.
        """
        try:
            return cls.model_validate_json(raw)
        except ValidationError as e:
            msg = f"failed to decode asset document: {e.error_count()} error(s)"
            raise CorruptRecordError(msg) from e

    def with_owner(self, owner: str) -> Asset:
        """Copy with a new (normalised) owner. Every other field is kept."""
        return self.model_copy(update={"owner": owner.lower()})


def decode_value(raw: bytes) -> Any:
    """Decode a stored value as JSON, falling back to its text form.

    Values that are not valid UTF-8 are returned as the raw bytes unchanged.
    """
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError:
        return raw
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text


@dataclass(slots=True)
class QueryRecord:
    """One (key, decoded value) pair from a range or rich query."""

    key: str
    record: Any

    def to_dict(self) -> dict[str, Any]:
        return {"Key": self.key, "Record": self.record}


@dataclass(slots=True)
class HistoryRecord:
    """One historical mutation of a key, oldest first.

    Attributes:
        tx_id: Transaction that wrote the value.
        timestamp: Unix timestamp of the transaction.
        is_delete: True when the mutation deleted the key.
        value: Decoded JSON, raw text fallback, or None for deletes.
    """

    tx_id: str
    timestamp: float
    is_delete: bool
    value: Any

    def to_dict(self) -> dict[str, Any]:
        return {
            "TxId": self.tx_id,
            "Timestamp": self.timestamp,
            "IsDelete": self.is_delete,
            "Value": self.value,
        }


@dataclass(frozen=True, slots=True)
class PageMeta:
    """Pagination metadata returned with each page.

    ``records_count`` counts this page only. An empty ``bookmark`` means the
    result set is exhausted; pass any other bookmark back verbatim to continue.
    """

    records_count: int
    bookmark: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"RecordsCount": self.records_count, "Bookmark": self.bookmark}

"""Record store: create, read, delete, and re-own asset records.

Every mutation that touches the index issues two ordered writes (record,
then index entry). They are only atomic when the caller wraps the call in
the store's commit boundary; the dispatcher does this for each invocation.

Usage:
    index = SecondaryIndex(store)
    records = RecordStore(store, index)
    records.create("asset1", "blue", "35", "tom")
    raw = records.read("asset1")
    records.set_owner("asset1", "jerry")
    records.delete("asset1")
"""

from __future__ import annotations

import re

import structlog

from ledgersafe.core.asset import Asset
from ledgersafe.core.errors import ConflictError, InvalidArgumentError, NotFoundError
from ledgersafe.registry.index import SecondaryIndex
from ledgersafe.storage.protocol import KeyValueStore

_PRICE_PATTERN = re.compile(r"[0-9]+")

logger = structlog.get_logger(__name__)


def require_text(value: object, label: str) -> str:
    """Return value if it is a non-empty string, else raise InvalidArgumentError."""
    if not isinstance(value, str) or not value:
        raise InvalidArgumentError(f"{label} must be a non-empty string")
    return value


def parse_price(value: int | str) -> int:
    """Parse a non-negative integer price from an int or a decimal string.

    Raises:
        InvalidArgumentError: For booleans, negatives, anything that is not
            made of ASCII digits only, and strings too long to convert.
    """
    if isinstance(value, bool):
        raise InvalidArgumentError("price must be a numeric string")
    if isinstance(value, int):
        if value < 0:
            raise InvalidArgumentError(f"price must not be negative, got {value}")
        return value
    if not isinstance(value, str) or not _PRICE_PATTERN.fullmatch(value):
        raise InvalidArgumentError(f"price must be a numeric string, got {value!r}")
    try:
        return int(value)
    except ValueError as e:
        raise InvalidArgumentError(f"price is too large ({len(value)} digits)") from e


class RecordStore:
    """CRUD over asset records, keeping the secondary index in step.

    Args:
        store: Key-value store holding records.
        index: Secondary index maintained on create and delete.
    """

    def __init__(self, store: KeyValueStore, index: SecondaryIndex):
        self._store = store
        self._index = index

    def create(self, name: str, asset_type: str, price: int | str, owner: str) -> Asset:
        """Create and index a new asset.

        Raises:
            InvalidArgumentError: Empty inputs, bad price, or delimiter in name/type.
            ConflictError: If an asset already exists under name.
        """
        asset = Asset(
            name=require_text(name, "asset name"),
            asset_type=require_text(asset_type, "asset type"),
            price=parse_price(price),
            owner=require_text(owner, "owner"),
        )
        # Validates the index key before anything is written.
        self._index.key_for(asset.asset_type, asset.name)

        if self._store.get(asset.name):
            raise ConflictError(f"asset already exists: {asset.name}")

        self._store.put(asset.name, asset.encode())
        self._index.add(asset.asset_type, asset.name)
        logger.info(
            "asset_created",
            name=asset.name,
            type=asset.asset_type,
            price=asset.price,
            owner=asset.owner,
        )
        return asset

    def read(self, name: str) -> bytes:
        """Return the raw stored bytes of an asset.

        Raises:
            NotFoundError: If no asset exists under name.
        """
        require_text(name, "asset name")
        raw = self._store.get(name)
        if not raw:
            raise NotFoundError(f"asset does not exist: {name}")
        return raw

    def get(self, name: str) -> Asset:
        """Read and decode an asset.

        Raises:
            NotFoundError: If no asset exists under name.
            CorruptRecordError: If the stored bytes are not an asset document.
        """
        return Asset.decode(self.read(name))

    def delete(self, name: str) -> None:
        """Delete an asset and its index entry.

        The record is read first to recover the type its index entry uses.
        """
        asset = self.get(name)
        self._store.delete(name)
        self._index.remove(asset.asset_type, name)
        logger.info("asset_deleted", name=name, type=asset.asset_type)

    def set_owner(self, name: str, new_owner: str) -> Asset:
        """Replace the owner and rewrite the full record. The index is untouched."""
        require_text(new_owner, "new owner")
        asset = self.get(name)
        updated = asset.with_owner(new_owner)
        self._store.put(name, updated.encode())
        logger.info("asset_owner_changed", name=name, old_owner=asset.owner, owner=updated.owner)
        return updated

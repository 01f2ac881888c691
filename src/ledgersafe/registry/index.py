"""Secondary index from asset type to asset name.

Each entry is a composite key ``assetType~name`` over ``[type, name]``
mapped to a one-byte sentinel. Only the key carries information; there is
no duplicate copy of the asset.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import closing

import structlog

from ledgersafe.core.errors import MalformedKeyError
from ledgersafe.core.keys import encode_composite_key, split_composite_key
from ledgersafe.storage.protocol import KeyValueStore

INDEX_SENTINEL = b"\x00"
"""Index entry value. A null value would read as a delete, so one byte is stored."""

DEFAULT_INDEX_NAME = "assetType~name"

logger = structlog.get_logger(__name__)


class SecondaryIndex:
    """Maintains and scans the type-to-name index.

    Args:
        store: Store holding the index entries.
        index_name: Composite index name.
    """

    def __init__(self, store: KeyValueStore, index_name: str = DEFAULT_INDEX_NAME):
        self._store = store
        self._index_name = index_name

    @property
    def index_name(self) -> str:
        return self._index_name

    def key_for(self, asset_type: str, name: str) -> str:
        """Composite key for one entry. Raises InvalidArgumentError on delimiter collision."""
        return encode_composite_key(self._index_name, [asset_type, name])

    def add(self, asset_type: str, name: str) -> None:
        key = self.key_for(asset_type, name)
        self._store.put(key, INDEX_SENTINEL)
        logger.debug("index_entry_added", index=self._index_name, type=asset_type, name=name)

    def remove(self, asset_type: str, name: str) -> None:
        key = self.key_for(asset_type, name)
        self._store.delete(key)
        logger.debug("index_entry_removed", index=self._index_name, type=asset_type, name=name)

    def scan_by_type(self, asset_type: str) -> Iterator[tuple[str, str]]:
        """Lazily yield (type, name) for every entry under asset_type.

        The store scan opens on first iteration and is closed when the
        generator is exhausted, closed early, or raises. Callers that may
        stop early should wrap the generator in ``contextlib.closing``.

        Raises:
            MalformedKeyError: If an entry under the prefix does not decode
                to this index with exactly two attributes.
        """
        iterator = self._store.scan_prefix(self._index_name, [asset_type])
        with closing(iterator):
            for entry in iterator:
                index_name, attributes = split_composite_key(entry.key)
                if index_name != self._index_name or len(attributes) != 2:
                    raise MalformedKeyError(f"unexpected entry in {self._index_name}: {entry.key!r}")
                yield attributes[0], attributes[1]

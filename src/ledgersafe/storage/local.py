"""Local in-memory store implementation.

Dict-based ordered store suitable for single-process use and testing.
Scans are served from a sorted snapshot taken when the iterator opens.

Structure:
    _state[key] = committed value bytes
    _history[key] = [KeyModification, ...] oldest first
    _pending[key] = staged value (None marks a delete) inside transaction()

Usage:
    store = LocalDocumentStore()
    with store.transaction() as tx_id:
        store.put("asset1", b'{"docType": "asset", ...}')
    iterator = store.scan_range("asset1", "asset3")
"""

from __future__ import annotations

import json
import time
import uuid
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from typing import Any, Generic, TypeVar

import structlog

from ledgersafe.core.errors import InvalidArgumentError, StoreError, UnsupportedQueryError
from ledgersafe.core.keys import composite_prefix, is_composite_key
from ledgersafe.storage.protocol import KV, KeyModification, QueryResponseMetadata

T = TypeVar("T")

logger = structlog.get_logger(__name__)


class LocalResultsIterator(Generic[T]):
    """Iterator over a materialized result list that tracks its own release.

    Args:
        items: Results in delivery order.
    """

    def __init__(self, items: list[T]):
        self._items = items
        self._position = 0
        self.closed = False
        self.close_count = 0

    def __iter__(self) -> Iterator[T]:
        return self

    def __next__(self) -> T:
        if self.closed:
            raise StoreError("iterator used after close")
        if self._position >= len(self._items):
            raise StopIteration
        item = self._items[self._position]
        self._position += 1
        return item

    def close(self) -> None:
        self.close_count += 1
        self.closed = True


class LocalStore:
    """In-memory ordered key-value store with history and a commit boundary.

    Writes outside ``transaction()`` commit immediately, each under its own
    transaction id. Inside a transaction, reads and scans see staged writes
    and nothing reaches committed state or history until the block exits
    cleanly.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._state: dict[str, bytes] = {}
        self._history: dict[str, list[KeyModification]] = {}
        self._pending: dict[str, bytes | None] | None = None
        self._tx_id: str | None = None
        self._clock = clock

    # Commit boundary

    @contextmanager
    def transaction(self, tx_id: str | None = None) -> Iterator[str]:
        """Stage writes and commit them together on clean exit.

        Args:
            tx_id: Transaction id to record in history (generated if omitted).

        Yields:
            The transaction id.

        Raises:
            StoreError: If a transaction is already open.
        """
        if self._pending is not None:
            raise StoreError(f"transaction {self._tx_id} already open")
        self._tx_id = tx_id or uuid.uuid4().hex
        self._pending = {}
        try:
            yield self._tx_id
        except BaseException:
            logger.debug("transaction_discarded", tx_id=self._tx_id, writes=len(self._pending))
            raise
        else:
            self._commit(self._pending, self._tx_id)
        finally:
            self._pending = None
            self._tx_id = None

    @property
    def in_transaction(self) -> bool:
        return self._pending is not None

    def _commit(self, writes: dict[str, bytes | None], tx_id: str) -> None:
        timestamp = self._clock()
        for key, value in writes.items():
            if value is None:
                self._state.pop(key, None)
                modification = KeyModification(tx_id, timestamp, True, b"")
            else:
                self._state[key] = value
                modification = KeyModification(tx_id, timestamp, False, value)
            self._history.setdefault(key, []).append(modification)
        logger.debug("transaction_committed", tx_id=tx_id, writes=len(writes))

    def _write(self, key: str, value: bytes | None) -> None:
        if not isinstance(key, str) or not key:
            raise InvalidArgumentError("key must be a non-empty string")
        if self._pending is not None:
            self._pending[key] = value
        else:
            self._commit({key: value}, uuid.uuid4().hex)

    def _view(self) -> list[tuple[str, bytes]]:
        """Sorted (key, value) pairs visible to the current caller."""
        if not self._pending:
            return sorted(self._state.items())
        merged = dict(self._state)
        for key, value in self._pending.items():
            if value is None:
                merged.pop(key, None)
            else:
                merged[key] = value
        return sorted(merged.items())

    # Point access

    def get(self, key: str) -> bytes | None:
        if self._pending is not None and key in self._pending:
            return self._pending[key]
        return self._state.get(key)

    def put(self, key: str, value: bytes) -> None:
        if not isinstance(value, bytes | bytearray) or not value:
            raise InvalidArgumentError(f"value for {key!r} must be non-empty bytes")
        self._write(key, bytes(value))

    def delete(self, key: str) -> None:
        self._write(key, None)

    # Scans

    def _range_items(self, start_key: str, end_key: str) -> list[KV]:
        return [
            KV(key, value)
            for key, value in self._view()
            if not is_composite_key(key)
            and key >= start_key
            and (not end_key or key < end_key)
        ]

    def scan_range(self, start_key: str, end_key: str) -> LocalResultsIterator[KV]:
        return LocalResultsIterator(self._range_items(start_key, end_key))

    def scan_prefix(
        self, index_name: str, attributes: Sequence[str]
    ) -> LocalResultsIterator[KV]:
        prefix = composite_prefix(index_name, attributes)
        return LocalResultsIterator(
            [KV(key, value) for key, value in self._view() if key.startswith(prefix)]
        )

    def history(self, key: str) -> LocalResultsIterator[KeyModification]:
        return LocalResultsIterator(list(self._history.get(key, [])))

    def scan_range_paginated(
        self, start_key: str, end_key: str, page_size: int, bookmark: str
    ) -> tuple[LocalResultsIterator[KV], QueryResponseMetadata]:
        return _paginate(self._range_items(start_key, end_key), page_size, bookmark)

    # Snapshots for tests and tooling

    def keys(self) -> list[str]:
        """All visible keys in order, composite keys included."""
        return [key for key, _ in self._view()]


class LocalDocumentStore(LocalStore):
    """LocalStore plus selector queries over JSON values.

    Only field equality is understood: ``{"selector": {"owner": "tom"}}``
    matches documents whose ``owner`` equals ``"tom"``. Operator expressions
    such as ``{"price": {"$gt": 10}}`` raise UnsupportedQueryError.
    """

    def _query_items(self, selector: str) -> list[KV]:
        conditions = _parse_selector(selector)
        results = []
        for key, value in self._view():
            if is_composite_key(key):
                continue
            try:
                document = json.loads(value)
            except (UnicodeDecodeError, json.JSONDecodeError):
                continue
            if isinstance(document, dict) and all(
                document.get(field) == expected for field, expected in conditions.items()
            ):
                results.append(KV(key, value))
        return results

    def query_by_selector(self, selector: str) -> LocalResultsIterator[KV]:
        return LocalResultsIterator(self._query_items(selector))

    def query_by_selector_paginated(
        self, selector: str, page_size: int, bookmark: str
    ) -> tuple[LocalResultsIterator[KV], QueryResponseMetadata]:
        return _paginate(self._query_items(selector), page_size, bookmark)


def _parse_selector(selector: str) -> dict[str, Any]:
    try:
        query = json.loads(selector)
    except json.JSONDecodeError as e:
        raise InvalidArgumentError(f"selector is not valid JSON: {e.msg}") from e
    if not isinstance(query, dict) or not isinstance(query.get("selector"), dict):
        raise InvalidArgumentError('query must be an object with a "selector" object')

    conditions: dict[str, Any] = query["selector"]
    for field, expected in conditions.items():
        if field.startswith("$") or isinstance(expected, dict):
            raise UnsupportedQueryError(f"operator expressions are not supported: {field}")
    return conditions


def _paginate(
    items: list[KV], page_size: int, bookmark: str
) -> tuple[LocalResultsIterator[KV], QueryResponseMetadata]:
    """Slice one page. The bookmark is the key the next page starts at."""
    if page_size <= 0:
        raise InvalidArgumentError(f"page size must be positive, got {page_size}")
    if bookmark:
        items = [item for item in items if item.key >= bookmark]
    page = items[:page_size]
    next_bookmark = items[page_size].key if len(items) > page_size else ""
    return LocalResultsIterator(page), QueryResponseMetadata(len(page), next_bookmark)

"""Storage protocols for the key-value store collaborator.

The registry never owns the storage engine. It talks to anything that
satisfies these protocols:

- KeyValueStore: point reads/writes, ordered range and prefix scans,
  per-key history, and paginated range scans (required)
- RichQueryStore: selector queries over document values (optional)
- TransactionalStore: commit boundary wrapping one invocation (optional)

Every scan returns a ResultsIterator. The component that opens an iterator
must close it on every exit path.

Usage:
    store = LocalDocumentStore()
    if isinstance(store, RichQueryStore):
        iterator = store.query_by_selector('{"selector": {"owner": "tom"}}')
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import Protocol, TypeVar, runtime_checkable

T_co = TypeVar("T_co", covariant=True)


@dataclass(frozen=True, slots=True)
class KV:
    """A stored key and its raw value."""

    key: str
    value: bytes


@dataclass(frozen=True, slots=True)
class KeyModification:
    """One entry of a key's history log as reported by the store."""

    tx_id: str
    timestamp: float
    is_delete: bool
    value: bytes


@dataclass(frozen=True, slots=True)
class QueryResponseMetadata:
    """Store-side pagination metadata.

    Attributes:
        fetched_records_count: Records in this page.
        bookmark: Token for the next page, empty once exhausted.
    """

    fetched_records_count: int
    bookmark: str


@runtime_checkable
class ResultsIterator(Protocol[T_co]):
    """Single-consumer iterator over store results that holds a resource."""

    def __iter__(self) -> Iterator[T_co]: ...

    def __next__(self) -> T_co: ...

    def close(self) -> None:
        """Release the underlying scan. Idempotent."""
        ...


@runtime_checkable
class KeyValueStore(Protocol):
    """Ordered key-value store with history."""

    def get(self, key: str) -> bytes | None:
        """Read a value. Returns None when the key is absent."""
        ...

    def put(self, key: str, value: bytes) -> None:
        """Write a value."""
        ...

    def delete(self, key: str) -> None:
        """Delete a key. Deleting an absent key is not an error."""
        ...

    def scan_range(self, start_key: str, end_key: str) -> ResultsIterator[KV]:
        """Scan simple keys in [start_key, end_key). Empty bounds are open."""
        ...

    def scan_prefix(self, index_name: str, attributes: Sequence[str]) -> ResultsIterator[KV]:
        """Scan composite keys for index_name whose leading attributes match."""
        ...

    def history(self, key: str) -> ResultsIterator[KeyModification]:
        """Iterate every mutation of key, oldest first."""
        ...

    def scan_range_paginated(
        self, start_key: str, end_key: str, page_size: int, bookmark: str
    ) -> tuple[ResultsIterator[KV], QueryResponseMetadata]:
        """Bounded range scan resuming at bookmark."""
        ...


@runtime_checkable
class RichQueryStore(Protocol):
    """Document store capable of selector queries."""

    def query_by_selector(self, selector: str) -> ResultsIterator[KV]:
        """Run a selector query given as a JSON string."""
        ...

    def query_by_selector_paginated(
        self, selector: str, page_size: int, bookmark: str
    ) -> tuple[ResultsIterator[KV], QueryResponseMetadata]:
        """Bounded selector query resuming at bookmark."""
        ...


@runtime_checkable
class TransactionalStore(Protocol):
    """Store that can group writes into one all-or-nothing commit."""

    def transaction(self, tx_id: str | None = None) -> AbstractContextManager[str]:
        """Open a commit boundary. Yields the transaction id."""
        ...

"""Storage collaborators: protocols and backends."""

from ledgersafe.storage.local import LocalDocumentStore, LocalResultsIterator, LocalStore
from ledgersafe.storage.protocol import (
    KV,
    KeyModification,
    KeyValueStore,
    QueryResponseMetadata,
    ResultsIterator,
    RichQueryStore,
    TransactionalStore,
)
from ledgersafe.storage.retrying import RetryingStore, RetryPolicy

__all__ = [
    # Protocols
    "KeyValueStore",
    "RichQueryStore",
    "TransactionalStore",
    "ResultsIterator",
    # Wire types
    "KV",
    "KeyModification",
    "QueryResponseMetadata",
    # Backends
    "LocalStore",
    "LocalDocumentStore",
    "LocalResultsIterator",
    "RetryingStore",
    "RetryPolicy",
]

"""ledgersafe: indexed asset registry over a key-value ledger store.

Usage:
    from ledgersafe import AssetContract, LocalDocumentStore

    contract = AssetContract(LocalDocumentStore())
    contract.invoke("initAsset", ["asset1", "blue", "35", "tom"])
    contract.invoke("transferAssetsBasedOnType", ["blue", "jerry"])
    contract.invoke("getAssetsByRange", ["asset1", "asset3"]).json()

    # Or use the services directly
    index = SecondaryIndex(store)
    records = RecordStore(store, index)
    QueryEngine(store).range_query("asset1", "asset3")
"""

__version__ = "0.1.0"

# Configuration
from ledgersafe.config import LedgerSettings, configure_logging

# Dispatcher
from ledgersafe.contract import OPERATIONS, AssetContract, Response

# Core primitives
from ledgersafe.core import (
    Asset,
    ConflictError,
    CorruptRecordError,
    HistoryRecord,
    InvalidArgumentError,
    LedgerError,
    MalformedKeyError,
    NotFoundError,
    PageMeta,
    QueryRecord,
    StoreError,
    StoreUnavailableError,
    TransferAbortedError,
    UnknownOperationError,
    UnsupportedQueryError,
    encode_composite_key,
    split_composite_key,
)

# Registry services
from ledgersafe.registry import (
    QueryEngine,
    RecordStore,
    SecondaryIndex,
    TransferSummary,
    TransferWorkflow,
    collect,
)

# Storage
from ledgersafe.storage import (
    KeyValueStore,
    LocalDocumentStore,
    LocalStore,
    RetryingStore,
    RetryPolicy,
    RichQueryStore,
)

__all__ = [
    # Version
    "__version__",
    # Core
    "Asset",
    "QueryRecord",
    "HistoryRecord",
    "PageMeta",
    "encode_composite_key",
    "split_composite_key",
    # Errors
    "LedgerError",
    "InvalidArgumentError",
    "NotFoundError",
    "ConflictError",
    "CorruptRecordError",
    "UnsupportedQueryError",
    "MalformedKeyError",
    "UnknownOperationError",
    "StoreError",
    "StoreUnavailableError",
    "TransferAbortedError",
    # Registry
    "SecondaryIndex",
    "RecordStore",
    "QueryEngine",
    "TransferWorkflow",
    "TransferSummary",
    "collect",
    # Storage
    "KeyValueStore",
    "RichQueryStore",
    "LocalStore",
    "LocalDocumentStore",
    "RetryingStore",
    "RetryPolicy",
    # Dispatcher
    "AssetContract",
    "Response",
    "OPERATIONS",
    # Config
    "LedgerSettings",
    "configure_logging",
]

"""Core primitives: errors, composite keys, and record models.

Architecture Note:
    core/ holds stateless building blocks with no store access.
    For stateful services, see storage/, registry/, and contract/.
"""

from ledgersafe.core.asset import (
    ASSET_DOC_TYPE,
    Asset,
    HistoryRecord,
    PageMeta,
    QueryRecord,
    decode_value,
)
from ledgersafe.core.errors import (
    ConflictError,
    CorruptRecordError,
    InvalidArgumentError,
    LedgerError,
    MalformedKeyError,
    NotFoundError,
    StoreError,
    StoreUnavailableError,
    TransferAbortedError,
    UnknownOperationError,
    UnsupportedQueryError,
)
from ledgersafe.core.keys import (
    COMPOSITE_KEY_DELIMITER,
    composite_prefix,
    encode_composite_key,
    is_composite_key,
    split_composite_key,
)

__all__ = [
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
    # Keys
    "COMPOSITE_KEY_DELIMITER",
    "encode_composite_key",
    "split_composite_key",
    "composite_prefix",
    "is_composite_key",
    # Models
    "ASSET_DOC_TYPE",
    "Asset",
    "QueryRecord",
    "HistoryRecord",
    "PageMeta",
    "decode_value",
]

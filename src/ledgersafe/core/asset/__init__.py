"""Asset record and query result models."""

from ledgersafe.core.asset.models import (
    ASSET_DOC_TYPE,
    Asset,
    HistoryRecord,
    PageMeta,
    QueryRecord,
    decode_value,
)

__all__ = [
    "ASSET_DOC_TYPE",
    "Asset",
    "QueryRecord",
    "HistoryRecord",
    "PageMeta",
    "decode_value",
]

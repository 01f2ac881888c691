"""Named-operation surface over the asset registry."""

from ledgersafe.contract.dispatcher import (
    OPERATIONS,
    AssetContract,
    Operation,
    Response,
    parse_page_size,
)

__all__ = [
    "AssetContract",
    "Operation",
    "OPERATIONS",
    "Response",
    "parse_page_size",
]

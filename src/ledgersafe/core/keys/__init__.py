"""Composite key codec for secondary indexes."""

from ledgersafe.core.keys.codec import (
    COMPOSITE_KEY_DELIMITER,
    composite_prefix,
    encode_composite_key,
    is_composite_key,
    split_composite_key,
)

__all__ = [
    "COMPOSITE_KEY_DELIMITER",
    "encode_composite_key",
    "split_composite_key",
    "composite_prefix",
    "is_composite_key",
]

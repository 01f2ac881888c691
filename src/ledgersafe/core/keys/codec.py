"""Composite key encoding for secondary indexes over a flat key space.

Wire form (U+0000 as delimiter):

    \\x00 index_name \\x00 attr1 \\x00 attr2 ... \\x00 attrN \\x00

The leading delimiter namespaces composite keys away from plain primary keys,
and the trailing delimiter after every attribute keeps a prefix of ``["blue"]``
from matching ``["bluegreen", ...]``. Keys sharing an index name and leading
attributes are therefore contiguous in byte-lexicographic order.

Usage:
    key = encode_composite_key("assetType~name", ["blue", "asset1"])
    index_name, attributes = split_composite_key(key)
    prefix = composite_prefix("assetType~name", ["blue"])
"""

from __future__ import annotations

from collections.abc import Sequence

from ledgersafe.core.errors import InvalidArgumentError, MalformedKeyError

COMPOSITE_KEY_DELIMITER = "\x00"
"""Separator between index name and attributes. Must not occur in any component."""


def _validate_component(value: str, label: str) -> None:
    if not isinstance(value, str):
        raise InvalidArgumentError(f"{label} must be a string, got {type(value).__name__}")
    if COMPOSITE_KEY_DELIMITER in value:
        raise InvalidArgumentError(f"{label} contains the composite key delimiter: {value!r}")


def composite_prefix(index_name: str, attributes: Sequence[str] = ()) -> str:
    """Encode a (possibly partial) composite key.

    With all attributes this is the full key; with a leading subset it is the
    prefix every matching key starts with.

    Raises:
        InvalidArgumentError: If index_name is empty or any component
            contains the delimiter.
    """
    if not index_name:
        raise InvalidArgumentError("index name must not be empty")
    _validate_component(index_name, "index name")
    for position, attribute in enumerate(attributes):
        _validate_component(attribute, f"attribute {position}")

    parts = [index_name, *attributes]
    return COMPOSITE_KEY_DELIMITER + "".join(p + COMPOSITE_KEY_DELIMITER for p in parts)


def encode_composite_key(index_name: str, attributes: Sequence[str]) -> str:
    """Encode index name plus ordered attributes into one sortable key."""
    return composite_prefix(index_name, attributes)


def split_composite_key(key: str) -> tuple[str, list[str]]:
    """Decode a composite key back into (index_name, attributes).

    Raises:
        MalformedKeyError: If the key does not carry the namespace delimiter
            or yields fewer than two segments.
    """
    segments = key.split(COMPOSITE_KEY_DELIMITER)
    if len(segments) < 2:
        raise MalformedKeyError(f"not a composite key: {key!r}")
    if segments[0] or segments[-1]:
        raise MalformedKeyError(f"composite key is not delimiter-framed: {key!r}")

    inner = segments[1:-1]
    if not inner or not inner[0]:
        raise MalformedKeyError(f"composite key has no index name: {key!r}")
    return inner[0], inner[1:]


def is_composite_key(key: str) -> bool:
    """Check whether a key lives in the composite (index) namespace."""
    return key.startswith(COMPOSITE_KEY_DELIMITER)

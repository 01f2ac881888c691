"""Tests for the type-to-name secondary index."""

from contextlib import closing

import pytest

from ledgersafe.core.errors import InvalidArgumentError, MalformedKeyError
from ledgersafe.core.keys import encode_composite_key
from ledgersafe.registry import SecondaryIndex
from ledgersafe.storage import LocalResultsIterator, LocalStore


class TrackingStore(LocalStore):
    """Remembers every iterator it hands out."""

    def __init__(self) -> None:
        super().__init__()
        self.opened: list[LocalResultsIterator] = []

    def scan_prefix(self, index_name, attributes):
        iterator = super().scan_prefix(index_name, attributes)
        self.opened.append(iterator)
        return iterator


def test_scan_by_type_yields_pairs_in_key_order(index):
    for name in ("a3", "a1", "a2"):
        index.add("blue", name)
    index.add("red", "a4")

    assert list(index.scan_by_type("blue")) == [("blue", "a1"), ("blue", "a2"), ("blue", "a3")]


def test_remove_deletes_entry(index):
    index.add("blue", "a1")
    index.remove("blue", "a1")

    assert list(index.scan_by_type("blue")) == []


def test_scan_is_lazy_and_closes_on_exhaustion():
    store = TrackingStore()
    index = SecondaryIndex(store)
    index.add("blue", "a1")

    scan = index.scan_by_type("blue")
    assert store.opened == []

    assert list(scan) == [("blue", "a1")]
    assert store.opened[0].close_count == 1


def test_scan_closes_on_early_stop():
    store = TrackingStore()
    index = SecondaryIndex(store)
    index.add("blue", "a1")
    index.add("blue", "a2")

    with closing(index.scan_by_type("blue")) as scan:
        assert next(scan) == ("blue", "a1")

    assert store.opened[0].close_count == 1


def test_scan_rejects_foreign_entries_under_prefix():
    store = TrackingStore()
    index = SecondaryIndex(store)
    store.put(encode_composite_key(index.index_name, ["blue"]), b"\x00")

    with pytest.raises(MalformedKeyError):
        list(index.scan_by_type("blue"))
    assert store.opened[0].close_count == 1


def test_add_rejects_delimiter(index):
    with pytest.raises(InvalidArgumentError):
        index.add("blue", "a\x001")

"""Unit tests for LocalStore and LocalDocumentStore."""

import pytest

from ledgersafe.core.errors import InvalidArgumentError, StoreError, UnsupportedQueryError
from ledgersafe.core.keys import encode_composite_key
from ledgersafe.storage import (
    KeyValueStore,
    LocalDocumentStore,
    LocalStore,
    RichQueryStore,
    TransactionalStore,
)


def test_capabilities_follow_protocols():
    """LocalStore is key-value only; LocalDocumentStore adds selector queries."""
    assert isinstance(LocalStore(), KeyValueStore)
    assert isinstance(LocalStore(), TransactionalStore)
    assert not isinstance(LocalStore(), RichQueryStore)
    assert isinstance(LocalDocumentStore(), RichQueryStore)


def test_put_get_delete(store):
    store.put("k", b"v")
    assert store.get("k") == b"v"

    store.delete("k")
    assert store.get("k") is None


def test_put_rejects_empty_value(store):
    with pytest.raises(InvalidArgumentError):
        store.put("k", b"")


def test_scan_range_is_end_exclusive_and_skips_composite_keys(store):
    for key in ("asset1", "asset2", "asset3"):
        store.put(key, b"{}")
    store.put(encode_composite_key("idx", ["a"]), b"\x00")

    keys = [kv.key for kv in store.scan_range("asset1", "asset3")]
    open_keys = [kv.key for kv in store.scan_range("", "")]

    assert keys == ["asset1", "asset2"]
    assert open_keys == ["asset1", "asset2", "asset3"]


def test_scan_prefix_matches_leading_attributes(store):
    store.put(encode_composite_key("idx", ["blue", "a1"]), b"\x00")
    store.put(encode_composite_key("idx", ["bluegreen", "a2"]), b"\x00")
    store.put(encode_composite_key("idx", ["blue", "a3"]), b"\x00")

    keys = [kv.key for kv in store.scan_prefix("idx", ["blue"])]

    assert keys == [
        encode_composite_key("idx", ["blue", "a1"]),
        encode_composite_key("idx", ["blue", "a3"]),
    ]


def test_iterator_close_is_tracked_and_blocks_reuse(store):
    store.put("a", b"1")
    iterator = store.scan_range("", "")

    iterator.close()

    assert iterator.closed
    with pytest.raises(StoreError, match="after close"):
        next(iterator)


def test_transaction_commits_on_clean_exit(store):
    with store.transaction("tx-1") as tx_id:
        store.put("a", b"1")
        assert store.get("a") == b"1"
        assert store.in_transaction

    assert tx_id == "tx-1"
    assert store.get("a") == b"1"
    assert [m.tx_id for m in store.history("a")] == ["tx-1"]


def test_transaction_discards_on_error(store):
    store.put("a", b"1")

    with pytest.raises(RuntimeError):
        with store.transaction():
            store.put("a", b"2")
            store.put("b", b"3")
            raise RuntimeError("boom")

    assert store.get("a") == b"1"
    assert store.get("b") is None
    assert len(list(store.history("a"))) == 1


def test_nested_transaction_rejected(store):
    with store.transaction():
        with pytest.raises(StoreError, match="already open"):
            with store.transaction():
                pass


def test_history_records_deletes_in_order(store):
    store.put("a", b"1")
    store.put("a", b"2")
    store.delete("a")

    history = list(store.history("a"))

    assert [m.value for m in history] == [b"1", b"2", b""]
    assert [m.is_delete for m in history] == [False, False, True]
    assert history[0].timestamp < history[1].timestamp < history[2].timestamp


def test_paginated_range_chains_bookmarks(store):
    for i in range(1, 6):
        store.put(f"asset{i}", b"{}")

    first, meta1 = store.scan_range_paginated("", "", 2, "")
    second, meta2 = store.scan_range_paginated("", "", 2, meta1.bookmark)
    third, meta3 = store.scan_range_paginated("", "", 2, meta2.bookmark)

    assert [kv.key for kv in first] == ["asset1", "asset2"]
    assert meta1.bookmark == "asset3"
    assert [kv.key for kv in second] == ["asset3", "asset4"]
    assert [kv.key for kv in third] == ["asset5"]
    assert meta3.fetched_records_count == 1
    assert meta3.bookmark == ""


def test_selector_query_matches_field_equality(store):
    store.put("a1", b'{"docType": "asset", "owner": "tom"}')
    store.put("a2", b'{"docType": "asset", "owner": "jerry"}')
    store.put("a3", b"not json")

    keys = [kv.key for kv in store.query_by_selector('{"selector": {"owner": "tom"}}')]

    assert keys == ["a1"]


def test_selector_query_rejects_operators_and_bad_json(store):
    with pytest.raises(UnsupportedQueryError):
        store.query_by_selector('{"selector": {"price": {"$gt": 10}}}')
    with pytest.raises(InvalidArgumentError):
        store.query_by_selector("{not json")
    with pytest.raises(InvalidArgumentError):
        store.query_by_selector('{"owner": "tom"}')

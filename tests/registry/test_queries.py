"""Tests for QueryEngine."""

import pytest

from ledgersafe.core.errors import InvalidArgumentError, UnsupportedQueryError
from ledgersafe.registry import QueryEngine, RecordStore, SecondaryIndex, selector_text
from ledgersafe.storage import LocalDocumentStore, LocalStore, RetryingStore


def test_range_query_excludes_end_key(seeded, queries):
    records = queries.range_query("asset1", "asset3")

    assert [r.key for r in records] == ["asset1", "asset2"]
    assert records[0].record["assetType"] == "blue"


def test_range_query_never_returns_index_entries(seeded, queries):
    assert [r.key for r in queries.range_query("", "")] == ["asset1", "asset2", "asset3"]


def test_query_by_owner(seeded, queries):
    seeded.set_owner("asset2", "jerry")

    assert [r.key for r in queries.query_by_owner("TOM")] == ["asset1", "asset3"]
    assert [r.key for r in queries.query_by_owner("jerry")] == ["asset2"]


def test_rich_query_accepts_string_or_mapping(seeded, queries):
    by_text = queries.rich_query('{"selector": {"assetType": "blue"}}')
    by_mapping = queries.rich_query({"selector": {"assetType": "blue"}})

    assert [r.key for r in by_text] == [r.key for r in by_mapping] == ["asset1", "asset3"]


@pytest.mark.parametrize("selector", ["", "{oops", {}])
def test_rich_query_rejects_bad_selectors(queries, selector):
    with pytest.raises(InvalidArgumentError):
        queries.rich_query(selector)


def test_rich_query_unsupported_on_key_value_store():
    store = LocalStore()
    RecordStore(store, SecondaryIndex(store)).create("asset1", "blue", "35", "tom")
    engine = QueryEngine(store)

    assert not engine.supports_rich_query
    with pytest.raises(UnsupportedQueryError):
        engine.query_by_owner("tom")
    with pytest.raises(UnsupportedQueryError):
        engine.rich_query_paginated('{"selector": {}}', 2, "")
    assert [r.key for r in engine.range_query("", "")] == ["asset1"]



def test_rich_query_capability_seen_through_retrying_store():
    assert not QueryEngine(RetryingStore(LocalStore())).supports_rich_query
    assert QueryEngine(RetryingStore(LocalDocumentStore())).supports_rich_query

    with pytest.raises(UnsupportedQueryError):
        QueryEngine(RetryingStore(LocalStore())).query_by_owner("tom")


def test_history_follows_lifecycle(records, queries):
    records.create("asset1", "blue", "35", "tom")
    records.set_owner("asset1", "jerry")
    records.delete("asset1")

    history = queries.history_query("asset1")

    assert len(history) == 3
    assert [h.is_delete for h in history] == [False, False, True]
    assert history[0].value["owner"] == "tom"
    assert history[1].value["owner"] == "jerry"
    assert history[2].value is None
    assert history[0].timestamp < history[1].timestamp < history[2].timestamp


def test_history_of_unknown_asset_is_empty(queries):
    assert queries.history_query("nothing") == []


def test_range_pagination_covers_every_record_once(records, queries):
    for i in range(1, 6):
        records.create(f"asset{i}", "blue", str(i), "tom")

    seen = []
    bookmark = ""
    pages = []
    for _ in range(3):
        page, meta = queries.range_query_paginated("asset1", "asset9", 2, bookmark)
        assert meta.records_count == len(page)
        seen.extend(r.key for r in page)
        pages.append(len(page))
        bookmark = meta.bookmark

    assert seen == [f"asset{i}" for i in range(1, 6)]
    assert pages == [2, 2, 1]
    assert bookmark == ""


def test_rich_pagination_covers_every_record_once(records, queries):
    for i in range(1, 6):
        records.create(f"asset{i}", "blue", str(i), "tom")
    records.create("asset6", "red", "6", "jerry")

    selector = {"selector": {"owner": "tom"}}
    page1, meta1 = queries.rich_query_paginated(selector, 2, "")
    page2, meta2 = queries.rich_query_paginated(selector, 2, meta1.bookmark)
    page3, meta3 = queries.rich_query_paginated(selector, 2, meta2.bookmark)

    keys = [r.key for r in page1 + page2 + page3]
    assert sorted(keys) == [f"asset{i}" for i in range(1, 6)]
    assert len(set(keys)) == 5
    assert meta3.records_count <= 2


@pytest.mark.parametrize("page_size", [0, -1])
def test_pagination_rejects_non_positive_page_size(queries, page_size):
    with pytest.raises(InvalidArgumentError):
        queries.range_query_paginated("", "", page_size, "")
    with pytest.raises(InvalidArgumentError):
        queries.rich_query_paginated('{"selector": {}}', page_size, "")


def test_page_size_is_clamped(store, records):
    for i in range(1, 4):
        records.create(f"asset{i}", "blue", "1", "tom")
    engine = QueryEngine(store, max_page_size=2)

    page, meta = engine.range_query_paginated("", "", 100, "")

    assert len(page) == 2
    assert meta.bookmark == "asset3"


def test_selector_text_sorts_mapping_keys():
    assert selector_text({"selector": {"owner": "tom", "docType": "asset"}}) == (
        '{"selector": {"docType": "asset", "owner": "tom"}}'
    )

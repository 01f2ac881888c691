"""Query engine: range, selector, history, and paginated reads.

Range scans walk primary keys in byte-lexicographic order with an
exclusive end key. Selector queries are passed through to stores that
implement RichQueryStore; their ordering is whatever the store returns.

Usage:
    engine = QueryEngine(store)
    engine.range_query("asset1", "asset3")
    engine.query_by_owner("tom")
    page, meta = engine.range_query_paginated("", "", page_size=2, bookmark="")
    next_page, meta = engine.range_query_paginated("", "", 2, meta.bookmark)
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

import structlog

from ledgersafe.core.asset import ASSET_DOC_TYPE, HistoryRecord, PageMeta, QueryRecord
from ledgersafe.core.errors import InvalidArgumentError, UnsupportedQueryError
from ledgersafe.registry.collector import collect, collect_page
from ledgersafe.registry.records import require_text
from ledgersafe.storage.protocol import KeyValueStore, RichQueryStore

Selector = str | Mapping[str, Any]

logger = structlog.get_logger(__name__)


def selector_text(selector: Selector) -> str:
    """Normalise a selector to the JSON string handed to the store.

    Strings must be valid JSON; mappings are serialised.

    Raises:
        InvalidArgumentError: For empty or non-JSON selectors.
    """
    if isinstance(selector, Mapping):
        if not selector:
            raise InvalidArgumentError("query selector must not be empty")
        return json.dumps(selector, sort_keys=True)
    text = require_text(selector, "query selector")
    try:
        json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidArgumentError(f"query selector is not valid JSON: {e.msg}") from e
    return text


class QueryEngine:
    """Read-side operations over records and their history.

    Args:
        store: Store to query. Selector queries need a RichQueryStore.
        max_page_size: Page sizes above this are clamped.
    """

    def __init__(self, store: KeyValueStore, max_page_size: int = 1000):
        self._store = store
        self._max_page_size = max_page_size

    @property
    def supports_rich_query(self) -> bool:
        if not isinstance(self._store, RichQueryStore):
            return False
        # Wrapping stores always expose the selector methods; they report the inner capability.
        return bool(getattr(self._store, "supports_rich_query", True))

    def _rich_store(self) -> RichQueryStore:
        store = self._store
        if not isinstance(store, RichQueryStore) or not self.supports_rich_query:
            raise UnsupportedQueryError(
                f"{type(store).__name__} does not support selector queries"
            )
        return store

    def _page_size(self, page_size: int) -> int:
        if isinstance(page_size, bool) or not isinstance(page_size, int) or page_size <= 0:
            raise InvalidArgumentError(f"page size must be a positive integer, got {page_size!r}")
        return min(page_size, self._max_page_size)

    def range_query(self, start_key: str, end_key: str) -> list[QueryRecord]:
        """All records with start_key <= key < end_key. Empty bounds are open."""
        return collect(self._store.scan_range(start_key, end_key))

    def rich_query(self, selector: Selector) -> list[QueryRecord]:
        """Records matching a selector query."""
        store = self._rich_store()
        text = selector_text(selector)
        logger.debug("rich_query", selector=text)
        return collect(store.query_by_selector(text))

    def query_by_owner(self, owner: str) -> list[QueryRecord]:
        """Assets held by owner (parameterised selector query)."""
        owner = require_text(owner, "owner").lower()
        return self.rich_query({"selector": {"docType": ASSET_DOC_TYPE, "owner": owner}})

    def history_query(self, name: str) -> list[HistoryRecord]:
        """Every mutation of name, oldest first, including the delete if any."""
        require_text(name, "asset name")
        return collect(self._store.history(name), history=True)

    def range_query_paginated(
        self, start_key: str, end_key: str, page_size: int, bookmark: str = ""
    ) -> tuple[list[QueryRecord], PageMeta]:
        """One page of range_query. Pass the returned bookmark to continue."""
        size = self._page_size(page_size)
        iterator, metadata = self._store.scan_range_paginated(start_key, end_key, size, bookmark)
        return collect_page(iterator, metadata)

    def rich_query_paginated(
        self, selector: Selector, page_size: int, bookmark: str = ""
    ) -> tuple[list[QueryRecord], PageMeta]:
        """One page of rich_query. Pass the returned bookmark to continue."""
        store = self._rich_store()
        text = selector_text(selector)
        size = self._page_size(page_size)
        iterator, metadata = store.query_by_selector_paginated(text, size, bookmark)
        return collect_page(iterator, metadata)

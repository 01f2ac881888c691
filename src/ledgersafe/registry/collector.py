"""Result collection: drain a store iterator into caller-facing records.

The collector owns the iterator it is handed. It is closed exactly once on
every exit path: exhaustion, an error raised by the store mid-scan, or an
error raised while decoding.

Usage:
    records = collect(store.scan_range("asset1", "asset3"))
    history = collect(store.history("asset1"), history=True)
    page, meta = collect_page(*store.scan_range_paginated("", "", 10, ""))
"""

from __future__ import annotations

from contextlib import closing
from typing import Literal, overload

import structlog

from ledgersafe.core.asset import HistoryRecord, PageMeta, QueryRecord, decode_value
from ledgersafe.storage.protocol import KV, KeyModification, QueryResponseMetadata, ResultsIterator

logger = structlog.get_logger(__name__)


@overload
def collect(iterator: ResultsIterator[KV], history: Literal[False] = ...) -> list[QueryRecord]: ...


@overload
def collect(
    iterator: ResultsIterator[KeyModification], history: Literal[True]
) -> list[HistoryRecord]: ...


def collect(
    iterator: ResultsIterator[KV] | ResultsIterator[KeyModification], history: bool = False
) -> list[QueryRecord] | list[HistoryRecord]:
    """Drain iterator into decoded records, closing it when done.

    Elements with an empty value are skipped, except history entries that
    mark a delete. Values are decoded as JSON with a raw-text fallback.

    Args:
        iterator: Open store iterator. Ownership passes to this call.
        history: Build HistoryRecord entries instead of QueryRecord pairs.

    Returns:
        Records in the order the store delivered them.
    """
    results: list = []
    with closing(iterator):
        for item in iterator:
            if history:
                if not item.value and not item.is_delete:
                    continue
                value = decode_value(item.value) if item.value else None
                results.append(HistoryRecord(item.tx_id, item.timestamp, item.is_delete, value))
            else:
                if not item.value:
                    continue
                results.append(QueryRecord(item.key, decode_value(item.value)))
    logger.debug("results_collected", count=len(results), history=history)
    return results


def collect_page(
    iterator: ResultsIterator[KV], metadata: QueryResponseMetadata
) -> tuple[list[QueryRecord], PageMeta]:
    """Drain one page and pair it with its resume metadata.

    ``records_count`` is the number of records actually returned, which can
    be lower than the store's fetched count when empty values were skipped.
    """
    records = collect(iterator)
    return records, PageMeta(records_count=len(records), bookmark=metadata.bookmark)

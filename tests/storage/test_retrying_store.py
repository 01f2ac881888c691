"""Tests for RetryingStore."""

import pytest

from ledgersafe.core.errors import StoreUnavailableError, UnsupportedQueryError
from ledgersafe.storage import LocalDocumentStore, LocalStore, RetryingStore, RetryPolicy

NO_WAIT = RetryPolicy(max_attempts=3, backoff="none")


class FlakyStore(LocalDocumentStore):
    """Fails the first ``failures`` point reads with StoreUnavailableError."""

    def __init__(self, failures: int) -> None:
        super().__init__()
        self.failures = failures
        self.calls = 0

    def get(self, key: str) -> bytes | None:
        self.calls += 1
        if self.calls <= self.failures:
            raise StoreUnavailableError("peer unavailable")
        return super().get(key)


def test_transient_failures_are_retried():
    inner = FlakyStore(failures=2)
    inner.put("a", b"1")
    store = RetryingStore(inner, NO_WAIT)

    assert store.get("a") == b"1"
    assert inner.calls == 3


def test_exhausted_retries_reraise_last_error():
    inner = FlakyStore(failures=5)
    store = RetryingStore(inner, NO_WAIT)

    with pytest.raises(StoreUnavailableError):
        store.get("a")
    assert inner.calls == 3


def test_selector_queries_unsupported_without_capability():
    store = RetryingStore(LocalStore(), NO_WAIT)

    assert not store.supports_rich_query
    with pytest.raises(UnsupportedQueryError):
        store.query_by_selector('{"selector": {}}')


def test_reports_inner_selector_capability():
    assert RetryingStore(LocalDocumentStore(), NO_WAIT).supports_rich_query


def test_transaction_delegates_to_inner_store():
    inner = LocalStore()
    store = RetryingStore(inner, NO_WAIT)

    with pytest.raises(RuntimeError):
        with store.transaction():
            store.put("a", b"1")
            raise RuntimeError("boom")

    assert inner.get("a") is None

"""Retrying wrapper for stores with transient failures.

Retry belongs to the store side of the boundary: the registry never retries
on its own. Wrap a remote or flaky backend so that StoreUnavailableError on
point access or scan opening is retried under a RetryPolicy. Iteration over
an already opened scan is never retried.

Usage:
    policy = RetryPolicy(max_attempts=3, backoff="exponential", base_delay=0.05)
    store = RetryingStore(remote_store, policy)
"""

from __future__ import annotations

import uuid
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Literal, TypeVar

import structlog
import tenacity

from ledgersafe.core.errors import StoreUnavailableError, UnsupportedQueryError
from ledgersafe.storage.protocol import (
    KV,
    KeyModification,
    KeyValueStore,
    QueryResponseMetadata,
    ResultsIterator,
    RichQueryStore,
    TransactionalStore,
)

R = TypeVar("R")

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Configuration for retrying transient store failures."""

    max_attempts: int = 3
    """Maximum attempts (1 = no retry)."""

    backoff: Literal["none", "linear", "exponential"] = "exponential"
    """Backoff strategy between retries."""

    base_delay: float = 0.05
    """Base delay in seconds for backoff calculation."""


class RetryingStore:
    """KeyValueStore decorator that retries StoreUnavailableError.

    Mirrors the inner store's optional capabilities: selector queries raise
    UnsupportedQueryError when the inner store has none, and transaction()
    degrades to a plain id when the inner store has no commit boundary.

    Args:
        inner: Store to delegate to.
        policy: Retry configuration.
    """

    def __init__(self, inner: KeyValueStore, policy: RetryPolicy | None = None):
        self._inner = inner
        self._policy = policy or RetryPolicy()

    @property
    def inner(self) -> KeyValueStore:
        return self._inner

    @property
    def supports_rich_query(self) -> bool:
        """Whether the inner store answers selector queries."""
        return isinstance(self._inner, RichQueryStore)

    def _build_retryer(self) -> tenacity.Retrying:
        """Build a tenacity retryer from the policy."""
        policy = self._policy
        wait: tenacity.wait.wait_base
        if policy.backoff == "exponential":
            wait = tenacity.wait_exponential(multiplier=policy.base_delay, min=policy.base_delay)
        elif policy.backoff == "linear":
            wait = tenacity.wait_incrementing(start=policy.base_delay, increment=policy.base_delay)
        else:
            wait = tenacity.wait_none()

        return tenacity.Retrying(
            stop=tenacity.stop_after_attempt(max(policy.max_attempts, 1)),
            wait=wait,
            retry=tenacity.retry_if_exception_type(StoreUnavailableError),
            before_sleep=self._log_retry,
            reraise=True,
        )

    @staticmethod
    def _log_retry(state: tenacity.RetryCallState) -> None:
        exception = state.outcome.exception() if state.outcome else None
        logger.warning(
            "store_call_retrying",
            attempt=state.attempt_number,
            error=str(exception) if exception else None,
        )

    def _call(self, fn: Callable[..., R], *args: Any) -> R:
        return self._build_retryer()(fn, *args)

    def get(self, key: str) -> bytes | None:
        return self._call(self._inner.get, key)

    def put(self, key: str, value: bytes) -> None:
        self._call(self._inner.put, key, value)

    def delete(self, key: str) -> None:
        self._call(self._inner.delete, key)

    def scan_range(self, start_key: str, end_key: str) -> ResultsIterator[KV]:
        return self._call(self._inner.scan_range, start_key, end_key)

    def scan_prefix(self, index_name: str, attributes: Sequence[str]) -> ResultsIterator[KV]:
        return self._call(self._inner.scan_prefix, index_name, attributes)

    def history(self, key: str) -> ResultsIterator[KeyModification]:
        return self._call(self._inner.history, key)

    def scan_range_paginated(
        self, start_key: str, end_key: str, page_size: int, bookmark: str
    ) -> tuple[ResultsIterator[KV], QueryResponseMetadata]:
        return self._call(
            self._inner.scan_range_paginated, start_key, end_key, page_size, bookmark
        )

    def _rich(self) -> RichQueryStore:
        if not isinstance(self._inner, RichQueryStore):
            raise UnsupportedQueryError(
                f"{type(self._inner).__name__} does not support selector queries"
            )
        return self._inner

    def query_by_selector(self, selector: str) -> ResultsIterator[KV]:
        return self._call(self._rich().query_by_selector, selector)

    def query_by_selector_paginated(
        self, selector: str, page_size: int, bookmark: str
    ) -> tuple[ResultsIterator[KV], QueryResponseMetadata]:
        return self._call(self._rich().query_by_selector_paginated, selector, page_size, bookmark)

    @contextmanager
    def transaction(self, tx_id: str | None = None) -> Iterator[str]:
        if isinstance(self._inner, TransactionalStore):
            with self._inner.transaction(tx_id) as opened:
                yield opened
        else:
            yield tx_id or uuid.uuid4().hex

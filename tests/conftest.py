"""Shared test fixtures."""

import sys

import pytest

# Ensure src is in path
sys.path.insert(0, "src")

from ledgersafe import (
    AssetContract,
    LedgerSettings,
    LocalDocumentStore,
    QueryEngine,
    RecordStore,
    SecondaryIndex,
    TransferWorkflow,
)


class Clock:
    """Deterministic clock: each call advances one second."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        self.now += 1.0
        return self.now


@pytest.fixture
def store():
    """Fresh document store with a deterministic clock."""
    return LocalDocumentStore(clock=Clock())


@pytest.fixture
def index(store):
    return SecondaryIndex(store)


@pytest.fixture
def records(store, index):
    return RecordStore(store, index)


@pytest.fixture
def queries(store):
    return QueryEngine(store)


@pytest.fixture
def transfers(records, index):
    return TransferWorkflow(records, index)


@pytest.fixture
def settings():
    return LedgerSettings(_env_file=None)


@pytest.fixture
def contract(store, settings):
    return AssetContract(store, settings)


@pytest.fixture
def seeded(records):
    """asset1 (blue), asset2 (red), asset3 (blue), all owned by tom."""
    records.create("asset1", "blue", "35", "tom")
    records.create("asset2", "red", "50", "tom")
    records.create("asset3", "blue", "70", "tom")
    return records

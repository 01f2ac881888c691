"""Asset registry services: records, index, queries, and transfers."""

from ledgersafe.registry.collector import collect, collect_page
from ledgersafe.registry.index import DEFAULT_INDEX_NAME, INDEX_SENTINEL, SecondaryIndex
from ledgersafe.registry.queries import QueryEngine, Selector, selector_text
from ledgersafe.registry.records import RecordStore, parse_price, require_text
from ledgersafe.registry.transfer import TransferSummary, TransferWorkflow

__all__ = [
    # Collector
    "collect",
    "collect_page",
    # Index
    "SecondaryIndex",
    "DEFAULT_INDEX_NAME",
    "INDEX_SENTINEL",
    # Records
    "RecordStore",
    "require_text",
    "parse_price",
    # Queries
    "QueryEngine",
    "Selector",
    "selector_text",
    # Transfers
    "TransferWorkflow",
    "TransferSummary",
]

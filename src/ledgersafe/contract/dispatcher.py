"""Invocation dispatcher: named operations over string arguments.

Each operation name maps to a handler with a fixed arity in the static
OPERATIONS table. An invocation runs inside the store's commit boundary
when the store has one, so a failed invocation leaves no partial writes.
Errors come back as error responses; they never escape invoke().

Usage:
    contract = AssetContract(LocalDocumentStore())
    contract.invoke("initAsset", ["asset1", "blue", "35", "tom"])
    response = contract.invoke("readAsset", ["asset1"])
    response.payload  # b'{"docType":"asset","name":"asset1",...}'
"""

from __future__ import annotations

import base64
import json
import re
import uuid
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

import structlog

from ledgersafe.config.logging import bind_invocation, clear_invocation
from ledgersafe.config.settings import LedgerSettings
from ledgersafe.core.asset import PageMeta, QueryRecord
from ledgersafe.core.errors import InvalidArgumentError, LedgerError, UnknownOperationError
from ledgersafe.registry.index import SecondaryIndex
from ledgersafe.registry.queries import QueryEngine
from ledgersafe.registry.records import RecordStore
from ledgersafe.registry.transfer import TransferWorkflow
from ledgersafe.storage.protocol import KeyValueStore, TransactionalStore

_PAGE_SIZE_PATTERN = re.compile(r"[0-9]+")

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Response:
    """Outcome of one invocation.

    Attributes:
        status: 200 on success, 500 on failure.
        payload: Marshalled result bytes (empty for operations without one).
        message: Error message on failure.
        code: Error category on failure (see LedgerError.code).
    """

    status: int
    payload: bytes = b""
    message: str = ""
    code: str = ""

    OK = 200
    ERROR = 500

    @property
    def ok(self) -> bool:
        return self.status == self.OK

    @classmethod
    def success(cls, payload: bytes = b"") -> Response:
        return cls(status=cls.OK, payload=payload)

    @classmethod
    def error(cls, error: LedgerError) -> Response:
        return cls(status=cls.ERROR, message=str(error), code=error.code)

    def json(self) -> Any:
        """Decode the payload as JSON."""
        return json.loads(self.payload)


Handler = Callable[["AssetContract", Sequence[str]], bytes | None]


@dataclass(frozen=True, slots=True)
class Operation:
    """One routable operation: exact argument count plus handler."""

    name: str
    arity: int
    handler: Handler


def _json_default(value: Any) -> str:
    # Non-UTF-8 stored values come back from decode_value as raw bytes.
    if isinstance(value, bytes):
        return base64.b64encode(value).decode("ascii")
    raise TypeError(f"{type(value).__name__} is not JSON serializable")


def _marshal(value: Any) -> bytes:
    return json.dumps(value, default=_json_default).encode("utf-8")


def _records(records: list[QueryRecord]) -> list[dict[str, Any]]:
    return [record.to_dict() for record in records]


def _page(records: list[QueryRecord], meta: PageMeta) -> bytes:
    return _marshal({"Results": _records(records), "ResponseMetadata": meta.to_dict()})


def parse_page_size(value: str) -> int:
    """Parse a positive page size from its decimal string form."""
    size = 0
    if _PAGE_SIZE_PATTERN.fullmatch(value):
        try:
            size = int(value)
        except ValueError as e:
            raise InvalidArgumentError(f"page size is too large ({len(value)} digits)") from e
    if size <= 0:
        raise InvalidArgumentError(f"page size must be a positive integer, got {value!r}")
    return size


# Handlers


def _init_asset(contract: AssetContract, args: Sequence[str]) -> None:
    name, asset_type, price, owner = args
    contract.records.create(name, asset_type, price, owner)


def _read_asset(contract: AssetContract, args: Sequence[str]) -> bytes:
    return contract.records.read(args[0])


def _delete(contract: AssetContract, args: Sequence[str]) -> None:
    contract.records.delete(args[0])


def _transfer_asset(contract: AssetContract, args: Sequence[str]) -> None:
    contract.transfers.transfer_one(args[0], args[1])


def _transfer_assets_based_on_type(contract: AssetContract, args: Sequence[str]) -> bytes:
    summary = contract.transfers.transfer_by_type(args[0], args[1])
    return summary.message.encode("utf-8")


def _get_assets_by_range(contract: AssetContract, args: Sequence[str]) -> bytes:
    return _marshal(_records(contract.queries.range_query(args[0], args[1])))


def _query_assets_by_owner(contract: AssetContract, args: Sequence[str]) -> bytes:
    return _marshal(_records(contract.queries.query_by_owner(args[0])))


def _query_assets(contract: AssetContract, args: Sequence[str]) -> bytes:
    return _marshal(_records(contract.queries.rich_query(args[0])))


def _get_history_for_asset(contract: AssetContract, args: Sequence[str]) -> bytes:
    return _marshal([entry.to_dict() for entry in contract.queries.history_query(args[0])])


def _get_assets_by_range_with_pagination(contract: AssetContract, args: Sequence[str]) -> bytes:
    start_key, end_key, page_size, bookmark = args
    records, meta = contract.queries.range_query_paginated(
        start_key, end_key, parse_page_size(page_size), bookmark
    )
    return _page(records, meta)


def _query_assets_with_pagination(contract: AssetContract, args: Sequence[str]) -> bytes:
    selector, page_size, bookmark = args
    records, meta = contract.queries.rich_query_paginated(
        selector, parse_page_size(page_size), bookmark
    )
    return _page(records, meta)


OPERATIONS: dict[str, Operation] = {
    op.name: op
    for op in (
        Operation("initAsset", 4, _init_asset),
        Operation("readAsset", 1, _read_asset),
        Operation("delete", 1, _delete),
        Operation("transferAsset", 2, _transfer_asset),
        Operation("transferAssetsBasedOnType", 2, _transfer_assets_based_on_type),
        Operation("getAssetsByRange", 2, _get_assets_by_range),
        Operation("queryAssetsByOwner", 1, _query_assets_by_owner),
        Operation("queryAssets", 1, _query_assets),
        Operation("getHistoryForAsset", 1, _get_history_for_asset),
        Operation("getAssetsByRangeWithPagination", 4, _get_assets_by_range_with_pagination),
        Operation("queryAssetsWithPagination", 3, _query_assets_with_pagination),
    )
}
"""Operation name -> Operation. Resolved once at import."""


class AssetContract:
    """Asset registry exposed as named operations.

    Composes SecondaryIndex, RecordStore, QueryEngine and TransferWorkflow
    over one store.

    Args:
        store: Key-value store collaborator.
        settings: Registry configuration (defaults from environment).
    """

    def __init__(self, store: KeyValueStore, settings: LedgerSettings | None = None):
        self._settings = settings or LedgerSettings()
        self._store = store
        self.index = SecondaryIndex(store, self._settings.index_name)
        self.records = RecordStore(store, self.index)
        self.queries = QueryEngine(store, max_page_size=self._settings.max_page_size)
        self.transfers = TransferWorkflow(self.records, self.index)

    @property
    def store(self) -> KeyValueStore:
        return self._store

    def init(self, args: Sequence[str] = ()) -> Response:
        """Instantiation hook. Nothing to set up; always succeeds."""
        logger.info("contract_instantiated", args=list(args))
        return Response.success()

    @contextmanager
    def _commit_boundary(self, tx_id: str | None) -> Iterator[str]:
        if isinstance(self._store, TransactionalStore):
            with self._store.transaction(tx_id) as opened:
                yield opened
        else:
            yield tx_id or uuid.uuid4().hex

    def invoke(self, function: str, args: Sequence[str], tx_id: str | None = None) -> Response:
        """Route one invocation and marshal its outcome.

        Args:
            function: Operation name from OPERATIONS.
            args: Positional string arguments.
            tx_id: Transaction id (generated if omitted).

        Returns:
            Success response with the payload, or an error response.
        """
        try:
            operation = OPERATIONS.get(function)
            if operation is None:
                raise UnknownOperationError(f"received unknown function {function!r} invocation")
            if len(args) != operation.arity:
                raise InvalidArgumentError(
                    f"incorrect number of arguments for {function}: "
                    f"expected {operation.arity}, got {len(args)}"
                )
            with self._commit_boundary(tx_id) as opened:
                bind_invocation(tx_id=opened, function=function)
                logger.info("invocation_started", args=list(args))
                payload = operation.handler(self, list(args))
        except LedgerError as e:
            logger.warning("invocation_failed", function=function, code=e.code, error=str(e))
            return Response.error(e)
        else:
            logger.info("invocation_succeeded", payload_bytes=len(payload or b""))
            return Response.success(payload or b"")
        finally:
            clear_invocation()

"""Error taxonomy shared by every ledgersafe layer.

Every failure aborts the current operation and propagates to the caller.
The dispatcher is the only place that turns these into error responses,
using ``code`` as the stable category name.

Usage:
    try:
        records.read("asset1")
    except NotFoundError as e:
        print(e.code)  # "not_found"
"""

from __future__ import annotations


class LedgerError(Exception):
    """Base class for all ledgersafe failures."""

    code = "ledger_error"


class InvalidArgumentError(LedgerError):
    """Wrong arity, empty required value, bad number, or delimiter collision."""

    code = "invalid_argument"


class NotFoundError(LedgerError):
    """Record absent on read, delete, or transfer."""

    code = "not_found"


class ConflictError(LedgerError):
    """Create attempted on a name that already exists."""

    code = "conflict"


class CorruptRecordError(LedgerError):
    """Stored bytes could not be decoded where decoding is required."""

    code = "corrupt"


class UnsupportedQueryError(LedgerError):
    """Rich query issued against a store without selector support."""

    code = "unsupported"


class MalformedKeyError(LedgerError):
    """Composite key could not be split into index name and attributes."""

    code = "malformed"


class UnknownOperationError(LedgerError):
    """Dispatcher received a function name it does not route."""

    code = "unknown_operation"


class StoreError(LedgerError):
    """Failure reported by the key-value store collaborator."""

    code = "store_error"


class StoreUnavailableError(StoreError):
    """Transient store failure. The only error RetryingStore retries."""

    code = "store_unavailable"


class TransferAbortedError(LedgerError):
    """Bulk transfer stopped part way through.

    Transfers completed before the failure are not rolled back here.

    Attributes:
        transferred: Number of assets transferred before the failure.
        cause: The error raised by the failing transfer.
    """

    code = "transfer_aborted"

    def __init__(self, message: str, transferred: int, cause: LedgerError) -> None:
        super().__init__(message)
        self.transferred = transferred
        self.cause = cause

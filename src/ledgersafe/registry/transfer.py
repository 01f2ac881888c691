"""Ownership transfers for one asset or every asset of a type.

Bulk transfers walk the type index and re-own each asset in index order.
There is no rollback at this layer: if one transfer fails, the ones before
it stay applied unless the enclosing commit boundary discards them.
"""

from __future__ import annotations

from contextlib import closing
from dataclasses import dataclass

import structlog

from ledgersafe.core.asset import Asset
from ledgersafe.core.errors import LedgerError, TransferAbortedError
from ledgersafe.registry.index import SecondaryIndex
from ledgersafe.registry.records import RecordStore, require_text

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class TransferSummary:
    """Outcome of a bulk transfer."""

    asset_type: str
    new_owner: str
    names: tuple[str, ...] = ()

    @property
    def transferred(self) -> int:
        return len(self.names)

    @property
    def message(self) -> str:
        return f"Transferred {self.transferred} {self.asset_type} assets to {self.new_owner}"


class TransferWorkflow:
    """Single and bulk ownership changes built on RecordStore and SecondaryIndex.

    Args:
        records: Record store performing each owner change.
        index: Type index enumerating bulk transfer candidates.
    """

    def __init__(self, records: RecordStore, index: SecondaryIndex):
        self._records = records
        self._index = index

    def transfer_one(self, name: str, new_owner: str) -> Asset:
        """Change the owner of one asset. Fails as RecordStore.set_owner does."""
        return self._records.set_owner(name, new_owner)

    def transfer_by_type(self, asset_type: str, new_owner: str) -> TransferSummary:
        """Transfer every asset of asset_type to new_owner, sequentially.

        Raises:
            InvalidArgumentError: If asset_type or new_owner is empty.
            TransferAbortedError: On the first failing transfer. Carries the
                number of assets already transferred and the cause.
        """
        asset_type = require_text(asset_type, "asset type").lower()
        new_owner = require_text(new_owner, "new owner").lower()
        logger.info("bulk_transfer_started", type=asset_type, owner=new_owner)

        names: list[str] = []
        with closing(self._index.scan_by_type(asset_type)) as entries:
            for _, name in entries:
                try:
                    self.transfer_one(name, new_owner)
                except LedgerError as e:
                    logger.warning(
                        "bulk_transfer_aborted",
                        type=asset_type,
                        failed=name,
                        transferred=len(names),
                        error=str(e),
                    )
                    raise TransferAbortedError(
                        f"transfer of {name} failed after {len(names)} transfer(s): {e}",
                        transferred=len(names),
                        cause=e,
                    ) from e
                names.append(name)

        summary = TransferSummary(asset_type, new_owner, tuple(names))
        logger.info("bulk_transfer_finished", type=asset_type, transferred=summary.transferred)
        return summary

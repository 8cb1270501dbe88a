"""Best-effort batch persistence of parsed records."""

import asyncio
import logging
from typing import Sequence

from breachscan.models import BreachRecord
from breachscan.storage.interfaces import RecordStorageInterface

logger = logging.getLogger(__name__)


class BatchWriter:
    """Persists a batch of records, one independent insert per record.

    All inserts of a batch are dispatched together and awaited as a group. A
    failing insert is logged and dropped; it never blocks, cancels or rolls
    back the others, and the caller gets no per-record outcome. Records may
    land in the store in any order.
    """

    def __init__(self, records: RecordStorageInterface):
        self.records = records

    async def write(self, batch: Sequence[BreachRecord]) -> None:
        if not batch:
            return
        results = await asyncio.gather(
            *(self.records.add_record(record) for record in batch),
            return_exceptions=True,
        )
        failures = [r for r in results if isinstance(r, BaseException)]
        for failure in failures:
            if isinstance(failure, asyncio.CancelledError):
                raise failure
        if failures:
            logger.warning(
                "Failed to persist %d of %d records in batch: %s",
                len(failures),
                len(batch),
                failures[0],
            )

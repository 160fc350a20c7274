"""
Sequential chunked inserts into the record store
"""

import logging
from typing import Awaitable, Callable, Iterable, List, Optional, Sequence

from app.core.exceptions import StoreError
from app.services.dev_state import DevStateStore
from app.services.record_store import RecordStore

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], Awaitable[None]]


def chunked(rows: Sequence, size: int) -> List[list]:
    if size < 1:
        raise ValueError("chunk size must be at least 1")
    return [list(rows[i:i + size]) for i in range(0, len(rows), size)]


class BatchInserter:
    """Writes pre-chunked rows one chunk at a time.

    A failing chunk stops the run and raises ``StoreError``; chunks that
    were already written stay committed. Clearing before insert is best
    effort: a failed delete is logged and generation carries on.
    """

    def __init__(
        self,
        store: RecordStore,
        dev_state: DevStateStore,
        clear_existing: bool = False,
        on_progress: Optional[ProgressCallback] = None,
    ):
        self.store = store
        self.dev_state = dev_state
        self.clear_existing = clear_existing
        self.on_progress = on_progress
        self.progress: List[str] = []

    async def _report(self, message: str) -> None:
        self.progress.append(message)
        if self.on_progress is not None:
            await self.on_progress(message)

    async def clear_if_requested(self, table: str, user_id: str) -> bool:
        if not self.clear_existing:
            return False

        await self.dev_state.simulate_network_delay()
        result = self.store.delete(table, {"user_id": user_id})
        if result.error:
            logger.warning(f"Failed to clear {table}: {result.error}")
            return False
        logger.info(f"Cleared {result.data} rows from {table} for user {user_id}")
        return True

    async def insert_batches(
        self,
        table: str,
        batches: Iterable[list],
        total: Optional[int] = None,
        label: Optional[str] = None,
    ) -> int:
        """Insert each batch in order and return the number of rows written"""
        label = label or table
        inserted = 0
        for index, batch in enumerate(batches, start=1):
            if not batch:
                continue
            await self.dev_state.simulate_network_delay()
            result = self.store.insert(table, batch)
            if result.error:
                logger.error(f"Chunk {index} into {table} failed after {inserted} rows: {result.error}")
                raise StoreError(result.error, committed=inserted)

            inserted += len(batch)
            await self._report(f"Generated {inserted}/{total if total is not None else inserted} {label}...")

        return inserted

"""Bounded batching of points into vector-index upserts."""

from __future__ import annotations

import asyncio
import logging
import time

from vectorium.exceptions import ConfigurationError, UpsertError
from vectorium.index.base import VectorIndexBase
from vectorium.ingestion.models import Point

logger = logging.getLogger(__name__)


class BatchUpsertDispatcher:
    """Accumulate points and flush them to the index in bounded batches.

    The buffer is cleared only after a successful write.  When a flush
    fails the same points stay pending, so calling :meth:`flush` again
    retries exactly that batch.

    Parameters
    ----------
    index:
        Destination vector index.
    collection:
        Collection to write into.
    batch_size:
        Buffer length that triggers an implicit flush from :meth:`add`.
    max_retries:
        Extra attempts per flush after the first failure (0 = fail fast).
    retry_backoff:
        Base delay in seconds; doubles after every failed attempt.
    """

    def __init__(
        self,
        index: VectorIndexBase,
        collection: str,
        *,
        batch_size: int = 5,
        max_retries: int = 0,
        retry_backoff: float = 1.0,
    ) -> None:
        if batch_size < 1:
            raise ConfigurationError(f"batch_size must be >= 1, got {batch_size}")
        self._index = index
        self.collection = collection
        self.batch_size = batch_size
        self.max_retries = max_retries
        self.retry_backoff = retry_backoff
        self._buffer: list[Point] = []
        self.flushed_total = 0

    @property
    def pending(self) -> tuple[Point, ...]:
        """Snapshot of points waiting to be written."""
        return tuple(self._buffer)

    async def add(self, point: Point) -> None:
        """Buffer *point*, flushing once the buffer reaches ``batch_size``."""
        self._buffer.append(point)
        if len(self._buffer) >= self.batch_size:
            await self.flush()

    async def flush(self) -> int:
        """Write every pending point in one call.

        Returns
        -------
        int
            Number of points written (0 when nothing was pending).

        Raises
        ------
        UpsertError
            When every attempt failed; the buffer is left untouched.
        """
        if not self._buffer:
            return 0

        batch = list(self._buffer)
        attempts = self.max_retries + 1
        logger.info("Batch upserting %d points to '%s'...", len(batch), self.collection)
        t0 = time.monotonic()

        for attempt in range(1, attempts + 1):
            try:
                await asyncio.to_thread(self._index.upsert_points, self.collection, batch, wait=True)
                break
            except Exception as exc:
                if attempt < attempts:
                    wait = self.retry_backoff * 2 ** (attempt - 1)
                    logger.warning(
                        "Upsert attempt %d/%d failed (%s), retrying in %.1fs",
                        attempt, attempts, exc, wait,
                    )
                    await asyncio.sleep(wait)
                    continue
                raise UpsertError(
                    f"Failed to upsert {len(batch)} points to '{self.collection}' "
                    f"after {attempts} attempt(s): {exc}"
                ) from exc

        del self._buffer[: len(batch)]
        self.flushed_total += len(batch)
        logger.info("Batch upsert completed in %.2fs", time.monotonic() - t0)
        return len(batch)

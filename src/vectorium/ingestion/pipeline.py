"""Directory ingestion: discover → read → chunk → embed → build → upsert.

Usage::

    from vectorium.index import ChromaVectorIndex
    from vectorium.ingestion.embedder import EmbeddingClient
    from vectorium.ingestion.models import IngestionConfig
    from vectorium.ingestion.pipeline import DirectoryIngestor

    async with EmbeddingClient() as embedder:
        ingestor = DirectoryIngestor(ChromaVectorIndex(), embedder, IngestionConfig())
        result = await ingestor.ingest("./data")
"""

from __future__ import annotations

import asyncio
import itertools
import logging
import time
from contextlib import closing
from pathlib import Path

from vectorium.exceptions import ConfigurationError, UpsertError
from vectorium.index.base import VectorIndexBase
from vectorium.ingestion.chunker import chunk_lines
from vectorium.ingestion.dispatcher import BatchUpsertDispatcher
from vectorium.ingestion.embedder import EmbeddingClient
from vectorium.ingestion.loader import discover_files, load_document, read_non_empty_lines
from vectorium.ingestion.models import Document, IdPolicy, IngestionConfig, IngestionResult
from vectorium.ingestion.points import build_point, make_point_id

logger = logging.getLogger(__name__)


class DirectoryIngestor:
    """Drive one ingestion run over a directory of text files.

    The point-id counter and the batch buffer are local to each
    :meth:`ingest` call; an instance may be reused for sequential runs but
    must not run two ingestions concurrently.

    Parameters
    ----------
    index:
        Destination vector index.
    embedder:
        Embedding client whose ``vector_size`` must match the config.
    config:
        Chunking, batching, discovery and id-policy settings.
    """

    def __init__(
        self,
        index: VectorIndexBase,
        embedder: EmbeddingClient,
        config: IngestionConfig | None = None,
    ) -> None:
        config = config or IngestionConfig()
        if embedder.vector_size != config.vector_size:
            raise ConfigurationError(
                f"Embedder vector size {embedder.vector_size} does not match "
                f"index vector size {config.vector_size}"
            )
        self._index = index
        self._embedder = embedder
        self.config = config

    # -- public API -----------------------------------------------------------

    async def ingest(self, directory: str | Path, *, start_id: int | None = None) -> IngestionResult:
        """Ingest every matching file under *directory*.

        Parameters
        ----------
        directory:
            Directory to scan.
        start_id:
            Counter value before the first point (the first id is
            ``start_id + 1``).  Defaults to the collection's current point
            count so a repeated run never reuses ids.  Ignored under
            :attr:`IdPolicy.CONTENT_HASH`.

        Returns
        -------
        IngestionResult
            Points written, final counter, and per-file tallies.
        """
        cfg = self.config
        paths = discover_files(directory, cfg.file_extensions, recursive=cfg.recursive)
        if not paths:
            logger.warning("No documents found in '%s' matching %s", directory, cfg.file_extensions)
            return IngestionResult(last_id=start_id if cfg.id_policy is IdPolicy.COUNTER else None)

        logger.info("Found %d documents to process.", len(paths))

        await asyncio.to_thread(
            self._index.ensure_collection, cfg.collection_name, cfg.vector_size, "cosine"
        )
        await self._embedder.check_dimension()

        if cfg.id_policy is IdPolicy.COUNTER and start_id is None:
            try:
                start_id = await asyncio.to_thread(self._index.count, cfg.collection_name)
            except Exception as exc:
                raise UpsertError(f"Failed to count points in '{cfg.collection_name}': {exc}") from exc
            logger.info("Seeding point-id counter from collection size: %d", start_id)
        counter = start_id or 0

        dispatcher = BatchUpsertDispatcher(
            self._index,
            cfg.collection_name,
            batch_size=cfg.batch_size,
            max_retries=cfg.upsert_max_retries,
            retry_backoff=cfg.upsert_retry_backoff,
        )

        t0 = time.monotonic()
        total = processed = skipped = 0
        for path in paths:
            document = load_document(path)
            counter, written = await self._ingest_file(document, dispatcher, counter)
            if written:
                processed += 1
                total += written
            else:
                skipped += 1

        await dispatcher.flush()

        result = IngestionResult(
            total_points=total,
            last_id=counter if cfg.id_policy is IdPolicy.COUNTER else None,
            files_processed=processed,
            files_skipped=skipped,
        )
        logger.info("Processing completed in %.1fs: %s", time.monotonic() - t0, result)
        return result

    # -- internals ------------------------------------------------------------

    async def _ingest_file(
        self,
        document: Document,
        dispatcher: BatchUpsertDispatcher,
        counter: int,
    ) -> tuple[int, int]:
        """Stream one document into *dispatcher*.

        Returns the advanced counter and the number of points produced.
        """
        cfg = self.config
        if cfg.id_policy is IdPolicy.CONTENT_HASH:
            await self._drop_previous_version(document)

        with closing(read_non_empty_lines(document.file_path, cfg.buffer_size)) as lines:
            chunks = chunk_lines(lines, cfg.chunk_size)
            first = next(chunks, None)
            if first is None:
                logger.warning("Skipping empty file: %s", document.file_path)
                return counter, 0

            logger.info("Processing file: %s", document.file_name)
            written = 0
            for chunk in itertools.chain([first], chunks):
                logger.debug("Generating embeddings for %d lines (chunk %d)", len(chunk), chunk.index)
                vectors = await self._embedder.embed(chunk.lines)
                for offset, (text, vector) in enumerate(zip(chunk.lines, vectors)):
                    counter += 1
                    line_number = chunk.start_line + offset
                    point_id = make_point_id(cfg.id_policy, document, line_number, counter)
                    await dispatcher.add(build_point(text, vector, document, point_id, line_number))
                written += len(chunk)

        logger.info("Completed processing file: %s (%d points)", document.file_name, written)
        return counter, written

    async def _drop_previous_version(self, document: Document) -> None:
        """Remove points stored for an earlier version of *document*.

        Hash ids are per line, so a shrunk file would otherwise leave its old
        trailing lines behind.  Pending points never carry this ``doc_id``:
        each path is discovered once per run.
        """
        try:
            await asyncio.to_thread(
                self._index.delete_document, self.config.collection_name, document.doc_id
            )
        except Exception as exc:
            raise UpsertError(
                f"Failed to delete previous points of '{document.file_path}': {exc}"
            ) from exc


def ingest_directory(
    directory: str | Path,
    config: IngestionConfig | None = None,
    *,
    index: VectorIndexBase | None = None,
    embedder: EmbeddingClient | None = None,
    start_id: int | None = None,
) -> IngestionResult:
    """Blocking convenience wrapper around :meth:`DirectoryIngestor.ingest`.

    Builds a :class:`~vectorium.index.chroma_index.ChromaVectorIndex` and a
    default :class:`EmbeddingClient` from settings when none are supplied.
    """
    config = config or IngestionConfig.from_settings()
    if index is None:
        from vectorium.index.chroma_index import ChromaVectorIndex

        index = ChromaVectorIndex()
    owns_embedder = embedder is None
    if embedder is None:
        embedder = EmbeddingClient(vector_size=config.vector_size)

    try:
        ingestor = DirectoryIngestor(index, embedder, config)
        return asyncio.run(ingestor.ingest(directory, start_id=start_id))
    finally:
        if owns_embedder:
            embedder.close()

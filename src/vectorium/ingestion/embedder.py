"""Embedding client: batch text → batch vectors on a dedicated worker thread."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING

from vectorium.config import settings
from vectorium.exceptions import ConfigurationError, EmbeddingError

if TYPE_CHECKING:
    from langchain_core.embeddings import Embeddings

logger = logging.getLogger(__name__)


def get_embedding_function(
    model_name: str = settings.embedding_model,
    device: str = settings.embedding_device,
) -> Embeddings:
    """Return the configured sentence-transformer embedding function.

    ``langchain_huggingface`` pulls in torch, so it is imported here rather
    than at module import time.
    """
    from langchain_huggingface import HuggingFaceEmbeddings

    return HuggingFaceEmbeddings(
        model_name=model_name,
        model_kwargs={"device": device},
        encode_kwargs={"normalize_embeddings": True},
    )


class EmbeddingClient:
    """Uniform async front-end over a blocking embedding backend.

    Model loading and inference are CPU/GPU bound, so every backend call is
    dispatched to a single-thread executor owned by this client; the event
    loop only awaits the finished batch.

    Parameters
    ----------
    backend:
        A ``langchain_core`` ``Embeddings`` instance, or a zero-argument
        factory returning one.  A factory is invoked lazily on the worker
        thread the first time vectors are needed.
    vector_size:
        Dimensionality every returned vector must have; it must equal the
        vector index's configured size.
    """

    def __init__(
        self,
        backend: Embeddings | Callable[[], Embeddings] | None = None,
        *,
        vector_size: int = settings.vector_size,
    ) -> None:
        if backend is None:
            backend = get_embedding_function
        self._backend: Embeddings | None = None
        self._factory: Callable[[], Embeddings] | None = None
        if callable(backend) and not hasattr(backend, "embed_documents"):
            self._factory = backend
        else:
            self._backend = backend  # type: ignore[assignment]
        self.vector_size = vector_size
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="embedding")

    # -- public API -----------------------------------------------------------

    async def embed(self, texts: Sequence[str]) -> list[list[float]]:
        """Embed *texts*, returning one vector per input in input order."""
        if not texts:
            return []

        loop = asyncio.get_running_loop()
        vectors = await loop.run_in_executor(self._executor, self._embed_blocking, list(texts))

        if len(vectors) != len(texts):
            raise EmbeddingError(
                f"Backend returned {len(vectors)} vectors for {len(texts)} inputs"
            )
        for vector in vectors:
            if len(vector) != self.vector_size:
                raise ConfigurationError(
                    f"Embedding dimension {len(vector)} does not match "
                    f"configured vector size {self.vector_size}"
                )
        return vectors

    async def check_dimension(self) -> None:
        """Embed a probe string so a dimension mismatch fails before any file is read."""
        await self.embed(["dimension probe"])
        logger.info("Embedding backend ready (dim=%d)", self.vector_size)

    def close(self) -> None:
        """Release the worker thread."""
        self._executor.shutdown(wait=True)

    async def __aenter__(self) -> EmbeddingClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()

    # -- internals ------------------------------------------------------------

    def _get_backend(self) -> Embeddings:
        if self._backend is None:
            assert self._factory is not None
            logger.info("Initialising embedding backend...")
            try:
                self._backend = self._factory()
            except Exception as exc:
                raise EmbeddingError(f"Failed to initialise embedding backend: {exc}") from exc
        return self._backend

    def _embed_blocking(self, texts: list[str]) -> list[list[float]]:
        backend = self._get_backend()
        logger.debug("Embedding %d texts", len(texts))
        try:
            vectors = backend.embed_documents(texts)
        except Exception as exc:
            raise EmbeddingError(f"Embedding inference failed: {exc}") from exc
        return [list(map(float, v)) for v in vectors]

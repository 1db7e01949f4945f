"""Abstract base class for vector-index backends.

Adding a new backend (Qdrant, Pinecone, Weaviate …) only requires
subclassing :class:`VectorIndexBase` and implementing the abstract
methods.  The ingestion pipeline is backend-agnostic.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Literal

from vectorium.exceptions import ConfigurationError
from vectorium.ingestion.models import Point

logger = logging.getLogger(__name__)

Distance = Literal["cosine", "l2", "ip"]


class VectorIndexBase(ABC):
    """Backend-agnostic vector-index interface."""

    # -- required overrides ---------------------------------------------------

    @abstractmethod
    def list_collections(self) -> list[str]:
        """Return the names of all existing collections."""
        ...

    @abstractmethod
    def create_collection(self, name: str, vector_size: int, distance: Distance = "cosine") -> None:
        """Create collection *name* with a fixed *vector_size* and *distance* metric."""
        ...

    @abstractmethod
    def upsert_points(self, collection: str, points: Sequence[Point], *, wait: bool = True) -> None:
        """Insert-or-overwrite *points* by id in a single call.

        Parameters
        ----------
        collection:
            Target collection name.
        points:
            Points to write; ids already present are overwritten.
        wait:
            Block until the write is durable (backends that are always
            synchronous may ignore it).
        """
        ...

    @abstractmethod
    def count(self, collection: str) -> int:
        """Return the number of points stored in *collection*."""
        ...

    @abstractmethod
    def collection_vector_size(self, collection: str) -> int | None:
        """Return the vector size *collection* was created with, if known."""
        ...

    @abstractmethod
    def health_check(self) -> bool:
        """Return ``True`` when the backend is reachable and ready."""
        ...

    # -- optional overrides ---------------------------------------------------

    def delete_document(self, collection: str, doc_id: str) -> None:
        """Delete every point of *collection* whose payload carries *doc_id*.  Optional; raises by default."""
        raise NotImplementedError(f"{type(self).__name__} does not support delete_document")

    # -- shared helpers -------------------------------------------------------

    def ensure_collection(self, name: str, vector_size: int, distance: Distance = "cosine") -> None:
        """Create *name* if missing; verify its vector size if it exists."""
        try:
            existing_names = self.list_collections()
        except Exception as exc:
            raise ConfigurationError(f"Failed to list collections: {exc}") from exc

        if name not in existing_names:
            logger.info("Creating collection '%s' (size=%d, distance=%s)", name, vector_size, distance)
            try:
                self.create_collection(name, vector_size, distance)
            except Exception as exc:
                raise ConfigurationError(f"Failed to create collection '{name}': {exc}") from exc
            return

        try:
            existing = self.collection_vector_size(name)
        except Exception as exc:
            raise ConfigurationError(f"Failed to read collection '{name}': {exc}") from exc
        if existing is not None and existing != vector_size:
            raise ConfigurationError(
                f"Collection '{name}' has vector size {existing}, expected {vector_size}"
            )
        logger.info("Collection '%s' already exists.", name)

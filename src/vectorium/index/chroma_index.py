"""Chroma implementation of the vector-index abstraction."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import chromadb

from vectorium.config import settings
from vectorium.exceptions import ConfigurationError
from vectorium.index.base import Distance, VectorIndexBase
from vectorium.ingestion.models import Point

logger = logging.getLogger(__name__)

# Chroma does not enforce a dimensionality per collection, so the size the
# collection was created for is kept in its metadata.
_VECTOR_SIZE_KEY = "vector_size"
_DISTANCE_KEY = "hnsw:space"


def _point_to_record(point: Point) -> tuple[str, list[float], str, dict[str, Any]]:
    """Split a :class:`Point` into Chroma's ``(id, embedding, document, metadata)``."""
    meta = point.payload.model_dump(exclude={"content"})
    return str(point.id), point.vector, point.payload.content, meta


class ChromaVectorIndex(VectorIndexBase):
    """Chroma-backed vector index.

    Parameters
    ----------
    host:
        Chroma server hostname.
    port:
        Chroma server port.
    client:
        Pre-built Chroma client (e.g. ``chromadb.EphemeralClient()``);
        overrides *host* / *port*.
    """

    def __init__(
        self,
        *,
        host: str = settings.chroma_host,
        port: int = settings.chroma_port,
        client: Any | None = None,
    ) -> None:
        self._host = host
        self._port = port
        if client is None:
            try:
                client = chromadb.HttpClient(host=host, port=port)
            except Exception as exc:
                raise ConfigurationError(f"Cannot connect to Chroma at {host}:{port}: {exc}") from exc
        self._client = client
        self._collections: dict[str, Any] = {}

    # -- VectorIndexBase overrides --------------------------------------------

    def list_collections(self) -> list[str]:
        # chromadb returns Collection objects in some releases and bare names in others.
        return [getattr(c, "name", c) for c in self._client.list_collections()]

    def create_collection(self, name: str, vector_size: int, distance: Distance = "cosine") -> None:
        self._collections[name] = self._client.create_collection(
            name=name,
            metadata={_DISTANCE_KEY: distance, _VECTOR_SIZE_KEY: vector_size},
        )

    def upsert_points(self, collection: str, points: Sequence[Point], *, wait: bool = True) -> None:
        if not points:
            return
        ids, embeddings, documents, metadatas = (list(col) for col in zip(*map(_point_to_record, points)))
        self._collection(collection).upsert(
            ids=ids,
            embeddings=embeddings,
            documents=documents,
            metadatas=metadatas,
        )
        logger.debug("Upserted %d points into '%s'", len(ids), collection)

    def count(self, collection: str) -> int:
        return int(self._collection(collection).count())

    def collection_vector_size(self, collection: str) -> int | None:
        meta = self._collection(collection).metadata or {}
        size = meta.get(_VECTOR_SIZE_KEY)
        return int(size) if size is not None else None

    def delete_document(self, collection: str, doc_id: str) -> None:
        self._collection(collection).delete(where={"doc_id": doc_id})
        logger.debug("Deleted points of document %s from '%s'", doc_id, collection)

    def health_check(self) -> bool:
        try:
            self._client.heartbeat()
            return True
        except Exception:
            logger.warning("Chroma health-check failed", exc_info=True)
            return False

    # -- internals ------------------------------------------------------------

    def _collection(self, name: str) -> Any:
        if name not in self._collections:
            self._collections[name] = self._client.get_collection(name)
        return self._collections[name]

"""Shared pytest configuration and fixtures."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from pathlib import Path
from typing import Any

import pytest
from langchain_core.embeddings import Embeddings

from vectorium.index.base import Distance, VectorIndexBase
from vectorium.ingestion.embedder import EmbeddingClient
from vectorium.ingestion.models import IngestionConfig, Point

VECTOR_SIZE = 8


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests requiring external services")


# ── Fakes ──────────────────────────────────────────────────────────────


class FakeVectorIndex(VectorIndexBase):
    """In-memory index with upsert-by-id semantics and injectable failures."""

    def __init__(self) -> None:
        self.collections: dict[str, dict[str, Any]] = {}
        self.upsert_calls: list[list[Point]] = []
        self.delete_calls: list[str] = []
        self.fail_upserts = 0

    def list_collections(self) -> list[str]:
        return list(self.collections)

    def create_collection(self, name: str, vector_size: int, distance: Distance = "cosine") -> None:
        self.collections[name] = {"vector_size": vector_size, "distance": distance, "points": {}}

    def upsert_points(self, collection: str, points: Sequence[Point], *, wait: bool = True) -> None:
        if self.fail_upserts:
            self.fail_upserts -= 1
            raise ConnectionError("index unavailable")
        self.upsert_calls.append(list(points))
        store = self.collections[collection]["points"]
        for point in points:
            store[point.id] = point

    def count(self, collection: str) -> int:
        return len(self.collections[collection]["points"])

    def collection_vector_size(self, collection: str) -> int | None:
        return self.collections[collection]["vector_size"]

    def delete_document(self, collection: str, doc_id: str) -> None:
        self.delete_calls.append(doc_id)
        store = self.collections[collection]["points"]
        for point_id in [pid for pid, p in store.items() if p.payload.doc_id == doc_id]:
            del store[point_id]

    def health_check(self) -> bool:
        return True

    def points(self, collection: str = "documents") -> list[Point]:
        return list(self.collections[collection]["points"].values())


class RecordingEmbeddings(Embeddings):
    """Deterministic embedding backend that records every batch it sees."""

    def __init__(self, size: int = VECTOR_SIZE, fail_on_call: int | None = None) -> None:
        self.size = size
        self.fail_on_call = fail_on_call
        self.calls: list[list[str]] = []

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        self.calls.append(list(texts))
        if self.fail_on_call is not None and len(self.calls) == self.fail_on_call:
            raise RuntimeError("model crashed")
        return [self._vector(t) for t in texts]

    def embed_query(self, text: str) -> list[float]:
        return self._vector(text)

    def _vector(self, text: str) -> list[float]:
        seed = sum(map(ord, text))
        return [((seed + i) % 7) / 7.0 for i in range(self.size)]


# ── Fixtures ───────────────────────────────────────────────────────────


@pytest.fixture()
def fake_index() -> FakeVectorIndex:
    return FakeVectorIndex()


@pytest.fixture()
def recording_backend() -> RecordingEmbeddings:
    return RecordingEmbeddings()


@pytest.fixture()
def embedder(recording_backend: RecordingEmbeddings) -> Iterator[EmbeddingClient]:
    client = EmbeddingClient(recording_backend, vector_size=VECTOR_SIZE)
    yield client
    client.close()


@pytest.fixture()
def config() -> IngestionConfig:
    return IngestionConfig(chunk_size=2, batch_size=10, vector_size=VECTOR_SIZE)


@pytest.fixture()
def make_corpus(tmp_path: Path) -> Callable[[dict[str, str]], Path]:
    """Write ``{relative_name: text}`` under a fresh directory and return it."""

    def _make(files: dict[str, str]) -> Path:
        root = tmp_path / "corpus"
        root.mkdir(exist_ok=True)
        for name, text in files.items():
            path = root / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        return root

    return _make

"""Unit tests for the embedding client adapter."""

from __future__ import annotations

import threading

import pytest
from langchain_core.embeddings import DeterministicFakeEmbedding, Embeddings

from vectorium.exceptions import ConfigurationError, EmbeddingError
from vectorium.ingestion.embedder import EmbeddingClient


class RecordingEmbeddings(Embeddings):
    """Constant vectors; records calls and the worker thread that ran them."""

    def __init__(self, size: int = 8, fail_on_call: int | None = None) -> None:
        self.size = size
        self.fail_on_call = fail_on_call
        self.calls: list[list[str]] = []
        self.threads: list[str] = []

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        self.calls.append(list(texts))
        self.threads.append(threading.current_thread().name)
        if self.fail_on_call == len(self.calls):
            raise RuntimeError("model crashed")
        return [[0.5] * self.size for _ in texts]

    def embed_query(self, text: str) -> list[float]:
        return [0.5] * self.size


class _ShortBatchEmbeddings(RecordingEmbeddings):
    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        return super().embed_documents(texts)[:-1]


@pytest.mark.asyncio
async def test_embed_returns_one_vector_per_input_in_order() -> None:
    backend = DeterministicFakeEmbedding(size=16)
    async with EmbeddingClient(backend, vector_size=16) as client:
        vectors = await client.embed(["alpha", "beta", "gamma"])

    assert len(vectors) == 3
    assert all(len(v) == 16 for v in vectors)
    assert vectors == [backend.embed_query(t) for t in ["alpha", "beta", "gamma"]]


@pytest.mark.asyncio
async def test_embed_runs_off_the_event_loop_thread() -> None:
    backend = RecordingEmbeddings(size=4)
    async with EmbeddingClient(backend, vector_size=4) as client:
        await client.embed(["a"])
        await client.embed(["b"])

    assert backend.threads and all(name.startswith("embedding") for name in backend.threads)
    assert threading.current_thread().name not in backend.threads


@pytest.mark.asyncio
async def test_empty_batch_skips_backend() -> None:
    backend = RecordingEmbeddings()
    async with EmbeddingClient(backend) as client:
        assert await client.embed([]) == []
    assert backend.calls == []


@pytest.mark.asyncio
async def test_dimension_mismatch_is_configuration_error() -> None:
    async with EmbeddingClient(RecordingEmbeddings(size=8), vector_size=384) as client:
        with pytest.raises(ConfigurationError, match="does not match"):
            await client.check_dimension()


@pytest.mark.asyncio
async def test_inference_failure_is_embedding_error() -> None:
    async with EmbeddingClient(RecordingEmbeddings(fail_on_call=1), vector_size=8) as client:
        with pytest.raises(EmbeddingError, match="inference failed"):
            await client.embed(["boom"])


@pytest.mark.asyncio
async def test_short_batch_is_embedding_error() -> None:
    async with EmbeddingClient(_ShortBatchEmbeddings(), vector_size=8) as client:
        with pytest.raises(EmbeddingError, match="2 vectors for 3 inputs"):
            await client.embed(["a", "b", "c"])


@pytest.mark.asyncio
async def test_factory_is_invoked_lazily_once() -> None:
    created: list[RecordingEmbeddings] = []

    def factory() -> RecordingEmbeddings:
        created.append(RecordingEmbeddings())
        return created[-1]

    async with EmbeddingClient(factory, vector_size=8) as client:
        assert created == []
        await client.embed(["a"])
        await client.embed(["b"])

    assert len(created) == 1


@pytest.mark.asyncio
async def test_factory_failure_is_embedding_error() -> None:
    def factory() -> RecordingEmbeddings:
        raise OSError("model files missing")

    async with EmbeddingClient(factory, vector_size=8) as client:
        with pytest.raises(EmbeddingError, match="initialise"):
            await client.embed(["a"])

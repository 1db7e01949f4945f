"""
Vector index — the write-side boundary of the ingestion pipeline.

Public surface
--------------
- :class:`VectorIndexBase` — abstract backend (subclass for Qdrant, etc.).
- :class:`ChromaVectorIndex` — default Chroma backend.
"""

from vectorium.index.base import Distance, VectorIndexBase

__all__ = [
    "ChromaVectorIndex",
    "Distance",
    "VectorIndexBase",
]


def __getattr__(name: str):  # noqa: ANN001
    """Lazy-import ChromaVectorIndex to avoid pulling in chromadb at import time."""
    if name == "ChromaVectorIndex":
        from vectorium.index.chroma_index import ChromaVectorIndex

        return ChromaVectorIndex
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

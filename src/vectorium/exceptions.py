"""Error hierarchy for the ingestion pipeline.

Every failure that aborts (or could abort) an ingestion run derives from
:class:`IngestionError`, so callers can catch one type at the boundary.
"""

from __future__ import annotations


class IngestionError(Exception):
    """Base class for all ingestion failures."""


class IoError(IngestionError):
    """File discovery, open, or read failure."""


class EmbeddingError(IngestionError):
    """Embedding backend could not be initialised or inference failed."""


class MetadataError(IngestionError):
    """Document metadata could not be turned into a valid point payload."""


class UpsertError(IngestionError):
    """The vector index rejected or failed a batch write."""


class ConfigurationError(IngestionError):
    """Invalid configuration, e.g. an embedding/index dimensionality mismatch."""

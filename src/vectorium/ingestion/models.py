"""Domain models for documents, chunks, points, and ingestion runs."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, ValidationError, field_validator

from vectorium.exceptions import ConfigurationError

if TYPE_CHECKING:
    from vectorium.config import Settings

PREVIEW_CHARS = 200


class IdPolicy(str, Enum):
    """How point identifiers are assigned for one ingestion run.

    ``COUNTER``
        Monotonically increasing integers threaded through the run.  Ids
        are unique within the run; seeding the counter from the index's
        current size keeps repeated runs from overlapping.  The seed assumes
        the collection holds only counter ids 1..N; after deletions or mixed
        policies pass an explicit ``start_id``.
    ``CONTENT_HASH``
        Deterministic UUIDs derived from the file path and line ordinal.
        Re-ingesting a file replaces every point stored for its path.
    """

    COUNTER = "counter"
    CONTENT_HASH = "content_hash"


class Document(BaseModel):
    """One source file discovered during a directory scan.

    Attributes
    ----------
    doc_id:
        md5 hex digest of the file path; stable across runs.
    file_path:
        Path of the file as discovered.
    file_name:
        Base name, used as the point title.
    last_modified:
        Modification time in whole seconds since the epoch.
    """

    model_config = ConfigDict(frozen=True)

    doc_id: str
    file_path: str
    file_name: str
    last_modified: int = Field(ge=0)


class Chunk(BaseModel):
    """A bounded, ordered group of non-empty lines from one document."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0, description="Ordinal of the chunk within its document")
    start_line: int = Field(ge=1, description="Ordinal of the first line (1-based, non-empty lines only)")
    lines: tuple[str, ...]

    def __len__(self) -> int:
        return len(self.lines)


class PointPayload(BaseModel):
    """Fixed-field payload stored alongside every vector."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    title: str = Field(min_length=1)
    content: str = Field(min_length=1)
    content_preview: str = Field(max_length=PREVIEW_CHARS)
    last_modified: int = Field(ge=0)
    file_path: str = Field(min_length=1)
    doc_id: str = Field(min_length=1)
    line_number: int = Field(ge=1)

    @field_validator("title", "content", "file_path")
    @classmethod
    def _must_be_utf8(cls, value: str) -> str:
        # Undecodable file names arrive as lone surrogates (surrogateescape).
        value.encode("utf-8")
        return value


class Point(BaseModel):
    """One ``(id, vector, payload)`` record bound for the vector index."""

    model_config = ConfigDict(frozen=True)

    id: int | str
    vector: list[float] = Field(min_length=1)
    payload: PointPayload


class IngestionConfig(BaseModel):
    """Per-run knobs for :class:`~vectorium.ingestion.pipeline.DirectoryIngestor`."""

    chunk_size: PositiveInt = 3000
    batch_size: PositiveInt = 5
    buffer_size: PositiveInt = 64 * 1024
    file_extensions: list[str] = Field(default_factory=lambda: ["*.txt", "*.md"], min_length=1)
    recursive: bool = False
    id_policy: IdPolicy = IdPolicy.COUNTER
    collection_name: str = Field(default="documents", min_length=1)
    vector_size: PositiveInt = 384
    upsert_max_retries: int = Field(default=0, ge=0)
    upsert_retry_backoff: float = Field(default=1.0, ge=0)

    @classmethod
    def from_settings(cls, settings: Settings | None = None, **overrides: Any) -> IngestionConfig:
        """Build a config from :class:`~vectorium.config.Settings` plus overrides."""
        if settings is None:
            from vectorium.config import settings

        values = {name: getattr(settings, name) for name in cls.model_fields}
        values.update({k: v for k, v in overrides.items() if v is not None})
        try:
            return cls(**values)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid ingestion config: {exc}") from exc


class IngestionResult(BaseModel):
    """Outcome of one ingestion run."""

    total_points: int = 0
    last_id: int | None = Field(
        default=None,
        description="Final counter value (counter policy only); pass it as the next run's start_id",
    )
    files_processed: int = 0
    files_skipped: int = 0

    def __str__(self) -> str:  # noqa: D105
        return (
            f"{self.total_points} points from {self.files_processed} files "
            f"({self.files_skipped} skipped)"
        )

"""Shared configuration loaded from environment / .env file."""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application-wide settings, populated from env vars or .env file."""

    # Vector index
    chroma_host: str = "localhost"
    chroma_port: int = 8000
    collection_name: str = "documents"

    # Embedding
    embedding_model: str = "sentence-transformers/all-MiniLM-L6-v2"
    embedding_device: str = "cpu"
    vector_size: int = Field(default=384, description="Must match the embedding model's output dimension")

    # Discovery
    documents_dir: str = "./data"
    file_extensions: list[str] = Field(
        default_factory=lambda: ["*.txt", "*.md"],
        description='Glob patterns, e.g. FILE_EXTENSIONS=\'["*.txt","*.md"]\'',
    )
    recursive: bool = False

    # Processing
    chunk_size: int = Field(default=3000, description="Max lines sent to the embedder per call")
    batch_size: int = Field(default=5, description="Max points per upsert call")
    buffer_size: int = Field(default=64 * 1024, description="File read buffer in bytes")
    id_policy: Literal["counter", "content_hash"] = "counter"
    upsert_max_retries: int = 0
    upsert_retry_backoff: float = 1.0

    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


# Module-level singleton; import `settings` wherever needed.
settings = Settings()

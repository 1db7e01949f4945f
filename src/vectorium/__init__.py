"""Vectorium: streaming document-to-vector ingestion into a vector index."""

__version__ = "0.1.0"

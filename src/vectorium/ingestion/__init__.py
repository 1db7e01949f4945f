"""
Ingestion — discovery, chunking, embedding, and batched upsert.

This package converts a directory of text documents into points stored
in a vector index: files are streamed line by line, grouped into chunks,
embedded off the event loop, and written in bounded batches.
"""

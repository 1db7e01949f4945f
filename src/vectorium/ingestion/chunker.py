"""Line-based chunking strategy."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from vectorium.exceptions import ConfigurationError
from vectorium.ingestion.models import Chunk


def chunk_lines(lines: Iterable[str], chunk_size: int = 3000) -> Iterator[Chunk]:
    """Group *lines* into consecutive chunks of at most *chunk_size* lines.

    Parameters
    ----------
    lines:
        Non-empty lines of one document, in order.  Consumed lazily.
    chunk_size:
        Maximum number of lines per chunk.  The final chunk may be shorter.

    Yields
    ------
    Chunk
        Chunks whose concatenation reproduces *lines* exactly.
    """
    if chunk_size < 1:
        raise ConfigurationError(f"chunk_size must be >= 1, got {chunk_size}")

    buffer: list[str] = []
    index = 0
    start_line = 1
    for line in lines:
        buffer.append(line)
        if len(buffer) >= chunk_size:
            yield Chunk(index=index, start_line=start_line, lines=tuple(buffer))
            index += 1
            start_line += len(buffer)
            buffer = []

    if buffer:
        yield Chunk(index=index, start_line=start_line, lines=tuple(buffer))

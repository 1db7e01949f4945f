"""Unit tests for the chunker module."""

import pytest

from vectorium.exceptions import ConfigurationError
from vectorium.ingestion.chunker import chunk_lines


def test_chunk_lines_respects_chunk_size() -> None:
    """No chunk may exceed chunk_size; the last one may be shorter."""
    lines = [f"line {i}" for i in range(7)]
    chunks = list(chunk_lines(lines, chunk_size=3))
    assert [len(c) for c in chunks] == [3, 3, 1]


def test_chunk_lines_reproduces_input_in_order() -> None:
    """Concatenating all chunks yields the original lines, nothing dropped or duplicated."""
    lines = [f"sentence {i}" for i in range(10)]
    chunks = list(chunk_lines(lines, chunk_size=4))
    assert [line for c in chunks for line in c.lines] == lines


def test_chunk_lines_tracks_positions() -> None:
    """Each chunk knows its ordinal and the 1-based ordinal of its first line."""
    chunks = list(chunk_lines(["x", "y", "z"], chunk_size=2))
    assert [(c.index, c.start_line, c.lines) for c in chunks] == [
        (0, 1, ("x", "y")),
        (1, 3, ("z",)),
    ]


def test_chunk_lines_is_lazy() -> None:
    """Chunks are produced without consuming the whole input first."""

    def source():
        yield "a"
        yield "b"
        raise AssertionError("read past the first chunk")

    first = next(chunk_lines(source(), chunk_size=2))
    assert first.lines == ("a", "b")


def test_chunk_lines_empty_input() -> None:
    """An empty sequence should produce no chunks."""
    assert list(chunk_lines([])) == []


@pytest.mark.parametrize("size", [0, -1])
def test_chunk_lines_rejects_non_positive_size(size: int) -> None:
    with pytest.raises(ConfigurationError, match="chunk_size"):
        list(chunk_lines(["a"], chunk_size=size))

"""Document discovery and streaming line reads."""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Iterator, Sequence
from pathlib import Path

from vectorium.exceptions import IoError, MetadataError
from vectorium.ingestion.models import Document

logger = logging.getLogger(__name__)


def discover_files(
    directory: str | Path,
    patterns: Sequence[str],
    *,
    recursive: bool = False,
) -> list[Path]:
    """Return every regular file under *directory* matching any of *patterns*.

    Parameters
    ----------
    directory:
        Root directory to scan.
    patterns:
        Glob patterns such as ``"*.txt"``; a path matched by several
        patterns is returned once.
    recursive:
        Descend into sub-directories (``rglob``) instead of scanning only
        the top level.

    Returns
    -------
    list[Path]
        Paths sorted lexicographically so repeated scans of an unchanged
        tree yield the same order.
    """
    root = Path(directory)
    if not root.is_dir():
        raise IoError(f"Not a directory: {root}")

    found: set[Path] = set()
    try:
        for pattern in patterns:
            matches = root.rglob(pattern) if recursive else root.glob(pattern)
            found.update(p for p in matches if p.is_file())
    except OSError as exc:
        raise IoError(f"Failed to scan {root}: {exc}") from exc

    return sorted(found)


def load_document(path: str | Path) -> Document:
    """Stat *path* and return its :class:`Document` descriptor."""
    path = Path(path)
    try:
        mtime = path.stat().st_mtime
    except OSError as exc:
        raise IoError(f"Failed to stat file: {path}: {exc}") from exc

    try:
        path_bytes = str(path).encode("utf-8")
    except UnicodeEncodeError as exc:
        raise MetadataError(f"File path is not valid UTF-8: {path!r}") from exc

    return Document(
        doc_id=hashlib.md5(path_bytes).hexdigest(),
        file_path=str(path),
        file_name=path.name,
        last_modified=max(int(mtime), 0),
    )


def read_non_empty_lines(path: str | Path, buffer_size: int = 64 * 1024) -> Iterator[str]:
    """Lazily yield the stripped, non-empty lines of *path*.

    The file handle is held only while the generator is alive and is
    closed when it is exhausted or garbage-collected / ``close()``-d.
    Any open, read, or decode failure raises :class:`IoError`.
    """
    try:
        fh = open(path, encoding="utf-8", buffering=buffer_size)
    except OSError as exc:
        raise IoError(f"Failed to open file: {path}: {exc}") from exc

    with fh:
        try:
            for line in fh:
                line = line.strip()
                if line:
                    yield line
        except (OSError, UnicodeDecodeError) as exc:
            raise IoError(f"Failed to read file: {path}: {exc}") from exc

"""Point construction and id assignment."""

from __future__ import annotations

import hashlib
import uuid

from pydantic import ValidationError

from vectorium.exceptions import ConfigurationError, MetadataError
from vectorium.ingestion.models import PREVIEW_CHARS, Document, IdPolicy, Point, PointPayload


def content_hash_id(document: Document, line_number: int) -> str:
    """Deterministic UUID for line *line_number* of *document*.

    Derived from the md5 of the file path and the line ordinal, so the same
    file re-ingested from the same path maps onto the same points.
    """
    digest = hashlib.md5(
        f"{document.file_path}#{line_number}".encode("utf-8", "surrogateescape")
    ).hexdigest()
    return str(uuid.UUID(hex=digest))


def make_point_id(
    policy: IdPolicy,
    document: Document,
    line_number: int,
    counter: int,
) -> int | str:
    """Return the id for one point under *policy*.

    *counter* is the already-incremented run counter for this point and is
    used as-is under :attr:`IdPolicy.COUNTER`.
    """
    if policy is IdPolicy.COUNTER:
        return counter
    if policy is IdPolicy.CONTENT_HASH:
        return content_hash_id(document, line_number)
    raise ConfigurationError(f"Unknown id policy: {policy!r}")


def build_point(
    text: str,
    vector: list[float],
    document: Document,
    point_id: int | str,
    line_number: int,
) -> Point:
    """Assemble a validated :class:`Point`.  Pure; no I/O."""
    try:
        payload = PointPayload(
            title=document.file_name,
            content=text,
            content_preview=text[:PREVIEW_CHARS],
            last_modified=document.last_modified,
            file_path=document.file_path,
            doc_id=document.doc_id,
            line_number=line_number,
        )
        return Point(id=point_id, vector=vector, payload=payload)
    except (ValidationError, UnicodeError) as exc:
        raise MetadataError(f"Invalid point metadata for {document.file_path!r}: {exc}") from exc

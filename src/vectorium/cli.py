"""Command-line entry point: ingest a directory into the configured index."""

from __future__ import annotations

import argparse
import logging
import sys

from vectorium.config import settings
from vectorium.exceptions import IngestionError
from vectorium.ingestion.models import IdPolicy, IngestionConfig
from vectorium.ingestion.pipeline import ingest_directory

logger = logging.getLogger("vectorium")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser("vectorium-ingest", description=__doc__)
    p.add_argument("directory", nargs="?", default=settings.documents_dir)
    p.add_argument("--collection", dest="collection_name")
    p.add_argument("--chunk-size", type=int)
    p.add_argument("--batch-size", type=int)
    p.add_argument("--id-policy", choices=[policy.value for policy in IdPolicy])
    p.add_argument("--start-id", type=int, help="Counter value before the first point")
    p.add_argument("--recursive", action="store_true", default=None)
    p.add_argument("--log-level", default=settings.log_level)
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        config = IngestionConfig.from_settings(
            collection_name=args.collection_name,
            chunk_size=args.chunk_size,
            batch_size=args.batch_size,
            id_policy=args.id_policy,
            recursive=args.recursive,
        )
        logger.info("Starting to process documents in %s", args.directory)
        result = ingest_directory(args.directory, config, start_id=args.start_id)
    except IngestionError as exc:
        logger.error("Failed to process documents: %s", exc)
        return 1

    logger.info("Processing completed. Total points: %d (last id: %s)", result.total_points, result.last_id)
    return 0


if __name__ == "__main__":
    sys.exit(main())

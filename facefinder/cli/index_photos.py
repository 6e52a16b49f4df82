#!/usr/bin/env python
"""
Index Event Photos

Uploads photographs to the record store, each with its primary face
descriptor. Photos without a face are stored but never matched.

Usage:
    python -m facefinder.cli.index_photos photos/ --concurrency 4
    python -m facefinder.cli.index_photos a.jpg b.jpg --descriptors descriptors.json
"""
import argparse
import asyncio
import sys
import time
from typing import Dict, List, Optional

from tqdm import tqdm

from facefinder.cli.common import build_oracle, collect_image_paths, load_descriptor_map, load_photo
from facefinder.core.config import settings
from facefinder.core.logging import setup_logging
from facefinder.domain.entities.photo import PhotoUpload
from facefinder.infrastructure.rpc.client import RecordStoreClient
from facefinder.services.models import BatchIndexReport, IndexOutcome, IndexStatus
from facefinder.services.photo_indexing import PhotoIndexingService


def print_stats(report: BatchIndexReport, total_time: float) -> None:
    """Print statistics about the indexing process."""
    print("\n===== Indexing Statistics =====")
    print(f"Total photos: {report.total}")
    print(f"Matchable: {report.matchable}")
    print(f"Stored without face: {report.non_matchable}")
    print(f"Failed: {report.failed}")
    print(f"Total time: {total_time:.2f} seconds")
    for outcome in report.failures:
        print(f"  {outcome.file_name}: {outcome.error}")
    print("===============================")


async def main(args: argparse.Namespace) -> int:
    """Index the given photos and return the process exit code."""
    paths = collect_image_paths(args.paths)
    if not paths:
        print("No photos to index.")
        return 0

    photos = [load_photo(path) for path in paths]
    to_index = photos
    descriptors = None
    descriptor_map = None
    oracle = None
    if args.descriptors:
        try:
            descriptor_map = load_descriptor_map(args.descriptors)
        except (OSError, ValueError) as e:
            print(f"Error: cannot read descriptor file: {e}", file=sys.stderr)
            return 1
        to_index = [photo for photo in photos if photo.file_name in descriptor_map]
        descriptors = [descriptor_map[photo.file_name] for photo in to_index]
    else:
        try:
            oracle = build_oracle()
        except ImportError as e:
            print(f"Error: face detection needs the 'oracle' extra: {e}", file=sys.stderr)
            return 1

    record_store = RecordStoreClient(url=args.url)
    service = PhotoIndexingService(
        record_store=record_store,
        oracle=oracle,
        max_concurrency=args.concurrency,
    )

    start_time = time.time()
    try:
        with tqdm(total=len(to_index), desc="Indexing") as progress:
            report = await service.index_batch(
                to_index,
                descriptors=descriptors,
                on_complete=lambda outcome: progress.update(1),
            )
    finally:
        record_store.close()

    if descriptor_map is not None:
        report = with_unlisted_photos(photos, descriptor_map, report)

    print_stats(report, time.time() - start_time)
    return 1 if report.failed else 0


def with_unlisted_photos(
    photos: List[PhotoUpload],
    descriptor_map: Dict[str, Optional[List[float]]],
    report: BatchIndexReport,
) -> BatchIndexReport:
    """Add a FAILED outcome, in input order, for each photo the descriptor file does not list.

    A listed photo with a null descriptor has no face; an unlisted photo was never described.
    """
    indexed = iter(report.outcomes)
    outcomes = []
    for photo in photos:
        if photo.file_name in descriptor_map:
            outcomes.append(next(indexed))
        else:
            outcomes.append(IndexOutcome(
                file_name=photo.file_name,
                status=IndexStatus.FAILED,
                error="not listed in descriptor file",
            ))
    return BatchIndexReport(outcomes=outcomes)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Index event photos into the record store")
    parser.add_argument("paths", nargs="+", help="Image files or directories")
    parser.add_argument("--url", default=settings.RECORD_STORE_URL, help="Record store endpoint")
    parser.add_argument("--descriptors", help="JSON file mapping file names to descriptors (null for no face)")
    parser.add_argument("--concurrency", type=int, default=settings.INDEXING_CONCURRENCY,
                        help="Maximum photos processed at once")
    return parser


def run(argv: Optional[List[str]] = None) -> None:
    """Console entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(sys.stderr)
    sys.exit(asyncio.run(main(args)))


if __name__ == "__main__":
    run()

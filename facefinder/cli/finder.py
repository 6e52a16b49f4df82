#!/usr/bin/env python
"""
Find My Photos

Enroll this device's owner, search the event gallery, or forget the enrolled face.

Usage:
    python -m facefinder.cli.finder status
    python -m facefinder.cli.finder enroll --image selfie.jpg
    python -m facefinder.cli.finder enroll --descriptor descriptor.json
    python -m facefinder.cli.finder search
    python -m facefinder.cli.finder forget
"""
import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

from facefinder.cli.common import build_oracle, load_json
from facefinder.core.config import settings
from facefinder.core.exceptions import (
    FaceFinderError,
    IdentityNotEnrolledError,
    NoFaceDetectedError,
    TransportFailureError,
)
from facefinder.core.logging import setup_logging
from facefinder.infrastructure.identity.json_file import JsonFileIdentityBackend
from facefinder.infrastructure.rpc.client import RecordStoreClient
from facefinder.services.identity_store import IdentityStore
from facefinder.services.photo_finder import PhotoFinderService


def print_photos(photo_refs: List[str]) -> None:
    if not photo_refs:
        print("Nothing found yet.")
        return
    print(f"Found {len(photo_refs)} photos!")
    for ref in photo_refs:
        print(ref)


async def main(args: argparse.Namespace) -> int:
    """Run one command and return the process exit code."""
    identity_store = IdentityStore(JsonFileIdentityBackend(args.identity_file))
    record_store = RecordStoreClient(url=args.url)

    with identity_store:
        try:
            oracle = build_oracle() if args.command == "enroll" and args.image else None
        except ImportError as e:
            record_store.close()
            print(f"Error: face detection needs the 'oracle' extra: {e}", file=sys.stderr)
            return 1
        finder = PhotoFinderService(identity_store, record_store, oracle=oracle)
        try:
            if args.command == "status":
                print("Returning user: face profile saved." if finder.is_returning_user()
                      else "New user: no face profile saved.")
            elif args.command == "enroll":
                if args.image:
                    photo_refs = await finder.enroll_from_capture(Path(args.image).read_bytes())
                else:
                    photo_refs = await finder.enroll_descriptor(load_json(args.descriptor))
                print_photos(photo_refs)
            elif args.command == "search":
                print_photos(await finder.search_my_photos())
            elif args.command == "forget":
                finder.forget_me()
                print("Face profile forgotten. You will need to re-scan next time.")
        except NoFaceDetectedError:
            print("Face not found! Please look directly at the camera.", file=sys.stderr)
            return 2
        except IdentityNotEnrolledError:
            print("No face profile saved. Run 'enroll' first.", file=sys.stderr)
            return 2
        except TransportFailureError as e:
            print(f"Search unavailable: {e}", file=sys.stderr)
            return 1
        except (OSError, ValueError) as e:
            print(f"Error: cannot read input file: {e}", file=sys.stderr)
            return 1
        except FaceFinderError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        finally:
            record_store.close()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Find event photos of yourself")
    parser.add_argument("--url", default=settings.RECORD_STORE_URL, help="Record store endpoint")
    parser.add_argument("--identity-file", default=settings.IDENTITY_STORE_PATH,
                        help="File holding the enrolled face profile")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("status", help="Show whether a face profile is saved")

    enroll = subparsers.add_parser("enroll", help="Save a face profile and search with it")
    source = enroll.add_mutually_exclusive_group(required=True)
    source.add_argument("--image", help="Image to extract the face from")
    source.add_argument("--descriptor", help="JSON file holding a descriptor list")

    subparsers.add_parser("search", help="Search with the saved face profile")
    subparsers.add_parser("forget", help="Delete the saved face profile")
    return parser


def run(argv: Optional[List[str]] = None) -> None:
    """Console entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(sys.stderr)
    sys.exit(asyncio.run(main(args)))


if __name__ == "__main__":
    run()

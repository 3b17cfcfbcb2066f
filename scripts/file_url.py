#!/usr/bin/env python3
"""
Print or check a signed download URL for a stored file.

Usage:
    python scripts/file_url.py store 3f2a9c...
    python scripts/file_url.py store 3f2a9c... --filename report --format pdf
    python scripts/file_url.py --verify https://files.example.com/attachments/...
    python scripts/file_url.py --generate-secret
"""

import argparse
import os
import secrets
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def generate_secret_key() -> str:
    """Generate a random value suitable for DEPOT_SECRET_KEY."""
    return secrets.token_hex(32)


def main() -> int:
    parser = argparse.ArgumentParser(description="Build or verify a signed file URL")
    parser.add_argument("backend", nargs="?", help="Registered backend name, e.g. 'store'")
    parser.add_argument("id", nargs="?", help="Id of the file within the backend")
    parser.add_argument("segments", nargs="*", help="Extra path segments")
    parser.add_argument("--filename", help="Filename for the last path segment")
    parser.add_argument("--format", help="Extension appended to the filename")
    parser.add_argument("--host", help="Override DEPOT_HOST")
    parser.add_argument("--prefix", help="Override DEPOT_MOUNT_POINT")
    parser.add_argument("--verify", metavar="URL", help="Check the token of an existing URL")
    parser.add_argument(
        "--generate-secret", action="store_true", help="Print a new secret key and exit"
    )
    args = parser.parse_args()

    if args.generate_secret:
        print(generate_secret_key())
        return 0

    from depot.core.exceptions import DepotError
    from depot.core.logging import configure_logging
    from depot.services.storage.factory import get_backend_registry
    from depot.services.urls.factory import get_url_builder

    try:
        configure_logging()
        builder = get_url_builder()

        if args.verify:
            valid = builder.verify(args.verify, prefix=args.prefix)
            print("valid" if valid else "invalid")
            return 0 if valid else 1

        if not args.backend or not args.id:
            parser.error("backend and id are required unless --verify is given")

        file = get_backend_registry().get(args.backend).get(args.id)
        print(
            builder.build(
                file,
                *args.segments,
                filename=args.filename,
                format=args.format,
                host=args.host,
                prefix=args.prefix,
            )
        )
        return 0

    except DepotError as e:
        print(f"error: {e.message}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())

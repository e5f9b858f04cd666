#!/usr/bin/env python3
"""Bulk-import golfers from a ``name,salary`` CSV file."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from golf_admin.csv_import import decode_upload
from golf_admin.errors import AdminError
from golf_admin.golfers import GolferRoster
from golf_admin.notifications import always_confirm
from golf_admin.settings import load_settings
from golf_admin.store import create_store


def main() -> None:
    parser = argparse.ArgumentParser(description="Import golfers from a CSV file.")
    parser.add_argument("csv_path", type=Path, help="CSV file with name,salary rows.")
    parser.add_argument("--strict", action="store_true", help="Reject malformed rows.")
    parser.add_argument(
        "--clear-first",
        action="store_true",
        help="Delete every existing golfer before importing.",
    )
    parser.add_argument(
        "--confirm",
        action="store_true",
        help="Required together with --clear-first.",
    )
    args = parser.parse_args()

    if args.clear_first and not args.confirm:
        parser.error("--clear-first deletes ALL golfers. Re-run with --confirm to proceed.")
    if not args.csv_path.is_file():
        parser.error(f"{args.csv_path} is not a file.")

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    settings = load_settings()
    roster = GolferRoster(create_store(settings), table=settings.golfers_table)
    text = decode_upload(args.csv_path.read_bytes())
    try:
        if args.clear_first:
            roster.clear_all(always_confirm)
        count = roster.import_csv(text, strict=args.strict)
    except AdminError as exc:
        for message in roster.notifier.messages() or [str(exc)]:
            print(message, file=sys.stderr)
        sys.exit(1)

    print(f"Imported {count} golfer{'s' if count != 1 else ''}; roster now has {len(roster.golfers)}.")


if __name__ == "__main__":
    main()

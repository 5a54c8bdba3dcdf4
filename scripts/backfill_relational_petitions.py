#!/usr/bin/env python3
"""Backfill the relational petitions table from the document store.

Copies every petition that exists only in the MongoDB collection into the
relational ``petitions`` table, embedding its legacy_id. Run while the
phase is DUAL_WRITE_MONGO_READ, before any phase that reads from the
relational store.

Usage:
    python scripts/backfill_relational_petitions.py [--dry-run] [--batch-size N]

Options:
    --dry-run       Count what would be copied without writing
    --batch-size N  Documents per page (default: 500)

Exit Codes:
    0 - Backfill completed successfully
    1 - Backfill failed or some petitions could not be copied (check logs)
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path for imports
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from structlog import get_logger

from src.application.services.petition_backfill_service import (
    DEFAULT_BATCH_SIZE,
    BackfillReport,
)
from src.bootstrap.database import close_database_engine
from src.bootstrap.logging import configure_structlog
from src.bootstrap.petition_store import get_backfill_service

logger = get_logger()


def print_report(report: BackfillReport) -> None:
    """Print a human-readable backfill report."""
    print("\n" + "=" * 60)
    print("RELATIONAL PETITION BACKFILL REPORT")
    print("=" * 60 + "\n")

    mode = "DRY RUN" if report.dry_run else "LIVE"
    print(f"  Mode: {mode}")
    print(f"  Started: {report.started_at.isoformat()}")
    if report.completed_at:
        print(f"  Completed: {report.completed_at.isoformat()}")
        print(f"  Duration: {report.duration_seconds:.2f} seconds")

    print("\n  Results:")
    print(f"    Petitions scanned: {report.scanned}")
    copied = "Would copy" if report.dry_run else "Copied"
    print(f"    {copied}: {report.migrated}")
    print(f"    Skipped (already in relational store): {report.skipped}")
    print(f"    Failed: {report.failed}")

    if report.failures:
        print("\n  Failures:")
        for failure in report.failures:
            print(f"    - {failure.legacy_id}: {failure.error}")

    print("\n" + "-" * 60)
    if report.succeeded:
        print("BACKFILL COMPLETED SUCCESSFULLY")
    else:
        print("BACKFILL COMPLETED WITH ERRORS")
    print("-" * 60 + "\n")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Copy document-store petitions into the relational store",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Count what would be copied without writing",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=DEFAULT_BATCH_SIZE,
        help=f"Documents per page (default: {DEFAULT_BATCH_SIZE})",
    )
    args = parser.parse_args(argv)
    if args.batch_size <= 0:
        parser.error("--batch-size must be positive")
    return args


async def run_backfill(batch_size: int, dry_run: bool) -> int:
    """Run the backfill and return the process exit code."""
    try:
        report = await get_backfill_service().backfill(
            batch_size=batch_size, dry_run=dry_run
        )
    except Exception as e:
        logger.error("petition_backfill_aborted", error=str(e))
        return 1
    finally:
        await close_database_engine()

    print_report(report)
    return 0 if report.succeeded else 1


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_structlog()
    return asyncio.run(run_backfill(args.batch_size, args.dry_run))


if __name__ == "__main__":
    sys.exit(main())

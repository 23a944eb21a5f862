"""
Inkrecon - Command-line Entrypoint

Loads provider snapshots, runs one reconciliation pass, writes the master
database, mismatch report and coverage documents.

Run via:
    python -m inkrecon.main --core-only --split
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

import structlog

from inkrecon.config import settings
from inkrecon.engine.errors import MalformedIdentifier
from inkrecon.engine.reconcile import ReconciliationResult, reconcile
from inkrecon.pipeline.documents import (
    build_coverage_document,
    build_master_document,
    build_mismatch_report,
    write_document,
)
from inkrecon.pipeline.loaders import load_providers


# ---------------------------------------------------------------------------
# Structlog Configuration
# ---------------------------------------------------------------------------


def _configure_logging(log_level: str = "INFO") -> None:
    """
    Set up structured logging with JSON output.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
    """
    # Configure stdlib logging first (for third-party libraries)
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level.upper()),
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Reconcile provider card snapshots into one master database.",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=settings.DATA_DIR,
        help=f"Directory holding provider snapshots (default: {settings.DATA_DIR}).",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=settings.OUTPUT_DIR,
        help=f"Directory for output documents (default: {settings.OUTPUT_DIR}).",
    )
    parser.add_argument(
        "--core-only",
        action="store_true",
        help="Restrict the universe to CORE_SET_CODES.",
    )
    parser.add_argument(
        "--keep-sealed",
        action="store_true",
        help="Keep sealed products from sets outside scope (only with --core-only).",
    )
    parser.add_argument(
        "--split",
        action="store_true",
        help="Write playable_cards / market_products instead of a single cards map.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=settings.LOG_LEVEL,
        help=f"Log level (default: {settings.LOG_LEVEL}).",
    )
    return parser.parse_args(argv)


def write_outputs(
    result: ReconciliationResult,
    output_dir: Path,
    split: bool,
    created_at: datetime | None = None,
) -> list[Path]:
    """Write all three documents with one shared timestamp. Returns the written paths."""
    created_at = created_at or datetime.now(timezone.utc)
    return [
        write_document(
            output_dir / settings.MASTER_DATABASE_FILE,
            build_master_document(result, split=split, created_at=created_at),
        ),
        write_document(
            output_dir / settings.MISMATCH_REPORT_FILE,
            build_mismatch_report(result, created_at=created_at),
        ),
        write_document(
            output_dir / settings.COVERAGE_REPORT_FILE,
            build_coverage_document(result, created_at=created_at),
        ),
    ]


def main(argv: list[str] | None = None) -> int:
    """
    Application entrypoint.

    Execution order:
    1. Configure logging (structlog JSON)
    2. Load provider snapshots
    3. Reconcile
    4. Write documents
    """
    args = parse_args(argv)
    _configure_logging(log_level=args.log_level)
    logger = structlog.get_logger(__name__)

    paths = {
        provider: args.data_dir / filename
        for provider, filename in settings.PROVIDER_FILES.items()
    }

    try:
        providers = load_providers(paths)
    except (OSError, ValueError) as e:
        logger.error("provider_load_failed", error=str(e), error_type=type(e).__name__)
        return 1

    if not providers:
        logger.error("no_provider_snapshots", data_dir=str(args.data_dir))
        return 1

    scope = settings.CORE_SET_CODES if args.core_only else None

    try:
        result = reconcile(
            providers,
            scope,
            keep_sealed_outside_scope=args.keep_sealed and args.core_only,
        )
    except MalformedIdentifier as e:
        # Input-format problem. InvariantViolation is left to propagate.
        logger.error("reconciliation_failed", error=str(e), error_type=type(e).__name__)
        return 1

    written = write_outputs(result, args.output_dir, split=args.split)
    logger.info(
        "inkrecon_run_complete",
        documents=[str(p) for p in written],
        cards=len(result.master_db),
        mismatches=len(result.mismatches),
        flagged=len(result.flags),
        warnings=len(result.warnings),
    )
    return 0


# ---------------------------------------------------------------------------
# CLI Entry
# ---------------------------------------------------------------------------


if __name__ == "__main__":
    sys.exit(main())

"""
Command-line entry point.

    python -m sprintcap [--arguments FILE] [--points FILE] [--database-url URL]

Exit status is 1 on any fatal error (unreadable inputs, iteration listing
failure, store failure) and 0 otherwise. Skipped iterations never change it.
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError

from sprintcap.core.config import settings
from sprintcap.core.errors import SprintCapException, StoreError
from sprintcap.core.logging import setup_logging
from sprintcap.db.base import make_engine
from sprintcap.integrations.azure_devops import AzureDevOpsClient
from sprintcap.services.inputs import load_completion_records, load_run_arguments
from sprintcap.services.pipeline import run_pipeline
from sprintcap.services.report import render_report
from sprintcap.services.store import SprintRecordStore

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sprintcap",
        description="Compute sprint efficiency and forecasts from Azure DevOps capacity.",
    )
    parser.add_argument(
        "--arguments", default=settings.ARGUMENTS_FILE,
        help="Run arguments JSON (org URL, token, project, team, sprint start).",
    )
    parser.add_argument(
        "--points", default=settings.POINTS_COMPLETED_FILE,
        help="Completed points JSON.",
    )
    parser.add_argument(
        "--database-url", default=settings.DATABASE_URL,
        help="SQLAlchemy database URL. The table is rebuilt on every run.",
    )
    parser.add_argument("--log-level", default=settings.LOG_LEVEL)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    engine = None
    try:
        completions = load_completion_records(args.points)
        arguments = load_run_arguments(args.arguments)

        try:
            engine = make_engine(args.database_url)
        except SQLAlchemyError as exc:
            raise StoreError("open", str(exc)) from exc
        store = SprintRecordStore(engine)

        with AzureDevOpsClient(
            arguments.organization_url,
            arguments.access_token,
            api_version=settings.AZURE_DEVOPS_API_VERSION,
            timeout=settings.HTTP_TIMEOUT,
        ) as client:
            result = run_pipeline(arguments, completions, client, store)
    except SprintCapException as exc:
        logger.error("%s: %s", exc.code, exc.message)
        return 1
    finally:
        if engine is not None:
            engine.dispose()

    sys.stdout.write(render_report(result.records))
    return 0

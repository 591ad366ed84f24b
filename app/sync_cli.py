"""
One-off Oura sync.

Usage:
    nutrition-sync                  # yesterday
    nutrition-sync --date 2024-01-15
"""
import argparse
import logging
import sys
from datetime import date as DateType
from typing import List, Optional

from app.core.config import settings
from app.core.db import Database
from app.core.logging_config import configure_logging
from app.core.oura_client import MissingCredentialsError, OuraClient
from app.core.sync import run_sync

logger = logging.getLogger("app.sync")


def _iso_date(value: str) -> str:
    try:
        return DateType.fromisoformat(value).isoformat()
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got {value!r}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Sync Oura Ring data into the local store")
    parser.add_argument("--date", type=_iso_date, help="day to sync (default: yesterday)")
    args = parser.parse_args(argv)

    configure_logging(settings)

    try:
        client = OuraClient.from_settings(settings)
    except MissingCredentialsError:
        logger.error("OURA_TOKEN not found in environment or .env file")
        return 1

    database = Database(settings.DATABASE_URL)
    try:
        database.create_all()
        with client:
            run_sync(database, client, args.date)
    finally:
        database.dispose()
    return 0


if __name__ == "__main__":
    sys.exit(main())

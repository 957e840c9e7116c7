# src/quillpress/scripts/migrate.py
"""Apply Alembic migrations to the configured database."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path

from alembic import command
from alembic.config import Config

from quillpress.core.logging import configure_logging
from quillpress.core.settings import settings

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parents[3] / "migrations"


def build_config(database_url: str | None = None) -> Config:
    """Return an Alembic config pointing at the project's migrations folder."""
    cfg = Config(str(MIGRATIONS_DIR / "alembic.ini"))
    cfg.set_main_option("script_location", str(MIGRATIONS_DIR))
    cfg.set_main_option("sqlalchemy.url", database_url or settings.database_url_sync)
    return cfg


def run_upgrade(revision: str = "head", database_url: str | None = None) -> None:
    command.upgrade(build_config(database_url), revision)


def run_downgrade(revision: str, database_url: str | None = None) -> None:
    command.downgrade(build_config(database_url), revision)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Run QuillPress database migrations.")
    parser.add_argument("direction", choices=("upgrade", "downgrade"), nargs="?", default="upgrade")
    parser.add_argument("revision", nargs="?", default=None)
    args = parser.parse_args(argv)

    configure_logging(settings.log_level)
    if args.direction == "upgrade":
        revision = args.revision or "head"
        logger.info("Upgrading database to %s", revision)
        run_upgrade(revision)
    else:
        if not args.revision:
            parser.error("downgrade needs a target revision")
        logger.info("Downgrading database to %s", args.revision)
        run_downgrade(args.revision)


if __name__ == "__main__":
    main()

"""Create all tables for the configured database."""

import logging

from quillpress.core.logging import configure_logging
from quillpress.core.settings import settings
from quillpress.db.session import create_tables

logger = logging.getLogger(__name__)


def init_db() -> None:
    """Initialize the database by creating all tables."""
    create_tables()


def main() -> None:
    configure_logging(settings.log_level)
    init_db()
    logger.info("Database initialized.")


if __name__ == "__main__":
    main()

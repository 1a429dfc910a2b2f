"""Create the database schema without running migrations (local development)."""

import logging

from storyfeed.core.logging import configure_logging
from storyfeed.db.session import create_tables

logger = logging.getLogger(__name__)


def init_db() -> None:
    """Initialize the database by creating all tables."""
    create_tables()


if __name__ == "__main__":
    configure_logging()
    init_db()
    logger.info("Database initialized.")

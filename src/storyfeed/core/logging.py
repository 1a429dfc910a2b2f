"""Logging setup shared by the API process and the maintenance scripts."""

from __future__ import annotations

import logging

from storyfeed.core.settings import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure the root logger once; later calls only adjust the level."""
    resolved = (level or settings.log_level).upper()
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=LOG_FORMAT)
    root.setLevel(resolved)
    # SQL echo is controlled by SQL_DEBUG on the engine, keep the logger quiet otherwise.
    if not settings.sql_debug:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

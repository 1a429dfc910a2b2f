# src/storyfeed/scripts/tokens.py
"""
Issue bearer tokens for local development.

Identity is verified upstream in production; this script stands in for that
service. It ensures an author row exists and prints a token for it:

    storyfeed-token alice --username Alice --admin
"""

from __future__ import annotations

import argparse
import logging
import re
import sys

from sqlalchemy.orm import Session

from storyfeed.core.logging import configure_logging
from storyfeed.core.security import create_access_token
from storyfeed.db.session import SessionLocal
from storyfeed.models import Author
from storyfeed.models.story import ID_PATTERN

logger = logging.getLogger(__name__)


def ensure_author(
    db: Session,
    author_id: str,
    *,
    username: str | None = None,
    email: str | None = None,
    admin: bool = False,
) -> Author:
    """Return the author with ``author_id``, creating or updating it as needed."""
    author = db.get(Author, author_id)
    if author is None:
        author = Author(id=author_id, username=username, email=email, is_admin=admin)
        db.add(author)
        logger.info("Created author %s", author_id)
    else:
        if username is not None:
            author.username = username
        if email is not None:
            author.email = email
        if admin:
            author.is_admin = True
    db.commit()
    return author


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Issue a development bearer token.")
    parser.add_argument("author_id", help="Author identifier ([A-Za-z0-9_-])")
    parser.add_argument("--username")
    parser.add_argument("--email")
    parser.add_argument("--admin", action="store_true", help="Grant the elevated role")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging()
    if not re.match(ID_PATTERN, args.author_id):
        logger.error("Invalid author id %r", args.author_id)
        return 2

    db = SessionLocal()
    try:
        author = ensure_author(
            db,
            args.author_id,
            username=args.username,
            email=args.email,
            admin=args.admin,
        )
        print(create_access_token(author.id))
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())

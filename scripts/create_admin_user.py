#!/usr/bin/env python3
"""Create or update an fbscore admin account.

Admins have no signup endpoint; this script is the only way to add one.

Usage:
    python scripts/create_admin_user.py --username root --name "League Admin"
"""

from __future__ import annotations

import argparse
import getpass
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from fbscore.db.session import get_session
from fbscore.services.accounts import create_or_update_admin_user

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(description="Create or update an admin account")
    parser.add_argument("--username", required=True, help="Admin id used at sign-in")
    parser.add_argument("--name", default=None, help="Display name (defaults to the username)")
    parser.add_argument(
        "--password",
        default=None,
        help="Admin password (omit to be prompted)",
    )
    parser.add_argument(
        "--inactive",
        action="store_true",
        help="Disable sign-in for this admin",
    )
    args = parser.parse_args()

    password = args.password
    if password is None:
        password = getpass.getpass("Password: ")
        if password != getpass.getpass("Confirm password: "):
            logger.error("Passwords do not match.")
            return 1
    if not password:
        logger.error("Password cannot be empty.")
        return 1

    try:
        with get_session() as session:
            admin = create_or_update_admin_user(
                db=session,
                username=args.username,
                password=password,
                name=args.name,
                is_active=not args.inactive,
            )
            logger.info(
                "Admin ready: id=%s username=%s active=%s",
                admin.id,
                admin.username,
                admin.is_active,
            )
    except ValueError as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

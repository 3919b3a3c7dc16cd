#!/usr/bin/env python3
"""Administrative helpers for community board deployments."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

BACKEND_DIR = Path(__file__).resolve().parents[1] / "backend"
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from sqlalchemy import select  # noqa: E402

from app.database import get_db_session  # noqa: E402
from app.models import User, UserRole  # noqa: E402
from app.services.moderation import seed_deletion_reasons  # noqa: E402
from app.services.persistence import commit  # noqa: E402


def seed_reasons() -> int:
    with get_db_session() as db:
        added = seed_deletion_reasons(db)
    print(f"Added {added} deletion reason(s)")
    return 0


def set_role(login: str, role: UserRole) -> int:
    with get_db_session() as db:
        user = db.execute(select(User).where(User.login == login)).scalar_one_or_none()
        if user is None:
            print(f"User '{login}' not found", file=sys.stderr)
            return 1
        user.role = role
        commit(db, "change user role", entity_id=user.id)
    print(f"User '{login}' is now {role.value}")
    return 0


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("seed-reasons", help="Insert the default deletion reasons")

    promote = subparsers.add_parser("promote", help="Grant the admin role to a user")
    promote.add_argument("login")

    demote = subparsers.add_parser("demote", help="Revoke the admin role from a user")
    demote.add_argument("login")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    args = parse_args(argv)
    if args.command == "seed-reasons":
        return seed_reasons()
    if args.command == "promote":
        return set_role(args.login, UserRole.ADMIN)
    return set_role(args.login, UserRole.USER)


if __name__ == "__main__":
    sys.exit(main())

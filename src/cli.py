# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Administrative command line.

Usage::

    python -m src.cli seed
    python -m src.cli grant-admin someone@example.com
"""

from __future__ import annotations

import argparse
import logging
import sys

from src.database import SessionLocal
from src.rbac import DuplicateAssignment
from src.services import rbac_service, user_service
from src.services.rbac_seed_service import seed_rbac_data

logger = logging.getLogger(__name__)


def cmd_seed(args: argparse.Namespace) -> int:
    db = SessionLocal()
    try:
        seed_rbac_data(db)
    finally:
        db.close()
    print("Seeded default permissions and roles")
    return 0


def cmd_grant_admin(args: argparse.Namespace) -> int:
    """Give a user the admin role globally, or org-wide with --org."""
    db = SessionLocal()
    try:
        user = user_service.get_user_by_email(db, args.email)
        if not user:
            print(f"User {args.email} not found", file=sys.stderr)
            return 1
        role = rbac_service.get_role_by_slug(db, "admin")
        if not role:
            print("Admin role not found; run 'seed' first", file=sys.stderr)
            return 1
        try:
            rbac_service.assign_role_to_user(db, user.id, role.id, org_id=args.org)
        except DuplicateAssignment:
            print(f"{args.email} already has the admin role")
            return 0
    finally:
        db.close()
    scope = f"org-wide for {args.org}" if args.org else "global"
    print(f"Assigned admin to {args.email} ({scope})")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="python -m src.cli", description=__doc__.splitlines()[0])
    subparsers = parser.add_subparsers(dest="command", required=True)

    seed = subparsers.add_parser("seed", help="Seed default permissions and roles")
    seed.set_defaults(func=cmd_seed)

    grant = subparsers.add_parser("grant-admin", help="Assign the admin role to a user")
    grant.add_argument("email")
    grant.add_argument("--org", default=None, help="Console organization id (default: global)")
    grant.set_defaults(func=cmd_grant_admin)
    return parser


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())

"""
Create an organization and grant members a permission.

Organizations have no HTTP surface; operators provision them here.

Usage:
  python scripts/create_organization.py "Acme" --member alice@example.com --permission collaborator
  python scripts/create_organization.py "Acme" --member bob@example.com --member carol@example.com
  python scripts/create_organization.py --organization-id 3 --member dave@example.com --permission read_only
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def main(argv: list[str] | None = None) -> int:
    from app.togglehub import create_app
    from app.togglehub.db import session_scope
    from app.togglehub.organizations import create_organization, find_organization, set_member_permission
    from app.togglehub.rbac import PERMISSION_RANKS, READ_ONLY
    from app.togglehub.users import find_user_by_email

    parser = argparse.ArgumentParser(description="Create an organization and add members.")
    parser.add_argument("name", nargs="?", default="", help="Name of a new organization")
    parser.add_argument("--organization-id", type=int, default=None, help="Add members to an existing organization")
    parser.add_argument("--member", action="append", default=[], help="Member email (repeatable)")
    parser.add_argument("--permission", choices=sorted(PERMISSION_RANKS), default=READ_ONLY)
    args = parser.parse_args(argv)

    if not args.name and args.organization_id is None:
        parser.error("either a name or --organization-id is required")

    app = create_app()
    with session_scope(app) as s:
        if args.organization_id is not None:
            org = find_organization(args.organization_id, s)
            if org is None:
                print(f"ERROR: organization {args.organization_id} not found", flush=True)
                return 1
        else:
            org = create_organization(s, args.name)
            print(f"Created organization id={org.id} name={org.name!r}", flush=True)

        for email in args.member:
            user = find_user_by_email(s, email)
            if user is None:
                print(f"WARNING: no user with email {email!r}; sign up first. Skipping.", flush=True)
                continue
            set_member_permission(s, org, user, args.permission)
            print(f"  {user.email}: {args.permission}", flush=True)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())

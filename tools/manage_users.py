#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-10-19 09:12:40
# @Author  : Tom Brandherm (https://github.com/tombo92)
"""
Create admins, grant/revoke admin rights, list users.

Usage:
  python tools/manage_users.py --create-admin alice --password "s3cret!"
  python tools/manage_users.py --promote bob
  python tools/manage_users.py --demote bob
  python tools/manage_users.py --list
"""

# ========================================================
# IMPORTS
# ========================================================

from __future__ import annotations

import sys
from pathlib import Path
import argparse
import getpass

# Ensure repo root is importable
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from tireshop.config import DATABASE_URL
from tireshop.db import init_db
from tireshop.errors import ConflictError, ValidationError
from tireshop.repository import UserRepository
from tireshop.validation import validate_credentials

# ========================================================
# MAIN
# ========================================================

def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Manage shop user accounts.")
    g = parser.add_mutually_exclusive_group()
    g.add_argument("--create-admin", metavar="USERNAME", help="Create a new admin account")
    g.add_argument("--promote", metavar="USERNAME", help="Give an existing user admin rights")
    g.add_argument("--demote", metavar="USERNAME", help="Remove admin rights from a user")
    g.add_argument("--list", action="store_true", help="List all users")
    parser.add_argument("--password", help="Password for --create-admin (prompted if omitted)")
    parser.add_argument("--database-url", default=DATABASE_URL, help="Override TIRESHOP_DATABASE_URL")
    args = parser.parse_args(argv)

    engine, session_factory = init_db(args.database_url)
    users = UserRepository(session_factory)
    try:
        if args.list or not (args.create_admin or args.promote or args.demote):
            rows = users.list_users()
            if not rows:
                print("No users.")
            else:
                print("Users:")
                for u in rows:
                    print("  ", u.username, "(admin)" if u.is_admin else "")
            return 0

        if args.create_admin:
            password = args.password or getpass.getpass("Password: ")
            try:
                username, password = validate_credentials(
                    {"username": args.create_admin, "password": password})
                users.create_user(username, password, is_admin=True)
            except ValidationError as e:
                print(f"ERROR: {e.message} {e.errors}")
                return 2
            except ConflictError as e:
                print(f"ERROR: {e.message}")
                return 2
            print(f"OK: admin {username} created")
            return 0

        username = (args.promote or args.demote).strip()
        if users.set_admin(username, bool(args.promote)):
            print(f"OK: {username} is {'now' if args.promote else 'no longer'} an admin")
            return 0
        print(f"ERROR: user '{username}' not found.")
        return 2
    finally:
        engine.dispose()

if __name__ == "__main__":
    raise SystemExit(main())

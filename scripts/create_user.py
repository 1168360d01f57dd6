#!/usr/bin/env python3
from __future__ import annotations

import os
import sys
from getpass import getpass
from pathlib import Path

from finmate.auth.users import register_user
from finmate.errors import FinmateError
from finmate.infra.user_repo import UserRepository


def main() -> None:
    raw_path = os.getenv("FINMATE_USERS_PATH", "").strip()
    if not raw_path:
        raise SystemExit("Set FINMATE_USERS_PATH to the users YAML file")
    users_path = Path(raw_path).resolve()

    username = input("Username: ").strip()
    email = input("Email: ").strip()

    pw1 = getpass("Password: ")
    pw2 = getpass("Repeat password: ")
    if pw1 != pw2:
        raise SystemExit("Passwords do not match")

    try:
        ident = register_user(UserRepository(users_path), username=username, email=email, password=pw1)
    except FinmateError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        raise SystemExit(1)
    print(f"OK -> {users_path} (id={ident.id})")


if __name__ == "__main__":
    main()

# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Credential store: username/email -> Identity.

Identities live in memory behind a single lock and, when a path is given,
are mirrored to a YAML file, re-read whenever another writer (for example
``scripts/create_user.py``) changed it. File layout::

    version: 1
    users:
      alice:
        id: 1
        email: a@x.com
        password_hash: $argon2id$...
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Dict, Optional, Tuple

from finmate.core.models import Identity
from finmate.errors import DuplicateEmail, DuplicateUsername
from finmate.infra.yaml_store import dump_yaml, load_yaml


def _email_key(email: str) -> str:
    return (email or "").strip().lower()


def _load_users_file(path: Path) -> Dict[str, Identity]:
    raw = load_yaml(path)
    users = raw.get("users") or {}
    out: Dict[str, Identity] = {}
    if not isinstance(users, dict):
        return out
    for uname, udata in users.items():
        if not isinstance(udata, dict):
            continue
        username = str(uname).strip()
        if not username:
            continue
        try:
            uid = int(udata.get("id"))
        except (TypeError, ValueError):
            continue
        out[username] = Identity(
            id=uid,
            username=username,
            email=str(udata.get("email") or "").strip(),
            password_hash=str(udata.get("password_hash") or "").strip(),
        )
    return out


class UserRepository:
    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = path
        self._lock = threading.Lock()
        self._by_username: Dict[str, Identity] = {}
        self._by_email: Dict[str, Identity] = {}
        self._by_id: Dict[int, Identity] = {}
        self._file_sig: Optional[Tuple[int, int]] = None
        self._next_id = 1
        with self._lock:
            self._refresh()

    def _index(self, ident: Identity) -> None:
        self._by_username[ident.username] = ident
        self._by_email[_email_key(ident.email)] = ident
        self._by_id[ident.id] = ident

    def _stat(self) -> Optional[Tuple[int, int]]:
        try:
            st = self._path.stat()
        except FileNotFoundError:
            return None
        return (st.st_mtime_ns, st.st_size)

    def _refresh(self) -> None:
        """Re-read the users file when another writer changed it. Caller holds the lock."""
        if self._path is None:
            return
        sig = self._stat()
        if sig is None or sig == self._file_sig:
            return
        self._by_username.clear()
        self._by_email.clear()
        self._by_id.clear()
        for ident in _load_users_file(self._path).values():
            self._index(ident)
        self._next_id = max(self._by_id, default=0) + 1
        self._file_sig = sig

    def _save(self) -> None:
        if self._path is None:
            return
        users = {
            ident.username: {
                "id": ident.id,
                "email": ident.email,
                "password_hash": ident.password_hash,
            }
            for ident in self._by_id.values()
        }
        dump_yaml(self._path, {"version": 1, "users": users})
        self._file_sig = self._stat()

    def register(self, username: str, email: str, password_hash: str) -> Identity:
        """Insert a new identity unless the username or email is already taken.

        The uniqueness checks and the insert run under one lock, so concurrent
        registrations of the same username admit exactly one.
        """
        username = (username or "").strip()
        email = (email or "").strip()
        with self._lock:
            self._refresh()
            if username in self._by_username:
                raise DuplicateUsername()
            if _email_key(email) in self._by_email:
                raise DuplicateEmail()
            ident = Identity(
                id=self._next_id,
                username=username,
                email=email,
                password_hash=password_hash,
            )
            self._index(ident)
            try:
                self._save()
            except Exception:
                self._by_username.pop(ident.username, None)
                self._by_email.pop(_email_key(ident.email), None)
                self._by_id.pop(ident.id, None)
                raise
            self._next_id += 1
            return ident

    def find_by_username(self, username: str) -> Optional[Identity]:
        u = (username or "").strip()
        if not u:
            return None
        with self._lock:
            self._refresh()
            return self._by_username.get(u)

    def exists_by_username(self, username: str) -> bool:
        return self.find_by_username(username) is not None

# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Authentication helpers.

This package provides:
- Password hashing/verification (argon2)
- Signed, time-bounded bearer tokens (itsdangerous)
- Per-request session context resolved from a bearer token
- Account registration and credential checks against the user store
"""

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Password hashing and generation using bcrypt.

Example:
    >>> hasher = PasswordHasher()
    >>> hashed = hasher.hash("my_password1")
    >>> hasher.verify("my_password1", hashed)
    True
"""

import hashlib
import logging
import re
import secrets

import bcrypt

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8
_HAS_LETTER = re.compile(r"[^\W\d_]")
_HAS_DIGIT = re.compile(r"\d")


class PasswordHasher:
    """Secure password hashing using bcrypt.

    Attributes:
        _rounds: Number of bcrypt rounds for hashing.
    """

    def __init__(self, rounds: int = 12) -> None:
        """Initialize the password hasher.

        Args:
            rounds: Number of bcrypt rounds. Tests pass a low value to stay fast.
        """
        self._rounds = rounds

    def hash(self, password: str) -> str:
        """Hash a password using bcrypt.

        Raises:
            ValueError: If password is empty.
        """
        if not password:
            raise ValueError("Password cannot be empty")

        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Verify a password against a hash. Malformed hashes never match."""
        if not password or not password_hash:
            return False

        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError as e:
            logger.warning("Password verification failed: %s", str(e))
            return False


def password_fingerprint(password_hash: str) -> str:
    """Short digest of a stored hash. Changes whenever the password changes."""
    return hashlib.sha256(password_hash.encode("utf-8")).hexdigest()[:16]


def generate_password(nbytes: int = 8) -> str:
    """Random hex password for new accounts. Always contains a letter and a digit."""
    while True:
        candidate = secrets.token_hex(nbytes)
        if is_secure_password(candidate):
            return candidate


def is_secure_password(password: str) -> bool:
    """At least eight characters including a letter and a digit."""
    return (
        len(password) >= MIN_PASSWORD_LENGTH
        and _HAS_LETTER.search(password) is not None
        and _HAS_DIGIT.search(password) is not None
    )

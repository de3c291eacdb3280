"""
Password hashing utilities using bcrypt.

The salt is generated and stored separately from the hash so that both can be
replaced together on a password change. ``bcrypt.hashpw`` with a fixed salt
is deterministic, which gives the ``compute_hash(password, salt)`` contract.
"""

import hmac
from typing import Optional

import bcrypt

from webauth.config import get_settings
from webauth.exceptions import InvalidInput

# bcrypt only uses the first 72 bytes of a password
BCRYPT_MAX_PASSWORD_BYTES = 72


class PasswordHasher:
    """Password hashing service."""

    @staticmethod
    def _truncate_password(password: str) -> bytes:
        """Encode and truncate the password to bcrypt's 72-byte limit."""
        return password.encode("utf-8")[:BCRYPT_MAX_PASSWORD_BYTES]

    @staticmethod
    def generate_salt(rounds: Optional[int] = None) -> str:
        """
        Generate a fresh bcrypt salt.

        Args:
            rounds: Cost factor (log2 of iterations); defaults to settings

        Returns:
            Salt string in modular crypt format, e.g. ``$2b$12$...``
        """
        cost = rounds if rounds is not None else get_settings().bcrypt_rounds
        return bcrypt.gensalt(rounds=cost).decode("ascii")

    @staticmethod
    def compute_hash(password: Optional[str], salt: str) -> str:
        """
        Hash a password with the given salt.

        Args:
            password: Plain text password
            salt: Salt produced by ``generate_salt``

        Returns:
            bcrypt hash string

        Raises:
            InvalidInput: If password is empty or salt is not a bcrypt salt
        """
        if not password:
            raise InvalidInput("Password must not be empty.", details={"field": "password"})
        try:
            hashed = bcrypt.hashpw(
                PasswordHasher._truncate_password(password),
                salt.encode("ascii"),
            )
        except (ValueError, TypeError, UnicodeEncodeError) as exc:
            raise InvalidInput("Malformed salt.", details={"field": "salt"}) from exc
        return hashed.decode("ascii")

    @staticmethod
    def hashes_match(candidate: str, stored: str) -> bool:
        """Constant-time comparison of two hash strings."""
        return hmac.compare_digest(candidate.encode("ascii"), stored.encode("ascii"))

    @staticmethod
    def needs_rehash(salt: str) -> bool:
        """
        Check if a salt uses a cost factor other than the configured one.

        Format: $2b$XX$... where XX is the rounds
        """
        try:
            parts = salt.split("$")
            return int(parts[2]) != get_settings().bcrypt_rounds
        except (IndexError, ValueError):
            return True


# Convenience functions
def generate_salt(rounds: Optional[int] = None) -> str:
    """Generate a salt."""
    return PasswordHasher.generate_salt(rounds)


def compute_hash(password: Optional[str], salt: str) -> str:
    """Hash a password with a salt."""
    return PasswordHasher.compute_hash(password, salt)


def hashes_match(candidate: str, stored: str) -> bool:
    """Compare two hashes in constant time."""
    return PasswordHasher.hashes_match(candidate, stored)

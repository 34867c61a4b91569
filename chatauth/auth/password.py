"""
Password handling utilities.

Uses bcrypt for secure password hashing.
"""

import re
import logging
import secrets
from typing import Optional

import bcrypt

from .exceptions import ValidationError

logger = logging.getLogger(__name__)

# bcrypt work factor (higher = more secure but slower)
# 12 takes a few hundred milliseconds per hash
BCRYPT_ROUNDS = 12

# bcrypt only looks at the first 72 bytes of input
BCRYPT_MAX_PASSWORD_BYTES = 72

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+$")


class PasswordHandler:
    """
    Handles password hashing and verification using bcrypt.

    Usage:
        handler = PasswordHandler()
        hashed = handler.hash("my_password")
        is_valid = handler.verify("my_password", hashed)
    """

    def __init__(self, rounds: int = BCRYPT_ROUNDS):
        """
        Initialize password handler.

        Args:
            rounds: bcrypt work factor (default: 12)
        """
        self.rounds = rounds
        self._dummy_hash: Optional[str] = None

    def hash(self, password: str) -> str:
        """
        Hash a password using bcrypt.

        Args:
            password: Plain text password

        Returns:
            Hashed password string (includes salt and cost)

        Raises:
            ValidationError: If the password is empty or cannot be hashed
        """
        if not password:
            raise ValidationError("Password cannot be empty")

        encoded = password.encode("utf-8")
        if len(encoded) > BCRYPT_MAX_PASSWORD_BYTES:
            raise ValidationError(
                f"Password must be at most {BCRYPT_MAX_PASSWORD_BYTES} bytes"
            )

        try:
            salt = bcrypt.gensalt(rounds=self.rounds)
            hashed = bcrypt.hashpw(encoded, salt)
        except ValueError as e:
            raise ValidationError(f"Password could not be hashed: {e}") from e

        return hashed.decode("utf-8")

    def verify(self, password: str, hashed: str) -> bool:
        """
        Verify a password against a hash.

        Args:
            password: Plain text password to verify
            hashed: Previously hashed password

        Returns:
            True if password matches, False otherwise
        """
        if not password or not hashed:
            return False

        encoded = password.encode("utf-8")
        if len(encoded) > BCRYPT_MAX_PASSWORD_BYTES:
            return False

        try:
            return bcrypt.checkpw(encoded, hashed.encode("utf-8"))
        except ValueError as e:
            logger.warning(f"Password verification error: {e}")
            return False

    def verify_dummy(self, password: str) -> bool:
        """
        Burn the same amount of work as a real verification.

        Used when no identity matches, so response time does not reveal
        whether the account exists. Always returns False.
        """
        if self._dummy_hash is None:
            self._dummy_hash = self.hash(secrets.token_urlsafe(16))
        self.verify(password or "-", self._dummy_hash)
        return False


def normalize_email(email: str) -> Optional[str]:
    """
    Normalize an email address for lookups and uniqueness.

    Strips whitespace and lower-cases the whole address.

    Args:
        email: Email in any case

    Returns:
        Normalized email or None if invalid

    Examples:
        normalize_email(" Alice@Example.com ") -> "alice@example.com"
        normalize_email("not-an-email") -> None
    """
    if not email:
        return None

    cleaned = email.strip().lower()
    if not _EMAIL_RE.match(cleaned):
        return None

    return cleaned

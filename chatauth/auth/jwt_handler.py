"""
JWT session token handler.

Issues and validates the signed session tokens carried in the session
cookie. Validation is stateless: it never consults the credential store.
"""

import time
import logging
from typing import Callable, Optional
from dataclasses import dataclass, asdict

from jose import jwt, JWTError

from ..config import DEFAULT_TOKEN_MAX_AGE_SECONDS
from .exceptions import (
    ConfigurationError,
    TokenMissingError,
    TokenExpiredError,
    TokenInvalidError,
)
from .users import Identity

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
MIN_SECRET_LENGTH = 32


@dataclass(frozen=True)
class SessionClaim:
    """Identity claim embedded in a session token."""
    user_id: str
    email: str
    iat: int  # Issued at timestamp
    exp: int  # Expiration timestamp

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "SessionClaim":
        try:
            claim = cls(
                user_id=data["user_id"],
                email=data["email"],
                iat=data["iat"],
                exp=data["exp"],
            )
        except (KeyError, TypeError) as e:
            raise TokenInvalidError(f"Malformed token payload: {e}") from e

        if not isinstance(claim.user_id, str) or not isinstance(claim.email, str):
            raise TokenInvalidError("Malformed token payload: bad subject")
        if not isinstance(claim.iat, int) or not isinstance(claim.exp, int):
            raise TokenInvalidError("Malformed token payload: bad timestamps")
        return claim


class JWTHandler:
    """
    Issues and validates session tokens.

    Token states:
    - valid: signature verifies and exp has not passed
    - expired: signature verifies, exp has passed (TokenExpiredError)
    - invalid: malformed or forged (TokenInvalidError)
    """

    def __init__(
        self,
        secret_key: str,
        max_age: int = DEFAULT_TOKEN_MAX_AGE_SECONDS,
        clock: Callable[[], float] = time.time
    ):
        """
        Initialize JWT handler.

        Args:
            secret_key: Secret key for signing tokens
            max_age: Token lifetime in seconds (default: 3 days)
            clock: Returns the current unix time; injectable for tests

        Raises:
            ConfigurationError: If the secret or lifetime is unusable
        """
        if not secret_key:
            raise ConfigurationError("JWT signing secret is not set (JWT_KEY)")
        if len(secret_key) < MIN_SECRET_LENGTH:
            raise ConfigurationError(
                f"JWT signing secret must be at least {MIN_SECRET_LENGTH} characters"
            )
        if max_age <= 0:
            raise ConfigurationError("Token max age must be positive")

        self._secret_key = secret_key
        self.max_age = max_age
        self.clock = clock

    def _now(self) -> int:
        return int(self.clock())

    def issue(self, identity: Identity) -> str:
        """
        Create a session token for an identity.

        Args:
            identity: Verified identity

        Returns:
            Encoded JWT token string
        """
        now = self._now()
        claim = SessionClaim(
            user_id=identity.user_id,
            email=identity.email,
            iat=now,
            exp=now + self.max_age,
        )

        token = jwt.encode(claim.to_dict(), self._secret_key, algorithm=ALGORITHM)
        logger.debug(f"Issued session token for user {identity.user_id}, expires in {self.max_age}s")
        return token

    def validate(self, token: Optional[str]) -> SessionClaim:
        """
        Verify and decode a token.

        Args:
            token: JWT token string

        Returns:
            SessionClaim carried by the token

        Raises:
            TokenMissingError: No token given
            TokenInvalidError: Bad signature or malformed token
            TokenExpiredError: Token is past its expiry
        """
        if not token:
            raise TokenMissingError("No session token presented")

        try:
            # Expiry is checked below against our own clock
            data = jwt.decode(
                token,
                self._secret_key,
                algorithms=[ALGORITHM],
                options={"verify_exp": False},
            )
        except JWTError as e:
            raise TokenInvalidError(f"Token verification failed: {e}") from e

        if not isinstance(data, dict):
            raise TokenInvalidError("Malformed token payload")

        claim = SessionClaim.from_dict(data)

        if claim.exp < self._now():
            raise TokenExpiredError(f"Token for user {claim.user_id} expired at {claim.exp}")

        return claim

    def get_token_expiry(self, token: str) -> Optional[int]:
        """
        Get the expiration timestamp of a token.

        Returns:
            Expiration timestamp or None if invalid or expired
        """
        try:
            return self.validate(token).exp
        except (TokenMissingError, TokenInvalidError, TokenExpiredError):
            return None

    def is_token_expired(self, token: str) -> bool:
        """
        Check if a token can no longer be used.

        Returns:
            True if expired or invalid, False if still valid
        """
        return self.get_token_expiry(token) is None

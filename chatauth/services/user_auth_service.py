"""
User authentication service.

Ties the credential store to the session token handler:
signup and login produce a session token, later requests are
authenticated from the token alone.
"""

import logging
from typing import Optional
from dataclasses import dataclass

from ..auth import (
    JWTHandler,
    SessionClaim,
    CredentialStore,
    Identity,
    AuthenticationFailure,
    DuplicateIdentityError,
    TokenError,
    TokenInvalidError,
    ValidationError,
)

logger = logging.getLogger(__name__)


@dataclass
class AuthResult:
    """Successful signup or login."""
    user: Identity
    token: str
    expires_at: int  # unix timestamp
    max_age: int  # seconds, for the cookie


class UserAuthService:
    """
    Service for user authentication.

    Handles:
    - Signup (email + password)
    - Login with password
    - Session token validation for protected routes
    """

    def __init__(self, jwt_handler: JWTHandler, user_store: CredentialStore):
        """
        Initialize auth service.

        Args:
            jwt_handler: Session token issuer/validator
            user_store: Credential store
        """
        self.jwt = jwt_handler
        self.users = user_store

    def _session_for(self, user: Identity) -> AuthResult:
        token = self.jwt.issue(user)
        claim = self.jwt.validate(token)
        return AuthResult(
            user=user,
            token=token,
            expires_at=claim.exp,
            max_age=self.jwt.max_age,
        )

    def register(self, email: Optional[str], password: Optional[str]) -> AuthResult:
        """
        Register a new identity and open a session for it.

        Raises:
            ValidationError: Missing or malformed email/password
            DuplicateIdentityError: Email already registered
        """
        try:
            user = self.users.register(email, password)
        except (ValidationError, DuplicateIdentityError) as e:
            logger.warning(f"Registration rejected: {e}")
            raise

        result = self._session_for(user)
        logger.info(f"User registered: {user.email}")
        return result

    def login(self, email: Optional[str], password: Optional[str]) -> AuthResult:
        """
        Login with email and password.

        Raises:
            AuthenticationFailure: Unknown email or wrong password
        """
        if not email or not password:
            logger.warning("Login rejected: missing email or password")
            raise AuthenticationFailure("Missing email or password")

        try:
            user = self.users.verify_credentials(email, password)
        except AuthenticationFailure as e:
            logger.warning(f"Login rejected: {e}")
            raise

        user = self.users.record_login(user.email) or user

        result = self._session_for(user)
        logger.info(f"User logged in: {user.email}")
        return result

    def authenticate(self, token: Optional[str]) -> SessionClaim:
        """
        Validate a session token without touching the store.

        Raises:
            TokenMissingError, TokenExpiredError, TokenInvalidError
        """
        try:
            return self.jwt.validate(token)
        except TokenError as e:
            logger.info(f"Session rejected ({type(e).__name__}): {e}")
            raise

    def get_current_user(self, token: Optional[str]) -> Identity:
        """
        Get the identity behind a session token.

        Raises:
            TokenError: Token is missing, expired, invalid, or its
                identity no longer exists
        """
        claim = self.authenticate(token)
        user = self.users.get_by_id(claim.user_id)
        if user is None:
            logger.warning(f"Session for unknown user {claim.user_id}")
            raise TokenInvalidError(f"No identity for user {claim.user_id}")
        return user

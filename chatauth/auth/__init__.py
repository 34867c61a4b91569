"""
Authentication module for the chat service.

Email/password identities with bcrypt hashes, and stateless JWT
session tokens carried in a cookie.
"""

from .exceptions import (
    AuthError,
    ValidationError,
    DuplicateIdentityError,
    AuthenticationFailure,
    TokenError,
    TokenMissingError,
    TokenExpiredError,
    TokenInvalidError,
    ConfigurationError,
)
from .jwt_handler import JWTHandler, SessionClaim
from .password import PasswordHandler, normalize_email
from .users import CredentialStore, Identity

__all__ = [
    "JWTHandler",
    "SessionClaim",
    "PasswordHandler",
    "normalize_email",
    "CredentialStore",
    "Identity",
    # Errors
    "AuthError",
    "ValidationError",
    "DuplicateIdentityError",
    "AuthenticationFailure",
    "TokenError",
    "TokenMissingError",
    "TokenExpiredError",
    "TokenInvalidError",
    "ConfigurationError",
]

"""
Authentication errors.

Every error keeps its precise reason in the exception message for logs,
and exposes a ``public_detail`` that is safe to return to the client.
"""


class AuthError(Exception):
    """Base class for credential and session errors."""

    status_code = 400
    public_detail = "Authentication error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.public_detail)


class ValidationError(AuthError):
    """Malformed registration input. The reason is shown to the user."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.public_detail = message


class DuplicateIdentityError(AuthError):
    """An identity with this email already exists."""

    status_code = 409
    public_detail = "Email is already registered"


class AuthenticationFailure(AuthError):
    """Unknown email or wrong password, deliberately indistinguishable."""

    status_code = 401
    public_detail = "Invalid email or password"


class TokenError(AuthError):
    """Base class for session token failures."""

    status_code = 401
    public_detail = "Session expired, please log in again"


class TokenMissingError(TokenError):
    """No session token was presented."""


class TokenExpiredError(TokenError):
    """Token signature is valid but its validity window has passed."""


class TokenInvalidError(TokenError):
    """Token is malformed or its signature does not verify."""


class ConfigurationError(AuthError):
    """Auth cannot be served with the current configuration."""

    status_code = 500
    public_detail = "Authentication is not configured"

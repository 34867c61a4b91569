"""
Session cookie helpers.

The cookie lifetime matches the token lifetime. Cross-site delivery
is never allowed.
"""

import logging

from fastapi import Response

from chatauth.config import CookieConfig
from chatauth.auth import ConfigurationError

logger = logging.getLogger(__name__)

ALLOWED_SAMESITE = ("strict", "lax")


def check_cookie_config(cookie: CookieConfig):
    """Reject cookie settings that would leak the session cross-site."""
    if cookie.samesite not in ALLOWED_SAMESITE:
        raise ConfigurationError(
            f"SESSION_COOKIE_SAMESITE must be one of {ALLOWED_SAMESITE}, got {cookie.samesite!r}"
        )
    if not cookie.name:
        raise ConfigurationError("SESSION_COOKIE_NAME cannot be empty")
    if not cookie.secure:
        logger.warning(
            "Session cookie Secure flag is off. "
            "Set SESSION_COOKIE_SECURE=true in production!"
        )


def set_session_cookie(response: Response, token: str, max_age: int, cookie: CookieConfig):
    """Write the session token into the response."""
    response.set_cookie(
        key=cookie.name,
        value=token,
        max_age=max_age,
        path=cookie.path,
        secure=cookie.secure,
        httponly=cookie.httponly,
        samesite=cookie.samesite,
    )


def clear_session_cookie(response: Response, cookie: CookieConfig):
    """Tell the client to drop the session cookie."""
    response.delete_cookie(
        key=cookie.name,
        path=cookie.path,
        secure=cookie.secure,
        httponly=cookie.httponly,
        samesite=cookie.samesite,
    )

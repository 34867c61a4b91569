"""
Services layer for the chat auth core.

Components are built once here and handed to the API layer.
"""

from typing import Optional

from ..config import Config, load_config
from ..auth import JWTHandler, CredentialStore, PasswordHandler
from .user_auth_service import UserAuthService, AuthResult

__all__ = [
    "UserAuthService",
    "AuthResult",
    "create_user_auth_service",
]


def create_user_auth_service(config: Optional[Config] = None) -> UserAuthService:
    """
    Factory function to wire the auth service from configuration.

    Args:
        config: Optional Config (loads from env if not provided)

    Returns:
        UserAuthService with its store and token handler

    Raises:
        ConfigurationError: If the signing secret is unusable
    """
    cfg = config or load_config()

    jwt_handler = JWTHandler(
        secret_key=cfg.auth.jwt_secret,
        max_age=cfg.auth.token_max_age_seconds,
    )
    user_store = CredentialStore(
        file_path=cfg.auth.users_file,
        password_handler=PasswordHandler(rounds=cfg.auth.bcrypt_rounds),
    )

    return UserAuthService(jwt_handler, user_store)

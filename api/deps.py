"""
API dependencies.

Provides dependency injection for services and session authentication.
"""

import logging
from typing import Optional, Annotated
from dataclasses import dataclass

from fastapi import Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from chatauth.config import load_config, Config
from chatauth.services import UserAuthService, create_user_auth_service
from chatauth.auth import SessionClaim, Identity

from .cookies import check_cookie_config

logger = logging.getLogger(__name__)

# Fallback for non-browser clients; the cookie is the primary carrier
security = HTTPBearer(auto_error=False)


@dataclass
class Services:
    """Container for all services."""
    config: Config
    user_auth: UserAuthService


# Global services instance (singleton)
_services: Optional[Services] = None


def create_services(config: Optional[Config] = None) -> Services:
    """
    Build the services container.

    Raises:
        ConfigurationError: If auth cannot be configured
    """
    cfg = config or load_config()
    check_cookie_config(cfg.cookie)
    return Services(config=cfg, user_auth=create_user_auth_service(cfg))


def get_services() -> Services:
    """
    Get or create the services singleton.

    This initializes all services on first call.
    """
    global _services

    if _services is None:
        logger.info("Initializing services...")
        _services = create_services()
        logger.info("Services initialized successfully")

    return _services


def close_services():
    """Drop the services singleton."""
    global _services
    if _services:
        _services = None
        logger.info("Services closed")


# Dependency for getting services
def services_dep() -> Services:
    """FastAPI dependency for services."""
    return get_services()


ServicesDep = Annotated[Services, Depends(services_dep)]


def read_session_token(
    request: Request,
    services: Services,
    credentials: Optional[HTTPAuthorizationCredentials] = None
) -> Optional[str]:
    """Session token from the cookie, else from a bearer header."""
    token = request.cookies.get(services.config.cookie.name)
    if token:
        return token
    if credentials is not None:
        return credentials.credentials
    return None


# Authentication dependencies

async def get_session_claim(
    request: Request,
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    services: ServicesDep
) -> SessionClaim:
    """
    Validate the session token (required).

    Token errors propagate and are answered with 401.
    """
    token = read_session_token(request, services, credentials)
    return services.user_auth.authenticate(token)


async def get_current_user(
    request: Request,
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    services: ServicesDep
) -> Identity:
    """
    Get the identity behind the session token (required).

    Token errors propagate and are answered with 401.
    """
    token = read_session_token(request, services, credentials)
    # Store lookup reads the users file
    return await run_in_threadpool(services.user_auth.get_current_user, token)


# Type aliases for dependencies
CurrentSession = Annotated[SessionClaim, Depends(get_session_claim)]
CurrentUser = Annotated[Identity, Depends(get_current_user)]

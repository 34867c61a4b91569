"""
Authentication endpoints.

Handles signup, login, logout and session inspection.
The session token travels in an HTTP-only cookie.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Response, status
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, Field

from ..deps import ServicesDep, CurrentUser, CurrentSession
from ..cookies import set_session_cookie, clear_session_cookie

logger = logging.getLogger(__name__)

router = APIRouter()


# Request/Response models

class CredentialsRequest(BaseModel):
    """Signup or login request."""
    # Optional so that missing fields reach the service as a 400
    email: Optional[str] = Field(None, description="Email address")
    password: Optional[str] = Field(None, description="Password")


class UserSummary(BaseModel):
    """Identity summary returned after signup/login."""
    id: str
    email: str
    profile_setup: bool


class AuthResponse(BaseModel):
    """Signup/login response."""
    user: UserSummary


class UserResponse(BaseModel):
    """Current user info response."""
    id: str
    email: str
    profile_setup: bool
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    image: Optional[str] = None
    color: Optional[int] = None


class SessionResponse(BaseModel):
    """Current session claim."""
    user_id: str
    email: str
    issued_at: int
    expires_at: int


# Endpoints

@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def signup(request: CredentialsRequest, response: Response, services: ServicesDep):
    """
    Register a new user.

    Creates the account and sets the session cookie.
    """
    # bcrypt is deliberately slow, keep it off the event loop
    result = await run_in_threadpool(
        services.user_auth.register, request.email, request.password
    )

    set_session_cookie(response, result.token, result.max_age, services.config.cookie)
    return AuthResponse(user=UserSummary(**result.user.summary()))


@router.post("/login", response_model=AuthResponse)
async def login(request: CredentialsRequest, response: Response, services: ServicesDep):
    """
    Login with email and password.

    Sets the session cookie on success.
    """
    result = await run_in_threadpool(
        services.user_auth.login, request.email, request.password
    )

    set_session_cookie(response, result.token, result.max_age, services.config.cookie)
    return AuthResponse(user=UserSummary(**result.user.summary()))


@router.post("/logout")
async def logout(response: Response, services: ServicesDep):
    """
    Clear the session cookie.

    The token itself stays valid until it expires.
    """
    clear_session_cookie(response, services.config.cookie)
    return {"success": True}


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user: CurrentUser):
    """
    Get current authenticated user info.

    Requires a valid session.
    """
    return UserResponse(
        id=current_user.user_id,
        email=current_user.email,
        profile_setup=current_user.profile_setup,
        first_name=current_user.first_name,
        last_name=current_user.last_name,
        image=current_user.image,
        color=current_user.color
    )


@router.get("/session", response_model=SessionResponse)
async def get_session(session: CurrentSession):
    """Return the claim carried by the session token."""
    return SessionResponse(
        user_id=session.user_id,
        email=session.email,
        issued_at=session.iat,
        expires_at=session.exp
    )

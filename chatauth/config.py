"""Configuration module for the chat auth service."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List
from dotenv import load_dotenv

load_dotenv()

# 3 days, matches the session cookie lifetime
DEFAULT_TOKEN_MAX_AGE_SECONDS = 60 * 60 * 24 * 3

DEFAULT_USERS_FILE = Path(__file__).parent.parent / "data" / "users.json"


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        # chatauth.auth imports this module
        from .auth.exceptions import ConfigurationError
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from None


@dataclass
class AuthConfig:
    """Credential store and session token settings."""
    jwt_secret: str = field(default_factory=lambda: os.getenv("JWT_KEY") or os.getenv("JWT_SECRET_KEY", ""))
    token_max_age_seconds: int = field(default_factory=lambda: _env_int("TOKEN_MAX_AGE_SECONDS", DEFAULT_TOKEN_MAX_AGE_SECONDS))
    bcrypt_rounds: int = field(default_factory=lambda: _env_int("BCRYPT_ROUNDS", 12))
    users_file: Path = field(default_factory=lambda: Path(os.getenv("USERS_FILE", str(DEFAULT_USERS_FILE))))


@dataclass
class CookieConfig:
    """Session cookie attributes."""
    name: str = field(default_factory=lambda: os.getenv("SESSION_COOKIE_NAME", "jwt"))
    secure: bool = field(default_factory=lambda: _env_bool("SESSION_COOKIE_SECURE", "true"))
    httponly: bool = field(default_factory=lambda: _env_bool("SESSION_COOKIE_HTTPONLY", "true"))
    # "strict" or "lax"; cross-site delivery is never allowed
    samesite: str = field(default_factory=lambda: os.getenv("SESSION_COOKIE_SAMESITE", "strict").lower())
    path: str = "/"


@dataclass
class ServerConfig:
    """HTTP server settings."""
    origins: List[str] = field(default_factory=lambda: [o.strip() for o in os.getenv("ORIGIN", "").split(",") if o.strip()])
    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: _env_int("PORT", 3001))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())


@dataclass
class Config:
    """Main configuration container."""
    auth: AuthConfig = field(default_factory=AuthConfig)
    cookie: CookieConfig = field(default_factory=CookieConfig)
    server: ServerConfig = field(default_factory=ServerConfig)


def load_config() -> Config:
    """Load configuration from environment variables."""
    return Config()

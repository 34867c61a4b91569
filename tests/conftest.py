"""
Pytest configuration and shared fixtures.

This module provides common fixtures for testing:
- Session tokens with a controllable clock
- Credential store on a temporary file
- Services container and API client
"""

import os
import sys
import json
import tempfile
from pathlib import Path
from typing import Generator
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Set test environment variables before imports
os.environ["JWT_KEY"] = "test_jwt_secret_key_for_testing_only_32bytes!"
os.environ["BCRYPT_ROUNDS"] = "4"

from chatauth.config import Config, AuthConfig, CookieConfig, ServerConfig
from chatauth.auth import JWTHandler, CredentialStore, Identity, PasswordHandler
from chatauth.services import UserAuthService


# =============================================================================
# Configuration
# =============================================================================

@pytest.fixture(scope="session")
def test_config():
    """Test configuration values."""
    return {
        "jwt_secret": "test_jwt_secret_key_for_testing_only_32bytes!",
        "test_email": "alice@example.com",
        "test_password": "Secr3t!",
        "max_age": 60 * 60 * 24 * 3,
        "bcrypt_rounds": 4,
    }


class FakeClock:
    """Settable stand-in for time.time."""

    def __init__(self, now: float = 1_700_000_000):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    """Clock shared by the token handler under test."""
    return FakeClock()


# =============================================================================
# JWT Fixtures
# =============================================================================

@pytest.fixture
def jwt_handler(test_config, clock) -> JWTHandler:
    """Create a JWTHandler with test secret and fake clock."""
    return JWTHandler(
        secret_key=test_config["jwt_secret"],
        max_age=test_config["max_age"],
        clock=clock
    )


@pytest.fixture
def identity(test_config) -> Identity:
    """Identity that is not stored anywhere."""
    return Identity(
        user_id="test-user-id-123",
        email=test_config["test_email"],
        password_hash="$2b$04$notarealhashnotarealhashnotarealhashnotarealhashnot"
    )


@pytest.fixture
def valid_token(jwt_handler, identity) -> str:
    """Create a valid session token."""
    return jwt_handler.issue(identity)


# =============================================================================
# Credential Store Fixtures
# =============================================================================

@pytest.fixture
def temp_user_file() -> Generator[Path, None, None]:
    """Create a temporary file for identity storage."""
    with tempfile.TemporaryDirectory() as temp_dir:
        temp_path = Path(temp_dir) / "users.json"
        temp_path.write_text(json.dumps({}))
        yield temp_path


@pytest.fixture
def password_handler(test_config) -> PasswordHandler:
    """Create a fast PasswordHandler."""
    return PasswordHandler(rounds=test_config["bcrypt_rounds"])


@pytest.fixture
def user_store(temp_user_file, password_handler) -> CredentialStore:
    """Create a CredentialStore with temporary file."""
    return CredentialStore(file_path=temp_user_file, password_handler=password_handler)


@pytest.fixture
def sample_user(user_store, test_config) -> Identity:
    """Register a sample identity in the store."""
    return user_store.register(
        email=test_config["test_email"],
        password=test_config["test_password"]
    )


@pytest.fixture
def user_auth(jwt_handler, user_store) -> UserAuthService:
    """Auth service over the test store and handler."""
    return UserAuthService(jwt_handler, user_store)


# =============================================================================
# Services and API Client
# =============================================================================

@pytest.fixture
def app_config(test_config, temp_user_file) -> Config:
    """Config pointing at the temporary store."""
    return Config(
        auth=AuthConfig(
            jwt_secret=test_config["jwt_secret"],
            token_max_age_seconds=test_config["max_age"],
            bcrypt_rounds=test_config["bcrypt_rounds"],
            users_file=temp_user_file
        ),
        cookie=CookieConfig(name="jwt", secure=True, httponly=True, samesite="strict"),
        server=ServerConfig()
    )


@pytest.fixture
def services(app_config, user_auth):
    """Services container built from test objects."""
    from api.deps import Services
    return Services(config=app_config, user_auth=user_auth)


@pytest.fixture
def api_app():
    """Create FastAPI app for testing."""
    from api.main import app
    return app


@pytest.fixture
def api_client(api_app, services) -> Generator[TestClient, None, None]:
    """
    Test client over https so Secure cookies are sent back.

    The services singleton is replaced with the test container.
    """
    with patch("api.deps.get_services", return_value=services):
        yield TestClient(api_app, base_url="https://testserver")


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as unit test"
    )
    config.addinivalue_line(
        "markers", "api: mark test as API endpoint test"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )

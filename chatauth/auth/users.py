"""
Identity storage.

Stores identities in a JSON file keyed by normalized email.
Writes go through a single lock and an atomic file replace, so the
email key acts as the unique index.
"""

import os
import json
import logging
import tempfile
import threading
import uuid
from pathlib import Path
from datetime import datetime, timezone
from typing import Optional, List
from dataclasses import dataclass, asdict, field

from ..config import DEFAULT_USERS_FILE
from .exceptions import ValidationError, DuplicateIdentityError, AuthenticationFailure
from .password import PasswordHandler, normalize_email

logger = logging.getLogger(__name__)


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class Identity:
    """Registered account."""
    user_id: str
    email: str  # Normalized email (primary identifier)
    password_hash: str
    profile_setup: bool = False
    # Profile fields, owned by the profile service
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    image: Optional[str] = None
    color: Optional[int] = None
    created_at: str = field(default_factory=_utcnow)
    updated_at: str = field(default_factory=_utcnow)
    last_login: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "Identity":
        return cls(
            user_id=data["user_id"],
            email=data["email"],
            password_hash=data["password_hash"],
            profile_setup=data.get("profile_setup", False),
            first_name=data.get("first_name"),
            last_name=data.get("last_name"),
            image=data.get("image"),
            color=data.get("color"),
            created_at=data.get("created_at", _utcnow()),
            updated_at=data.get("updated_at", _utcnow()),
            last_login=data.get("last_login"),
        )

    def summary(self) -> dict:
        """Public view returned by signup and login."""
        return {
            "id": self.user_id,
            "email": self.email,
            "profile_setup": self.profile_setup,
        }


class CredentialStore:
    """
    JSON-based identity storage.

    Thread-safe: every read-modify-write holds the store lock.
    Password hashing happens before the lock is taken.
    """

    def __init__(
        self,
        file_path: Optional[Path] = None,
        password_handler: Optional[PasswordHandler] = None
    ):
        """
        Initialize credential store.

        Args:
            file_path: Path to users JSON file (default: data/users.json)
            password_handler: Hasher to use (default: bcrypt, 12 rounds)
        """
        self.file_path = Path(file_path or DEFAULT_USERS_FILE)
        self.password_handler = password_handler or PasswordHandler()
        self._lock = threading.RLock()
        self._ensure_file()

    def _ensure_file(self):
        """Ensure the storage file and directory exist."""
        self.file_path.parent.mkdir(parents=True, exist_ok=True)
        with self._lock:
            if not self.file_path.exists():
                self._save_all({})

    def _load_all(self) -> dict[str, dict]:
        """Load all identities from file."""
        try:
            with open(self.file_path, "r", encoding="utf-8") as f:
                return json.load(f)
        except FileNotFoundError:
            return {}

    def _save_all(self, users: dict[str, dict]):
        """Write all identities, replacing the file atomically."""
        fd, tmp_path = tempfile.mkstemp(
            dir=self.file_path.parent, prefix=".users-", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(users, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.file_path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def _insert(self, identity: Identity):
        """Insert if the email key is free; the uniqueness constraint."""
        with self._lock:
            users = self._load_all()
            if identity.email in users:
                raise DuplicateIdentityError(
                    f"Identity with email {identity.email} already exists"
                )
            users[identity.email] = identity.to_dict()
            self._save_all(users)

    def register(self, email: str, password: str) -> Identity:
        """
        Create a new identity.

        Args:
            email: Email address (will be normalized)
            password: Plain text password, hashed before storage

        Returns:
            Created Identity with profile_setup unset

        Raises:
            ValidationError: If email or password is missing or invalid
            DuplicateIdentityError: If the email is already registered
        """
        if not email or not password:
            raise ValidationError("Email and password are required")

        normalized = normalize_email(email)
        if not normalized:
            raise ValidationError("Invalid email address")

        password_hash = self.password_handler.hash(password)

        identity = Identity(
            user_id=str(uuid.uuid4()),
            email=normalized,
            password_hash=password_hash,
        )
        self._insert(identity)

        logger.info(f"Created identity: {normalized}")
        return identity

    def verify_credentials(self, email: str, password: str) -> Identity:
        """
        Check an email/password pair.

        Args:
            email: Email address
            password: Password to verify

        Returns:
            The matching Identity

        Raises:
            AuthenticationFailure: Unknown email or wrong password
        """
        identity = self.get_by_email(email)
        if identity is None:
            self.password_handler.verify_dummy(password)
            raise AuthenticationFailure(f"No identity for email {email!r}")

        if not self.password_handler.verify(password, identity.password_hash):
            raise AuthenticationFailure(f"Wrong password for {identity.email}")

        return identity

    def get_by_email(self, email: str) -> Optional[Identity]:
        """
        Get identity by email.

        Returns:
            Identity if found, None otherwise
        """
        normalized = normalize_email(email)
        if not normalized:
            return None

        data = self._load_all().get(normalized)
        if data:
            return Identity.from_dict(data)
        return None

    def get_by_id(self, user_id: str) -> Optional[Identity]:
        """
        Get identity by user ID.

        Returns:
            Identity if found, None otherwise
        """
        for data in self._load_all().values():
            if data.get("user_id") == user_id:
                return Identity.from_dict(data)
        return None

    def record_login(self, email: str) -> Optional[Identity]:
        """
        Stamp the last login time.

        Returns:
            Updated Identity or None if not found
        """
        normalized = normalize_email(email)
        if not normalized:
            return None

        with self._lock:
            users = self._load_all()
            data = users.get(normalized)
            if data is None:
                return None

            now = _utcnow()
            data["last_login"] = now
            data["updated_at"] = now
            self._save_all(users)

        logger.debug(f"Recorded login: {normalized}")
        return Identity.from_dict(data)

    def list_users(self) -> List[Identity]:
        """List all identities."""
        return [Identity.from_dict(data) for data in self._load_all().values()]

    def user_exists(self, email: str) -> bool:
        """Check if an identity exists for this email."""
        return self.get_by_email(email) is not None

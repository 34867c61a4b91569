#!/usr/bin/env python3
"""
Script to create a new user interactively.

Usage:
    python scripts/create_user.py

    # Or with email as argument:
    python scripts/create_user.py alice@example.com
"""

import argparse
import getpass
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from chatauth.config import load_config
from chatauth.auth import (
    CredentialStore,
    PasswordHandler,
    ValidationError,
    DuplicateIdentityError,
)


def main():
    parser = argparse.ArgumentParser(description="Create a new user")
    parser.add_argument("email", nargs="?", help="Email address (e.g., alice@example.com)")
    parser.add_argument("--users-file", "-f", type=Path, help="Path to users JSON file")
    args = parser.parse_args()

    config = load_config()
    store = CredentialStore(
        file_path=args.users_file or config.auth.users_file,
        password_handler=PasswordHandler(rounds=config.auth.bcrypt_rounds)
    )

    # Get email
    email = args.email
    if not email:
        email = input("Email: ").strip()

    if not email:
        print("❌ Email is required!")
        sys.exit(1)

    password = getpass.getpass("Enter password: ")
    confirm = getpass.getpass("Confirm password: ")

    if password != confirm:
        print("❌ Passwords do not match!")
        sys.exit(1)

    try:
        user = store.register(email, password)
    except DuplicateIdentityError:
        print(f"❌ User with email {email} already exists!")
        sys.exit(1)
    except ValidationError as e:
        print(f"❌ {e}")
        sys.exit(1)

    print()
    print("✅ User created successfully!")
    print(f"   Email: {user.email}")
    print(f"   User ID: {user.user_id}")


if __name__ == "__main__":
    main()

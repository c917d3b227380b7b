"""Provision a user and print a bearer token for it.

Users are owned by an external identity service in production. This script
covers local setups and first deployments: it inserts one user row and
prints a signed access token so the API can be called right away.

Usage:
    docflow-seed-user
    python -m docflow.seed

Environment Variables:
    DATABASE_URL: SQLAlchemy connection string
    JWT_SECRET: Bearer token signing key
    SEED_USERNAME: Username for the new user (default: admin)
    SEED_NAME: Display name (default: System Administrator)
    SEED_ROLE: USER or ADMIN (default: ADMIN)
"""

import os
import sys

from sqlalchemy.orm import Session

from .auth.jwt import create_access_token
from .auth.roles import UserRole
from .database import get_db_session
from .models.user import User


def provision_user(session: Session, username: str, name: str, role: str) -> User:
    """Insert a user, refusing duplicate usernames.

    Raises:
        ValueError: If the role is unknown or the username is taken
    """
    try:
        role = UserRole(role.upper())
    except ValueError:
        raise ValueError(f"Invalid role: {role}. Expected USER or ADMIN")

    username = username.strip()
    if not username:
        raise ValueError("Username is required")

    existing_user = session.query(User).filter(User.username == username).first()
    if existing_user:
        raise ValueError(f"User {username} already exists")

    user = User(username=username, name=name.strip() or username, role=role)
    session.add(user)
    session.flush()
    return user


def main():
    """Create the user described by the SEED_* environment variables."""
    username = os.getenv("SEED_USERNAME", "admin")
    name = os.getenv("SEED_NAME", "System Administrator")
    role = os.getenv("SEED_ROLE", UserRole.ADMIN.value)

    try:
        with get_db_session() as session:
            user = provision_user(session, username, name, role)
            user_id, user_role = user.id, UserRole(user.role)
    except ValueError as e:
        print(f"ERROR: {e}")
        sys.exit(1)

    print("SUCCESS: User created")
    print(f"  ID:       {user_id}")
    print(f"  Username: {username}")
    print(f"  Role:     {user_role.value}")
    print(f"  Token:    {create_access_token(user_id, username, user_role)}")


if __name__ == "__main__":
    main()

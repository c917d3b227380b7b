"""Tests for the user provisioning script"""

import pytest

from docflow.auth.jwt import decode_token, create_access_token
from docflow.auth.roles import UserRole
from docflow.models import User
from docflow.seed import provision_user


def test_provision_admin(db_session):
    user = provision_user(db_session, "root", "Root Admin", "admin")
    db_session.commit()

    stored = db_session.query(User).filter(User.username == "root").one()
    assert stored.id == user.id
    assert UserRole(stored.role) == UserRole.ADMIN
    assert stored.name == "Root Admin"


def test_provision_defaults_name_to_username(db_session):
    user = provision_user(db_session, "  jdoe ", "   ", "USER")

    assert user.username == "jdoe"
    assert user.name == "jdoe"


def test_provision_rejects_duplicate_username(db_session, make_user):
    make_user("jdoe")

    with pytest.raises(ValueError, match="already exists"):
        provision_user(db_session, "jdoe", "John Doe", "USER")


def test_provision_rejects_unknown_role(db_session):
    with pytest.raises(ValueError, match="Invalid role"):
        provision_user(db_session, "jdoe", "John Doe", "SUPERUSER")


def test_provisioned_user_token_round_trips(db_session):
    user = provision_user(db_session, "jdoe", "John Doe", "USER")

    payload = decode_token(create_access_token(user.id, user.username, UserRole(user.role)))

    assert payload["sub"] == str(user.id)
    assert payload["role"] == "USER"

"""Unit tests for the user entity package.

The domain model, database table and repository are colocated in
``src.accounts.entities.core.user``.
"""

from uuid import UUID

import pytest
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError

from src.accounts.entities.core.user import Role, User, UserTable


class TestUser:
    """Test the User domain entity."""

    def test_user_creation_with_defaults(self):
        user = User(name="Ana", email="ana@x.com")

        UUID(user.id)  # Raises ValueError if invalid
        assert user.role is Role.USER
        assert user.phone is None
        assert user.address is None
        assert user.created_at.tzinfo is not None

    def test_invalid_fields_are_rejected(self):
        with pytest.raises(ValidationError):
            User(name="Ana", email="not-an-email")
        with pytest.raises(ValidationError):
            User(name="Ana", email="ana@x.com", phone="abc")
        with pytest.raises(ValidationError):
            User(name="Ana", email="ana@x.com", address="abc")
        with pytest.raises(ValidationError):
            User(name="", email="ana@x.com")

    def test_equality_ignores_timestamps(self):
        user = User(id="u-1", name="Ana", email="ana@x.com")
        later = user.model_copy(update={"updated_at": user.updated_at.replace(year=2099)})

        assert user == later
        assert hash(user) == hash(later)
        assert user != user.model_copy(update={"role": Role.ADMIN})


class TestUserRepository:
    def test_create_and_get(self, user_repository):
        created = user_repository.create(
            User(name="Ana", email="ana@x.com", phone="0612345678")
        )

        fetched = user_repository.get(created.id)
        assert fetched == created
        assert fetched.phone == "0612345678"
        assert user_repository.get("missing") is None

    def test_role_is_stored_as_text(self, user_repository, session):
        created = user_repository.create(
            User(name="Root", email="root@x.com", role=Role.ADMIN)
        )

        row = session.get(UserTable, created.id)
        assert row.role == "admin"
        assert user_repository.get(created.id).role is Role.ADMIN

    def test_get_by_email_and_exists(self, user_repository):
        ana = user_repository.create(User(name="Ana", email="ana@x.com"))

        assert user_repository.get_by_email("ana@x.com") == ana
        assert user_repository.get_by_email("bob@x.com") is None
        assert user_repository.exists_by_email("ana@x.com")
        assert not user_repository.exists_by_email("ana@x.com", exclude_id=ana.id)

    def test_email_is_unique(self, user_repository):
        user_repository.create(User(name="Ana", email="ana@x.com"))

        with pytest.raises(IntegrityError):
            user_repository.create(User(name="Other Ana", email="ana@x.com"))

    def test_update_is_a_sparse_merge(self, user_repository):
        ana = user_repository.create(
            User(name="Ana", email="ana@x.com", phone="0612345678")
        )

        updated = user_repository.update(ana.id, {"address": "123 Main Street"})

        assert updated.address == "123 Main Street"
        assert updated.name == "Ana"
        assert updated.email == "ana@x.com"
        assert updated.phone == "0612345678"
        assert updated.updated_at >= ana.updated_at

    def test_update_missing_user(self, user_repository):
        assert user_repository.update("missing", {"name": "Bob"}) is None

    def test_update_revalidates_merged_user(self, user_repository):
        ana = user_repository.create(User(name="Ana", email="ana@x.com"))

        with pytest.raises(ValidationError):
            user_repository.update(ana.id, {"phone": "not a phone"})

        assert user_repository.get(ana.id).phone is None

    def test_list_all(self, user_repository):
        user_repository.create(User(name="Ana", email="ana@x.com"))
        user_repository.create(User(name="Bob", email="bob@x.com"))

        assert {u.email for u in user_repository.list_all()} == {"ana@x.com", "bob@x.com"}

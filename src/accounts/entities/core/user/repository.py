"""User data-access layer."""

from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any

from sqlmodel import Session, select

from .entity import User
from .table import UserTable


def _row_values(user: User) -> dict[str, Any]:
    values = user.model_dump()
    values["role"] = user.role.value
    return values


class UserRepository:
    """Data-access layer for users.

    Methods flush but never commit; the caller owns the transaction.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def _to_entity(self, row: UserTable) -> User:
        return User.model_validate(row, from_attributes=True)

    def get(self, user_id: str) -> User | None:
        row = self._session.get(UserTable, user_id)
        if row is None:
            return None
        return self._to_entity(row)

    def get_by_email(self, email: str) -> User | None:
        statement = select(UserTable).where(UserTable.email == email)
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return self._to_entity(row)

    def exists_by_email(self, email: str, exclude_id: str | None = None) -> bool:
        statement = select(UserTable.id).where(UserTable.email == email)
        if exclude_id is not None:
            statement = statement.where(UserTable.id != exclude_id)
        return self._session.exec(statement).first() is not None

    def create(self, user: User) -> User:
        row = UserTable.model_validate(_row_values(user))
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return self._to_entity(row)

    def update(self, user_id: str, changes: dict[str, Any]) -> User | None:
        """Apply ``changes`` to the stored user and return the updated user.

        The merged document is validated as a whole before anything is
        written, so an update can never leave an invalid user behind.

        Returns:
            The post-update user, or None when no user has ``user_id``.

        Raises:
            pydantic.ValidationError: If the merged user is invalid.
        """
        row = self._session.get(UserTable, user_id)
        if row is None:
            return None

        current = self._to_entity(row)
        merged = User.model_validate(
            {**current.model_dump(), **changes, "updated_at": datetime.now(UTC)}
        )

        values = _row_values(merged)
        for field in (*changes, "updated_at"):
            setattr(row, field, values[field])

        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return self._to_entity(row)

    def list_all(self) -> Sequence[User]:
        rows = self._session.exec(select(UserTable).order_by(UserTable.created_at)).all()
        return [self._to_entity(row) for row in rows]

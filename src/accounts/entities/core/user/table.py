"""User database table model."""

from sqlmodel import Field

from src.accounts.entities.core._base import EntityTable


class UserTable(EntityTable, table=True):
    """Database persistence model for users.

    The unique index on ``email`` is what rejects the second of two
    concurrent registrations for the same address.
    """

    __tablename__ = "users"

    name: str
    email: str = Field(index=True, unique=True)
    phone: str | None = None
    address: str | None = None
    role: str = Field(default="user")

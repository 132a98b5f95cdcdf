"""User domain entity."""

from enum import StrEnum
from typing import Any

from pydantic import EmailStr, Field, field_validator

from src.accounts.core.validation import ADDRESS_MIN_LENGTH, check_min_length, check_phone
from src.accounts.entities.core._base import Entity


class Role(StrEnum):
    USER = "user"
    ADMIN = "admin"


class User(Entity):
    """User entity representing an account holder.

    It inherits from Entity to get an auto-generated UUID identifier. The
    validators here run on every create and update that goes through the
    repository, whatever the caller already checked.
    """

    name: str = Field(min_length=1, description="User's display name")
    email: EmailStr = Field(description="User's email address, unique across users")
    phone: str | None = Field(default=None, description="User's phone number")
    address: str | None = Field(default=None, description="User's postal address")
    role: Role = Field(default=Role.USER, description="Authorization role")

    @field_validator("phone")
    @classmethod
    def _phone_format(cls, value: str | None) -> str | None:
        return check_phone(value)

    @field_validator("address")
    @classmethod
    def _address_length(cls, value: str | None) -> str | None:
        return check_min_length(value, ADDRESS_MIN_LENGTH)

    def __eq__(self, other: Any) -> bool:
        """Compare users by business attributes, ignoring timestamps."""
        if not isinstance(other, User):
            return False

        return (
            self.id == other.id
            and self.name == other.name
            and self.email == other.email
            and self.phone == other.phone
            and self.address == other.address
            and self.role == other.role
        )

    def __hash__(self) -> int:
        """Hash based on business attributes, ignoring timestamps."""
        return hash((
            self.id,
            self.name,
            self.email,
            self.phone,
            self.address,
            self.role,
        ))

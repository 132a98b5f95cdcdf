"""Request validation for the user endpoints.

Request bodies are parsed into pydantic models. Every violation is collected
and reported together, in field declaration order, as ``FieldError`` items.
Fields the models do not declare (``role`` in particular) are dropped.
"""

import re
from typing import Any, TypeVar

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, EmailStr, ValidationError, field_validator

from src.accounts.core.errors import FieldError, ValidationFailed

_PHONE_SEPARATORS = re.compile(r"[\s\-.()]")
_PHONE_DIGITS = re.compile(r"^\+?\d{7,15}$")

NAME_MIN_LENGTH = 2
ADDRESS_MIN_LENGTH = 5


def is_phone_number(value: str) -> bool:
    """Accept international or local numbers with common separators.

    ``+1 (555) 010-2030`` and ``0612345678`` are accepted, ``12-34`` and
    ``call me`` are not.
    """
    compact = _PHONE_SEPARATORS.sub("", value)
    return bool(_PHONE_DIGITS.match(compact))


def normalize_email(value: Any) -> str | None:
    """Return ``value`` in the form ``EmailStr`` stores, or None if it is not an email.

    Lookups by email must go through this so that the string a user registered
    with finds the stored (domain-lowercased) address.
    """
    if not isinstance(value, str):
        return None
    try:
        return validate_email(value, check_deliverability=False).normalized
    except EmailNotValidError:
        return None


def check_phone(value: str | None) -> str | None:
    if value is not None and not is_phone_number(value):
        raise ValueError("invalid phone number")
    return value


def check_min_length(value: str | None, minimum: int) -> str | None:
    if value is not None and len(value) < minimum:
        raise ValueError(f"must be at least {minimum} characters")
    return value


class UserCreateRequest(BaseModel):
    """Body of ``POST /api/users``."""

    model_config = ConfigDict(extra="ignore")

    name: str
    email: EmailStr
    phone: str | None = None
    address: str | None = None

    @field_validator("name")
    @classmethod
    def _name_not_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value

    @field_validator("phone")
    @classmethod
    def _phone_format(cls, value: str | None) -> str | None:
        return check_phone(value)

    @field_validator("address")
    @classmethod
    def _address_length(cls, value: str | None) -> str | None:
        return check_min_length(value, ADDRESS_MIN_LENGTH)


class UserUpdateRequest(BaseModel):
    """Body of ``PUT /api/users/{id}``. Every field is optional.

    ``name`` and ``address`` are trimmed before their length is checked, and
    the trimmed value is what gets stored.
    """

    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    email: EmailStr | None = None
    phone: str | None = None
    address: str | None = None

    @field_validator("name", "address")
    @classmethod
    def _trim(cls, value: str | None) -> str | None:
        return value.strip() if value is not None else None

    @field_validator("name")
    @classmethod
    def _name_length(cls, value: str | None) -> str | None:
        return check_min_length(value, NAME_MIN_LENGTH)

    @field_validator("phone")
    @classmethod
    def _phone_format(cls, value: str | None) -> str | None:
        return check_phone(value)

    @field_validator("address")
    @classmethod
    def _address_length(cls, value: str | None) -> str | None:
        return check_min_length(value, ADDRESS_MIN_LENGTH)


CREATE_MESSAGES = {
    "name": "Name is required",
    "email": "Valid email is required",
    "phone": "Invalid phone number",
    "address": "Address must be at least 5 characters",
}

UPDATE_MESSAGES = {
    "name": "Name must be at least 2 characters",
    "email": "Invalid email format",
    "phone": "Invalid phone number",
    "address": "Address must be at least 5 characters",
}

ModelT = TypeVar("ModelT", bound=BaseModel)


def _to_field_errors(
    exc: ValidationError, payload: dict[str, Any], messages: dict[str, str]
) -> list[FieldError]:
    errors: list[FieldError] = []
    seen: set[str] = set()
    for err in exc.errors():
        field = str(err["loc"][0]) if err["loc"] else "body"
        # One entry per field, the first failing rule wins
        if field in seen:
            continue
        seen.add(field)
        errors.append(
            FieldError(
                field=field,
                message=messages.get(field, err["msg"]),
                value=payload.get(field),
            )
        )
    return errors


def collect_errors(
    model: type[ModelT], payload: Any, messages: dict[str, str]
) -> tuple[ModelT | None, list[FieldError]]:
    """Validate ``payload`` against ``model``.

    Returns the parsed model and an empty list, or ``None`` and every
    violation found.
    """
    if not isinstance(payload, dict):
        return None, [
            FieldError(field="body", message="Request body must be a JSON object")
        ]
    try:
        return model.model_validate(payload), []
    except ValidationError as exc:
        return None, _to_field_errors(exc, payload, messages)


def _validate(model: type[ModelT], payload: Any, messages: dict[str, str]) -> ModelT:
    parsed, errors = collect_errors(model, payload, messages)
    if errors:
        raise ValidationFailed(errors)
    assert parsed is not None
    return parsed


def validate_create(payload: Any) -> UserCreateRequest:
    """Apply the create rules, raising ``ValidationFailed`` with all violations."""
    return _validate(UserCreateRequest, payload, CREATE_MESSAGES)


def validate_update(payload: Any) -> UserUpdateRequest:
    """Apply the update rules, raising ``ValidationFailed`` with all violations."""
    return _validate(UserUpdateRequest, payload, UPDATE_MESSAGES)

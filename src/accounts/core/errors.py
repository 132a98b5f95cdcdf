"""Error taxonomy for the accounts API.

Every failure a request can end with is one of these exceptions. They derive
from FastAPI's ``HTTPException`` so the status code travels with the error,
and carry a stable ``error`` kind so clients can tell apart failures that
share a status code (a missing token and a bad token, for instance).
"""

from typing import Any

from fastapi import HTTPException, status
from pydantic import BaseModel


class FieldError(BaseModel):
    """A single rejected request field."""

    field: str
    message: str
    value: Any = None


class AccountsError(HTTPException):
    """Base class for all errors rendered by the API."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "internal_error"
    default_detail: str = "Server error"

    def __init__(self, detail: str | None = None, headers: dict[str, str] | None = None):
        super().__init__(
            status_code=self.status_code,
            detail=detail or self.default_detail,
            headers=headers,
        )

    def to_content(self) -> dict[str, Any]:
        return {"error": self.error, "detail": self.detail}


class ValidationFailed(AccountsError):
    """Request body failed validation; carries every violation found."""

    status_code = status.HTTP_400_BAD_REQUEST
    error = "validation_error"
    default_detail = "Request validation failed"

    def __init__(self, errors: list[FieldError], detail: str | None = None):
        super().__init__(detail)
        self.errors = errors

    def to_content(self) -> dict[str, Any]:
        content = super().to_content()
        content["errors"] = [e.model_dump(mode="json") for e in self.errors]
        return content


class DuplicateResource(AccountsError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "duplicate_resource"
    default_detail = "Resource already exists"


class Unauthenticated(AccountsError):
    """No bearer token was supplied."""

    status_code = status.HTTP_401_UNAUTHORIZED
    error = "unauthenticated"
    default_detail = "Access denied. Token missing."

    def __init__(self, detail: str | None = None):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class InvalidCredential(AccountsError):
    """A bearer token was supplied but is malformed, forged or expired."""

    status_code = status.HTTP_403_FORBIDDEN
    error = "invalid_credential"
    default_detail = "Invalid or expired token."


class Unauthorized(AccountsError):
    """Authenticated, but not allowed to act on the target resource."""

    status_code = status.HTTP_403_FORBIDDEN
    error = "unauthorized"
    default_detail = "Unauthorized to update this profile."


class NotFound(AccountsError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "not_found"
    default_detail = "User not found"


class InternalError(AccountsError):
    """Unexpected store or runtime failure. The detail is always generic."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error = "internal_error"
    default_detail = "Server error"

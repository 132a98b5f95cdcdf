"""User account endpoints."""

from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from src.accounts.api.http.deps import (
    get_current_claims,
    get_user_management_service,
    read_json_body,
)
from src.accounts.core.models.claims import TokenClaims
from src.accounts.core.services import UserManagementService
from src.accounts.core.validation import validate_create, validate_update
from src.accounts.entities.core.user import Role, User

router = APIRouter(prefix="/users", tags=["users"])


class UserResponse(BaseModel):
    """Public view of a user.

    Only the fields declared here are ever serialized, so credential-like
    fields added to the entity later stay out of responses.
    """

    id: str
    name: str
    email: str
    phone: str | None = None
    address: str | None = None
    role: Role
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls.model_validate(user.model_dump())


class UserEnvelope(BaseModel):
    message: str
    user: UserResponse


class LoginResponse(BaseModel):
    message: str
    token: str


@router.post("", response_model=UserEnvelope, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: Any = Depends(read_json_body),
    service: UserManagementService = Depends(get_user_management_service),
) -> UserEnvelope:
    """Register a new user. Any ``role`` in the body is ignored."""
    request = validate_create(payload)
    user = service.create_user(request)
    return UserEnvelope(
        message="User created successfully", user=UserResponse.from_user(user)
    )


@router.post("/login", response_model=LoginResponse)
def login(
    payload: Any = Depends(read_json_body),
    service: UserManagementService = Depends(get_user_management_service),
) -> LoginResponse:
    """Issue a one-hour access token for a registered email.

    No password is checked: the email alone identifies the account.
    """
    email = payload.get("email") if isinstance(payload, dict) else None
    token = service.login(email)
    return LoginResponse(message="Login successful", token=token)


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: str,
    claims: TokenClaims = Depends(get_current_claims),
    service: UserManagementService = Depends(get_user_management_service),
) -> UserResponse:
    """Fetch any user. Requires authentication, not ownership."""
    return UserResponse.from_user(service.get_user(user_id))


@router.put("/{user_id}", response_model=UserEnvelope)
def update_user(
    user_id: str,
    claims: TokenClaims = Depends(get_current_claims),
    payload: Any = Depends(read_json_body),
    service: UserManagementService = Depends(get_user_management_service),
) -> UserEnvelope:
    """Update the caller's own profile, or any profile for admins."""
    request = validate_update(payload)
    user = service.update_user(claims, user_id, request)
    return UserEnvelope(
        message="Profile updated successfully", user=UserResponse.from_user(user)
    )

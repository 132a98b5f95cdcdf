"""Identity claims carried by access tokens."""

from typing import Any

from pydantic import BaseModel, Field

from src.accounts.entities.core.user import Role


class TokenClaims(BaseModel):
    """Structured representation of a verified access token."""

    subject: str = Field(description="Subject (user ID)")
    role: Role = Field(description="Role of the subject when the token was issued")

    issuer: str | None = Field(default=None, description="Issuer")
    issued_at: int = Field(description="Issued at")
    expires_at: int = Field(description="Expiration time")
    not_before: int | None = Field(default=None, description="Not before")
    jti: str | None = Field(default=None, description="JWT ID (unique token identifier)")

    raw_token: str = Field(default="", repr=False, description="Original JWT token")
    custom_claims: dict[str, Any] = Field(
        default_factory=dict, description="Claims not mapped to a field above"
    )

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

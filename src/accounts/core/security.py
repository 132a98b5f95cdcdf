"""Authentication and authorization primitives."""

from src.accounts.core.models.claims import TokenClaims

BEARER_SCHEME = "bearer"


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token from an ``Authorization: Bearer <token>`` header value.

    Returns None when the header is absent, uses another scheme, or carries
    no token. The scheme is matched case-insensitively.
    """
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != BEARER_SCHEME:
        return None
    token = token.strip()
    if not token or " " in token:
        return None
    return token


def can_update_user(claims: TokenClaims, owner_id: str) -> bool:
    """Owners may update their own record; admins may update any record."""
    return claims.subject == owner_id or claims.is_admin

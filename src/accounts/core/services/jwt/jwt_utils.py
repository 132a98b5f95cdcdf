import base64
import binascii
import json
import re
from typing import Any, Final

from pydantic import ValidationError

from src.accounts.core.errors import InvalidCredential
from src.accounts.core.models.claims import TokenClaims

MAX_JWT_CHARS: Final = 4096
MAX_HEADER_BYTES: Final = 1024

# header.payload.signature, base64url without padding, no empty segment
_COMPACT_JWT: Final = re.compile(r"^([A-Za-z0-9_-]+)\.[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+$")

REGISTERED_CLAIMS: Final = frozenset(
    {"iss", "sub", "aud", "exp", "iat", "nbf", "jti", "role"}
)


def read_unverified_alg(token: str) -> str | None:
    """Return the ``alg`` named in the token header, without verifying anything.

    Only the header is decoded; the payload is left to the verifier.

    Raises:
        InvalidCredential: If the token is oversized, not in compact form, or
            its header is not a base64url JSON object.
    """
    if not token or len(token) > MAX_JWT_CHARS:
        raise InvalidCredential("Invalid JWT size")
    match = _COMPACT_JWT.match(token)
    if match is None:
        raise InvalidCredential("Invalid JWT format")

    segment = match.group(1)
    try:
        raw = base64.urlsafe_b64decode(segment + "=" * (-len(segment) % 4))
        if len(raw) > MAX_HEADER_BYTES:
            raise InvalidCredential("JWT header too large")
        header = json.loads(raw)
    except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise InvalidCredential("Unreadable JWT header") from e

    if not isinstance(header, dict):
        raise InvalidCredential("JWT header must be a JSON object")
    alg = header.get("alg")
    return alg if isinstance(alg, str) else None


def create_token_claims(token: str, claims: dict[str, Any]) -> TokenClaims:
    """Map verified JWT claims onto ``TokenClaims``.

    Raises:
        InvalidCredential: If the subject or role claims are missing or unusable.
    """
    try:
        return TokenClaims(
            subject=claims["sub"],
            role=claims["role"],
            issuer=claims.get("iss"),
            issued_at=claims["iat"],
            expires_at=claims["exp"],
            not_before=claims.get("nbf"),
            jti=claims.get("jti"),
            raw_token=token,
            custom_claims={
                k: v for k, v in claims.items() if k not in REGISTERED_CLAIMS
            },
        )
    except (KeyError, ValidationError) as e:
        raise InvalidCredential("Token is missing required claims") from e

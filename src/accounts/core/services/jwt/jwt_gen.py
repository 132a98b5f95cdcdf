import time
from typing import Any

from authlib.common.security import generate_token
from authlib.jose import JoseError, jwt
from loguru import logger

from src.accounts.core.errors import InternalError
from src.accounts.entities.core.user import Role
from src.accounts.runtime.config.config_data import JWTConfig


class JwtGeneratorService:
    """Service for signing access tokens."""

    def __init__(self, secret: str, config: JWTConfig) -> None:
        if not secret:
            raise ValueError("JWT signing secret must not be empty")
        if config.algorithm not in config.allowed_algorithms:
            raise ValueError(
                f"Signing algorithm {config.algorithm} is not in the allowed list"
            )
        self._secret = secret
        self._config = config

    def generate_jwt(
        self,
        subject: str,
        claims: dict[str, Any] | None = None,
        expires_in_seconds: int | None = None,
        valid_after_seconds: int = 0,
        include_jti: bool = True,
    ) -> str:
        """Generate a signed JWT.

        Args:
            subject: Subject (sub) claim - the user ID
            claims: Additional claims to include in the token
            expires_in_seconds: Token lifetime in seconds (defaults to the
                configured access token lifetime)
            valid_after_seconds: Time in seconds before the token is valid
            include_jti: Whether to include a unique JWT ID claim

        Returns:
            Signed JWT token string

        Raises:
            InternalError: If encoding fails
        """
        now = int(time.time())
        ttl = (
            self._config.access_token_ttl_seconds
            if expires_in_seconds is None
            else expires_in_seconds
        )

        payload: dict[str, Any] = {
            "iss": self._config.gen_issuer,
            "sub": subject,
            "exp": now + ttl,
            "iat": now,
            "nbf": now + valid_after_seconds,
        }
        if include_jti:
            payload["jti"] = generate_token(16)

        # Registered claims above always win over caller-supplied ones
        if claims:
            payload.update(
                {
                    k: v
                    for k, v in claims.items()
                    if k not in {"iss", "sub", "exp", "iat", "nbf", "jti"}
                }
            )

        try:
            header = {"alg": self._config.algorithm, "typ": "JWT"}
            token = jwt.encode(header, payload, self._secret)
            return token.decode() if isinstance(token, bytes) else token
        except JoseError as e:
            logger.error("JWT encoding failed: {}", e)
            raise InternalError() from e

    def sign(
        self, subject: str, role: Role, expires_in_seconds: int | None = None
    ) -> str:
        """Issue an access token carrying the subject id and role."""
        return self.generate_jwt(
            subject=subject,
            claims={"role": Role(role).value},
            expires_in_seconds=expires_in_seconds,
        )

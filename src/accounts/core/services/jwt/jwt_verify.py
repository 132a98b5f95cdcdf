"""JWT verification service."""

from authlib.jose import JoseError, jwt
from loguru import logger

from src.accounts.core.errors import InvalidCredential
from src.accounts.core.models.claims import TokenClaims
from src.accounts.core.services.jwt.jwt_utils import create_token_claims, read_unverified_alg
from src.accounts.runtime.config.config_data import JWTConfig


class JwtVerificationService:
    """Verifies access tokens issued by ``JwtGeneratorService``.

    Every failure (bad structure, disallowed algorithm, bad signature, wrong
    issuer, expiry) raises ``InvalidCredential``; the reasons are logged but
    not distinguished for the caller.
    """

    def __init__(self, secret: str, config: JWTConfig) -> None:
        if not secret:
            raise ValueError("JWT verification secret must not be empty")
        self._secret = secret
        self._config = config

    async def verify(self, token: str) -> TokenClaims:
        """Verify ``token`` and return its claims.

        Raises:
            InvalidCredential: If the token is invalid or expired.
        """
        try:
            alg = read_unverified_alg(token)
        except InvalidCredential as exc:
            logger.debug("Rejected malformed JWT: {}", exc.detail)
            raise InvalidCredential() from exc

        if alg not in self._config.allowed_algorithms:
            logger.debug("Rejected JWT with disallowed algorithm {}", alg)
            raise InvalidCredential()

        claims_options = {
            "iss": {"essential": True, "value": self._config.gen_issuer},
            "sub": {"essential": True},
            "exp": {"essential": True},
            "iat": {"essential": True},
        }

        try:
            claims = jwt.decode(token, self._secret, claims_options=claims_options)
            claims.validate(leeway=self._config.clock_skew)
        except (JoseError, ValueError) as exc:
            logger.debug("JWT verification failed: {}", exc)
            raise InvalidCredential() from exc

        try:
            return create_token_claims(token=token, claims=dict(claims))
        except InvalidCredential as exc:
            logger.debug("Rejected JWT: {}", exc.detail)
            raise InvalidCredential() from exc

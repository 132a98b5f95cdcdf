from __future__ import annotations

from collections.abc import Callable, Generator

import pytest
from sqlalchemy import StaticPool
from sqlmodel import Session, SQLModel, create_engine
from starlette.requests import Request

from src.accounts.core.models.claims import TokenClaims
from src.accounts.core.services import (
    JwtGeneratorService,
    JwtVerificationService,
    UserManagementService,
)
from src.accounts.entities.core.user import Role, UserRepository
from src.accounts.runtime.config.config_data import JWTConfig

_HS_KEY = "unit-test-signing-secret"


@pytest.fixture
def signing_secret() -> str:
    return _HS_KEY


@pytest.fixture
def jwt_config() -> JWTConfig:
    return JWTConfig(gen_issuer="accounts-test")


@pytest.fixture
def jwt_generator(signing_secret: str, jwt_config: JWTConfig) -> JwtGeneratorService:
    return JwtGeneratorService(signing_secret, jwt_config)


@pytest.fixture
def jwt_verifier(signing_secret: str, jwt_config: JWTConfig) -> JwtVerificationService:
    return JwtVerificationService(signing_secret, jwt_config)


@pytest.fixture
def claims_factory() -> Callable[..., TokenClaims]:
    def _make_claims(subject: str, role: Role = Role.USER) -> TokenClaims:
        return TokenClaims(subject=subject, role=role, issued_at=0, expires_at=3600)

    return _make_claims


@pytest.fixture
def request_factory() -> Callable[[dict[str, str]], Request]:
    def _make_request(headers: dict[str, str]) -> Request:
        scope = {
            "type": "http",
            "headers": [
                (name.lower().encode("ascii"), value.encode("latin-1"))
                for name, value in headers.items()
            ],
            "method": "GET",
            "path": "/",
            "query_string": b"",
        }
        return Request(scope)

    return _make_request


@pytest.fixture
def session() -> Generator[Session]:
    """Create a fresh database session for testing."""
    # Create a unique engine for each test to avoid metadata conflicts
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Import models to register them with the metadata
    from src.accounts.entities.core.user import UserTable  # noqa: F401

    # Create all tables - each test gets a fresh database
    SQLModel.metadata.create_all(engine)

    with Session(engine, expire_on_commit=False) as session:
        try:
            yield session
        finally:
            # Explicit cleanup
            session.rollback()
            session.close()
            engine.dispose()


@pytest.fixture
def user_repository(session: Session) -> UserRepository:
    return UserRepository(session)


@pytest.fixture
def user_service(
    session: Session, jwt_generator: JwtGeneratorService
) -> UserManagementService:
    return UserManagementService(session, jwt_generator)

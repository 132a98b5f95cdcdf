"""FastAPI dependency implementations."""

from __future__ import annotations

import json
from collections.abc import Iterator
from typing import Any

from fastapi import Depends, Request
from loguru import logger
from sqlmodel import Session

from src.accounts.api.http.app_data import ApplicationDependencies
from src.accounts.core.errors import FieldError, Unauthenticated, ValidationFailed
from src.accounts.core.models.claims import TokenClaims
from src.accounts.core.security import extract_bearer_token
from src.accounts.core.services import (
    DbSessionService,
    JwtGeneratorService,
    JwtVerificationService,
    UserManagementService,
)


def _app_dependencies(request: Request) -> ApplicationDependencies:
    return request.app.state.app_dependencies


def get_database_service(request: Request) -> DbSessionService:
    """Get the database service instance."""
    return _app_dependencies(request).database_service


def get_db_session(
    database_service: DbSessionService = Depends(get_database_service),
) -> Iterator[Session]:
    """Yield a request-scoped database session, closed after the response."""
    session = database_service.get_session()
    try:
        yield session
    finally:
        session.close()


def get_jwt_generation_service(request: Request) -> JwtGeneratorService:
    """Get the JWT generation service instance."""
    return _app_dependencies(request).jwt_generation_service


def get_jwt_verify_service(request: Request) -> JwtVerificationService:
    """Get the JWT verification service instance."""
    return _app_dependencies(request).jwt_verify_service


def get_user_management_service(
    db_session: Session = Depends(get_db_session),
    jwt_service: JwtGeneratorService = Depends(get_jwt_generation_service),
) -> UserManagementService:
    """Get the User Management service instance."""
    return UserManagementService(db_session, jwt_service)


async def read_json_body(request: Request) -> Any:
    """Parse the request body as JSON; an empty body reads as ``{}``.

    Malformed JSON is a client error reported like any other validation
    failure, rather than FastAPI's 422.
    """
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        return json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ValidationFailed(
            [FieldError(field="body", message="Malformed JSON body")]
        ) from exc


async def get_current_claims(
    request: Request,
    jwt_verify: JwtVerificationService = Depends(get_jwt_verify_service),
) -> TokenClaims:
    """Authenticate the request using a Bearer token.

    A missing or malformed ``Authorization`` header fails with
    ``Unauthenticated`` (401) before any verification. A token that does not
    verify fails with ``InvalidCredential`` (403). On success the claims are
    stored on ``request.state.claims``.
    """
    token = extract_bearer_token(request.headers.get("Authorization"))
    if token is None:
        raise Unauthenticated()

    claims = await jwt_verify.verify(token)

    request.state.claims = claims
    logger.debug("Authenticated subject {} ({})", claims.subject, claims.role.value)
    return claims

from collections.abc import Callable
from typing import Any, TypeVar

from loguru import logger
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from src.accounts.core.errors import (
    DuplicateResource,
    FieldError,
    InternalError,
    NotFound,
    Unauthorized,
    ValidationFailed,
)
from src.accounts.core.models.claims import TokenClaims
from src.accounts.core.security import can_update_user
from src.accounts.core.services.jwt.jwt_gen import JwtGeneratorService
from src.accounts.core.validation import (
    UserCreateRequest,
    UserUpdateRequest,
    normalize_email,
)
from src.accounts.entities.core.user import Role, User, UserRepository

# Fields a client may change through an update; role is deliberately absent.
UPDATABLE_FIELDS = ("name", "email", "phone", "address")

T = TypeVar("T")


class UserManagementService:
    """Account operations behind the user endpoints.

    Store failures are caught here, rolled back, logged and replaced by a
    generic ``InternalError``; every other error is raised as-is.
    """

    def __init__(
        self, db_session: Session, jwt_service: JwtGeneratorService | None = None
    ):
        self._db_session = db_session
        self._user_repo = UserRepository(db_session)
        self._jwt_service = jwt_service

    def _store(self, operation: str, action: Callable[[], T]) -> T:
        try:
            return action()
        except SQLAlchemyError as e:
            self._db_session.rollback()
            logger.exception("Store failure during {}: {}", operation, type(e).__name__)
            raise InternalError() from e

    def create_user(self, request: UserCreateRequest) -> User:
        """Register a new user with the ``user`` role.

        Raises:
            DuplicateResource: If the email is already registered.
        """
        email = str(request.email)
        if self._store("create_user", lambda: self._user_repo.exists_by_email(email)):
            raise DuplicateResource("Email already registered")

        new_user = User(
            name=request.name,
            email=email,
            phone=request.phone,
            address=request.address,
            role=Role.USER,
        )

        def _create() -> User:
            created = self._user_repo.create(new_user)
            self._db_session.commit()
            return created

        created_user = self._store("create_user", _create)
        logger.info("User created", user_id=created_user.id)
        return created_user

    def login(self, email: Any) -> str:
        """Issue an access token for the user registered under ``email``.

        Only the email is checked: anyone who knows a registered address
        gets a token for that account.

        Raises:
            NotFound: If no user has this email.
        """
        lookup = normalize_email(email)
        if lookup is None:
            raise NotFound("User not found")

        user = self._store("login", lambda: self._user_repo.get_by_email(lookup))
        if user is None:
            raise NotFound("User not found")

        if self._jwt_service is None:
            logger.error("Login attempted without a token signer")
            raise InternalError()
        token = self._jwt_service.sign(subject=user.id, role=user.role)
        logger.info("Token issued", user_id=user.id, role=user.role.value)
        return token

    def get_user(self, user_id: str) -> User:
        """Raises NotFound if no user has ``user_id``."""
        user = self._store("get_user", lambda: self._user_repo.get(user_id))
        if user is None:
            raise NotFound("User not found")
        return user

    def update_user(
        self, claims: TokenClaims, user_id: str, request: UserUpdateRequest
    ) -> User:
        """Apply a sparse update to ``user_id`` on behalf of ``claims``.

        Only allow-listed fields with a truthy value are written; everything
        else keeps its stored value.

        Raises:
            Unauthorized: If the caller is neither the owner nor an admin.
            NotFound: If no user has ``user_id``.
            DuplicateResource: If the new email belongs to another user.
            ValidationFailed: If the merged user fails entity validation.
        """
        if not can_update_user(claims, user_id):
            logger.info(
                "Update refused", subject=claims.subject, target_user_id=user_id
            )
            raise Unauthorized("Unauthorized to update this profile.")

        changes: dict[str, Any] = {}
        for field in UPDATABLE_FIELDS:
            value = getattr(request, field)
            if value:
                changes[field] = str(value)

        if self._store("update_user", lambda: self._user_repo.get(user_id)) is None:
            raise NotFound("User not found.")

        if "email" in changes and self._store(
            "update_user",
            lambda: self._user_repo.exists_by_email(changes["email"], exclude_id=user_id),
        ):
            raise DuplicateResource("Email already registered")

        def _update() -> User | None:
            updated = self._user_repo.update(user_id, changes)
            self._db_session.commit()
            return updated

        try:
            updated_user = self._store("update_user", _update)
        except ValidationError as e:
            self._db_session.rollback()
            raise ValidationFailed(
                [
                    FieldError(
                        field=str(err["loc"][0]) if err["loc"] else "body",
                        message=err["msg"],
                        value=changes.get(str(err["loc"][0])) if err["loc"] else None,
                    )
                    for err in e.errors()
                ]
            ) from e

        if updated_user is None:
            raise NotFound("User not found.")

        logger.info(
            "User updated",
            user_id=user_id,
            fields=sorted(changes),
            by_admin=claims.subject != user_id,
        )
        return updated_user

    def set_role(self, email: str, role: Role) -> User:
        """Change a user's role. Not reachable over HTTP.

        Raises:
            NotFound: If no user has this email.
        """
        lookup = normalize_email(email)
        if lookup is None:
            raise NotFound("User not found")

        user = self._store("set_role", lambda: self._user_repo.get_by_email(lookup))
        if user is None:
            raise NotFound("User not found")

        def _update() -> User | None:
            updated = self._user_repo.update(user.id, {"role": role})
            self._db_session.commit()
            return updated

        updated_user = self._store("set_role", _update)
        if updated_user is None:
            raise NotFound("User not found")
        logger.info("Role changed", user_id=updated_user.id, role=role.value)
        return updated_user

    def list_users(self) -> list[User]:
        return list(self._store("list_users", self._user_repo.list_all))

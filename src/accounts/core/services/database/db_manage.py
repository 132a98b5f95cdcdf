"""Schema management for the accounts database."""

from loguru import logger
from sqlmodel import SQLModel

from .db_session import DbSessionService


class DbManageService:
    def __init__(self, database_service: DbSessionService):
        self._engine = database_service.engine

    def create_all(self) -> None:
        """Create all database tables."""
        from src.accounts.entities.core.user import UserTable  # noqa: F401

        SQLModel.metadata.create_all(self._engine)
        logger.info("Database initialized with tables.")

    def drop_all(self) -> None:
        """Drop all database tables."""
        from src.accounts.entities.core.user import UserTable  # noqa: F401

        SQLModel.metadata.drop_all(self._engine)
        logger.info("Database tables dropped.")

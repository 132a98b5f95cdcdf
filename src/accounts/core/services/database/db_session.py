"""Database engine and session factory used across the application."""

from collections.abc import Iterator
from contextlib import contextmanager

from loguru import logger
from sqlalchemy import StaticPool, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, create_engine

from src.accounts.runtime.config.config_data import DatabaseConfig
from src.accounts.runtime.context import get_config


class DbSessionService:
    def __init__(self, db_config: DatabaseConfig | None = None):
        """Initialize the shared database engine and session factory."""

        main_config = get_config()
        db_config = db_config or main_config.database
        self._config = db_config

        logger.info(
            "Configuring database engine for environment: {}",
            main_config.app.environment,
        )
        self._engine = create_engine(
            db_config.connection_string, **self._engine_kwargs(db_config)
        )

    @staticmethod
    def _engine_kwargs(db_config: DatabaseConfig) -> dict:
        """Build engine arguments for the configured backend."""
        engine_kwargs: dict = {"echo": db_config.echo}

        if db_config.is_sqlite:
            # SQLite-specific settings; sessions are used from the threadpool
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if db_config.is_memory:
                # One shared connection, or every session sees an empty database
                engine_kwargs["poolclass"] = StaticPool
                if get_config().app.environment == "production":
                    logger.warning(
                        "In-memory database in production: data is lost on restart"
                    )
            return engine_kwargs

        engine_kwargs.update(
            {
                "pool_size": db_config.pool_size,
                "max_overflow": db_config.max_overflow,
                "pool_timeout": db_config.pool_timeout,
                "pool_recycle": db_config.pool_recycle,
                "pool_pre_ping": True,
            }
        )
        return engine_kwargs

    @property
    def engine(self) -> Engine:
        return self._engine

    def get_session(self) -> Session:
        """Return a new SQLModel session bound to the shared engine."""
        return Session(
            self._engine,
            expire_on_commit=False,
            autoflush=True,
        )

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Context manager style helper for scripts and tests."""
        db = self.get_session()
        try:
            yield db
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(
                "Database transaction failed",
                error_type=type(e).__name__,
                error_message=str(e),
            )
            raise
        finally:
            db.close()

    def health_check(self) -> bool:
        """Perform a health check on the database connection."""
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
                return True
        except SQLAlchemyError as e:
            logger.error(
                "Database health check failed",
                error_type=type(e).__name__,
                error_message=str(e),
            )
            return False

    def dispose(self) -> None:
        """Release every pooled connection."""
        self._engine.dispose()
        logger.info("Database engine disposed")

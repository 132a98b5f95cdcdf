"""Shared helpers for CLI commands."""

from collections.abc import Iterator
from contextlib import contextmanager

import typer
from rich.console import Console
from sqlalchemy.exc import SQLAlchemyError

from src.accounts.core.services import DbManageService, DbSessionService
from src.accounts.runtime.context import get_config

console = Console()


@contextmanager
def database_service(reset: bool = False) -> Iterator[DbSessionService]:
    """Open the configured database, creating tables if needed.

    With ``reset`` every table is dropped first.
    """
    service = DbSessionService(get_config().database)
    try:
        manager = DbManageService(service)
        if reset:
            manager.drop_all()
        manager.create_all()
        yield service
    except SQLAlchemyError as e:
        console.print(f"[red]❌ Database error: {e}[/red]")
        raise typer.Exit(code=1) from e
    finally:
        service.dispose()
